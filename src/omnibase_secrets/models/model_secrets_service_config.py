# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Service Configuration Model.

This module provides the Pydantic configuration model for the secrets
service and its fetch orchestrator. Configuration is always passed in
explicitly; nothing in the engine reads process environment.

Address Map Format:
    ``secrets`` is a possibly nested mapping. Nested keys are concatenated to
    form the backend path; leaf string values are the dotted tree address the
    secret is merged into, with ``"."`` meaning the tree root::

        secrets:
          secret/:
            postgres: database.postgres
            app: "."
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from omnibase_secrets.models.model_retry_policy_config import ModelRetryPolicyConfig


class ModelSecretsServiceConfig(BaseModel):
    """Configuration for ServiceSecrets / SecretFetchOrchestrator.

    Attributes:
        secrets: Nested address map (backend path -> tree address)
        retry: Retry policy applied to every backend read
        request_timeout_seconds: Timeout for a single backend read attempt
        max_concurrent_fetches: Worker limit for the initial batch fetch

    Example:
        >>> config = ModelSecretsServiceConfig(
        ...     secrets={"secret/db": "database"},
        ...     retry=ModelRetryPolicyConfig(max_attempts=3),
        ... )
        >>> config.max_concurrent_fetches
        5
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    secrets: dict[str, Any] = Field(
        default_factory=dict,
        description="Nested address map; leaf values are dotted tree addresses",
    )
    retry: ModelRetryPolicyConfig = Field(
        default_factory=ModelRetryPolicyConfig,
        description="Retry configuration with backoff",
    )
    request_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=300.0,
        description="Per-attempt backend read timeout in seconds",
    )
    max_concurrent_fetches: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum backend reads in flight during a batch fetch",
    )


__all__: list[str] = ["ModelSecretsServiceConfig"]
