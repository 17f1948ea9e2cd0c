# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Handler Configuration Model.

This module provides the Pydantic configuration model for the HashiCorp
Vault secret backend.

Security Note:
    The token field uses SecretStr to prevent accidental logging of
    sensitive credentials. Tokens should come from the caller's environment,
    never from address-map documents.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ModelVaultHandlerConfig(BaseModel):
    """Configuration for the HashiCorp Vault secret backend.

    Attributes:
        url: Vault server URL (required, e.g., "https://vault.example.com:8200")
        token: Vault authentication token (SecretStr for security, optional)
        namespace: Vault namespace for Vault Enterprise (optional)
        timeout_seconds: HTTP timeout of the hvac client (1.0-300.0, default 30.0)
        verify_ssl: Whether to verify SSL certificates (default True)
        kv_version: KV engine version of the mounts being read (1 or 2)
        max_concurrent_operations: Thread pool size for blocking hvac calls

    Example:
        >>> config = ModelVaultHandlerConfig(
        ...     url="https://vault.example.com:8200",
        ...     token=SecretStr("s.1234567890abcdefghijklmnopqrstuv"),
        ...     kv_version=2,
        ... )
        >>> print(config.token)
        **********
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        from_attributes=True,
    )

    url: str = Field(
        min_length=1,
        description="Vault server URL (e.g., 'https://vault.example.com:8200')",
    )
    token: SecretStr | None = Field(
        default=None,
        description="Vault authentication token (use SecretStr for security)",
    )
    namespace: str | None = Field(
        default=None,
        description="Vault namespace for Vault Enterprise",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="HTTP timeout of the hvac client in seconds",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    kv_version: Literal[1, 2] = Field(
        default=1,
        description="KV secrets engine version; v2 responses nest data under data.data",
    )
    max_concurrent_operations: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum concurrent Vault operations (thread pool size)",
    )


__all__: list[str] = ["ModelVaultHandlerConfig"]
