# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Retry Policy Configuration Model.

Parameters for the backoff/retry decision applied around every backend
read. Growth is exponential by default (``min_delay * factor ** (n - 1)``)
and linear when ``step_seconds`` is set (``min_delay + step * (n - 1)``);
both are clamped to ``max_delay_seconds``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_NON_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({401, 403, 404})


class ModelRetryPolicyConfig(BaseModel):
    """Configuration for retry with backoff.

    Attributes:
        max_attempts: Total attempts (first try included) before giving up
        forever: Retry until success or a non-retryable error, ignoring max_attempts
        min_delay_seconds: Delay after the first failed attempt
        max_delay_seconds: Upper bound for any single delay
        factor: Exponential growth factor (ignored when step_seconds is set)
        step_seconds: Linear growth step; switches growth from exponential to linear
        non_retryable_status_codes: Backend status codes surfaced without retry

    Example:
        >>> policy = ModelRetryPolicyConfig(max_attempts=3, min_delay_seconds=0.5)
        >>> policy.factor
        2.0
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    max_attempts: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Total attempts before the last error is surfaced",
    )
    forever: bool = Field(
        default=False,
        description="Retry without an attempt limit",
    )
    min_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Delay after the first failed attempt",
    )
    max_delay_seconds: float = Field(
        default=60.0,
        ge=0.0,
        description="Clamp for any single retry delay",
    )
    factor: float = Field(
        default=2.0,
        ge=1.0,
        description="Exponential backoff multiplier",
    )
    step_seconds: float | None = Field(
        default=None,
        ge=0.0,
        description="Linear backoff step (overrides exponential growth when set)",
    )
    non_retryable_status_codes: frozenset[int] = Field(
        default=DEFAULT_NON_RETRYABLE_STATUS_CODES,
        description="Backend status codes that fail immediately",
    )

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> ModelRetryPolicyConfig:
        if self.max_delay_seconds < self.min_delay_seconds:
            raise ValueError(
                "max_delay_seconds must be greater than or equal to min_delay_seconds"
            )
        return self


__all__: list[str] = ["DEFAULT_NON_RETRYABLE_STATUS_CODES", "ModelRetryPolicyConfig"]
