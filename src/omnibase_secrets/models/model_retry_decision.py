"""Retry decision returned by the backoff policy."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelRetryDecision(BaseModel):
    """Whether to retry after a failed attempt, and how long to wait first."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    should_retry: bool = Field(description="True if another attempt is allowed")
    delay_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Wait before the next attempt (0.0 when not retrying)",
    )


__all__: list[str] = ["ModelRetryDecision"]
