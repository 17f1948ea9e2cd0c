# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Retry State Model.

Ephemeral per-fetch retry bookkeeping. The model is immutable: every failed
attempt produces a new state via ``next_attempt``, so a state captured in a
log record or an error never changes underneath the reader.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from omnibase_secrets.models.model_retry_policy_config import ModelRetryPolicyConfig


class ModelRetryState(BaseModel):
    """Retry state for a single fetch.

    Attributes:
        attempt: Number of failed attempts so far (0 before the first try)
        last_error: Most recent error; the one surfaced on exhaustion
        policy: Policy the state is evaluated against
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    attempt: int = Field(default=0, ge=0)
    last_error: BaseException | None = Field(default=None)
    policy: ModelRetryPolicyConfig = Field(default_factory=ModelRetryPolicyConfig)

    def next_attempt(self, error: BaseException) -> ModelRetryState:
        """Return the state after one more failed attempt."""
        return self.model_copy(update={"attempt": self.attempt + 1, "last_error": error})

    def is_exhausted(self) -> bool:
        """True when the attempt budget is spent (never true for forever policies)."""
        if self.policy.forever:
            return False
        return self.attempt >= self.policy.max_attempts


__all__: list[str] = ["ModelRetryState"]
