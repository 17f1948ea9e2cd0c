# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Backoff and retry decision logic.

Pure functions: no I/O, no clock, no randomness. The fetch orchestrator
feeds them the number of failed attempts and the policy and gets back a
retry decision and delay.

Backoff Calculation:
    exponential (default): min_delay * factor ** (attempt - 1)
    linear (step set):     min_delay + step * (attempt - 1)
    both clamped to max_delay

Example:
    >>> policy = ModelRetryPolicyConfig(max_attempts=3, min_delay_seconds=1.0)
    >>> compute_retry_decision(1, policy)
    ModelRetryDecision(should_retry=True, delay_seconds=1.0)
    >>> compute_retry_decision(3, policy).should_retry
    False
"""

from __future__ import annotations

from omnibase_secrets.errors import BackendCommunicationError, SecretsRuntimeError
from omnibase_secrets.models.model_retry_decision import ModelRetryDecision
from omnibase_secrets.models.model_retry_policy_config import ModelRetryPolicyConfig


def compute_backoff_delay(attempt: int, policy: ModelRetryPolicyConfig) -> float:
    """Delay to wait after the ``attempt``-th failed attempt (1-indexed).

    Args:
        attempt: Number of failed attempts so far (>= 1)
        policy: Retry policy

    Returns:
        Delay in seconds, clamped to ``policy.max_delay_seconds``
    """
    if attempt < 1:
        return 0.0

    exponent = attempt - 1
    if policy.step_seconds is not None:
        delay = policy.min_delay_seconds + policy.step_seconds * exponent
    else:
        try:
            delay = policy.min_delay_seconds * (policy.factor**exponent)
        except OverflowError:
            delay = policy.max_delay_seconds

    return min(delay, policy.max_delay_seconds)


def compute_retry_decision(
    attempt: int, policy: ModelRetryPolicyConfig
) -> ModelRetryDecision:
    """Decide whether to retry after ``attempt`` failed attempts.

    With ``max_attempts = N`` the N-th failure is final. ``forever``
    policies always retry; the caller's non-retryable error check is what
    stops them.
    """
    if not policy.forever and attempt >= policy.max_attempts:
        return ModelRetryDecision(should_retry=False, delay_seconds=0.0)
    return ModelRetryDecision(
        should_retry=True,
        delay_seconds=compute_backoff_delay(attempt, policy),
    )


def is_retryable_error(error: BaseException, policy: ModelRetryPolicyConfig) -> bool:
    """Whether a failed attempt may be retried at all.

    Backend errors are retryable unless their status code is listed in
    ``policy.non_retryable_status_codes``. Other engine errors (bad
    configuration, rejected credentials) are terminal. Anything else is an
    unclassified transport failure and is retried.
    """
    if isinstance(error, BackendCommunicationError):
        return error.status_code not in policy.non_retryable_status_codes
    if isinstance(error, SecretsRuntimeError):
        return False
    return True


__all__: list[str] = [
    "compute_backoff_delay",
    "compute_retry_decision",
    "is_retryable_error",
]
