# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for backoff and retry decision logic."""

from __future__ import annotations

import pytest

from omnibase_secrets.errors import (
    BackendCommunicationError,
    SecretFetchTimeoutError,
    SecretsConfigurationError,
    SecretValidationError,
)
from omnibase_secrets.models import ModelRetryPolicyConfig
from omnibase_secrets.runtime.util_retry_policy import (
    compute_backoff_delay,
    compute_retry_decision,
    is_retryable_error,
)


class TestComputeBackoffDelay:
    """Test exponential and linear backoff."""

    def test_exponential_growth(self) -> None:
        """Delay doubles per attempt with the default factor."""
        policy = ModelRetryPolicyConfig(min_delay_seconds=1.0, max_delay_seconds=60.0)

        delays = [compute_backoff_delay(n, policy) for n in range(1, 6)]

        assert delays == [1.0, 2.0, 4.0, 8.0, 16.0]

    def test_delay_clamped_to_max(self) -> None:
        """Large attempts never exceed max_delay_seconds."""
        policy = ModelRetryPolicyConfig(min_delay_seconds=1.0, max_delay_seconds=10.0)

        assert compute_backoff_delay(5, policy) == 10.0
        assert compute_backoff_delay(50, policy) == 10.0

    def test_overflow_falls_back_to_max(self) -> None:
        """Float overflow in the exponential term yields the max delay."""
        policy = ModelRetryPolicyConfig(
            max_attempts=1000,
            min_delay_seconds=1.0,
            max_delay_seconds=30.0,
            factor=10.0,
        )

        assert compute_backoff_delay(900, policy) == 30.0

    def test_linear_step(self) -> None:
        """A step turns the schedule linear."""
        policy = ModelRetryPolicyConfig(
            min_delay_seconds=1.0, max_delay_seconds=5.0, step_seconds=1.5
        )

        delays = [compute_backoff_delay(n, policy) for n in range(1, 5)]

        assert delays == [1.0, 2.5, 4.0, 5.0]

    def test_non_positive_attempt(self) -> None:
        """No failed attempt means no delay."""
        assert compute_backoff_delay(0, ModelRetryPolicyConfig()) == 0.0


class TestComputeRetryDecision:
    """Test attempt limits."""

    def test_retries_until_max_attempts(self) -> None:
        """The N-th failure of an N-attempt policy is final."""
        policy = ModelRetryPolicyConfig(max_attempts=3, min_delay_seconds=1.0)

        first = compute_retry_decision(1, policy)
        second = compute_retry_decision(2, policy)
        third = compute_retry_decision(3, policy)

        assert first.should_retry is True
        assert first.delay_seconds == 1.0
        assert second.should_retry is True
        assert second.delay_seconds == 2.0
        assert third.should_retry is False

    def test_single_attempt_policy(self) -> None:
        """max_attempts=1 never retries."""
        policy = ModelRetryPolicyConfig(max_attempts=1)

        assert compute_retry_decision(1, policy).should_retry is False

    def test_forever_ignores_max_attempts(self) -> None:
        """forever policies keep retrying with a capped delay."""
        policy = ModelRetryPolicyConfig(
            max_attempts=2, forever=True, max_delay_seconds=8.0
        )

        decision = compute_retry_decision(500, policy)

        assert decision.should_retry is True
        assert decision.delay_seconds == 8.0


class TestIsRetryableError:
    """Test retryable error classification."""

    @pytest.mark.parametrize("status_code", [401, 403, 404])
    def test_terminal_status_codes(self, status_code: int) -> None:
        """Auth and not-found responses are never retried."""
        error = BackendCommunicationError("failed", status_code=status_code)

        assert is_retryable_error(error, ModelRetryPolicyConfig()) is False

    @pytest.mark.parametrize("status_code", [429, 500, 502, 503, None])
    def test_transient_status_codes(self, status_code: int | None) -> None:
        """Throttling, server errors and unknown statuses are retried."""
        error = BackendCommunicationError("failed", status_code=status_code)

        assert is_retryable_error(error, ModelRetryPolicyConfig()) is True

    def test_custom_non_retryable_codes(self) -> None:
        """The terminal status set is configurable."""
        policy = ModelRetryPolicyConfig(non_retryable_status_codes=frozenset({503}))

        assert is_retryable_error(BackendCommunicationError("x", status_code=503), policy) is False
        assert is_retryable_error(BackendCommunicationError("x", status_code=404), policy) is True

    def test_timeout_is_retryable(self) -> None:
        """A timed-out attempt is retried."""
        error = SecretFetchTimeoutError("timed out", timeout_seconds=5.0)

        assert is_retryable_error(error, ModelRetryPolicyConfig()) is True

    def test_other_engine_errors_are_terminal(self) -> None:
        """Configuration and validation errors are not transport failures."""
        policy = ModelRetryPolicyConfig()

        assert is_retryable_error(SecretsConfigurationError("bad"), policy) is False
        assert is_retryable_error(SecretValidationError("bad"), policy) is False

    def test_unclassified_errors_are_retryable(self) -> None:
        """Raw transport exceptions are retried."""
        assert is_retryable_error(ConnectionError("reset"), ModelRetryPolicyConfig()) is True
