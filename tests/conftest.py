"""Pytest configuration and shared fixtures for omnibase_secrets tests."""

from __future__ import annotations

import pytest

from omnibase_secrets.models import ModelRetryPolicyConfig, ModelSecretsServiceConfig
from tests.helpers import DeterministicTimers, ScriptedSecretBackend


@pytest.fixture
def backend() -> ScriptedSecretBackend:
    """Provide an empty scripted backend (every path 404s until scripted)."""
    return ScriptedSecretBackend()


@pytest.fixture
def timers() -> DeterministicTimers:
    """Provide a simulated call_later starting at t=0."""
    return DeterministicTimers()


@pytest.fixture
def fast_retry() -> ModelRetryPolicyConfig:
    """Retry policy with zero backoff so retry tests do not sleep."""
    return ModelRetryPolicyConfig(
        max_attempts=3,
        min_delay_seconds=0.0,
        max_delay_seconds=0.0,
    )


@pytest.fixture
def service_config(fast_retry: ModelRetryPolicyConfig) -> ModelSecretsServiceConfig:
    """Service config over a small address map using the fast retry policy."""
    return ModelSecretsServiceConfig(
        secrets={
            "secret/": {
                "postgres": "database.postgres",
                "app": ".",
            },
        },
        retry=fast_retry,
        request_timeout_seconds=1.0,
    )
