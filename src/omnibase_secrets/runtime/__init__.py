# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets runtime: store, renewal, fetch orchestration and the service facade.

Exports:
    ServiceSecrets: Fetch -> merge -> validate -> publish pipeline
    SecretFetchOrchestrator: Retry loop, batch fetch and renewal tasks
    RenewalScheduler: At most one renewal timer per (address, backend path)
    SecretStore: Thread-safe nested secret tree
    ValidationGate: Validator applied before the service becomes ready
    flatten_address_map: Nested address map -> {backend_path: address}
"""

from omnibase_secrets.runtime.renewal_scheduler import (
    MAX_TIMER_DELAY_SECONDS,
    RenewalScheduler,
    compute_renewal_delay,
)
from omnibase_secrets.runtime.secret_fetch_orchestrator import SecretFetchOrchestrator
from omnibase_secrets.runtime.secret_store import SecretStore
from omnibase_secrets.runtime.service_secrets import ALL_ADDRESSES, ServiceSecrets
from omnibase_secrets.runtime.util_address_map import (
    addresses_for,
    flatten_address_map,
)
from omnibase_secrets.runtime.util_retry_policy import (
    compute_backoff_delay,
    compute_retry_decision,
    is_retryable_error,
)
from omnibase_secrets.runtime.validation_gate import SecretValidator, ValidationGate

__all__: list[str] = [
    "ALL_ADDRESSES",
    "MAX_TIMER_DELAY_SECONDS",
    "RenewalScheduler",
    "SecretFetchOrchestrator",
    "SecretStore",
    "SecretValidator",
    "ServiceSecrets",
    "ValidationGate",
    "addresses_for",
    "compute_backoff_delay",
    "compute_renewal_delay",
    "compute_retry_decision",
    "flatten_address_map",
    "is_retryable_error",
]
