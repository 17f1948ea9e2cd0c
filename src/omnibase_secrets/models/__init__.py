# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Engine Models Module.

Exports:
    ModelRenewalEntry: Live renewal timer for one address
    ModelRetryDecision: Retry/delay decision produced by the backoff policy
    ModelRetryPolicyConfig: Backoff and attempt-limit configuration
    ModelRetryState: Immutable per-fetch retry bookkeeping
    ModelSecretRecord: One fetched secret (data + lease)
    ModelSecretsServiceConfig: Service and orchestrator configuration
"""

from omnibase_secrets.models.model_renewal_entry import ModelRenewalEntry
from omnibase_secrets.models.model_retry_decision import ModelRetryDecision
from omnibase_secrets.models.model_retry_policy_config import (
    DEFAULT_NON_RETRYABLE_STATUS_CODES,
    ModelRetryPolicyConfig,
)
from omnibase_secrets.models.model_retry_state import ModelRetryState
from omnibase_secrets.models.model_secret_record import ModelSecretRecord
from omnibase_secrets.models.model_secrets_service_config import (
    ModelSecretsServiceConfig,
)

__all__: list[str] = [
    "DEFAULT_NON_RETRYABLE_STATUS_CODES",
    "ModelRenewalEntry",
    "ModelRetryDecision",
    "ModelRetryPolicyConfig",
    "ModelRetryState",
    "ModelSecretRecord",
    "ModelSecretsServiceConfig",
]
