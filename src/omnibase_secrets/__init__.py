# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""ONEX Secrets - secret acquisition and renewal engine.

Fetches secrets from a remote store (HashiCorp Vault via hvac, or any
ProtocolSecretBackend), merges them into one in-memory tree, renews leased
secrets before they expire and publishes the tree once a validator accepts
it.

Key Components:
    - ServiceSecrets: Public facade (start, ready, get, refresh, subscribe)
    - SecretFetchOrchestrator: Retry, bounded batch fetch and renewal tasks
    - HandlerVault: Vault backend adapter
    - SecretsRuntimeError hierarchy with ModelSecretErrorContext
"""

from omnibase_secrets.errors import (
    BackendCommunicationError,
    SecretsConfigurationError,
    SecretsNotReadyError,
    SecretsRuntimeError,
    SecretValidationError,
)
from omnibase_secrets.handlers import HandlerVault, ModelVaultHandlerConfig
from omnibase_secrets.models import (
    ModelRetryPolicyConfig,
    ModelSecretRecord,
    ModelSecretsServiceConfig,
)
from omnibase_secrets.runtime import ServiceSecrets

__all__: list[str] = [
    "BackendCommunicationError",
    "HandlerVault",
    "ModelRetryPolicyConfig",
    "ModelSecretRecord",
    "ModelSecretsServiceConfig",
    "ModelVaultHandlerConfig",
    "SecretValidationError",
    "SecretsConfigurationError",
    "SecretsNotReadyError",
    "SecretsRuntimeError",
    "ServiceSecrets",
]
