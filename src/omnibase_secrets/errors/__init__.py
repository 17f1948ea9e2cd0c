# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Engine Errors Module.

Exports:
    ModelSecretErrorContext: Configuration model for bundled error context
    SecretsRuntimeError: Base secrets error class
    SecretsConfigurationError: Empty or malformed address map / configuration
    BackendCommunicationError: Backend read failures (carries status_code)
    SecretFetchTimeoutError: Single backend read exceeded its timeout
    SecretValidationError: Merged tree rejected by the validator
    SecretRenewalError: Background renewal failure (logged only)
    SecretsNotReadyError: Accessor used before the service is ready
    InfraAuthenticationError: Backend client authentication failure

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Secret values or any part of a fetched secret tree
        - Vault tokens, passwords, API keys

    SAFE to include:
        - Tree addresses and backend paths
        - Status codes, attempt counts, timeout values
        - Correlation IDs (always include for tracing)
"""

from omnibase_secrets.errors.model_secret_error_context import ModelSecretErrorContext
from omnibase_secrets.errors.secret_errors import (
    BackendCommunicationError,
    InfraAuthenticationError,
    SecretFetchTimeoutError,
    SecretRenewalError,
    SecretsConfigurationError,
    SecretsNotReadyError,
    SecretsRuntimeError,
    SecretValidationError,
)

__all__: list[str] = [
    "BackendCommunicationError",
    "InfraAuthenticationError",
    "ModelSecretErrorContext",
    "SecretFetchTimeoutError",
    "SecretRenewalError",
    "SecretValidationError",
    "SecretsConfigurationError",
    "SecretsNotReadyError",
    "SecretsRuntimeError",
]
