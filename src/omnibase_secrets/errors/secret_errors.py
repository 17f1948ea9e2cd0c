# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Acquisition Error Classes.

This module defines the error classes raised by the secrets engine.

Error Hierarchy:
    SecretsRuntimeError (base secrets error)
    ├── SecretsConfigurationError
    ├── BackendCommunicationError
    │   └── SecretFetchTimeoutError
    ├── SecretValidationError
    ├── SecretRenewalError
    ├── SecretsNotReadyError
    └── InfraAuthenticationError

All errors:
    - Carry an EnumSecretErrorCode classification
    - Support proper error chaining with `raise ... from e`
    - Accept ModelSecretErrorContext for bundled context parameters
    - Never include secret values in messages or context
"""

from __future__ import annotations

from omnibase_secrets.enums import EnumSecretErrorCode
from omnibase_secrets.errors.model_secret_error_context import ModelSecretErrorContext


class SecretsRuntimeError(Exception):
    """Base error class for the secrets engine.

    Structured Fields (via ModelSecretErrorContext):
        operation: Operation being performed
        address: Secret tree address
        backend_path: Backend path
        correlation_id: Fetch cycle correlation ID

    Example:
        >>> context = ModelSecretErrorContext(operation="fetch_all")
        >>> raise SecretsRuntimeError("Operation failed", context=context)

        # Or with extra context:
        >>> raise SecretsRuntimeError(
        ...     "Operation failed",
        ...     context=context,
        ...     retry_count=3,
        ... )
    """

    def __init__(
        self,
        message: str,
        error_code: EnumSecretErrorCode | None = None,
        context: ModelSecretErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize SecretsRuntimeError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to OPERATION_FAILED)
            context: Bundled secret error context
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or EnumSecretErrorCode.OPERATION_FAILED
        self.context = context
        self.correlation_id = context.correlation_id if context is not None else None

        structured_context: dict[str, object] = dict(extra_context)
        if context is not None:
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.address is not None:
                structured_context["address"] = context.address
            if context.backend_path is not None:
                structured_context["backend_path"] = context.backend_path
        self.extra_context = structured_context

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.message!r}, "
            f"error_code={self.error_code.value})"
        )


class SecretsConfigurationError(SecretsRuntimeError):
    """Raised when the address map or service configuration is unusable.

    An empty address map signals a missing or misconfigured secrets section
    and is reported here rather than producing an empty tree.

    Example:
        >>> raise SecretsConfigurationError(
        ...     "Missing secrets config",
        ...     context=ModelSecretErrorContext(operation="fetch_all"),
        ... )
    """

    def __init__(
        self,
        message: str,
        context: ModelSecretErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.INVALID_CONFIGURATION,
            context=context,
            **extra_context,
        )


class BackendCommunicationError(SecretsRuntimeError):
    """Raised when the secret backend fails to return a secret.

    Carries an HTTP-like status code so retry policy can branch on it
    (e.g. 404 is terminal, 503 is retried). ``status_code`` is None when
    the failure happened below HTTP (connection refused, DNS, ...).

    Example:
        >>> raise BackendCommunicationError(
        ...     "Vault server is unavailable",
        ...     context=ModelSecretErrorContext(backend_path="secret/db"),
        ...     status_code=503,
        ... )
    """

    def __init__(
        self,
        message: str,
        context: ModelSecretErrorContext | None = None,
        status_code: int | None = None,
        error_code: EnumSecretErrorCode | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize BackendCommunicationError.

        Args:
            message: Human-readable error message
            context: Bundled secret error context
            status_code: HTTP-like status code reported by the backend
            error_code: Override for subclasses (defaults to BACKEND_COMMUNICATION)
            **extra_context: Additional context information (e.g., attempts)
        """
        if status_code is not None:
            extra_context["status_code"] = status_code
        super().__init__(
            message=message,
            error_code=error_code or EnumSecretErrorCode.BACKEND_COMMUNICATION,
            context=context,
            **extra_context,
        )
        self.status_code = status_code


class SecretFetchTimeoutError(BackendCommunicationError):
    """Raised when a single backend read exceeds its per-attempt timeout."""

    def __init__(
        self,
        message: str,
        context: ModelSecretErrorContext | None = None,
        timeout_seconds: float | None = None,
        **extra_context: object,
    ) -> None:
        if timeout_seconds is not None:
            extra_context["timeout_seconds"] = timeout_seconds
        super().__init__(
            message=message,
            context=context,
            error_code=EnumSecretErrorCode.TIMEOUT,
            **extra_context,
        )
        self.timeout_seconds = timeout_seconds


class SecretValidationError(SecretsRuntimeError):
    """Raised when the merged secret tree is rejected by the validator.

    Terminal for the fetch cycle: the service is not considered ready.
    """

    def __init__(
        self,
        message: str,
        context: ModelSecretErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.VALIDATION_FAILED,
            context=context,
            **extra_context,
        )


class SecretRenewalError(SecretsRuntimeError):
    """Wraps a failure of a background renewal fetch.

    Renewal errors are logged, never propagated to callers.
    """

    def __init__(
        self,
        message: str,
        context: ModelSecretErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.RENEWAL_FAILED,
            context=context,
            **extra_context,
        )


class SecretsNotReadyError(SecretsRuntimeError):
    """Raised when secrets are read before the first fetch cycle succeeded."""

    def __init__(
        self,
        message: str,
        context: ModelSecretErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.NOT_READY,
            context=context,
            **extra_context,
        )


class InfraAuthenticationError(SecretsRuntimeError):
    """Raised when the backend client cannot authenticate.

    Example:
        >>> raise InfraAuthenticationError(
        ...     "Vault authentication failed - check token validity",
        ...     context=ModelSecretErrorContext(operation="initialize"),
        ... )
    """

    def __init__(
        self,
        message: str,
        context: ModelSecretErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumSecretErrorCode.AUTHENTICATION_ERROR,
            context=context,
            **extra_context,
        )


__all__ = [
    "BackendCommunicationError",
    "InfraAuthenticationError",
    "SecretFetchTimeoutError",
    "SecretRenewalError",
    "SecretValidationError",
    "SecretsConfigurationError",
    "SecretsNotReadyError",
    "SecretsRuntimeError",
]
