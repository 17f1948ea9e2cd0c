# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""HashiCorp Vault secret backend using the hvac client.

Implements ProtocolSecretBackend: one ``get(path)`` per secret read, mapped
to a ModelSecretRecord whose lease drives renewal. Retries, timeouts and
renewal scheduling belong to the fetch orchestrator; this handler performs
exactly one read per call.

Security Features:
    - SecretStr protection for tokens (prevents accidental logging)
    - Sanitized error messages (never expose secrets in logs)
    - SSL verification enabled by default

Status Mapping:
    hvac raises one exception class per HTTP status. Each is translated to a
    BackendCommunicationError carrying that status so the retry policy can
    tell terminal failures (401, 403, 404) from transient ones (429, 5xx).
    A ``None`` response from ``Client.read`` means the path does not exist
    and is reported as 404.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, NoReturn
from uuid import UUID, uuid4

import hvac
from pydantic import SecretStr, ValidationError

from omnibase_secrets.errors import (
    BackendCommunicationError,
    InfraAuthenticationError,
    ModelSecretErrorContext,
    SecretsConfigurationError,
    SecretsRuntimeError,
)
from omnibase_secrets.handlers.model_vault_handler_config import (
    ModelVaultHandlerConfig,
)
from omnibase_secrets.models.model_secret_record import ModelSecretRecord

logger = logging.getLogger(__name__)

HVAC_STATUS_CODES: tuple[tuple[type[hvac.exceptions.VaultError], int], ...] = (
    (hvac.exceptions.InvalidRequest, 400),
    (hvac.exceptions.Unauthorized, 401),
    (hvac.exceptions.Forbidden, 403),
    (hvac.exceptions.InvalidPath, 404),
    (hvac.exceptions.PreconditionFailed, 412),
    (hvac.exceptions.RateLimitExceeded, 429),
    (hvac.exceptions.InternalServerError, 500),
    (hvac.exceptions.VaultNotInitialized, 501),
    (hvac.exceptions.BadGateway, 502),
    (hvac.exceptions.VaultDown, 503),
)


def status_code_for(error: BaseException) -> int | None:
    """HTTP-like status for an hvac exception, None if it has no mapping."""
    for exc_type, status_code in HVAC_STATUS_CODES:
        if isinstance(error, exc_type):
            return status_code
    return None


class HandlerVault:
    """HashiCorp Vault secret backend (KV v1 and v2 mounts).

    Security Policy - Token Handling:
        1. Token is stored as SecretStr in config (never logged or exposed)
        2. All error messages use generic descriptions without exposing token
        3. Secret payloads are never logged, only paths and status codes

    Thread Pool Management:
        - hvac is synchronous; every call runs in a bounded ThreadPoolExecutor
        - Pool size is max_concurrent_operations (default: 10, max: 100)
        - Pool is shut down on shutdown()

    Example:
        >>> vault = HandlerVault()
        >>> await vault.initialize({"url": "https://vault:8200", "token": token})
        >>> record = await vault.get("secret/postgres")
        >>> await vault.shutdown()
    """

    def __init__(self) -> None:
        """Initialize HandlerVault in uninitialized state."""
        self._client: hvac.Client | None = None
        self._config: ModelVaultHandlerConfig | None = None
        self._initialized: bool = False
        self._executor: ThreadPoolExecutor | None = None
        self._max_workers: int = 0

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def max_workers(self) -> int:
        """Return thread pool max workers (public API for tests)."""
        return self._max_workers

    # -------------------------------------------------------------------------
    # Helper methods for initialize
    # -------------------------------------------------------------------------

    def _create_init_error_context(
        self, correlation_id: UUID
    ) -> ModelSecretErrorContext:
        return ModelSecretErrorContext(
            operation="vault.initialize",
            correlation_id=correlation_id,
        )

    def _parse_vault_config(
        self,
        config: ModelVaultHandlerConfig | dict[str, Any],
        correlation_id: UUID,
    ) -> ModelVaultHandlerConfig:
        """Parse and validate vault configuration.

        Raises:
            SecretsConfigurationError: If validation fails or no token is set
        """
        if isinstance(config, ModelVaultHandlerConfig):
            parsed = config
        else:
            try:
                token_raw = config.get("token")
                if isinstance(token_raw, str):
                    config = dict(config)
                    config["token"] = SecretStr(token_raw)
                parsed = ModelVaultHandlerConfig.model_validate(config)
            except ValidationError as e:
                raise SecretsConfigurationError(
                    f"Invalid Vault configuration: {e.error_count()} validation error(s)",
                    context=self._create_init_error_context(correlation_id),
                ) from e

        if parsed.token is None:
            raise SecretsConfigurationError(
                "Missing 'token' in config - Vault authentication token required",
                context=self._create_init_error_context(correlation_id),
            )
        return parsed

    def _create_hvac_client(self, config: ModelVaultHandlerConfig) -> hvac.Client:
        return hvac.Client(
            url=config.url,
            token=config.token.get_secret_value() if config.token else "",
            namespace=config.namespace,
            verify=config.verify_ssl,
            timeout=config.timeout_seconds,
        )

    def _verify_vault_auth(self, client: hvac.Client, correlation_id: UUID) -> None:
        """Verify vault authentication.

        Raises:
            InfraAuthenticationError: If authentication fails
        """
        if not client.is_authenticated():
            raise InfraAuthenticationError(
                "Vault authentication failed - check token validity",
                context=self._create_init_error_context(correlation_id),
            )

    def _setup_thread_pool(self, config: ModelVaultHandlerConfig) -> None:
        self._max_workers = config.max_concurrent_operations
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="vault_handler_",
        )

    def _handle_init_hvac_error(
        self, error: Exception, correlation_id: UUID
    ) -> NoReturn:
        """Translate an hvac error raised during initialization.

        Raises:
            InfraAuthenticationError: For InvalidRequest and Unauthorized errors
            BackendCommunicationError: For other VaultError errors
            SecretsRuntimeError: For anything else
        """
        ctx = self._create_init_error_context(correlation_id)

        if isinstance(
            error, (hvac.exceptions.InvalidRequest, hvac.exceptions.Unauthorized)
        ):
            raise InfraAuthenticationError(
                "Vault authentication failed - invalid token or permissions",
                context=ctx,
            ) from error
        if isinstance(error, hvac.exceptions.VaultError):
            raise BackendCommunicationError(
                f"Failed to connect to Vault: {type(error).__name__}",
                context=ctx,
                status_code=status_code_for(error),
            ) from error
        raise SecretsRuntimeError(
            f"Failed to initialize Vault client: {type(error).__name__}",
            context=ctx,
        ) from error

    async def initialize(self, config: ModelVaultHandlerConfig | dict[str, Any]) -> None:
        """Initialize Vault client with configuration.

        Args:
            config: ModelVaultHandlerConfig, or a dict of its fields (a plain
                string token is wrapped in SecretStr)

        Raises:
            SecretsConfigurationError: If configuration validation fails
            InfraAuthenticationError: If token authentication fails
            BackendCommunicationError: If Vault answers with an error
            SecretsRuntimeError: If client initialization fails otherwise
        """
        init_correlation_id = uuid4()

        logger.info(
            "Initializing %s",
            self.__class__.__name__,
            extra={
                "handler": self.__class__.__name__,
                "correlation_id": str(init_correlation_id),
            },
        )

        self._config = self._parse_vault_config(config, init_correlation_id)

        try:
            self._client = self._create_hvac_client(self._config)
            self._verify_vault_auth(self._client, init_correlation_id)
            self._setup_thread_pool(self._config)
            self._initialized = True
        except InfraAuthenticationError:
            self._client = None
            raise
        except Exception as e:
            self._client = None
            self._handle_init_hvac_error(e, init_correlation_id)

        logger.info(
            "%s initialized successfully",
            self.__class__.__name__,
            extra={
                "handler": self.__class__.__name__,
                "url": self._config.url,
                "namespace": self._config.namespace,
                "kv_version": self._config.kv_version,
                "verify_ssl": self._config.verify_ssl,
                "thread_pool_max_workers": self._max_workers,
                "correlation_id": str(init_correlation_id),
            },
        )

    async def shutdown(self) -> None:
        """Release the thread pool and drop the client."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._client = None
        self._initialized = False
        self._config = None
        logger.info("HandlerVault shutdown complete")

    # -------------------------------------------------------------------------
    # ProtocolSecretBackend
    # -------------------------------------------------------------------------

    async def get(self, path: str) -> ModelSecretRecord:
        """Read one secret from Vault.

        Args:
            path: Full Vault API path (e.g. "secret/postgres", or
                "secret/data/postgres" on a KV v2 mount)

        Returns:
            ModelSecretRecord with the secret fields and the lease duration

        Raises:
            SecretsRuntimeError: If the handler is not initialized
            BackendCommunicationError: On any Vault error, with its status code
        """
        ctx = ModelSecretErrorContext(operation="vault.read", backend_path=path)
        if not self._initialized or self._client is None or self._config is None:
            raise SecretsRuntimeError(
                "Vault handler not initialized - call initialize() first",
                context=ctx,
            )

        client = self._client
        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(
                self._executor, lambda: client.read(path)
            )
        except hvac.exceptions.VaultError as e:
            status_code = status_code_for(e)
            logger.debug(
                "Vault read failed",
                extra={
                    "backend_path": path,
                    "error_type": type(e).__name__,
                    "status_code": status_code,
                },
            )
            raise BackendCommunicationError(
                f"Vault read failed: {type(e).__name__}",
                context=ctx,
                status_code=status_code,
            ) from e

        if response is None:
            raise BackendCommunicationError(
                "Secret not found in Vault",
                context=ctx,
                status_code=404,
            )
        return self._to_record(response, ctx)

    def _to_record(
        self, response: object, ctx: ModelSecretErrorContext
    ) -> ModelSecretRecord:
        if not isinstance(response, dict):
            raise BackendCommunicationError(
                "Invalid response from Vault - expected a JSON object",
                context=ctx,
            )

        data = response.get("data")
        if self._config is not None and self._config.kv_version == 2:
            data = data.get("data") if isinstance(data, dict) else None
        if not isinstance(data, dict):
            raise BackendCommunicationError(
                "Invalid response from Vault - missing secret data",
                context=ctx,
            )

        lease_duration = response.get("lease_duration")
        valid_for_seconds: float | None = None
        if isinstance(lease_duration, (int, float)) and not isinstance(
            lease_duration, bool
        ):
            valid_for_seconds = float(lease_duration)

        return ModelSecretRecord(data=data, valid_for_seconds=valid_for_seconds)


__all__: list[str] = ["HVAC_STATUS_CODES", "HandlerVault", "status_code_for"]
