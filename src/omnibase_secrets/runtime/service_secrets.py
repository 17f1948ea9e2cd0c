# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets service: fetch -> merge -> validate -> publish.

ServiceSecrets wires the SecretStore, RenewalScheduler,
SecretFetchOrchestrator and ValidationGate into one pipeline and exposes the
public surface: a completion signal, a copy-returning accessor, manual
refresh and per-address change subscriptions.

Readiness:
    The service is either READY (the accessor returns data) or not. A failed
    first cycle leaves state FAILED even if some secrets were merged; the
    accessor refuses reads in every state except READY. Renewals after the
    first cycle never touch the completion signal.

Example:
    ```python
    config = ModelSecretsServiceConfig(
        secrets={"secret/": {"postgres": "database.postgres", "app": "."}},
        retry=ModelRetryPolicyConfig(max_attempts=5),
    )
    async with ServiceSecrets(backend=vault, config=config) as secrets:
        await secrets.start()
        password = secrets.get("database.postgres.password")
    ```
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections import defaultdict
from collections.abc import Callable
from types import TracebackType
from typing import Any
from uuid import uuid4

from omnibase_secrets.enums import EnumServiceState
from omnibase_secrets.errors import (
    ModelSecretErrorContext,
    SecretsConfigurationError,
    SecretsNotReadyError,
)
from omnibase_secrets.models.model_secrets_service_config import (
    ModelSecretsServiceConfig,
)
from omnibase_secrets.protocols.protocol_secret_backend import ProtocolSecretBackend
from omnibase_secrets.protocols.protocol_timer import ProtocolCallLater
from omnibase_secrets.runtime.renewal_scheduler import RenewalScheduler
from omnibase_secrets.runtime.secret_fetch_orchestrator import SecretFetchOrchestrator
from omnibase_secrets.runtime.secret_store import SecretStore
from omnibase_secrets.runtime.util_address_map import (
    addresses_for,
    flatten_address_map,
)
from omnibase_secrets.runtime.validation_gate import SecretValidator, ValidationGate

logger = logging.getLogger(__name__)

ALL_ADDRESSES: str = "*"

SecretListener = Callable[[str, Any], None]


class ServiceSecrets:
    """Owns the secret tree for one service and keeps it renewed.

    Args:
        backend: Secret backend adapter
        config: Service configuration (address map, retry, timeouts)
        validator: Optional validator run over the merged tree
        call_later: Timer factory for renewals (defaults to the running loop)
    """

    def __init__(
        self,
        backend: ProtocolSecretBackend,
        config: ModelSecretsServiceConfig,
        validator: SecretValidator | None = None,
        *,
        call_later: ProtocolCallLater | None = None,
    ) -> None:
        self._config = config
        self._address_map = flatten_address_map(config.secrets)
        self._store = SecretStore()
        self._scheduler = RenewalScheduler(call_later=call_later)
        self._orchestrator = SecretFetchOrchestrator(
            backend=backend,
            store=self._store,
            scheduler=self._scheduler,
            config=config,
            on_fetched=self._dispatch,
        )
        self._gate = ValidationGate(validator)
        self._listeners: defaultdict[str, list[SecretListener]] = defaultdict(list)
        self._state = EnumServiceState.PENDING
        self._ready: asyncio.Future[None] | None = None
        self._started = False

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def state(self) -> EnumServiceState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is EnumServiceState.READY

    @property
    def address_map(self) -> dict[str, str]:
        """Flattened backend path -> address map."""
        return dict(self._address_map)

    @property
    def orchestrator(self) -> SecretFetchOrchestrator:
        return self._orchestrator

    @property
    def ready(self) -> asyncio.Future[None]:
        """Completion signal of the first fetch cycle.

        Resolved exactly once: with None on success, with the cycle's error
        on failure.
        """
        if self._ready is None:
            self._ready = asyncio.get_running_loop().create_future()
        return self._ready

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Run the first fetch + validation cycle and publish the result.

        Raises:
            RuntimeError: If the service was already started
            SecretsConfigurationError: If the address map is empty
            SecretsRuntimeError: If any fetch or the validation fails
        """
        if self._started:
            raise RuntimeError("ServiceSecrets already started")
        self._started = True

        ready = self.ready
        correlation_id = uuid4()
        logger.info(
            "Starting secrets service",
            extra={
                "secret_count": len(self._address_map),
                "validation_enabled": self._gate.enabled,
                "correlation_id": str(correlation_id),
            },
        )

        try:
            await self._orchestrator.fetch_all(self._address_map, correlation_id)
            await self._gate.apply(self._store, correlation_id)
        except BaseException as e:
            self._state = EnumServiceState.FAILED
            # A service that never became ready must not keep renewing.
            await self._orchestrator.close()
            if not ready.done():
                if isinstance(e, asyncio.CancelledError):
                    ready.cancel()
                else:
                    ready.set_exception(e)
                    # Mark retrieved; the caller receives the same error below.
                    ready.exception()
            logger.error(
                "Secrets service failed to become ready",
                extra={
                    "error_type": type(e).__name__,
                    "correlation_id": str(correlation_id),
                },
            )
            raise

        self._state = EnumServiceState.READY
        if not ready.done():
            ready.set_result(None)
        logger.info(
            "Secrets service ready",
            extra={
                "renewals_scheduled": len(self._scheduler),
                "correlation_id": str(correlation_id),
            },
        )

    async def close(self) -> None:
        """Stop renewals and drop every secret."""
        await self._orchestrator.close()
        self._store.clear()
        self._listeners.clear()
        self._state = EnumServiceState.CLOSED
        if self._ready is not None and not self._ready.done():
            self._ready.cancel()
        logger.info("Secrets service closed")

    async def __aenter__(self) -> ServiceSecrets:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Public accessor
    # -------------------------------------------------------------------------

    def get(self, address: str | None = None, default: Any = None) -> Any:
        """Return a copy of the whole tree, or of the value at ``address``.

        Raises:
            SecretsNotReadyError: Unless the first cycle succeeded
        """
        if self._state is not EnumServiceState.READY:
            raise SecretsNotReadyError(
                f"Secrets service is not ready (state={self._state.value})",
                context=ModelSecretErrorContext(operation="get", address=address),
            )
        return self._store.get(address, default)

    async def refresh(self, address: str) -> Any:
        """Re-fetch every backend path targeting ``address`` now.

        Supersedes the address's pending renewal; the fetch schedules a new
        one if the lease expires again.

        Raises:
            SecretsConfigurationError: If no backend path targets ``address``
        """
        paths = addresses_for(self._address_map, address)
        if not paths:
            raise SecretsConfigurationError(
                f"No backend path is mapped to address '{address}'",
                context=ModelSecretErrorContext(operation="refresh", address=address),
            )
        correlation_id = uuid4()
        value: Any = None
        for backend_path in paths:
            value = await self._orchestrator.fetch_one(
                backend_path, address, correlation_id
            )
        return value

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, address: str, listener: SecretListener) -> Callable[[], None]:
        """Call ``listener(address, value)`` after every fetch of ``address``.

        Use ``"*"`` to receive every address. Returns an unsubscribe callable.
        """
        self._listeners[address].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(address)
            if listeners and listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _dispatch(self, address: str, value: Any) -> None:
        for key in (address, ALL_ADDRESSES):
            for listener in list(self._listeners.get(key, ())):
                try:
                    listener(address, copy.deepcopy(value))
                except Exception as e:
                    logger.warning(
                        "Secret listener raised",
                        extra={
                            "address": address,
                            "error_type": type(e).__name__,
                        },
                        exc_info=True,
                    )


__all__: list[str] = ["ALL_ADDRESSES", "SecretListener", "ServiceSecrets"]
