# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Fetch orchestration for secrets: retry, merge, renewal and batch fetch.

SecretFetchOrchestrator coordinates fetching one secret (retry loop around a
single backend read, merge into the store, renewal scheduling) and fetching
a full address map (bounded concurrency, fail-fast aggregate failure).

Fetch Flow (fetch_one):
    1. Cancel any pending renewal for the address (a fresh fetch supersedes it)
    2. Read from the backend, each attempt bounded by request_timeout_seconds,
       retrying per ModelRetryPolicyConfig
    3. Merge the record data into the SecretStore at the address
    4. If the record has a lease, schedule a renewal that re-runs fetch_one
       in the background
    5. Return a copy of the post-merge value at the address

Renewals:
    Renewal fetches are fire-and-forget background tasks. Their failures are
    logged as SecretRenewalError and never reach a caller; the previously
    fetched value stays in the store.

Batch Fetch (fetch_all):
    - Empty address map: SecretsConfigurationError, no backend calls
    - At most max_concurrent_fetches reads in flight
    - First terminal failure cancels the remaining fetches and is re-raised;
      values merged by sibling fetches stay in the store (no rollback)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from omnibase_secrets.errors import (
    BackendCommunicationError,
    ModelSecretErrorContext,
    SecretFetchTimeoutError,
    SecretRenewalError,
    SecretsConfigurationError,
    SecretsRuntimeError,
)
from omnibase_secrets.models.model_retry_state import ModelRetryState
from omnibase_secrets.models.model_secret_record import ModelSecretRecord
from omnibase_secrets.models.model_secrets_service_config import (
    ModelSecretsServiceConfig,
)
from omnibase_secrets.protocols.protocol_secret_backend import ProtocolSecretBackend
from omnibase_secrets.runtime.renewal_scheduler import RenewalScheduler
from omnibase_secrets.runtime.secret_store import SecretStore
from omnibase_secrets.runtime.util_retry_policy import (
    compute_retry_decision,
    is_retryable_error,
)

logger = logging.getLogger(__name__)

FetchListener = Callable[[str, Any], None]


class SecretFetchOrchestrator:
    """Fetches secrets into a SecretStore and keeps leased secrets renewed.

    Concurrency:
        All work runs on one event loop. Store merges and scheduler
        bookkeeping happen between awaits, so they never interleave with
        each other; ordering between fetches of the same address follows
        response completion order.

    Example:
        >>> orchestrator = SecretFetchOrchestrator(
        ...     backend=vault_backend,
        ...     store=SecretStore(),
        ...     scheduler=RenewalScheduler(),
        ...     config=ModelSecretsServiceConfig(),
        ... )
        >>> await orchestrator.fetch_all({"secret/db": "database"})
    """

    def __init__(
        self,
        backend: ProtocolSecretBackend,
        store: SecretStore,
        scheduler: RenewalScheduler,
        config: ModelSecretsServiceConfig,
        on_fetched: FetchListener | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            backend: Secret backend adapter
            store: Store the fetched secrets are merged into
            scheduler: Renewal scheduler (owned by this orchestrator)
            config: Retry, timeout and concurrency configuration
            on_fetched: Optional hook called with (address, value) after every
                successful fetch, initial or renewal
        """
        self._backend = backend
        self._store = store
        self._scheduler = scheduler
        self._config = config
        self._on_fetched = on_fetched
        self._renewal_tasks: set[asyncio.Task[None]] = set()
        self._renewal_failures: dict[str, SecretRenewalError] = {}
        self._closed = False

    @property
    def scheduler(self) -> RenewalScheduler:
        return self._scheduler

    @property
    def renewal_tasks(self) -> frozenset[asyncio.Task[None]]:
        """Background renewal fetches currently in flight."""
        return frozenset(self._renewal_tasks)

    @property
    def renewal_failures(self) -> dict[str, SecretRenewalError]:
        """Most recent renewal failure per backend path (cleared on the next success)."""
        return dict(self._renewal_failures)

    # -------------------------------------------------------------------------
    # Single secret
    # -------------------------------------------------------------------------

    async def fetch_one(
        self,
        backend_path: str,
        address: str,
        correlation_id: UUID | None = None,
    ) -> Any:
        """Fetch one secret, merge it and schedule its renewal.

        Args:
            backend_path: Backend path to read
            address: Tree address to merge into ("." for the root)
            correlation_id: Correlation ID of the enclosing fetch cycle

        Returns:
            Copy of the value at ``address`` after the merge (the whole tree
            for the root address)

        Raises:
            BackendCommunicationError: Last error after retries are exhausted,
                or the first non-retryable error
            SecretsRuntimeError: Terminal errors raised by the backend adapter
        """
        correlation_id = correlation_id or uuid4()
        self._scheduler.cancel(address, backend_path)

        record = await self._read_with_retry(backend_path, address, correlation_id)

        self._store.merge(address, record.data)
        if record.expires and not self._closed:
            self._scheduler.schedule(
                address,
                backend_path,
                record.valid_for_seconds or 0.0,
                self._on_renewal_fire,
            )

        value = self._store.get(address)
        logger.debug(
            "Secret fetched",
            extra={
                "address": address,
                "backend_path": backend_path,
                "valid_for_seconds": record.valid_for_seconds,
                "correlation_id": str(correlation_id),
            },
        )
        self._notify(address)
        return value

    async def _read_with_retry(
        self,
        backend_path: str,
        address: str,
        correlation_id: UUID,
    ) -> ModelSecretRecord:
        """Run the retry loop around single backend reads."""
        policy = self._config.retry
        retry_state = ModelRetryState(policy=policy)
        ctx = ModelSecretErrorContext(
            operation="fetch_one",
            address=address,
            backend_path=backend_path,
            correlation_id=correlation_id,
        )

        while True:
            try:
                return await self._read_once(backend_path, ctx)
            except Exception as e:
                error = self._as_secrets_error(e, ctx)
                retry_state = retry_state.next_attempt(error)

                if not is_retryable_error(error, policy):
                    self._log_terminal_failure(
                        "Non-retryable error retrieving secret", retry_state, ctx
                    )
                    if error is e:
                        raise
                    raise error from e

                if retry_state.is_exhausted():
                    self._log_terminal_failure(
                        "Unable to retrieve secret, retries exhausted",
                        retry_state,
                        ctx,
                    )
                    if error is e:
                        raise
                    raise error from e

                decision = compute_retry_decision(retry_state.attempt, policy)
                logger.warning(
                    "Error retrieving secret, retrying",
                    extra={
                        "address": address,
                        "backend_path": backend_path,
                        "attempt": retry_state.attempt,
                        "max_attempts": None if policy.forever else policy.max_attempts,
                        "delay_seconds": decision.delay_seconds,
                        "error_type": type(error).__name__,
                        "status_code": getattr(error, "status_code", None),
                        "correlation_id": str(correlation_id),
                    },
                )
                await asyncio.sleep(decision.delay_seconds)

    async def _read_once(
        self, backend_path: str, ctx: ModelSecretErrorContext
    ) -> ModelSecretRecord:
        """Single backend read bounded by the per-attempt timeout."""
        timeout_seconds = self._config.request_timeout_seconds
        try:
            result = await asyncio.wait_for(
                self._backend.get(backend_path),
                timeout=timeout_seconds,
            )
        except TimeoutError as e:
            raise SecretFetchTimeoutError(
                f"Secret read timed out after {timeout_seconds}s",
                context=ctx,
                timeout_seconds=timeout_seconds,
            ) from e

        if isinstance(result, ModelSecretRecord):
            return result
        try:
            return ModelSecretRecord.model_validate(result)
        except ValidationError as e:
            raise BackendCommunicationError(
                "Invalid response from backend - expected a mapping of secret data",
                context=ctx,
            ) from e

    @staticmethod
    def _as_secrets_error(
        error: Exception, ctx: ModelSecretErrorContext
    ) -> SecretsRuntimeError:
        if isinstance(error, SecretsRuntimeError):
            return error
        return BackendCommunicationError(
            f"Secret read failed: {type(error).__name__}",
            context=ctx,
        )

    def _log_terminal_failure(
        self,
        message: str,
        retry_state: ModelRetryState,
        ctx: ModelSecretErrorContext,
    ) -> None:
        error = retry_state.last_error
        logger.error(
            message,
            extra={
                "address": ctx.address,
                "backend_path": ctx.backend_path,
                "attempts": retry_state.attempt,
                "error_type": type(error).__name__,
                "status_code": getattr(error, "status_code", None),
                "correlation_id": str(ctx.correlation_id),
            },
        )

    def _notify(self, address: str) -> None:
        if self._on_fetched is None:
            return
        try:
            self._on_fetched(address, self._store.get(address))
        except Exception as e:
            logger.warning(
                "Secret listener raised",
                extra={"address": address, "error_type": type(e).__name__},
                exc_info=True,
            )

    # -------------------------------------------------------------------------
    # Renewal
    # -------------------------------------------------------------------------

    def _on_renewal_fire(self, address: str, backend_path: str) -> None:
        if self._closed:
            return
        task = asyncio.get_running_loop().create_task(
            self._renew(address, backend_path),
            name=f"renew_secret:{address}:{backend_path}",
        )
        self._renewal_tasks.add(task)
        task.add_done_callback(self._renewal_tasks.discard)

    async def _renew(self, address: str, backend_path: str) -> None:
        correlation_id = uuid4()
        logger.info(
            "Renewing secret",
            extra={
                "address": address,
                "backend_path": backend_path,
                "correlation_id": str(correlation_id),
            },
        )
        try:
            await self.fetch_one(backend_path, address, correlation_id)
        except Exception as e:
            renewal_error = SecretRenewalError(
                "Secret renewal failed",
                context=ModelSecretErrorContext(
                    operation="renew",
                    address=address,
                    backend_path=backend_path,
                    correlation_id=correlation_id,
                ),
                cause_type=type(e).__name__,
            )
            renewal_error.__cause__ = e
            self._renewal_failures[backend_path] = renewal_error
            logger.error(
                "Secret renewal failed",
                extra={
                    "address": address,
                    "backend_path": backend_path,
                    "error_type": type(e).__name__,
                    "correlation_id": str(correlation_id),
                },
                exc_info=renewal_error,
            )
            return
        self._renewal_failures.pop(backend_path, None)

    async def wait_for_renewals(self) -> None:
        """Wait until every in-flight renewal fetch has finished."""
        while self._renewal_tasks:
            await asyncio.gather(*self._renewal_tasks, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Batch
    # -------------------------------------------------------------------------

    async def fetch_all(
        self,
        address_map: Mapping[str, str],
        correlation_id: UUID | None = None,
    ) -> None:
        """Fetch every (backend_path, address) pair of a flat address map.

        Args:
            address_map: Backend path -> tree address
            correlation_id: Correlation ID for the fetch cycle

        Raises:
            SecretsConfigurationError: If the address map is empty
            SecretsRuntimeError: The first terminal fetch failure
        """
        correlation_id = correlation_id or uuid4()
        if not address_map:
            raise SecretsConfigurationError(
                "Missing secrets config - address map is empty",
                context=ModelSecretErrorContext(
                    operation="fetch_all", correlation_id=correlation_id
                ),
            )

        logger.info(
            "Fetching secrets",
            extra={
                "secret_count": len(address_map),
                "max_concurrent_fetches": self._config.max_concurrent_fetches,
                "correlation_id": str(correlation_id),
            },
        )

        semaphore = asyncio.Semaphore(self._config.max_concurrent_fetches)

        async def bounded_fetch(backend_path: str, address: str) -> None:
            async with semaphore:
                await self.fetch_one(backend_path, address, correlation_id)

        tasks = [
            asyncio.create_task(
                bounded_fetch(backend_path, address),
                name=f"fetch_secret:{address}",
            )
            for backend_path, address in address_map.items()
        ]

        try:
            done, pending = await asyncio.wait(
                tasks, return_when=asyncio.FIRST_EXCEPTION
            )
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        failures: list[BaseException] = []
        for task in tasks:
            if task in done and not task.cancelled():
                exc = task.exception()
                if exc is not None:
                    failures.append(exc)

        if failures:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            logger.error(
                "Secret fetch cycle failed",
                extra={
                    "failed_count": len(failures),
                    "cancelled_count": len(pending),
                    "error_type": type(failures[0]).__name__,
                    "correlation_id": str(correlation_id),
                },
            )
            raise failures[0]

        logger.info(
            "Secrets fetched",
            extra={
                "secret_count": len(address_map),
                "renewals_scheduled": len(self._scheduler),
                "correlation_id": str(correlation_id),
            },
        )

    async def close(self) -> None:
        """Cancel every renewal timer and in-flight renewal fetch."""
        self._closed = True
        cancelled = self._scheduler.cancel_all()
        tasks = list(self._renewal_tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug(
            "Fetch orchestrator closed",
            extra={"timers_cancelled": cancelled, "renewals_cancelled": len(tasks)},
        )


__all__: list[str] = ["FetchListener", "SecretFetchOrchestrator"]
