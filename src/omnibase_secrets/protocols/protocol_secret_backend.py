# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for secret backends.

This module defines the ProtocolSecretBackend interface consumed by the
fetch orchestrator. The orchestrator never speaks a backend wire protocol
itself; a backend adapter (HandlerVault over hvac, an in-memory fake in
tests, ...) turns an opaque backend path into a ModelSecretRecord.

Architecture Context:
    - SecretFetchOrchestrator handles retry, timeouts, merging and renewal
    - ProtocolSecretBackend defines the single-read contract
    - Concrete adapters own path semantics (mount points, versions, namespaces)

Error Handling:
    Implementations should raise BackendCommunicationError on failure and set
    ``status_code`` to the closest HTTP status so the retry policy can branch:
    - 404: path does not exist (terminal, never retried)
    - 401/403: credentials rejected (terminal)
    - 429/5xx or None: transient, retried per policy

Example Usage:
    ```python
    class InMemorySecretBackend:
        def __init__(self, secrets: dict[str, ModelSecretRecord]) -> None:
            self._secrets = secrets

        async def get(self, path: str) -> ModelSecretRecord:
            try:
                return self._secrets[path]
            except KeyError:
                raise BackendCommunicationError("Secret not found", status_code=404)

    backend = InMemorySecretBackend({...})
    assert isinstance(backend, ProtocolSecretBackend)
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from omnibase_secrets.models.model_secret_record import ModelSecretRecord

__all__ = [
    "ProtocolSecretBackend",
]


@runtime_checkable
class ProtocolSecretBackend(Protocol):
    """Single-read contract for a remote secret store.

    Concurrency Safety:
        Implementations must be coroutine-safe: the orchestrator issues up to
        ``max_concurrent_fetches`` reads at once, plus background renewals.
    """

    async def get(self, path: str) -> ModelSecretRecord:
        """Read one secret.

        Args:
            path: Opaque backend path

        Returns:
            ModelSecretRecord with the secret fields and lease duration

        Raises:
            BackendCommunicationError: If the read fails
        """
        ...
