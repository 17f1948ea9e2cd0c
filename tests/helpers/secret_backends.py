# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Scripted secret backend for orchestrator and service tests."""

from __future__ import annotations

import asyncio
from typing import Any

from omnibase_secrets.errors import BackendCommunicationError
from omnibase_secrets.models import ModelSecretRecord

__all__ = [
    "ScriptedSecretBackend",
    "backend_error",
]

ScriptedResponse = ModelSecretRecord | BaseException


def backend_error(status_code: int | None, message: str = "backend error") -> BackendCommunicationError:
    """Build the error a real backend adapter raises for ``status_code``."""
    return BackendCommunicationError(message, status_code=status_code)


class ScriptedSecretBackend:
    """ProtocolSecretBackend double with scripted responses and a call log.

    Each path serves its queued responses first (one per call, exceptions
    are raised), then repeats its standing response. Paths with neither
    fail with a 404.

    Example:
        >>> backend = ScriptedSecretBackend()
        >>> backend.set("secret/db", {"password": "pw"}, valid_for_seconds=900)
        >>> backend.script("secret/app", backend_error(503), {"key": "v"})
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._queued: dict[str, list[ScriptedResponse]] = {}
        self._standing: dict[str, ScriptedResponse] = {}
        self._delays: dict[str, float] = {}
        self._gates: dict[str, asyncio.Event] = {}
        self.in_flight: int = 0
        self.max_in_flight: int = 0

    @staticmethod
    def _record(
        response: ScriptedResponse | dict[str, Any],
        valid_for_seconds: float | None = None,
    ) -> ScriptedResponse:
        if isinstance(response, (ModelSecretRecord, BaseException)):
            return response
        return ModelSecretRecord(data=response, valid_for_seconds=valid_for_seconds)

    def set(
        self,
        path: str,
        response: ScriptedResponse | dict[str, Any],
        valid_for_seconds: float | None = None,
    ) -> None:
        """Serve ``response`` for every call to ``path`` once the queue is empty."""
        self._standing[path] = self._record(response, valid_for_seconds)

    def script(self, path: str, *responses: ScriptedResponse | dict[str, Any]) -> None:
        """Queue one response per upcoming call to ``path``."""
        self._queued.setdefault(path, []).extend(self._record(r) for r in responses)

    def delay(self, path: str, seconds: float) -> None:
        """Sleep ``seconds`` (real time) before answering ``path``."""
        self._delays[path] = seconds

    def hold(self, path: str) -> asyncio.Event:
        """Block calls to ``path`` until the returned event is set."""
        gate = asyncio.Event()
        self._gates[path] = gate
        return gate

    def calls_for(self, path: str) -> int:
        return self.calls.count(path)

    async def get(self, path: str) -> ModelSecretRecord:
        self.calls.append(path)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            gate = self._gates.get(path)
            if gate is not None:
                await gate.wait()
            if path in self._delays:
                await asyncio.sleep(self._delays[path])

            queue = self._queued.get(path)
            if queue:
                response = queue.pop(0)
            elif path in self._standing:
                response = self._standing[path]
            else:
                response = backend_error(404, f"no secret at {path}")
        finally:
            self.in_flight -= 1

        if isinstance(response, BaseException):
            raise response
        return response
