# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test helpers for omnibase_secrets unit tests.

Available Utilities:
    Deterministic:
        - DeterministicTimers: Simulated call_later with a manual clock
        - DeterministicTimerHandle: Handle returned by DeterministicTimers

    Backends:
        - ScriptedSecretBackend: Scripted ProtocolSecretBackend with a call log
        - backend_error: BackendCommunicationError for a status code
"""

from tests.helpers.deterministic import DeterministicTimerHandle, DeterministicTimers
from tests.helpers.secret_backends import ScriptedSecretBackend, backend_error

__all__ = [
    "DeterministicTimerHandle",
    "DeterministicTimers",
    "ScriptedSecretBackend",
    "backend_error",
]
