# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Engine Protocols Module.

Exports:
    ProtocolSecretBackend: Single-read contract for remote secret stores
    ProtocolCallLater: call_later-shaped timer factory used by the renewal scheduler
    ProtocolTimerHandle: Cancellable handle of an armed timer
"""

from omnibase_secrets.protocols.protocol_secret_backend import ProtocolSecretBackend
from omnibase_secrets.protocols.protocol_timer import (
    ProtocolCallLater,
    ProtocolTimerHandle,
)

__all__: list[str] = [
    "ProtocolCallLater",
    "ProtocolSecretBackend",
    "ProtocolTimerHandle",
]
