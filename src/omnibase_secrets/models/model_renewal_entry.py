# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Renewal entry owned by the renewal scheduler."""

from __future__ import annotations

from dataclasses import dataclass

from omnibase_secrets.enums import EnumRenewalState
from omnibase_secrets.protocols.protocol_timer import ProtocolTimerHandle


@dataclass
class ModelRenewalEntry:
    """A live renewal timer for one backend path of an address.

    Mutable: the scheduler flips ``state`` to FIRED when the timer
    runs. At most one entry per (address, backend path) exists at any time.
    """

    address: str
    backend_path: str
    handle: ProtocolTimerHandle
    delay_seconds: float
    state: EnumRenewalState = EnumRenewalState.SCHEDULED


__all__: list[str] = ["ModelRenewalEntry"]
