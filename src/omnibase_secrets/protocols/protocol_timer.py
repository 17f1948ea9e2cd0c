# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definitions for renewal timers.

The renewal scheduler arms timers through a ``call_later``-shaped callable
instead of reaching for the event loop directly. Production code passes
``asyncio.get_running_loop().call_later``; tests pass a fake that advances
simulated time deterministically.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

__all__ = [
    "ProtocolCallLater",
    "ProtocolTimerHandle",
]


@runtime_checkable
class ProtocolTimerHandle(Protocol):
    """Handle of an armed timer (asyncio.TimerHandle satisfies this)."""

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        ...


class ProtocolCallLater(Protocol):
    """Arms ``callback`` to run after ``delay`` seconds."""

    def __call__(
        self, delay: float, callback: Callable[[], object], /
    ) -> ProtocolTimerHandle: ...
