# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Per-secret renewal timers with cancel-and-replace semantics.

The RenewalScheduler arms one timer per (address, backend path) pair. When
the timer fires, the entry is removed and ``on_fire`` re-fetches the
secret; the fetch re-schedules it if the new lease expires again.

State Machine (per address and backend path):
    UNSCHEDULED -> SCHEDULED -> FIRED -> (rescheduled -> SCHEDULED
                                          | cleared -> UNSCHEDULED)

Invariants:
    - At most one live entry per (address, backend path). ``schedule``
      cancels the existing timer before arming a new one, so a manual re-fetch
      racing a natural renewal never leaves two timers behind.
    - Delays are clamped to MAX_TIMER_DELAY_SECONDS. Very long leases renew
      at the clamp instead of overflowing into an immediate renewal storm.

Timer Source:
    Timers are armed through a ``call_later(delay, callback)`` callable.
    The default resolves ``asyncio.get_running_loop().call_later`` at
    schedule time; tests inject a fake to advance simulated time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from omnibase_secrets.enums import EnumRenewalState
from omnibase_secrets.models.model_renewal_entry import ModelRenewalEntry
from omnibase_secrets.protocols.protocol_timer import (
    ProtocolCallLater,
    ProtocolTimerHandle,
)

logger = logging.getLogger(__name__)

# 2**31 - 1 milliseconds, the largest delay a signed 32-bit timer can hold.
MAX_TIMER_DELAY_SECONDS: float = 2_147_483.647

RenewalCallback = Callable[[str, str], object]


def compute_renewal_delay(valid_for_seconds: float) -> float:
    """Convert a lease duration into a timer delay, clamped to the maximum."""
    if valid_for_seconds <= 0:
        return 0.0
    return min(float(valid_for_seconds), MAX_TIMER_DELAY_SECONDS)


def _loop_call_later(
    delay: float, callback: Callable[[], object]
) -> ProtocolTimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


RenewalKey = tuple[str, str]


class RenewalScheduler:
    """Owns the renewal entries for every (address, backend path) pair.

    Several backend paths may contribute sub-keys to one address; each
    keeps its own lease and timer. Address-level queries and cancellation
    cover every path of that address.

    Example:
        >>> scheduler = RenewalScheduler()
        >>> scheduler.schedule("db", "secret/db", 900, on_fire)  # inside a running loop
        >>> scheduler.state("db")
        <EnumRenewalState.SCHEDULED: 'SCHEDULED'>
        >>> scheduler.cancel("db", "secret/db")
        True
    """

    def __init__(self, call_later: ProtocolCallLater | None = None) -> None:
        self._call_later: ProtocolCallLater = call_later or _loop_call_later
        self._entries: dict[RenewalKey, ModelRenewalEntry] = {}

    def schedule(
        self,
        address: str,
        backend_path: str,
        valid_for_seconds: float,
        on_fire: RenewalCallback,
    ) -> ModelRenewalEntry:
        """Arm a renewal for ``backend_path`` at ``address``, replacing any pending one.

        Args:
            address: Secret tree address
            backend_path: Backend path to re-fetch
            valid_for_seconds: Lease duration; converted and clamped to a delay
            on_fire: Called as ``on_fire(address, backend_path)`` when the timer fires

        Returns:
            The new live entry
        """
        key = (address, backend_path)
        self.cancel(address, backend_path)

        delay = compute_renewal_delay(valid_for_seconds)
        if delay < valid_for_seconds:
            logger.warning(
                "Lease exceeds maximum timer delay, renewal clamped",
                extra={
                    "address": address,
                    "backend_path": backend_path,
                    "valid_for_seconds": valid_for_seconds,
                    "delay_seconds": delay,
                },
            )

        entry: ModelRenewalEntry | None = None

        def fire() -> None:
            # Ignore a stale timer whose entry was already replaced.
            if entry is None or self._entries.get(key) is not entry:
                return
            entry.state = EnumRenewalState.FIRED
            del self._entries[key]
            logger.debug(
                "Renewal timer fired",
                extra={"address": address, "backend_path": backend_path},
            )
            on_fire(address, backend_path)

        handle = self._call_later(delay, fire)
        entry = ModelRenewalEntry(
            address=address,
            backend_path=backend_path,
            handle=handle,
            delay_seconds=delay,
        )
        self._entries[key] = entry
        logger.debug(
            "Renewal scheduled",
            extra={
                "address": address,
                "backend_path": backend_path,
                "delay_seconds": delay,
            },
        )
        return entry

    def cancel(self, address: str, backend_path: str | None = None) -> bool:
        """Cancel pending renewals for ``address``.

        Args:
            address: Secret tree address
            backend_path: Only cancel this path's renewal; every path of the
                address when None

        Returns:
            True if at least one entry was cancelled
        """
        if backend_path is not None:
            keys = [(address, backend_path)]
        else:
            keys = [key for key in self._entries if key[0] == address]

        cancelled = False
        for key in keys:
            entry = self._entries.pop(key, None)
            if entry is None:
                continue
            entry.handle.cancel()
            cancelled = True
            logger.debug(
                "Renewal cancelled",
                extra={"address": address, "backend_path": entry.backend_path},
            )
        return cancelled

    def cancel_all(self) -> int:
        """Cancel every pending renewal and return how many were cancelled."""
        entries = list(self._entries.values())
        self._entries.clear()
        for entry in entries:
            entry.handle.cancel()
        return len(entries)

    def state(self, address: str, backend_path: str | None = None) -> EnumRenewalState:
        """SCHEDULED if a renewal is pending for ``address`` (or that path of it).

        UNSCHEDULED when no entry exists.
        """
        if backend_path is not None:
            entry = self._entries.get((address, backend_path))
            return EnumRenewalState.UNSCHEDULED if entry is None else entry.state
        for (entry_address, _), entry in self._entries.items():
            if entry_address == address:
                return entry.state
        return EnumRenewalState.UNSCHEDULED

    def get_entry(self, address: str, backend_path: str) -> ModelRenewalEntry | None:
        return self._entries.get((address, backend_path))

    @property
    def addresses(self) -> frozenset[str]:
        return frozenset(address for address, _ in self._entries)

    def __contains__(self, address: object) -> bool:
        return any(key[0] == address for key in self._entries)

    def __len__(self) -> int:
        return len(self._entries)


__all__: list[str] = [
    "MAX_TIMER_DELAY_SECONDS",
    "RenewalCallback",
    "RenewalKey",
    "RenewalScheduler",
    "compute_renewal_delay",
]
