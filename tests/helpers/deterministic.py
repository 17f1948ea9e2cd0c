# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Deterministic test utilities for predictable testing.

Renewal timers in the secrets engine are armed through an injectable
``call_later``. DeterministicTimers implements that callable against a
simulated clock so tests can jump a lease forward without sleeping.

Example usage:
    >>> from tests.helpers.deterministic import DeterministicTimers
    >>>
    >>> timers = DeterministicTimers()
    >>> service = ServiceSecrets(backend, config, call_later=timers)
    >>> await service.start()
    >>> timers.advance(15.1 * 60)  # fires every renewal due by then
    >>> await service.orchestrator.wait_for_renewals()
"""

from __future__ import annotations

from collections.abc import Callable

__all__ = [
    "DeterministicTimerHandle",
    "DeterministicTimers",
]


class DeterministicTimerHandle:
    """Cancellable handle returned by DeterministicTimers.

    Attributes:
        when: Simulated time at which the callback is due
        delay: Delay the timer was armed with
        cancelled: True once cancel() was called
        fired: True once the callback ran
    """

    def __init__(self, when: float, delay: float, callback: Callable[[], object]) -> None:
        self.when = when
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class DeterministicTimers:
    """Simulated ``call_later`` with a manually advanced clock.

    Callbacks run synchronously inside advance(), in due-time order (ties in
    arming order). Callbacks that schedule tasks need a running event loop,
    so call advance() from an async test.

    Example:
        >>> timers = DeterministicTimers()
        >>> handle = timers(900, lambda: print("renew"))
        >>> timers.advance(899)
        >>> timers.advance(1)
        renew
    """

    def __init__(self, start: float = 0.0) -> None:
        """Initialize the simulated clock.

        Args:
            start: Initial simulated time in seconds. Defaults to 0.0.
        """
        self._now: float = start
        self._handles: list[DeterministicTimerHandle] = []

    def __call__(
        self, delay: float, callback: Callable[[], object], /
    ) -> DeterministicTimerHandle:
        handle = DeterministicTimerHandle(self._now + delay, delay, callback)
        self._handles.append(handle)
        return handle

    def now(self) -> float:
        """Return the current simulated time."""
        return self._now

    @property
    def handles(self) -> list[DeterministicTimerHandle]:
        """Every handle ever armed, in arming order."""
        return list(self._handles)

    @property
    def pending(self) -> list[DeterministicTimerHandle]:
        """Handles that are neither cancelled nor fired."""
        return [handle for handle in self._handles if handle.pending]

    def advance(self, seconds: float) -> int:
        """Advance the clock, firing every timer that comes due.

        Timers armed by a firing callback are themselves fired if they come
        due before the target time.

        Args:
            seconds: Number of seconds to advance.

        Returns:
            Number of callbacks fired.
        """
        target = self._now + seconds
        fired = 0
        while True:
            due = [h for h in self._handles if h.pending and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._now = max(self._now, handle.when)
            handle.fired = True
            handle.callback()
            fired += 1
        self._now = target
        return fired
