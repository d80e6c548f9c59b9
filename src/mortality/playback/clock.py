"""
Schedulers for the playback controller.

The controller needs one capability: run a callback once after a delay and be able to
cancel it. Anything with `call_later(delay_seconds, callback) -> handle`, where
`handle.cancel()` releases the callback, qualifies. An asyncio event loop satisfies this
directly; ManualScheduler is a virtual clock advanced explicitly, used by tests and by the
Streamlit shell (which advances it by elapsed wall time on every rerun).
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from typing import Protocol

__all__ = ["Cancellable", "Scheduler", "ManualScheduler", "ScheduledCall"]


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], object]) -> Cancellable: ...


class ScheduledCall:
    """Handle returned by ManualScheduler.call_later."""

    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callable[[], object]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic virtual-time scheduler.

    Callbacks fire only inside advance(), in due-time order (FIFO for equal times).
    A callback scheduled while advancing fires in the same advance() call if it falls due
    before the target time.

    Examples:
        >>> clock = ManualScheduler()
        >>> fired = []
        >>> _ = clock.call_later(1.0, lambda: fired.append(clock.now))
        >>> clock.advance(2.5)
        1
        >>> fired
        [1.0]
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._queue: list[tuple[float, int, ScheduledCall]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of scheduled, not-yet-cancelled callbacks."""
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def call_later(self, delay: float, callback: Callable[[], object]) -> ScheduledCall:
        if delay < 0:
            raise ValueError(f"delay must be non-negative (got {delay})")
        call = ScheduledCall(self._now + delay, callback)
        heapq.heappush(self._queue, (call.when, next(self._seq), call))
        return call

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every callback that falls due.

        Returns:
            int: Number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError(f"cannot move the clock backwards ({seconds})")
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._now = when
            call.cancelled = True
            call.callback()
            fired += 1
        self._now = target
        return fired
