"""
Playback controller: a timer-driven year cursor for the animated map.

States
- Playing: one timer is armed; each fire advances current_year by one, wrapping from
  max_year back to min_year, then re-arms. The loop never ends on its own.
- Paused: no timer is armed; current_year is frozen.

Commands
- play(), pause(), toggle(), set_speed(ms), set_year(y), close().

Guarantees
- At most one timer is armed at any time: every arm cancels the previous handle first.
- pause() and close() are idempotent. close() releases the timer deterministically.
- The controller never renders. Subscribers receive immutable PlaybackState snapshots
  after every tick and every command that changes state.
- Exceptions raised by subscribers propagate to whoever triggered the change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from mortality.core.constants import DEFAULT_TICK_INTERVAL_MS
from mortality.core.schema import PlaybackState

from .clock import Cancellable, Scheduler

if TYPE_CHECKING:  # pragma: no cover
    from mortality.core.index import Index
    from mortality.io.config import Settings

__all__ = ["PlaybackController", "Subscriber"]

logger = logging.getLogger(__name__)

Subscriber = Callable[[PlaybackState], object]


class PlaybackController:
    """
    Owns a PlaybackState and the single timer that advances it.

    Args:
        min_year (int): First year of the loop.
        max_year (int): Last year of the loop.
        scheduler (Scheduler): Provides call_later(delay_seconds, callback) -> handle.
            Pass asyncio.get_running_loop() in async code or a ManualScheduler.
        tick_interval_ms (int): Milliseconds between ticks.
        autoplay (bool): Start in Playing (default) rather than Paused.

    Raises:
        ValueError: If the range is inverted or the interval is not positive.

    Examples:
        >>> from mortality.playback import ManualScheduler, PlaybackController
        >>> clock = ManualScheduler()
        >>> pc = PlaybackController(2014, 2023, scheduler=clock, tick_interval_ms=1000)
        >>> _ = clock.advance(3.0)
        >>> pc.state.current_year
        2017
    """

    def __init__(
        self,
        min_year: int,
        max_year: int,
        *,
        scheduler: Scheduler,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        autoplay: bool = True,
    ) -> None:
        self._state = PlaybackState(
            current_year=min_year,
            is_playing=False,
            tick_interval_ms=tick_interval_ms,
            min_year=min_year,
            max_year=max_year,
        )
        self._scheduler = scheduler
        self._handle: Cancellable | None = None
        self._subscribers: list[Subscriber] = []
        self._closed = False
        if autoplay:
            self.play()

    @classmethod
    def from_index(
        cls,
        index: Index,
        scheduler: Scheduler,
        settings: Settings | None = None,
        *,
        autoplay: bool = True,
    ) -> PlaybackController:
        """
        Controller looping over the years present in an index.

        Falls back to the settings year range when the index is empty.

        Raises:
            IoConfigError: If settings fail Settings.validate().
        """
        from mortality.io.config import Settings

        s = (settings or Settings()).validate()
        if index.all_years:
            lo, hi = index.all_years[0], index.all_years[-1]
        else:
            lo, hi = s.start_year, s.end_year
        return cls(lo, hi, scheduler=scheduler, tick_interval_ms=s.tick_interval_ms, autoplay=autoplay)

    # ----------------------------
    # Read side
    # ----------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def timer_armed(self) -> bool:
        return self._handle is not None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot observer; returns a function that unregisters it."""
        self._ensure_open()
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ----------------------------
    # Commands
    # ----------------------------

    def play(self) -> None:
        self._ensure_open()
        if self._state.is_playing:
            return
        self._update(is_playing=True)
        self._arm()
        self._emit()

    def pause(self) -> None:
        if self._closed or not self._state.is_playing:
            return
        self._release()
        self._update(is_playing=False)
        self._emit()

    def toggle(self) -> None:
        if self._state.is_playing:
            self.pause()
        else:
            self.play()

    def set_speed(self, tick_interval_ms: int) -> None:
        """
        Change the tick interval.

        When playing, the armed timer is replaced so the new interval counts from now
        instead of completing the in-flight one.

        Raises:
            ValueError: If tick_interval_ms is not a positive integer.
        """
        self._ensure_open()
        _require_int("tick_interval_ms", tick_interval_ms)
        if tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive (got {tick_interval_ms!r})")
        self._update(tick_interval_ms=tick_interval_ms)
        if self._state.is_playing:
            self._arm()
        self._emit()

    def set_year(self, year: int) -> None:
        """
        Jump to a year without changing Playing/Paused.

        Raises:
            ValueError: If year is not an integer or is outside [min_year, max_year].
        """
        self._ensure_open()
        _require_int("year", year)
        s = self._state
        if not s.min_year <= year <= s.max_year:
            raise ValueError(f"year {year} outside [{s.min_year}, {s.max_year}]")
        self._update(current_year=year)
        if s.is_playing:
            self._arm()
        self._emit()

    def close(self) -> None:
        """Release the timer and drop subscribers. Safe to call more than once."""
        if self._closed:
            return
        self._release()
        if self._state.is_playing:
            self._update(is_playing=False)
        self._subscribers.clear()
        self._closed = True
        logger.debug("playback closed at %d", self._state.current_year)

    def __enter__(self) -> PlaybackController:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ----------------------------
    # Internals
    # ----------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("playback controller is closed")

    def _update(self, **changes: object) -> None:
        data = self._state.model_dump()
        data.update(changes)
        self._state = PlaybackState.model_validate(data)

    def _arm(self) -> None:
        self._release()
        self._handle = self._scheduler.call_later(
            self._state.tick_interval_ms / 1000.0, self._on_tick
        )

    def _release(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_tick(self) -> None:
        self._handle = None
        if self._closed or not self._state.is_playing:
            return
        s = self._state
        nxt = s.current_year + 1
        if nxt > s.max_year:
            nxt = s.min_year
        self._update(current_year=nxt)
        self._arm()
        self._emit()

    def _emit(self) -> None:
        snapshot = self._state
        for callback in list(self._subscribers):
            callback(snapshot)


def _require_int(name: str, value: object) -> None:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer (got {value!r})")
