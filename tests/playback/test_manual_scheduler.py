from __future__ import annotations

import pytest

from mortality.playback import ManualScheduler


def test_callbacks_fire_in_due_order_and_fifo_on_ties() -> None:
    clock = ManualScheduler()
    out: list[str] = []
    clock.call_later(2.0, lambda: out.append("b"))
    clock.call_later(1.0, lambda: out.append("a1"))
    clock.call_later(1.0, lambda: out.append("a2"))

    assert clock.advance(1.5) == 2
    assert out == ["a1", "a2"]
    assert clock.now == pytest.approx(1.5)
    assert clock.advance(1.0) == 1
    assert out[-1] == "b"


def test_cancelled_calls_never_fire_and_are_not_pending() -> None:
    clock = ManualScheduler()
    handle = clock.call_later(1.0, lambda: pytest.fail("cancelled call fired"))
    assert clock.pending == 1
    handle.cancel()
    assert clock.pending == 0
    assert clock.advance(5.0) == 0


def test_callbacks_scheduled_during_advance_fire_if_due() -> None:
    clock = ManualScheduler()
    times: list[float] = []

    def again() -> None:
        times.append(clock.now)
        if len(times) < 3:
            clock.call_later(1.0, again)

    clock.call_later(1.0, again)
    clock.advance(10.0)
    assert times == [1.0, 2.0, 3.0]


def test_rejects_negative_delays() -> None:
    clock = ManualScheduler()
    with pytest.raises(ValueError):
        clock.call_later(-1.0, lambda: None)
    with pytest.raises(ValueError):
        clock.advance(-0.1)
