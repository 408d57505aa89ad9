import time

import pytest

from dirqueue.adapters.clock.manual import ManualClock
from dirqueue.adapters.clock.system import SystemClock
from dirqueue.ports.clock import Clock


def test_clocks_satisfy_protocol():
    assert isinstance(SystemClock(), Clock)
    assert isinstance(ManualClock(), Clock)


def test_system_clock_tracks_wall_time():
    before = time.time()
    now = SystemClock().now()
    assert before <= now <= time.time()


def test_manual_clock_starts_at_start():
    assert ManualClock(start=100.0).now() == 100.0


def test_manual_clock_advance():
    clock = ManualClock(start=100.0)
    clock.advance(3599)
    assert clock.now() == 3699.0


def test_manual_clock_rejects_negative_advance():
    clock = ManualClock(start=100.0)
    with pytest.raises(ValueError):
        clock.advance(-1)
    assert clock.now() == 100.0


def test_manual_clock_set():
    clock = ManualClock()
    clock.set(42.0)
    assert clock.now() == 42.0
