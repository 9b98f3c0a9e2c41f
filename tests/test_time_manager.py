import pytest

from village_world.core.time_manager import TimeManager


def test_advance_counts_ticks():
    tm = TimeManager(tick_rate=5)
    assert tm.advance() == 1
    assert tm.advance() == 2
    assert tm.tick_counter == 2


def test_sleep_until_next_tick(monkeypatch):
    tm = TimeManager(tick_rate=1000)
    slept = []
    monkeypatch.setattr("village_world.core.time_manager.time.sleep", slept.append)
    assert tm.sleep_until_next_tick() == 1
    assert all(s <= 0.001 for s in slept)


def test_tick_rate_must_be_positive():
    with pytest.raises(ValueError):
        TimeManager(0)
