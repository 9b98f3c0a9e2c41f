"""Tick counter and real-time pacing for the simulation loop."""

from __future__ import annotations

import time


class TimeManager:
    """Count ticks and optionally pace them at ``tick_rate`` per second."""

    def __init__(self, tick_rate: float = 10.0) -> None:
        if tick_rate <= 0:
            raise ValueError("tick_rate must be positive")
        self.tick_rate: float = tick_rate
        self.tick_counter: int = 0
        self._deadline: float | None = None

    @property
    def interval(self) -> float:
        return 1.0 / self.tick_rate

    def advance(self) -> int:
        """Move to the next tick without waiting and return its number."""

        self.tick_counter += 1
        return self.tick_counter

    def sleep_until_next_tick(self) -> int:
        """Wait out the current interval, then advance.

        A loop running behind schedule is not made to catch up; pacing
        restarts from the current time.
        """

        now = time.perf_counter()
        if self._deadline is None:
            self._deadline = now + self.interval
        remaining = self._deadline - now
        if remaining > 0:
            time.sleep(remaining)
            self._deadline += self.interval
        else:
            self._deadline = now + self.interval
        return self.advance()


__all__ = ["TimeManager"]
