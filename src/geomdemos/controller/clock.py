import time
from typing import Callable


class Clock:
    """Measures the time elapsed between successive ``get_delta`` calls."""

    def __init__(self, timer: Callable[[], float] = time.perf_counter) -> None:
        self._timer = timer
        self._last = timer()

    def reset(self) -> None:
        self._last = self._timer()

    def get_delta(self) -> float:
        """Seconds since the previous call (or since creation/reset); never negative."""
        now = self._timer()
        delta = max(0.0, now - self._last)
        self._last = now
        return delta
