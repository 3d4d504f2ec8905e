# clock.py — frame counter standing in for the host engine's game clock
from __future__ import annotations

import threading

from weather.core.interfaces import WeatherConfigError

DEFAULT_TICKS_PER_SECOND = 30


class GameClock:
    """
    Monotonic integer frame counter with a ticks-per-second rate.

    The rate only matters when converting seconds to frames; changing it
    never rewrites frames that were already computed.
    """
    def __init__(self, ticks_per_second: int = DEFAULT_TICKS_PER_SECOND, start_frame: int = 0):
        if start_frame < 0:
            raise WeatherConfigError(f"start_frame must be >= 0 (got {start_frame})")
        self._frame = int(start_frame)
        self._tps = DEFAULT_TICKS_PER_SECOND
        self._lock = threading.Lock()
        self.set_speed(ticks_per_second)

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def ticks_per_second(self) -> int:
        return self._tps

    def set_speed(self, ticks_per_second: int):
        if int(ticks_per_second) <= 0:
            raise WeatherConfigError(f"ticks_per_second must be > 0 (got {ticks_per_second})")
        self._tps = int(ticks_per_second)

    def advance(self, frames: int = 1) -> int:
        if frames < 0:
            raise ValueError("clock cannot run backwards")
        with self._lock:
            self._frame += int(frames)
            return self._frame

    def seconds(self) -> float:
        return self._frame / self._tps
