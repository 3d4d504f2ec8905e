# workers.py — real-time frame loop driving a WeatherSession
import threading
import time

from weather.core.logger import APP_LOGGER

MIN_FRAME_INTERVAL_S = 0.001
STOP_JOIN_SLICE_S = 0.1


class TickLoop:
    """
    Calls ``session.game_frame()`` at ``ticks_per_second`` on a daemon thread.

    Frames are never skipped: if the loop falls behind it runs frames
    back to back until it has caught up with the schedule.
    """
    def __init__(self, session, speedup: float = 1.0):
        if speedup <= 0:
            raise ValueError("speedup must be > 0")
        self._session = session
        self._speedup = float(speedup)
        self._running = False
        self._thread: threading.Thread | None = None
        self.error: Exception | None = None

    @property
    def running(self) -> bool:
        return self._running

    def _interval_s(self) -> float:
        tps = self._session.clock.ticks_per_second
        return max(MIN_FRAME_INTERVAL_S, 1.0 / (tps * self._speedup))

    def _loop(self):
        next_tick = time.perf_counter()
        try:
            while self._running:
                self._session.game_frame()
                next_tick += self._interval_s()
                sleep_for = next_tick - time.perf_counter()
                if sleep_for > 0:
                    time.sleep(sleep_for)
        except Exception as e:
            self.error = e
            APP_LOGGER.exception(f"TickLoop stopped on error: {e}")
        finally:
            self._running = False

    def start(self):
        if self._running:
            return
        self._running = True
        self.error = None
        self._thread = threading.Thread(target=self._loop, name="WeatherTickLoop", daemon=True)
        self._thread.start()

    def stop(self, wait_timeout: float = 1.0) -> bool:
        thread = self._thread
        self._running = False
        if thread is None:
            return True
        if threading.current_thread() is thread:
            return False
        deadline = time.perf_counter() + max(0.0, wait_timeout)
        while thread.is_alive():
            remaining = deadline - time.perf_counter()
            if remaining <= 0:
                break
            thread.join(timeout=min(STOP_JOIN_SLICE_S, remaining))
        if thread.is_alive():
            return False
        self._thread = None
        return True
