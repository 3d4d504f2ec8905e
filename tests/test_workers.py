import time

import pytest

from weather.core.configio import WeatherConfig
from weather.core.session import WeatherSession
from weather.core.workers import TickLoop


def test_tick_loop_drives_frames():
    with WeatherSession.create(WeatherConfig(seed=1)) as session:
        loop = TickLoop(session, speedup=20.0)
        loop.start()
        deadline = time.monotonic() + 2.0
        while session.clock.frame < 30 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert loop.stop() is True
        assert loop.running is False
        assert session.clock.frame >= 30
        frame = session.clock.frame
        time.sleep(0.05)
        assert session.clock.frame == frame

def test_tick_loop_stop_without_start():
    with WeatherSession.create(WeatherConfig(seed=1)) as session:
        assert TickLoop(session).stop() is True

def test_tick_loop_records_errors():
    class Exploding:
        class clock:
            ticks_per_second = 30

        def game_frame(self):
            raise RuntimeError("boom")

    loop = TickLoop(Exploding())
    loop.start()
    deadline = time.monotonic() + 1.0
    while loop.running and time.monotonic() < deadline:
        time.sleep(0.01)
    loop.stop()
    assert isinstance(loop.error, RuntimeError)

def test_tick_loop_rejects_bad_speedup():
    with pytest.raises(ValueError):
        TickLoop(object(), speedup=0)
