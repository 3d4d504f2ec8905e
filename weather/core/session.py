"""Weather session: the one context object built at process start."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from .broadcast import BroadcastReader, SharedWeatherBroadcast, WeatherBroadcast
from .clock import GameClock
from .configio import WeatherConfig
from .logger import APP_LOGGER
from .rng import SyncedRandom
from .scheduler import WeatherScheduler


@dataclass
class WeatherSession:
    """Owns the clock, random stream, scheduler and broadcast for one game.

    Consumers receive handles from here (``reader()`` or ``scheduler``)
    instead of looking anything up globally.
    """

    config: WeatherConfig
    clock: GameClock
    rng: SyncedRandom
    broadcast: Union[WeatherBroadcast, SharedWeatherBroadcast]
    scheduler: WeatherScheduler
    consumers: list = field(default_factory=list)
    pollers: list = field(default_factory=list)  # objects with game_frame()
    frame_counter: int = 0
    triggers: int = 0
    closed: bool = False

    @classmethod
    def create(
        cls,
        config: Optional[WeatherConfig] = None,
        *,
        shared: bool = False,
        shm_name: Optional[str] = None,
        start_frame: int = 0,
    ) -> "WeatherSession":
        config = (config or WeatherConfig()).validate()
        clock = GameClock(config.ticks_per_second, start_frame=start_frame)
        rng = SyncedRandom(config.seed)
        broadcast = SharedWeatherBroadcast(shm_name, create=True) if shared else WeatherBroadcast()
        try:
            scheduler = WeatherScheduler(config, clock, rng, broadcast=broadcast)
            scheduler.initialize(clock.frame, clock.ticks_per_second)
        except Exception:
            broadcast.close()
            raise
        return cls(config=config, clock=clock, rng=rng, broadcast=broadcast, scheduler=scheduler)

    def reader(self) -> BroadcastReader:
        return BroadcastReader(self.broadcast)

    def add_consumer(self, consumer) -> None:
        """Register on the scheduler (push) and/or the frame loop (poll)."""
        self.consumers.append(consumer)
        if callable(getattr(consumer, "on_weather_changed", None)):
            self.scheduler.register_consumer(consumer)
        if callable(getattr(consumer, "game_frame", None)):
            self.pollers.append(consumer)

    def game_frame(self) -> bool:
        """Advance one frame; check for a trigger every ``update_interval`` frames."""
        self.clock.advance(1)
        self.frame_counter += 1
        fired = False
        if self.frame_counter % self.config.update_interval == 0:
            fired = self.scheduler.on_tick(self.clock.frame)
            if fired:
                self.triggers += 1
        for poller in self.pollers:
            poller.game_frame()
        return fired

    def run_frames(self, frames: int) -> int:
        """Headless simulation; returns the number of triggers fired."""
        fired = 0
        for _ in range(int(frames)):
            if self.game_frame():
                fired += 1
        return fired

    def run_seconds(self, seconds: float) -> int:
        return self.run_frames(int(seconds * self.clock.ticks_per_second))

    def shutdown(self) -> None:
        if self.closed:
            return
        self.closed = True
        APP_LOGGER.info("[Weather] System shutting down")
        for consumer in self.consumers:
            close = getattr(consumer, "close", None)
            if callable(close):
                close()
        self.broadcast.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
