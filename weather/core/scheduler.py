# scheduler.py — Global weather event scheduler (deterministic, tick based)
from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from weather.core.broadcast import BroadcastRecord
from weather.core.catalog import NEUTRAL_WEATHER, WEATHER_EVENTS, seconds_to_frames
from weather.core.configio import WeatherConfig
from weather.core.interfaces import (
    EffectConsumer,
    SchedulerInitError,
    WeatherConfigError,
    WeatherError,
)
from weather.core.logger import APP_LOGGER

MAGNITUDE_BASE = 0.5
MAGNITUDE_SPAN = 0.5
MIN_GAP_FRAMES = 1

_CLOCK_ATTRS = ("frame", "ticks_per_second")
_RNG_ATTRS = ("random", "uniform", "randint")


@dataclass(frozen=True)
class SchedulerState:
    """Immutable snapshot; replaced wholesale on every trigger."""
    current_weather: str = NEUTRAL_WEATHER
    intensity: float = 0.0
    last_trigger_frame: int = 0
    next_trigger_frame: int = 0
    active: bool = False
    trigger_count: int = 0

    @property
    def start_frame(self) -> int:
        return self.last_trigger_frame

    def to_record(self) -> BroadcastRecord:
        return BroadcastRecord(
            weather_current=self.current_weather,
            weather_intensity=self.intensity,
            weather_frame=self.last_trigger_frame,
        )


class WeatherScheduler:
    """
    Decides when the next global weather event fires, which variant it is
    and how strong it is.

    Every peer runs its own instance. Given the same clock frames, the same
    config and a random source in the same position, all peers compute the
    same timeline; nothing is negotiated over the network.

    Single writer: only ``initialize``/``on_tick`` mutate state, and they
    swap in a new frozen ``SchedulerState`` under a lock, so readers always
    see a consistent variant/intensity/frame combination.
    """
    def __init__(
        self,
        config: WeatherConfig,
        clock,
        rng,
        broadcast=None,
        catalog: Sequence[str] = WEATHER_EVENTS,
        neutral: str = NEUTRAL_WEATHER,
    ):
        if config is None:
            raise SchedulerInitError("scheduler requires a WeatherConfig")
        self._config = config.validate()
        self._clock = _require(clock, "tick source", _CLOCK_ATTRS)
        self._rng = _require(rng, "random source", _RNG_ATTRS)
        self._catalog = tuple(catalog)
        if not self._catalog:
            raise SchedulerInitError("weather catalog is empty")
        if len(set(self._catalog)) != len(self._catalog):
            raise SchedulerInitError(f"weather catalog has duplicate entries: {self._catalog}")
        if neutral not in self._catalog:
            raise SchedulerInitError(f"neutral weather {neutral!r} is not in the catalog")
        self._neutral = neutral
        self._broadcast = broadcast
        if broadcast is not None:
            self._check_catalog(broadcast)
        self._consumers: list[EffectConsumer] = []
        self._lock = threading.Lock()
        self._state: Optional[SchedulerState] = None

    # ── Lifecycle ────────────────────────────────────────────────────

    @property
    def config(self) -> WeatherConfig:
        return self._config

    @property
    def initialized(self) -> bool:
        return self._state is not None

    def initialize(self, now_tick: Optional[int] = None, ticks_per_second: Optional[int] = None) -> SchedulerState:
        """Reset to the idle state and sample the first trigger frame.

        The first gap is drawn from [initial_delay, max_interval] so the
        first event can never arrive before the configured delay.
        """
        now = self._clock.frame if now_tick is None else int(now_tick)
        tps = self._speed(ticks_per_second)
        delay_s = self._rng.uniform(self._config.initial_delay, self._config.max_interval)
        gap = max(MIN_GAP_FRAMES, seconds_to_frames(delay_s, tps))
        state = SchedulerState(
            current_weather=self._neutral,
            intensity=0.0,
            last_trigger_frame=0,
            next_trigger_frame=now + gap,
        )
        with self._lock:
            self._state = state
        APP_LOGGER.info(f"[Weather] System initialized. First weather event in ~{gap // tps} seconds")
        return state

    def register_consumer(self, consumer: EffectConsumer) -> None:
        if not callable(getattr(consumer, "on_weather_changed", None)):
            raise TypeError(f"{consumer!r} does not implement on_weather_changed()")
        self._consumers.append(consumer)

    def unregister_consumer(self, consumer: EffectConsumer) -> bool:
        try:
            self._consumers.remove(consumer)
            return True
        except ValueError:
            return False

    # ── Tick ─────────────────────────────────────────────────────────

    def on_tick(self, now_tick: Optional[int] = None) -> bool:
        """Fire a trigger if ``now_tick`` reached the threshold.

        A late call fires once; the threshold only moves inside a trigger,
        so skipped check intervals never queue up extra events.
        """
        state = self._require_state()
        now = self._clock.frame if now_tick is None else int(now_tick)
        if now < state.next_trigger_frame:
            return False
        self._trigger(state, now)
        return True

    def _trigger(self, prev: SchedulerState, now: int) -> None:
        tps = self._speed(None)
        variant = self._catalog[self._rng.randint(0, len(self._catalog) - 1)]
        magnitude = MAGNITUDE_BASE + self._rng.random() * MAGNITUDE_SPAN
        gap_s = self._rng.uniform(self._config.min_interval, self._config.max_interval)
        gap = max(MIN_GAP_FRAMES, seconds_to_frames(gap_s, tps))
        state = replace(
            prev,
            current_weather=variant,
            intensity=magnitude,
            last_trigger_frame=now,
            next_trigger_frame=now + gap,
            active=True,
            trigger_count=prev.trigger_count + 1,
        )
        with self._lock:
            # Publish first: a failed publish leaves the old state in place
            if self._broadcast is not None:
                self._broadcast.publish(state.to_record())
            self._state = state

        APP_LOGGER.info(
            f"[Weather] Event triggered: {variant} (Intensity: {magnitude:.2f}) | "
            f"Next event in ~{gap // tps} seconds"
        )
        self._notify(state)

    def _check_catalog(self, broadcast) -> None:
        check = getattr(broadcast, "check_variant", None)
        if check is None:
            return
        for name in self._catalog:
            try:
                check(name)
            except WeatherError as exc:
                raise SchedulerInitError(f"weather catalog entry cannot be broadcast: {exc}") from exc

    def _notify(self, state: SchedulerState) -> None:
        for consumer in list(self._consumers):
            try:
                consumer.on_weather_changed(state.current_weather, state.intensity, state.last_trigger_frame)
            except Exception:
                APP_LOGGER.exception(f"[Weather] Consumer {consumer!r} failed on {state.current_weather}")

    # ── Queries ──────────────────────────────────────────────────────

    def get_state(self) -> SchedulerState:
        return self._require_state()

    get_weather_state = get_state

    def get_current_weather(self) -> str:
        return self._require_state().current_weather

    def get_weather_intensity(self) -> float:
        return self._require_state().intensity

    def seconds_until_next(self, now_tick: int, ticks_per_second: int) -> float:
        if ticks_per_second <= 0:
            raise WeatherConfigError(f"ticks_per_second must be > 0 (got {ticks_per_second})")
        remaining = max(0, self._require_state().next_trigger_frame - int(now_tick))
        return remaining / ticks_per_second

    def get_time_until_next_event(self) -> float:
        return self.seconds_until_next(self._clock.frame, self._clock.ticks_per_second)

    def get_available_weather_events(self) -> tuple[str, ...]:
        return self._catalog

    def descriptor(self) -> dict:
        state = self._state
        desc = {
            "min_interval_s": self._config.min_interval,
            "max_interval_s": self._config.max_interval,
            "initial_delay_s": self._config.initial_delay,
            "update_interval": self._config.update_interval,
            "catalog": list(self._catalog),
        }
        if state is not None:
            desc.update({
                "current_weather": state.current_weather,
                "intensity": state.intensity,
                "last_trigger_frame": state.last_trigger_frame,
                "next_trigger_frame": state.next_trigger_frame,
                "active": state.active,
                "trigger_count": state.trigger_count,
            })
        return desc

    # ── Helpers ──────────────────────────────────────────────────────

    def _require_state(self) -> SchedulerState:
        state = self._state
        if state is None:
            raise SchedulerInitError("weather scheduler used before initialize()")
        return state

    def _speed(self, override: Optional[int]) -> int:
        tps = self._clock.ticks_per_second if override is None else int(override)
        if tps <= 0:
            raise WeatherConfigError(f"ticks_per_second must be > 0 (got {tps})")
        return tps


def _require(dep, label: str, attrs: Sequence[str]):
    if dep is None:
        raise SchedulerInitError(f"{label} is required")
    missing = [a for a in attrs if not hasattr(dep, a)]
    if missing:
        raise SchedulerInitError(f"{label} {dep!r} is missing {', '.join(missing)}")
    return dep
