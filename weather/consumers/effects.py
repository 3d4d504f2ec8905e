"""Gameplay-side weather consumer.

Reads the broadcast (never the scheduler) on its own cadence and answers
modifier queries for the simulation. Applying the numbers to units,
resources or terrain is left to the host game.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from weather.core import catalog
from weather.core.broadcast import BroadcastReader, KEY_CURRENT, KEY_INTENSITY, KEY_FRAME
from weather.core.logger import APP_LOGGER

DEFAULT_UPDATE_INTERVAL = 10


@dataclass(frozen=True)
class UnitDef:
    name: str = ""
    speed: float = 0.0
    can_fly: bool = False


class GameplayEffects:
    def __init__(self, reader: BroadcastReader, update_interval: int = DEFAULT_UPDATE_INTERVAL, debug: bool = False):
        if update_interval <= 0:
            raise ValueError("update_interval must be > 0")
        self._reader = reader
        self.update_interval = update_interval
        self.debug = debug
        self.current_weather = catalog.NEUTRAL_WEATHER
        self.weather_intensity = 0.0
        self.last_weather_frame = 0
        self._frame_counter = 0

    def game_frame(self) -> bool:
        """Call once per frame; refreshes every ``update_interval`` frames."""
        self._frame_counter += 1
        if self._frame_counter % self.update_interval:
            return False
        self.refresh()
        return True

    def refresh(self) -> None:
        record = self._reader.read()
        self.current_weather = record.get(KEY_CURRENT) or catalog.NEUTRAL_WEATHER
        self.weather_intensity = record.get(KEY_INTENSITY) or 0.0
        self.last_weather_frame = record.get(KEY_FRAME) or 0
        if self.debug:
            APP_LOGGER.debug(
                f"[Weather Effects] Applied effects for: {self.current_weather} "
                f"(Intensity: {self.weather_intensity:.2f})"
            )

    @property
    def weather_data(self) -> Optional[catalog.WeatherType]:
        return catalog.get_weather_data(self.current_weather)

    def modifier(self, key: str, base: float = 1.0) -> float:
        return catalog.apply_weather_modifier(base, self.current_weather, key)

    def unit_speed(self, unit: UnitDef) -> float:
        key = "airUnitSpeedMult" if unit.can_fly else "unitSpeedMult"
        return self.modifier(key, unit.speed)

    def weather_affects_unit(self, unit: Optional[UnitDef]) -> bool:
        if unit is None or self.weather_data is None:
            return False
        return catalog.affects_movement(self.current_weather) or catalog.affects_vision(self.current_weather)

    def is_active(self) -> bool:
        data = self.weather_data
        return data is not None and data.intensity > 0
