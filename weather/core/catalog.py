"""Weather type tables and pure helpers shared by the scheduler and consumers."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

NEUTRAL_WEATHER = "clear_skies"
SEVERE_INTENSITY = 0.6
DEFAULT_TICKS_PER_SECOND = 30

MOVEMENT_KEYS = ("unitSpeedMult", "airUnitSpeedMult")
PRODUCTION_KEYS = ("metalIncMult", "energyIncMult", "solarEnergyMult", "windEnergyBoost")


@dataclass(frozen=True)
class WeatherType:
    """Static description of one weather variant."""

    key: str
    name: str
    description: str
    intensity: float
    effects: Mapping[str, float] = field(default_factory=dict)
    particle_intensity: float = 0.0
    fog_density: float = 0.0
    color_tint: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)


def _wt(key, name, description, intensity, effects, particles, fog, tint) -> WeatherType:
    return WeatherType(
        key=key,
        name=name,
        description=description,
        intensity=intensity,
        effects=MappingProxyType(dict(effects)),
        particle_intensity=particles,
        fog_density=fog,
        color_tint=tint,
    )


WEATHER_TYPES: Mapping[str, WeatherType] = MappingProxyType({
    "light_rain": _wt(
        "light_rain", "Light Rain",
        "Light precipitation - slightly reduces unit speed and vision",
        0.3,
        {"unitSpeedMult": 0.95, "visionMult": 0.95, "metalIncMult": 0.95, "solarEnergyMult": 0.8},
        0.3, 0.1, (0.8, 0.85, 1.0, 1.0),
    ),
    "heavy_rain": _wt(
        "heavy_rain", "Heavy Rain",
        "Heavy precipitation - significantly reduces unit speed, vision, radar and production",
        0.8,
        {"unitSpeedMult": 0.85, "visionMult": 0.80, "radarMult": 0.85,
         "metalIncMult": 0.85, "solarEnergyMult": 0.4},
        0.8, 0.3, (0.7, 0.75, 0.95, 1.0),
    ),
    "fog": _wt(
        "fog", "Fog",
        "Dense fog - reduces vision and radar significantly",
        0.6,
        {"visionMult": 0.70, "radarMult": 0.75, "unitSpeedMult": 0.98, "solarEnergyMult": 0.2},
        0.2, 0.5, (0.85, 0.85, 0.9, 1.0),
    ),
    "dust_storm": _wt(
        "dust_storm", "Dust Storm",
        "Severe dust storm - disables radar, reduces vision and increases unit damage",
        0.7,
        {"visionMult": 0.75, "radarMult": 0.0, "unitDamageTaken": 1.05,
         "unitSpeedMult": 0.90, "solarEnergyMult": 0.2},
        0.85, 0.2, (0.95, 0.88, 0.7, 1.0),
    ),
    "wind_gust": _wt(
        "wind_gust", "Wind Gust",
        "Strong wind - affects air units and projectiles, boosts wind generators",
        0.5,
        {"airUnitSpeedMult": 1.10, "projectileDeviationMult": 1.3, "windEnergyBoost": 1.5},
        0.3, 0.05, (0.9, 0.92, 0.95, 1.0),
    ),
    NEUTRAL_WEATHER: _wt(
        NEUTRAL_WEATHER, "Clear Skies",
        "Clear weather - no weather effects",
        0.0,
        {"unitSpeedMult": 1.0, "visionMult": 1.0, "metalIncMult": 1.0, "energyIncMult": 1.0},
        0.0, 0.0, (1.0, 1.0, 1.0, 1.0),
    ),
})

# Selection order for the scheduler. Every peer must agree on it.
WEATHER_EVENTS: tuple[str, ...] = (
    "light_rain",
    "heavy_rain",
    "fog",
    "dust_storm",
    "wind_gust",
    NEUTRAL_WEATHER,
)


def get_weather_data(weather_type: str) -> Optional[WeatherType]:
    return WEATHER_TYPES.get(weather_type)

def get_all_weather_types() -> list[str]:
    return list(WEATHER_TYPES)

def apply_weather_modifier(value: float, weather_type: str, modifier_key: str) -> float:
    """Scale ``value`` by the variant's ``modifier_key`` multiplier; unknown keys leave it unchanged."""
    data = get_weather_data(weather_type)
    if data is None or modifier_key not in data.effects:
        return value
    return value * data.effects[modifier_key]

def is_severe_weather(weather_type: str) -> bool:
    data = get_weather_data(weather_type)
    return data is not None and data.intensity >= SEVERE_INTENSITY

def affects_vision(weather_type: str) -> bool:
    data = get_weather_data(weather_type)
    return data is not None and "visionMult" in data.effects

def affects_movement(weather_type: str) -> bool:
    data = get_weather_data(weather_type)
    return data is not None and any(k in data.effects for k in MOVEMENT_KEYS)

def affects_production(weather_type: str) -> bool:
    data = get_weather_data(weather_type)
    return data is not None and any(k in data.effects for k in PRODUCTION_KEYS)

def get_weather_color_tint(weather_type: str) -> tuple[float, float, float, float]:
    data = get_weather_data(weather_type) or WEATHER_TYPES[NEUTRAL_WEATHER]
    return data.color_tint

# --- Time conversion ---

def frames_to_seconds(frames: int, ticks_per_second: int = DEFAULT_TICKS_PER_SECOND) -> float:
    return frames / ticks_per_second

def seconds_to_frames(seconds: float, ticks_per_second: int = DEFAULT_TICKS_PER_SECOND) -> int:
    # Floor, so every peer lands on the same integer frame
    return int(math.floor(seconds * ticks_per_second))
