# configio.py — scheduler configuration + JSON save/load
from __future__ import annotations

import json, tempfile
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

from weather.core.interfaces import WeatherConfigError
from weather.core.logger import APP_LOGGER

DEFAULT_PATH = Path.home() / ".weather" / "config.json"

DEFAULT_MIN_INTERVAL_S = 120.0
DEFAULT_MAX_INTERVAL_S = 900.0
DEFAULT_INITIAL_DELAY_S = 60.0
DEFAULT_TICKS_PER_SECOND = 30
DEFAULT_UPDATE_INTERVAL = 10


@dataclass(frozen=True)
class WeatherConfig:
    """Static timing configuration. Loaded once, never re-read mid-run."""

    min_interval: float = DEFAULT_MIN_INTERVAL_S
    max_interval: float = DEFAULT_MAX_INTERVAL_S
    initial_delay: float = DEFAULT_INITIAL_DELAY_S
    ticks_per_second: int = DEFAULT_TICKS_PER_SECOND
    update_interval: int = DEFAULT_UPDATE_INTERVAL
    seed: Optional[int] = None

    def validate(self) -> "WeatherConfig":
        if self.min_interval < 0 or self.max_interval < 0:
            raise WeatherConfigError(
                f"intervals must be >= 0 (min={self.min_interval}, max={self.max_interval})"
            )
        if self.min_interval > self.max_interval:
            raise WeatherConfigError(
                f"min_interval ({self.min_interval}) exceeds max_interval ({self.max_interval})"
            )
        if self.initial_delay < 0:
            raise WeatherConfigError(f"initial_delay must be >= 0 (got {self.initial_delay})")
        if self.initial_delay > self.max_interval:
            raise WeatherConfigError(
                f"initial_delay ({self.initial_delay}) exceeds max_interval ({self.max_interval})"
            )
        if self.ticks_per_second <= 0:
            raise WeatherConfigError(f"ticks_per_second must be > 0 (got {self.ticks_per_second})")
        if self.update_interval <= 0:
            raise WeatherConfigError(f"update_interval must be > 0 (got {self.update_interval})")
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "WeatherConfig":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        try:
            for key in ("min_interval", "max_interval", "initial_delay"):
                if key in kwargs:
                    kwargs[key] = float(kwargs[key])
            for key in ("ticks_per_second", "update_interval"):
                if key in kwargs:
                    kwargs[key] = int(kwargs[key])
            if kwargs.get("seed") is not None:
                kwargs["seed"] = int(kwargs["seed"])
        except (TypeError, ValueError) as e:
            raise WeatherConfigError(f"Invalid config value: {e}") from e
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return asdict(self)


def ensure_dir(p: Path) -> Path:
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    except PermissionError:
        # Fallback to temp dir if home is not writable
        tmp = Path(tempfile.gettempdir()) / ".weather" / p.name
        APP_LOGGER.warning(f"Permission denied for {p}, falling back to {tmp}")
        tmp.parent.mkdir(parents=True, exist_ok=True)
        return tmp

def save_config(cfg: dict, path: Path = DEFAULT_PATH):
    target_path = ensure_dir(path)
    try:
        with open(target_path, "w", encoding="utf-8") as f:
            json.dump(cfg, f, indent=2)
    except Exception as e:
        APP_LOGGER.error(f"Failed to save config to {target_path}: {e}")

def load_weather_config(path: Optional[Path] = None) -> WeatherConfig:
    """Resolve a validated WeatherConfig.

    With no path the defaults are used. A path the caller names must exist
    and hold a JSON object, otherwise WeatherConfigError is raised.
    """
    if path is None:
        return WeatherConfig().validate()
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        raise WeatherConfigError(f"cannot read config {path}: {e}") from e
    if not isinstance(raw, dict):
        raise WeatherConfigError(f"config {path} must hold a JSON object, got {type(raw).__name__}")
    return WeatherConfig.from_dict(raw).validate()
