"""Client-side weather visuals: color overlay, particles and fog.

Purely cosmetic; each client computes these independently from the
broadcast, so nothing here needs to be deterministic across peers.
"""
from __future__ import annotations

import math

from weather.core import catalog
from weather.core.broadcast import BroadcastReader

DEFAULT_UPDATE_INTERVAL = 5
DEFAULT_PARTICLE_SCALE = 1.0
DEFAULT_MAX_PARTICLES = 5000
MAX_OVERLAY_ALPHA = 0.15
NO_OVERLAY = (1.0, 1.0, 1.0, 0.0)


class VisualEffects:
    def __init__(
        self,
        reader: BroadcastReader,
        update_interval: int = DEFAULT_UPDATE_INTERVAL,
        particle_scale: float = DEFAULT_PARTICLE_SCALE,
        max_particles: int = DEFAULT_MAX_PARTICLES,
    ):
        if update_interval <= 0:
            raise ValueError("update_interval must be > 0")
        self._reader = reader
        self.update_interval = update_interval
        self.particle_scale = particle_scale
        self.max_particles = max_particles
        self.current_weather = catalog.NEUTRAL_WEATHER
        self.weather_intensity = 0.0
        self.weather_start_frame = 0
        self.particle_count = 0
        self.fog_density = 0.0
        self._frame_counter = 0

    def game_frame(self) -> bool:
        self._frame_counter += 1
        if self._frame_counter % self.update_interval:
            return False
        self.refresh()
        return True

    def refresh(self) -> None:
        record = self._reader.read()
        self.current_weather = record.weather_current
        self.weather_intensity = record.weather_intensity
        self.weather_start_frame = record.weather_frame
        self._update_visuals()

    def _update_visuals(self) -> None:
        data = catalog.get_weather_data(self.current_weather)
        if data is None:
            self.particle_count = 0
            self.fog_density = 0.0
            return
        if data.particle_intensity > 0:
            self.particle_count = int(math.floor(data.particle_intensity * self.max_particles * self.particle_scale))
        else:
            self.particle_count = 0
        self.fog_density = data.fog_density

    def color_overlay(self) -> tuple[float, float, float, float]:
        """RGBA screen tint; alpha scales with intensity up to 15%."""
        if self.weather_intensity <= 0:
            return NO_OVERLAY
        r, g, b, _ = catalog.get_weather_color_tint(self.current_weather)
        return (r, g, b, self.weather_intensity * MAX_OVERLAY_ALPHA)
