"""Common interfaces and exceptions shared by the scheduler and its consumers."""
from __future__ import annotations

from typing import Protocol, runtime_checkable


class WeatherError(RuntimeError):
    """Base class for weather system faults."""


class WeatherConfigError(WeatherError, ValueError):
    """Raised when interval/speed configuration is inconsistent."""


class SchedulerInitError(WeatherError):
    """Raised when the scheduler cannot build a deterministic timeline."""


@runtime_checkable
class TickSource(Protocol):
    """Monotonic frame counter supplied by the host runtime."""

    @property
    def frame(self) -> int: ...

    @property
    def ticks_per_second(self) -> int: ...


@runtime_checkable
class RandomSource(Protocol):
    """Deterministic random stream, identical on every peer."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def randint(self, a: int, b: int) -> int: ...


@runtime_checkable
class EffectConsumer(Protocol):
    """Anything that wants to hear about a new weather event.

    Called once per trigger, after the new state has been published.
    """

    def on_weather_changed(self, variant: str, magnitude: float, frame: int) -> None: ...
