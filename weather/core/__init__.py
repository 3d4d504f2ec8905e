"""Core runtime modules of the weather system."""

from . import catalog, clock, configio, logger, rng, broadcast, scheduler, session, version

__all__ = [
    "catalog",
    "clock",
    "configio",
    "logger",
    "rng",
    "broadcast",
    "scheduler",
    "session",
    "version",
]
