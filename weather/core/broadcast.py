"""Last-write-wins weather broadcast for consumers without a scheduler handle.

Two transports share one record type:

- ``WeatherBroadcast``: in-process, an immutable record swapped under a lock.
- ``SharedWeatherBroadcast``: cross-process, the record lives in a named
  shared memory block guarded by a sequence counter (seqlock). The writer
  makes the counter odd while it writes; readers retry until they copy
  the record between two identical even counter values.

Consumers poll; a missed intermediate state is simply overwritten.
"""
from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Optional, Union

import numpy as np

from weather.core.catalog import NEUTRAL_WEATHER
from weather.core.interfaces import WeatherError
from weather.core.logger import APP_LOGGER
from weather.core.shared_mem import SharedMemoryManager

KEY_CURRENT = "weather_current"
KEY_INTENSITY = "weather_intensity"
KEY_FRAME = "weather_frame"
BROADCAST_KEYS = (KEY_CURRENT, KEY_INTENSITY, KEY_FRAME)

VARIANT_MAX_BYTES = 32
READ_MAX_RETRIES = 10000
READ_BACKOFF_EVERY = 64

BROADCAST_DTYPE = np.dtype([
    ("seq", np.uint64),
    ("weather_current", f"S{VARIANT_MAX_BYTES}"),
    ("weather_intensity", np.float64),
    ("weather_frame", np.int64),
])


@dataclass(frozen=True)
class BroadcastRecord:
    weather_current: str = NEUTRAL_WEATHER
    weather_intensity: float = 0.0
    weather_frame: int = 0

    @classmethod
    def default(cls) -> "BroadcastRecord":
        return cls()

    def as_params(self) -> dict[str, Any]:
        return {
            KEY_CURRENT: self.weather_current,
            KEY_INTENSITY: self.weather_intensity,
            KEY_FRAME: self.weather_frame,
        }

    def get(self, key: str) -> Any:
        if key not in BROADCAST_KEYS:
            raise KeyError(key)
        return getattr(self, key)


class WeatherBroadcast:
    """In-process broadcast. ``read()`` never blocks on the writer."""

    def __init__(self):
        self._record = BroadcastRecord.default()
        self._lock = threading.Lock()
        self._publishes = 0

    @property
    def publishes(self) -> int:
        return self._publishes

    def publish(self, record: BroadcastRecord) -> None:
        with self._lock:
            self._record = record
            self._publishes += 1

    def read(self) -> BroadcastRecord:
        # A single reference load; the record itself is immutable
        return self._record

    def get(self, key: str, default: Any = None) -> Any:
        value = self.read().get(key)
        return default if value is None else value

    def check_variant(self, name: str) -> None:
        pass

    def close(self) -> None:
        pass


def default_shm_name() -> str:
    return f"weather_broadcast_{os.getpid()}"


class SharedWeatherBroadcast:
    """
    Cross-process broadcast over SharedMemory.

    The scheduler process constructs it with ``create=True``; any other
    process attaches by name with ``create=False`` and only reads.
    """
    def __init__(self, name: Optional[str] = None, create: bool = True):
        self.name = name or default_shm_name()
        self._shm = SharedMemoryManager(self.name, BROADCAST_DTYPE, count=1, create=create)
        self._writer_lock = threading.Lock()
        self._create = create
        if create:
            APP_LOGGER.info(f"Weather broadcast block created: {self.name} ({self._shm.size_bytes} bytes)")

    @property
    def is_writer(self) -> bool:
        return self._create

    def publish(self, record: BroadcastRecord) -> None:
        if not self._create:
            raise WeatherError("attached broadcast readers cannot publish")
        encoded = encode_variant(record.weather_current)
        block = self._block()
        with self._writer_lock:
            seq = int(block["seq"][0])
            block["seq"][0] = seq + 1  # odd: write in progress
            block["weather_current"][0] = encoded
            block["weather_intensity"][0] = float(record.weather_intensity)
            block["weather_frame"][0] = int(record.weather_frame)
            block["seq"][0] = seq + 2

    def read(self) -> BroadcastRecord:
        block = self._block()
        for attempt in range(READ_MAX_RETRIES):
            before = int(block["seq"][0])
            if before % 2 == 0:
                current = bytes(block["weather_current"][0])
                intensity = float(block["weather_intensity"][0])
                frame = int(block["weather_frame"][0])
                if int(block["seq"][0]) == before:
                    return _decode(current, intensity, frame)
            if attempt % READ_BACKOFF_EVERY == READ_BACKOFF_EVERY - 1:
                time.sleep(0)
        raise WeatherError(f"broadcast {self.name} kept changing during read")

    def check_variant(self, name: str) -> None:
        encode_variant(name)

    def get(self, key: str, default: Any = None) -> Any:
        value = self.read().get(key)
        return default if value is None else value

    def close(self) -> None:
        self._shm.cleanup()

    def _block(self) -> np.ndarray:
        if self._shm.array is None:
            raise WeatherError(f"broadcast {self.name} is closed")
        return self._shm.array

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def encode_variant(name: str) -> bytes:
    """Encode a variant name for the fixed-width shared slot."""
    try:
        encoded = name.encode("ascii")
    except UnicodeEncodeError as exc:
        raise WeatherError(f"variant name is not ASCII: {name!r}") from exc
    if not encoded or len(encoded) > VARIANT_MAX_BYTES:
        raise WeatherError(f"variant name must be 1..{VARIANT_MAX_BYTES} bytes for broadcast: {name!r}")
    return encoded


def _decode(current: bytes, intensity: float, frame: int) -> BroadcastRecord:
    name = current.rstrip(b"\x00").decode("ascii", errors="replace")
    # All-zero slot: nothing published yet
    return BroadcastRecord(
        weather_current=name or NEUTRAL_WEATHER,
        weather_intensity=intensity,
        weather_frame=frame,
    )


Broadcast = Union[WeatherBroadcast, SharedWeatherBroadcast]


class BroadcastReader:
    """Read-only accessor handed to consumers instead of the broadcast itself."""

    def __init__(self, source: Broadcast):
        self._source = source

    def read(self) -> BroadcastRecord:
        return self._source.read()

    def get(self, key: str, default: Any = None) -> Any:
        return self._source.get(key, default)
