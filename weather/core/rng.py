# rng.py — seeded random stream shared by every peer
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

DEFAULT_SEED = 0


@dataclass(frozen=True)
class RandomSnapshot:
    seed: int
    draws: int
    state: tuple


class SyncedRandom:
    """
    Deterministic random source for the weather scheduler.

    Peers that start from the same seed and issue the same sequence of
    calls get bit-identical results. ``draws`` counts calls so two peers
    can compare positions cheaply.
    """
    def __init__(self, seed: Optional[int] = None):
        self._seed = DEFAULT_SEED if seed is None else int(seed)
        self._rng = random.Random(self._seed)
        self._draws = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def draws(self) -> int:
        return self._draws

    def set_seed(self, seed: Optional[int]):
        self._seed = DEFAULT_SEED if seed is None else int(seed)
        self._rng = random.Random(self._seed)
        self._draws = 0

    def random(self) -> float:
        self._draws += 1
        return self._rng.random()

    def uniform(self, a: float, b: float) -> float:
        self._draws += 1
        return self._rng.uniform(a, b)

    def randint(self, a: int, b: int) -> int:
        if b < a:
            raise ValueError(f"empty range for randint({a}, {b})")
        self._draws += 1
        return self._rng.randint(a, b)

    def position(self) -> tuple[int, int]:
        return (self._seed, self._draws)

    def snapshot(self) -> RandomSnapshot:
        return RandomSnapshot(self._seed, self._draws, self._rng.getstate())

    def restore(self, snap: RandomSnapshot):
        self._seed = snap.seed
        self._draws = snap.draws
        self._rng.setstate(snap.state)

    def descriptor(self) -> dict:
        return {"seed": self._seed, "draws": self._draws}
