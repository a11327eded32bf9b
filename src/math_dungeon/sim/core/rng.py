"""Seeded random source for reproducible battles.

Damage variance, enemy naming and the balance agents all draw from a
``GameRNG``.  Batch runs derive one RNG per battle from a base seed, and
each battle forks separate streams for combat rolls, problem generation
and the answering agent so that one consumer never shifts another.
"""

from __future__ import annotations

import hashlib
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class GameRNG:
    """Mersenne Twister wrapper with named, deterministic forks.

    Parameters
    ----------
    seed:
        Integer seed.  ``None`` seeds from system entropy, which is what
        interactive play wants; tests and simulations always pass a seed.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = random.SystemRandom().randrange(2**63)
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def random_int(self, low: int, high: int) -> int:
        """Uniform integer in the closed range ``[low, high]``."""
        return self._rng.randint(low, high)

    def random_float(self) -> float:
        """Uniform float in ``[0.0, 1.0)``."""
        return self._rng.random()

    def chance(self, probability: float) -> bool:
        """Return ``True`` with the given probability."""
        return self._rng.random() < probability

    def random_choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)

    def shuffle(self, items: list[T]) -> None:
        self._rng.shuffle(items)

    def fork(self, name: str) -> GameRNG:
        """Derive an independent child stream keyed by *name*.

        The child seed depends only on this RNG's seed and *name*, never
        on how many values have already been drawn.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        return GameRNG(int.from_bytes(digest[:8], "big"))

    def __repr__(self) -> str:
        return f"GameRNG(seed={self._seed})"
