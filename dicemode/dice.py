"""Dice rolling against an injectable random source.

Any object with a ``randint(low, high)`` method (inclusive bounds) can act as
the source, so ``random.Random`` works as-is and tests can pass a scripted one.
"""

from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def new_random_source(seed: int | None = None) -> RandomSource:
    """Return a fresh ``random.Random``, seeded when ``seed`` is given."""
    return random.Random(seed)


def roll(count: int, faces: int, rng: RandomSource) -> list[int]:
    """Roll ``count`` dice with ``faces`` sides each.

    Args:
        count: Number of dice, at least 1.
        faces: Sides per die, at least 1.
        rng: Source of uniformly distributed integers.

    Returns:
        A list of ``count`` independent values, each in ``[1, faces]``.

    Raises:
        ValueError: If count or faces is below 1.
    """
    if count < 1:
        raise ValueError(f"Dice count must be at least 1, got {count}")
    if faces < 1:
        raise ValueError(f"Face count must be at least 1, got {faces}")
    return [rng.randint(1, faces) for _ in range(count)]
