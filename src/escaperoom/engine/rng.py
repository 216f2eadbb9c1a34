"""Deterministic pseudo-random source used for level layouts.

SeededRandom is a mulberry32 generator: a 32-bit counter advanced by a
fixed odd constant and mixed through two xorshift/multiply rounds. Each
instance owns its counter, so two generators built from the same seed
produce the same sequence no matter what else is running.
"""

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_32 = 4294967296


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & MASK32


class SeededRandom:
    """Reproducible float source in [0, 1)."""

    def __init__(self, seed: int):
        self._state = seed & MASK32

    def next_float(self) -> float:
        self._state = (self._state + _INCREMENT) & MASK32
        s = self._state
        t = _imul(s ^ (s >> 15), 1 | s)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & MASK32) ^ t
        return ((t ^ (t >> 14)) & MASK32) / _TWO_32


def shuffle(items: Sequence[T], rng: SeededRandom) -> list[T]:
    """Return a Fisher-Yates permutation of items.

    Walks from the last index down to 1, swapping each slot with one drawn
    from the prefix, so exactly len(items) - 1 floats are consumed. The
    input sequence is left untouched.
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(rng.next_float() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def new_seed() -> int:
    """A fresh session seed for a new game."""
    return random.randrange(1 << 31)
