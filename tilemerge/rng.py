"""
Random sources for the board engine.

The engine only ever asks for a uniform integer in an inclusive range, so any
object with a matching ``randint`` can drive it. ``ScriptedRandomSource`` replays
a fixed sequence, which makes spawns reproducible in tests and replays.
"""
from __future__ import annotations

import random
from typing import Iterable, List, Optional, Protocol

__all__ = [
    "RandomSource",
    "UniformRandomSource",
    "ScriptedRandomSource",
]


class RandomSource(Protocol):
    def randint(self, low: int, high: int) -> int:
        """Return an integer N with low <= N <= high."""
        ...


class UniformRandomSource:
    def __init__(self, seed: Optional[int] = None) -> None:
        self._random = random.Random(seed)

    def randint(self, low: int, high: int) -> int:
        return self._random.randint(low, high)


class ScriptedRandomSource:
    """Hands out pre-recorded values in order."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values: List[int] = list(values)
        self._cursor = 0

    @property
    def remaining(self) -> int:
        return len(self._values) - self._cursor

    def extend(self, values: Iterable[int]) -> None:
        self._values.extend(values)

    def randint(self, low: int, high: int) -> int:
        if self._cursor >= len(self._values):
            raise IndexError("scripted random source exhausted")
        value = self._values[self._cursor]
        if not low <= value <= high:
            raise ValueError(f"scripted value {value} outside [{low}, {high}]")
        self._cursor += 1
        return value
