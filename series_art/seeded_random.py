"""
seeded_random.py - Deterministic random source for direction planning.

Every choice the planner makes (lane order, tie-breaks, motif rotation) is a
pure function of a string seed, so the same round always plans the same way:

    rng = SeededRandom("project-42|round-1")
    rng.next()                  # float in [0, 1)
    rng.shuffle(["a", "b", "c"])
    rng.pick(["a", "b", "c"])

The generator is a value object. Each planning call builds its own instances,
so concurrent rounds never share state.
"""

from __future__ import annotations

from typing import List, Sequence, TypeVar

T = TypeVar("T")

_MASK_32 = 0xFFFFFFFF
_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619
_MULBERRY_INCREMENT = 0x6D2B79F5

DEFAULT_SEED = "direction-plan"


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK_32


def hash_to_seed(value: str) -> int:
    """
    32-bit FNV-1a hash of a string.

    Hashes UTF-16 code units so the result does not depend on the platform's
    native string encoding.
    """
    data = value.encode("utf-16-le")
    h = _FNV_OFFSET_BASIS
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


class SeededRandom:
    """mulberry32 generator seeded from ``hash_to_seed(seed_input)``."""

    __slots__ = ("_state",)

    def __init__(self, seed_input: str) -> None:
        self._state = hash_to_seed(seed_input or DEFAULT_SEED)

    def next(self) -> float:
        self._state = (self._state + _MULBERRY_INCREMENT) & _MASK_32
        value = self._state
        value = _imul(value ^ (value >> 15), value | 1)
        value ^= (value + _imul(value ^ (value >> 7), value | 61)) & _MASK_32
        return ((value ^ (value >> 14)) & _MASK_32) / 4294967296

    def pick(self, items: Sequence[T]) -> T:
        if len(items) == 0:
            raise ValueError("Cannot pick from an empty list.")
        return items[int(self.next() * len(items))]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Fisher-Yates shuffle of a copy; the input is left untouched."""
        clone = list(items)
        for index in range(len(clone) - 1, 0, -1):
            swap_index = int(self.next() * (index + 1))
            clone[index], clone[swap_index] = clone[swap_index], clone[index]
        return clone
