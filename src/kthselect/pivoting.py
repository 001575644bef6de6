"""Pivot choice policies for quickselect partitioning.

A policy answers one question: which index of ``work[begin:end]`` should the
next partition pass pivot around. The three variants share a single
``PivotingStrategy`` type tagged by ``kind``:

- ``median_of_3`` (default): median of the first, middle and last samples.
  Avoids the endpoint worst case on sorted and reverse-sorted input.
- ``central``: midpoint of the range, no data inspection.
- ``random``: uniform index from the strategy's own ``random.Random``. Pass
  ``seed`` for reproducible runs. One instance per thread.

Every variant rejects empty, inverted or out-of-bounds ranges with
``ValueError``.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

MEDIAN_OF_3 = "median_of_3"
CENTRAL = "central"
RANDOM = "random"
PIVOTING_KINDS = (MEDIAN_OF_3, CENTRAL, RANDOM)


def check_range(work: Sequence[float], begin: int, end: int) -> None:
    """Raise ValueError unless ``0 <= begin < end <= len(work)``."""
    length = len(work)
    if begin < 0 or end > length or begin >= end:
        raise ValueError(
            f"invalid range [{begin}, {end}) for buffer of length {length}"
        )


def median_of_3_index(work: Sequence[float], begin: int, end: int) -> int:
    check_range(work, begin, end)
    last = end - 1
    middle = begin + (last - begin) // 2
    w_begin = work[begin]
    w_middle = work[middle]
    w_last = work[last]

    if w_begin < w_middle:
        if w_middle < w_last:
            return middle
        return last if w_begin < w_last else begin
    if w_begin < w_last:
        return begin
    return last if w_middle < w_last else middle


def central_index(work: Sequence[float], begin: int, end: int) -> int:
    check_range(work, begin, end)
    return begin + (end - begin) // 2


def random_index(work: Sequence[float], begin: int, end: int, rng: random.Random) -> int:
    check_range(work, begin, end)
    return rng.randrange(begin, end)


@dataclass(frozen=True)
class PivotingStrategy:
    kind: str = MEDIAN_OF_3
    seed: Optional[int] = None  # only meaningful for the random variant
    _rng: Optional[random.Random] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.kind not in PIVOTING_KINDS:
            raise ValueError(
                f"unknown pivoting strategy '{self.kind}' (expected one of {', '.join(PIVOTING_KINDS)})"
            )
        if self.kind == RANDOM:
            object.__setattr__(self, "_rng", random.Random(self.seed))

    def pivot_index(self, work: Sequence[float], begin: int, end: int) -> int:
        """Return an index in ``[begin, end)`` to partition ``work`` around."""
        if self.kind == MEDIAN_OF_3:
            return median_of_3_index(work, begin, end)
        if self.kind == CENTRAL:
            return central_index(work, begin, end)
        return random_index(work, begin, end, self._rng)  # type: ignore[arg-type]


def median_of_3() -> PivotingStrategy:
    return PivotingStrategy(MEDIAN_OF_3)


def central() -> PivotingStrategy:
    return PivotingStrategy(CENTRAL)


def randomized(seed: Optional[int] = None) -> PivotingStrategy:
    return PivotingStrategy(RANDOM, seed=seed)


__all__ = [
    "MEDIAN_OF_3",
    "CENTRAL",
    "RANDOM",
    "PIVOTING_KINDS",
    "PivotingStrategy",
    "check_range",
    "median_of_3_index",
    "central_index",
    "random_index",
    "median_of_3",
    "central",
    "randomized",
]
