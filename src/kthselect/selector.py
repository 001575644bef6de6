"""Quickselect with an optional cache of pivot positions.

``KthSelector.select(work, pivots_heap, k)`` rearranges ``work`` in place so
that ``work[k]`` holds the k-th smallest value and returns it. Only the
sub-ranges on the search path are partitioned; once at most
``min_select_size`` elements remain they are sorted directly.

The optional ``pivots_heap`` is a flat list of ints read as an implicit binary
tree (root 0, children ``2n+1`` / ``2n+2``). A negative slot means "not
partitioned yet"; otherwise it holds the absolute index where that node's
pivot landed. Reusing the same heap for several ``k`` on the same buffer turns
the shared prefix of each search path into lookups. The heap is only valid
while nothing but the selector mutates the buffer; refill it with -1 after
any external change.
"""
from __future__ import annotations

from typing import List, MutableSequence, Optional

from .logutil import get_logger
from .pivoting import PivotingStrategy, median_of_3

MIN_SELECT_SIZE = 15
DEFAULT_CACHE_LEVELS = 10


def new_pivots_cache(levels: int = DEFAULT_CACHE_LEVELS) -> List[int]:
    """Allocate an empty pivots heap able to remember ``levels`` tree levels."""
    if levels < 0:
        raise ValueError("levels must be >= 0")
    return [-1] * ((1 << levels) - 1)


def reset_pivots_cache(pivots_heap: MutableSequence[int]) -> None:
    for idx in range(len(pivots_heap)):
        pivots_heap[idx] = -1


def partition(work: MutableSequence[float], begin: int, end: int, pivot: int) -> int:
    """Partition ``work[begin:end]`` around the value at ``pivot``.

    Returns the final index ``p`` of the pivot value: everything in
    ``[begin, p)`` is <= it and everything in ``(p, end)`` is >= it. Equal
    values may end up on either side.
    """
    value = work[pivot]
    work[pivot] = work[begin]

    i = begin + 1
    j = end - 1
    while i < j:
        while i < j and work[j] > value:
            j -= 1
        while i < j and work[i] < value:
            i += 1
        if i < j:
            work[i], work[j] = work[j], work[i]
            i += 1
            j -= 1

    if i >= end or work[i] > value:
        i -= 1
    work[begin] = work[i]
    work[i] = value
    return i


def sort_range(work: MutableSequence[float], begin: int, end: int) -> None:
    """Insertion sort of ``work[begin:end]`` in place (any mutable sequence)."""
    for i in range(begin + 1, end):
        current = work[i]
        j = i - 1
        while j >= begin and work[j] > current:
            work[j + 1] = work[j]
            j -= 1
        work[j + 1] = current


_DEFAULT_PIVOTING = median_of_3()


class KthSelector:
    """Select order statistics from a work buffer.

    The pivoting strategy is fixed for the selector's lifetime. Counters
    (``selections``, ``partitions``, ``cache_hits``, ``small_sorts``) are
    plain ints for observability; see ``kthselect.metrics``.

    Not thread-safe: the buffer, the pivots heap, the counters and a random
    strategy's RNG are all shared mutable state.
    """

    def __init__(
        self,
        pivoting: Optional[PivotingStrategy] = _DEFAULT_PIVOTING,
        min_select_size: int = MIN_SELECT_SIZE,
    ) -> None:
        if pivoting is None:
            raise ValueError("pivoting strategy must not be None")
        if min_select_size < 1:
            raise ValueError("min_select_size must be >= 1")
        self.pivoting = pivoting
        self.min_select_size = min_select_size
        self.selections = 0
        self.partitions = 0
        self.cache_hits = 0
        self.small_sorts = 0
        get_logger().debug(
            "selector configured: pivoting=%s min_select_size=%d", pivoting.kind, min_select_size
        )

    def reset_counters(self) -> None:
        self.selections = 0
        self.partitions = 0
        self.cache_hits = 0
        self.small_sorts = 0

    def select(
        self,
        work: MutableSequence[float],
        pivots_heap: Optional[MutableSequence[int]],
        k: int,
    ) -> float:
        """Return the k-th smallest value (0-based) of ``work``.

        ``work`` is partially reordered in place; afterwards ``work[k]`` holds
        the returned value. ``pivots_heap`` may be None.
        """
        length = len(work)
        if not 0 <= k < length:
            raise IndexError(f"k={k} out of range for buffer of length {length}")
        self.selections += 1

        begin = 0
        end = length
        node = 0
        use_heap = pivots_heap is not None
        heap_len = len(pivots_heap) if use_heap else 0  # type: ignore[arg-type]
        while end - begin > self.min_select_size:
            if use_heap and node < heap_len and pivots_heap[node] >= 0:  # type: ignore[index]
                # already partitioned around this pivot by an earlier call
                pivot = pivots_heap[node]  # type: ignore[index]
                self.cache_hits += 1
            else:
                pivot = partition(work, begin, end, self.pivoting.pivot_index(work, begin, end))
                self.partitions += 1
                if use_heap and node < heap_len:
                    pivots_heap[node] = pivot  # type: ignore[index]

            if k == pivot:
                return work[k]
            if k < pivot:
                end = pivot
                node = min(2 * node + 1, heap_len)
            else:
                begin = pivot + 1
                node = min(2 * node + 2, heap_len)

        sort_range(work, begin, end)
        self.small_sorts += 1
        return work[k]


__all__ = [
    "MIN_SELECT_SIZE",
    "DEFAULT_CACHE_LEVELS",
    "KthSelector",
    "new_pivots_cache",
    "reset_pivots_cache",
    "partition",
    "sort_range",
]
