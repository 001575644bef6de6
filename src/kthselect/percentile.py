"""Percentile estimation on top of KthSelector.

``Percentile`` owns a copy of the data, a selector and a pivots heap. Asking
for several percentiles of the same data reuses the partitions made for the
earlier ones, so the whole batch costs little more than a single selection.

Interpolation follows the numpy ``method`` names. With ``h = p/100 * (n-1)``:

- linear:   x[lo] + (h - lo) * (x[hi] - x[lo])
- lower:    x[lo]
- higher:   x[hi]
- nearest:  x[round(h)] (ties to even)
- midpoint: (x[lo] + x[hi]) / 2

where ``lo = floor(h)``, ``hi = ceil(h)`` and ``x`` is the sorted data.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from .config import METHOD_CHOICES, NAN_POLICIES
from .logutil import get_logger
from .selector import DEFAULT_CACHE_LEVELS, KthSelector, new_pivots_cache, reset_pivots_cache


def drop_nans(values: Iterable[float], nan_policy: str = "omit") -> List[float]:
    """Return ``values`` as floats without NaNs, or raise if ``nan_policy`` is "raise".

    The selector assumes a total order, so NaN must never reach it.
    """
    if nan_policy not in NAN_POLICIES:
        raise ValueError(f"unknown nan_policy '{nan_policy}' (expected one of {', '.join(NAN_POLICIES)})")
    data = [float(v) for v in values]
    nans = sum(1 for v in data if math.isnan(v))
    if nans:
        if nan_policy == "raise":
            raise ValueError(f"input contains {nans} NaN value(s)")
        data = [v for v in data if not math.isnan(v)]
        get_logger().debug("omitted %d NaN value(s) from input", nans)
    return data


def _check_quantile(p: float) -> float:
    p = float(p)
    if not 0.0 <= p <= 100.0:
        raise ValueError(f"percentile must be in [0, 100], got {p}")
    return p


class Percentile:
    def __init__(
        self,
        quantile: float = 50.0,
        method: str = "linear",
        selector: Optional[KthSelector] = None,
        nan_policy: str = "omit",
        cache_levels: int = DEFAULT_CACHE_LEVELS,
    ) -> None:
        if method not in METHOD_CHOICES:
            raise ValueError(f"unknown method '{method}' (expected one of {', '.join(METHOD_CHOICES)})")
        if nan_policy not in NAN_POLICIES:
            raise ValueError(f"unknown nan_policy '{nan_policy}' (expected one of {', '.join(NAN_POLICIES)})")
        self.quantile = _check_quantile(quantile)
        self.method = method
        self.selector = selector or KthSelector()
        self.nan_policy = nan_policy
        self._work: List[float] = []
        self._pivots = new_pivots_cache(cache_levels)

    def __len__(self) -> int:
        return len(self._work)

    def set_data(self, values: Iterable[float]) -> "Percentile":
        """Copy ``values`` into the estimator and forget cached pivots."""
        data = drop_nans(values, self.nan_policy)
        self._work = data
        reset_pivots_cache(self._pivots)
        get_logger().debug("percentile data loaded: n=%d", len(data))
        return self

    def _order_stat(self, k: int) -> float:
        return self.selector.select(self._work, self._pivots, k)

    def evaluate(self, p: Optional[float] = None) -> float:
        """Return percentile ``p`` (defaults to the constructor quantile)."""
        p = self.quantile if p is None else _check_quantile(p)
        n = len(self._work)
        if n == 0:
            return float("nan")
        if n == 1:
            return self._work[0]

        h = p / 100.0 * (n - 1)
        lo = math.floor(h)
        hi = math.ceil(h)
        if self.method == "lower":
            return self._order_stat(lo)
        if self.method == "higher":
            return self._order_stat(hi)
        if self.method == "nearest":
            return self._order_stat(int(round(h)))

        low_value = self._order_stat(lo)
        if lo == hi:
            return low_value
        high_value = self._order_stat(hi)
        if self.method == "midpoint":
            return (low_value + high_value) / 2.0
        return low_value + (h - lo) * (high_value - low_value)

    def evaluate_many(self, ps: Sequence[float]) -> List[float]:
        return [self.evaluate(p) for p in ps]


def percentiles(values: Iterable[float], ps: Sequence[float], method: str = "linear") -> List[float]:
    """One-shot percentiles of ``values`` (the input is not modified)."""
    return Percentile(method=method).set_data(values).evaluate_many(ps)


def percentile(values: Iterable[float], p: float, method: str = "linear") -> float:
    return Percentile(p, method=method).set_data(values).evaluate()


def median(values: Iterable[float]) -> float:
    return percentile(values, 50.0)


__all__ = ["Percentile", "drop_nans", "percentile", "percentiles", "median"]
