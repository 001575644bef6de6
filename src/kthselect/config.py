from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .pivoting import PIVOTING_KINDS, PivotingStrategy
from .selector import DEFAULT_CACHE_LEVELS, MIN_SELECT_SIZE, KthSelector

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .percentile import Percentile

PIVOTING_CHOICES = PIVOTING_KINDS
METHOD_CHOICES = ("linear", "lower", "higher", "nearest", "midpoint")
NAN_POLICIES = ("omit", "raise")


@dataclass
class SelectionConfig:
    # Pivot choice policy; see kthselect.pivoting
    pivoting: str = "median_of_3"
    # Seed for the random policy (None = OS entropy)
    seed: Optional[int] = None
    # Ranges at or below this size are sorted instead of partitioned
    min_select_size: int = MIN_SELECT_SIZE
    # Tree levels remembered by a percentile estimator's pivots heap
    cache_levels: int = DEFAULT_CACHE_LEVELS
    # Interpolation between neighbouring order statistics
    method: str = "linear"
    nan_policy: str = "omit"

    def build_selector(self) -> KthSelector:
        return KthSelector(PivotingStrategy(self.pivoting, seed=self.seed), min_select_size=self.min_select_size)

    def build_percentile(self, quantile: float = 50.0) -> "Percentile":
        from .percentile import Percentile

        return Percentile(
            quantile,
            method=self.method,
            selector=self.build_selector(),
            nan_policy=self.nan_policy,
            cache_levels=self.cache_levels,
        )


__all__ = ["SelectionConfig", "PIVOTING_CHOICES", "METHOD_CHOICES", "NAN_POLICIES"]
