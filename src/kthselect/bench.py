"""Simple benchmarking harness for kthselect.

Compares answering a batch of percentile queries by sorting a copy of the data
against cached selection (one Percentile estimator per batch). Keeps
dependencies minimal; for deeper profiling use py-spy or scalene externally.
"""
from __future__ import annotations

import random
import time
from typing import List, Sequence

from .config import SelectionConfig
from .percentile import Percentile

DEFAULT_QUERIES = (50.0, 90.0, 95.0, 99.0, 99.9)


def synthetic_values(n: int, seed: int = 0) -> List[float]:
    rng = random.Random(seed)
    return [rng.lognormvariate(0.0, 1.0) for _ in range(n)]


def query_points(count: int) -> List[float]:
    if count <= len(DEFAULT_QUERIES):
        return list(DEFAULT_QUERIES[:count])
    step = 100.0 / (count - 1)
    return [i * step for i in range(count)]


def _sorted_lookup(values: Sequence[float], ps: Sequence[float]) -> List[float]:
    data = sorted(values)
    n = len(data)
    out = []
    for p in ps:
        h = p / 100.0 * (n - 1)
        lo = int(h)
        hi = min(n - 1, lo + 1)
        out.append(data[lo] + (data[hi] - data[lo]) * (h - lo))
    return out


def run(values: Sequence[float], ps: Sequence[float], repeats: int, config: SelectionConfig | None = None) -> None:
    cfg = config or SelectionConfig()
    estimator: Percentile = cfg.build_percentile()

    start = time.perf_counter()
    for _ in range(repeats):
        expected = _sorted_lookup(values, ps)
    sort_elapsed = time.perf_counter() - start

    start = time.perf_counter()
    for _ in range(repeats):
        got = estimator.set_data(values).evaluate_many(ps)
    select_elapsed = time.perf_counter() - start

    selector = estimator.selector
    print(f"Sort:   {repeats} x {len(ps)} queries over {len(values)} values in {sort_elapsed:.3f}s")
    print(f"Select: {repeats} x {len(ps)} queries over {len(values)} values in {select_elapsed:.3f}s")
    print(
        f"Partitions: {selector.partitions}  cache hits: {selector.cache_hits}  small sorts: {selector.small_sorts}"
    )
    drift = max((abs(a - b) for a, b in zip(expected, got)), default=0.0)
    print(f"Max abs difference vs sorted reference: {drift:.3g}")

