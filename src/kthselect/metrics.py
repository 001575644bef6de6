"""Metrics helper for KthSelector.

Provides a lightweight, dependency-free snapshot of selector counters suitable
for exposure via HTTP or logging. Avoids mutating the selector.
"""
from __future__ import annotations

from typing import Any, Dict

from .selector import KthSelector


def selector_metrics(selector: KthSelector) -> Dict[str, Any]:
    return {
        "selections": selector.selections,
        "partitions": selector.partitions,
        "cache_hits": selector.cache_hits,
        "small_sorts": selector.small_sorts,
        "config": {
            "pivoting": selector.pivoting.kind,
            "seed": selector.pivoting.seed,
            "min_select_size": selector.min_select_size,
        },
    }

__all__ = ["selector_metrics"]
