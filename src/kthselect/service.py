"""Optional FastAPI service exposing kthselect selection as HTTP endpoints.

Install with `pip install kthselect[server]` to enable.
This keeps the core library dependency-free.
"""
from __future__ import annotations

import threading
from typing import Dict, List, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import FastAPI, HTTPException
    from pydantic import BaseModel
except Exception as exc:  # noqa: BLE001
    raise RuntimeError(
        "FastAPI not installed. Install with `pip install kthselect[server]` to use the service."  # noqa: E501
    ) from exc

from . import __version__
from .config import SelectionConfig
from .metrics import selector_metrics
from .percentile import Percentile, drop_nans
from .pivoting import PivotingStrategy
from .selector import KthSelector


class SelectRequest(BaseModel):
    values: List[float]
    k: int
    pivoting: Optional[str] = None  # overrides the service default for this call


class SelectResponse(BaseModel):
    k: int
    value: float


class PercentileRequest(BaseModel):
    values: List[float]
    percentiles: List[float]
    method: Optional[str] = None


class PercentileResponse(BaseModel):
    n: int
    estimates: Dict[str, float]


def build_app(config: Optional[SelectionConfig] = None) -> FastAPI:
    cfg = config or SelectionConfig()
    selector = cfg.build_selector()
    app = FastAPI(title="kthselect Service", version=__version__)
    # Single lock protecting the shared selector (its counters and a random
    # strategy's RNG are not thread-safe).
    lock = threading.Lock()

    @app.get("/healthz")
    def health() -> dict[str, str]:  # pragma: no cover - trivial
        return {"status": "ok"}

    @app.post("/select", response_model=SelectResponse)
    def select(req: SelectRequest) -> SelectResponse:
        try:
            work = drop_nans(req.values, cfg.nan_policy)
            if req.pivoting is not None:
                one_off = KthSelector(PivotingStrategy(req.pivoting, seed=cfg.seed), cfg.min_select_size)
                value = one_off.select(work, None, req.k)
            else:
                with lock:
                    value = selector.select(work, None, req.k)
        except (ValueError, IndexError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return SelectResponse(k=req.k, value=value)

    @app.post("/percentile", response_model=PercentileResponse)
    def percentile(req: PercentileRequest) -> PercentileResponse:
        if not req.values:
            raise HTTPException(status_code=400, detail="values must not be empty")
        try:
            with lock:
                est = Percentile(
                    method=req.method or cfg.method,
                    selector=selector,
                    nan_policy=cfg.nan_policy,
                    cache_levels=cfg.cache_levels,
                )
                est.set_data(req.values)
                if not len(est):
                    raise ValueError("values must contain at least one number")
                values = est.evaluate_many(req.percentiles)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return PercentileResponse(
            n=len(est),
            estimates={f"{p:g}": v for p, v in zip(req.percentiles, values)},
        )

    @app.get("/metrics")
    def metrics() -> dict[str, object]:
        with lock:
            return selector_metrics(selector)

    return app


__all__ = ["build_app"]
