import pytest

try:
    from fastapi.testclient import TestClient  # type: ignore
    from kthselect.service import build_app  # type: ignore
    FASTAPI_AVAILABLE = True
except Exception:  # pragma: no cover - optional dependency missing
    FASTAPI_AVAILABLE = False

from kthselect.config import SelectionConfig


pytestmark = pytest.mark.skipif(not FASTAPI_AVAILABLE, reason="fastapi extra not installed")


def _client(config=None):
    app = build_app(config)
    return TestClient(app)


def test_select_endpoint():
    client = _client()
    r = client.post("/select", json={"values": [9, 3, 7, 1, 8, 2, 5], "k": 3})
    assert r.status_code == 200
    assert r.json() == {"k": 3, "value": 5.0}


def test_select_with_pivoting_override():
    client = _client(SelectionConfig(seed=4))
    values = [float(v) for v in range(100, 0, -1)]
    r = client.post("/select", json={"values": values, "k": 10, "pivoting": "random"})
    assert r.status_code == 200
    assert r.json()["value"] == 11.0


def test_select_errors_are_400():
    client = _client()
    r = client.post("/select", json={"values": [1, 2], "k": 5})
    assert r.status_code == 400
    assert "out of range" in r.json()["detail"]
    r = client.post("/select", json={"values": [1, 2], "k": 0, "pivoting": "first"})
    assert r.status_code == 400


def test_percentile_endpoint_and_metrics():
    client = _client()
    values = list(range(1, 101))
    r = client.post("/percentile", json={"values": values, "percentiles": [50, 99], "method": "higher"})
    assert r.status_code == 200
    data = r.json()
    assert data["n"] == 100
    assert data["estimates"] == {"50": 51.0, "99": 100.0}

    m = client.get("/metrics")
    assert m.status_code == 200
    metrics = m.json()
    for k in ["selections", "partitions", "cache_hits", "small_sorts", "config"]:
        assert k in metrics
    assert metrics["selections"] == 2
    assert metrics["config"]["pivoting"] == "median_of_3"


def test_percentile_errors_are_400():
    client = _client()
    assert client.post("/percentile", json={"values": [], "percentiles": [50]}).status_code == 400
    assert client.post("/percentile", json={"values": [1, 2], "percentiles": [101]}).status_code == 400
    assert client.post("/percentile", json={"values": [1, 2], "percentiles": [50], "method": "cubic"}).status_code == 400


def test_healthz():
    client = _client()
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_select_drops_nan_values():
    client = _client()
    body = b'{"values": [NaN, 3, 1, 2], "k": 0}'
    r = client.post("/select", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 200
    assert r.json()["value"] == 1.0


def test_select_nan_rejected_when_configured():
    client = _client(SelectionConfig(nan_policy="raise"))
    body = b'{"values": [NaN, 3, 1, 2], "k": 0}'
    r = client.post("/select", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert "NaN" in r.json()["detail"]
