"""Tests for the HTTP API layer.

Covers:
  - Health, root, defaults and schema endpoints
  - Grid search (JSON, NDJSON stream, CSV)
  - Partial-input merging and 422 error mapping
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from evcs_optimizer.api.server import _deep_merge, app, get_defaults
from evcs_optimizer.report.summary import NO_FEASIBLE_MESSAGE


client = TestClient(app)

SMALL_REQUEST = {
    "params": {"open_hours": 1},
    "config": {
        "n_grid": {"n_min": 1, "n_max": 2},
        "p_grid": {"p_min": 0.5, "p_max": 0.6, "p_step": 0.1},
        "mc_runs": 2,
    },
}


# ═══════════════════════════════════════════════════════════════════════════
# Metadata endpoints
# ═══════════════════════════════════════════════════════════════════════════


class TestMetadata:
    def test_health(self):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_root(self):
        data = client.get("/").json()
        assert data["name"] == "EV Charging Station Optimizer API"
        assert data["start_here"] == "GET /defaults"

    def test_defaults(self):
        data = client.get("/defaults").json()
        assert data["params"]["power_kw"] == 100.0
        assert data["params"]["base_arrivals_per_hour_by_month"][6] == 1.8
        assert data["config"]["n_grid"] == {"n_min": 1, "n_max": 8}
        assert data["config"]["max_drop_rate"] is None

    def test_schema(self):
        data = client.get("/schema").json()
        assert "power_kw" in data["params"]["properties"]
        assert "mc_runs" in data["config"]["properties"]


# ═══════════════════════════════════════════════════════════════════════════
# Grid search endpoints
# ═══════════════════════════════════════════════════════════════════════════


class TestGridSearch:
    def test_grid_search(self):
        resp = client.post("/grid-search", json=SMALL_REQUEST)
        assert resp.status_code == 200
        data = resp.json()
        assert [(r["n_stalls"], r["price"]) for r in data["results"]] == [
            (1, 0.5), (1, 0.6), (2, 0.5), (2, 0.6),
        ]
        assert data["feasible"] is True
        best_profit = max(r["mean"]["profit"] for r in data["results"])
        assert data["best"]["mean"]["profit"] == best_profit
        assert 1 <= len(data["pareto_front"]) <= 4
        assert f"- N* = {data['best']['n_stalls']}" in data["summary"]

    def test_deterministic(self):
        a = client.post("/grid-search", json=SMALL_REQUEST).json()
        b = client.post("/grid-search", json=SMALL_REQUEST).json()
        assert a == b

    def test_infeasible(self):
        request = {
            "params": {"open_hours": 1, "power_kw": 11, "q_max": 0,
                       "base_arrivals_per_hour_by_month": [4.0] * 12},
            "config": {**SMALL_REQUEST["config"], "max_drop_rate": 0.0},
        }
        data = client.post("/grid-search", json=request).json()
        assert data["feasible"] is False
        assert data["best"] is None
        assert data["summary"] == NO_FEASIBLE_MESSAGE
        assert len(data["results"]) == 4

    def test_invalid_config_422(self):
        request = {"config": {"mc_runs": 0}}
        resp = client.post("/grid-search", json=request)
        assert resp.status_code == 422
        detail = resp.json()["detail"]
        assert any("mc_runs" in e["loc"] for e in detail)

    def test_invalid_params_422(self):
        resp = client.post("/grid-search", json={"params": {"energy_kwh_min": 50.0}})
        assert resp.status_code == 422
        assert "energy_kwh" in json.dumps(resp.json()["detail"])

    def test_invalid_workers_422(self):
        resp = client.post("/grid-search", json={**SMALL_REQUEST, "workers": 0})
        assert resp.status_code == 422

    def test_stream(self):
        resp = client.post("/grid-search/stream", json=SMALL_REQUEST)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/x-ndjson")
        messages = [json.loads(line) for line in resp.text.splitlines() if line]
        assert [m["type"] for m in messages] == ["progress", "progress", "progress", "result"]
        assert messages[0]["progress"]["completed"] == 0
        assert messages[-1]["progress"]["completed"] == 4
        assert len(messages[-1]["results"]) == 4
        assert "error" not in messages[-1]

    def test_stream_invalid_422(self):
        resp = client.post("/grid-search/stream", json={"config": {"seed": -1}})
        assert resp.status_code == 422

    def test_csv(self):
        resp = client.post("/grid-search/csv", json=SMALL_REQUEST)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        lines = resp.text.split("\n")
        assert lines[0].startswith("N,p,profit_mean,dropRate_mean")
        assert len(lines) == 5
        assert lines[1].startswith("1,0.500,")


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════


class TestHelpers:
    def test_deep_merge_nested(self):
        base = {"n_grid": {"n_min": 1, "n_max": 8}, "mc_runs": 120}
        merged = _deep_merge(base, {"n_grid": {"n_max": 3}})
        assert merged == {"n_grid": {"n_min": 1, "n_max": 3}, "mc_runs": 120}

    def test_deep_merge_replaces_scalars(self):
        assert _deep_merge({"a": 1}, {"a": {"b": 2}}) == {"a": {"b": 2}}

    @pytest.mark.parametrize("section", ["params", "config"])
    def test_defaults_are_fresh_copies(self, section):
        first = get_defaults()
        first[section].clear()
        assert get_defaults()[section]
