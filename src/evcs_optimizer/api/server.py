"""FastAPI server for the EV charging station optimizer.

Run with:
    uvicorn evcs_optimizer.api.server:app --reload --port 8000

Or:
    evcs-optimizer-api

Endpoints:
    GET  /health              — liveness probe
    GET  /defaults            — default station parameters and grid config
    GET  /schema              — JSON Schema for both input models
    POST /grid-search         — run the optimizer, return results + best + summary
    POST /grid-search/stream  — same run as NDJSON progress/result messages
    POST /grid-search/csv     — same run exported as CSV
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import BaseModel, Field, ValidationError

from evcs_optimizer import __version__
from evcs_optimizer.api.jobs import GridSearchJob
from evcs_optimizer.config.grid import GridSearchConfig
from evcs_optimizer.config.station import StationParams
from evcs_optimizer.engine.optimizer import run_grid_search
from evcs_optimizer.errors import SimulationInputError
from evcs_optimizer.models.messages import WorkerRequest
from evcs_optimizer.report.export import results_to_csv
from evcs_optimizer.report.pareto import pareto_front
from evcs_optimizer.report.summary import build_summary


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="EV Charging Station Optimizer API",
    version=__version__,
    description=(
        "Monte Carlo grid search over stall count and price per kWh for an EV "
        "charging station with seasonal demand, finite queue and reneging customers."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class GridSearchRequest(BaseModel):
    """Partial inputs — missing fields use defaults."""
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial StationParams. Example: {'power_kw': 150, 'q_max': 4}",
    )
    config: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial GridSearchConfig. Example: "
                    "{'n_grid': {'n_max': 4}, 'mc_runs': 50, 'max_drop_rate': 0.1}",
    )
    workers: int | None = Field(
        default=None, ge=1, le=64,
        description="Worker processes for grid points (None = in-process).",
    )


class GridSearchResponse(BaseModel):
    results: list[dict[str, Any]]
    best: dict[str, Any] | None
    feasible: bool
    pareto_front: list[dict[str, Any]]
    summary: str


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _deep_merge(base: dict, overrides: dict) -> dict:
    """Recursively merge overrides into base dict."""
    for key, val in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            _deep_merge(base[key], val)
        else:
            base[key] = val
    return base


def get_defaults() -> dict[str, Any]:
    return {
        "params": StationParams().model_dump(mode="json"),
        "config": GridSearchConfig().model_dump(mode="json"),
    }


def _build_inputs(req: GridSearchRequest) -> tuple[StationParams, GridSearchConfig]:
    """Merge partial inputs onto defaults; invalid input → HTTP 422."""
    defaults = get_defaults()
    try:
        params = StationParams(**_deep_merge(defaults["params"], req.params))
        config = GridSearchConfig(**_deep_merge(defaults["config"], req.config))
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=[{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()],
        ) from exc
    return params, config


def _run(req: GridSearchRequest):
    params, config = _build_inputs(req)
    try:
        outcome = run_grid_search(params, config, workers=req.workers)
    except SimulationInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return params, outcome


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/")
def root():
    return {
        "name": "EV Charging Station Optimizer API",
        "version": __version__,
        "start_here": "GET /defaults",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/defaults")
def defaults():
    """Default StationParams and GridSearchConfig as JSON."""
    return get_defaults()


@app.get("/schema")
def schema():
    """JSON Schema for StationParams and GridSearchConfig."""
    return {
        "params": StationParams.model_json_schema(),
        "config": GridSearchConfig.model_json_schema(),
    }


@app.post("/grid-search", response_model=GridSearchResponse)
def grid_search(req: GridSearchRequest):
    """Run the full grid search and return every point plus the best feasible one."""
    params, outcome = _run(req)
    return GridSearchResponse(
        results=[r.model_dump() for r in outcome.results],
        best=outcome.best.model_dump() if outcome.best is not None else None,
        feasible=outcome.best is not None,
        pareto_front=[r.model_dump() for r in pareto_front(outcome.results)],
        summary=build_summary(params, outcome.best, outcome.results),
    )


@app.post("/grid-search/stream")
def grid_search_stream(req: GridSearchRequest):
    """Stream worker messages as NDJSON: progress lines, then one result or error line."""
    params, config = _build_inputs(req)
    job = GridSearchJob(WorkerRequest(params=params, config=config), workers=req.workers)

    def lines():
        for msg in job.messages():
            yield msg.model_dump_json(exclude_none=True) + "\n"

    return StreamingResponse(lines(), media_type="application/x-ndjson")


@app.post("/grid-search/csv", response_class=PlainTextResponse)
def grid_search_csv(req: GridSearchRequest):
    """Run the grid search and return one CSV row per grid point."""
    _, outcome = _run(req)
    return PlainTextResponse(results_to_csv(outcome.results), media_type="text/csv")


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    uvicorn.run(
        "evcs_optimizer.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
    )


if __name__ == "__main__":
    main()
