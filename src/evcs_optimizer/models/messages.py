"""Message shapes for running the optimizer behind an asynchronous boundary.

A job emits zero or more ``progress`` messages, then exactly one
``result`` or ``error`` message.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from evcs_optimizer.config.grid import GridSearchConfig
from evcs_optimizer.config.station import StationParams
from evcs_optimizer.models.results import GridPointResult


class WorkerRequest(BaseModel):
    type: Literal["run-grid"] = "run-grid"
    params: StationParams
    config: GridSearchConfig


class WorkerProgress(BaseModel):
    stage: Literal["running", "done", "error"]
    message: str | None = None
    completed: int
    total: int


class WorkerResponse(BaseModel):
    type: Literal["progress", "result", "error"]
    progress: WorkerProgress | None = None
    results: list[GridPointResult] | None = None
    best: GridPointResult | None = None
    error: str | None = None
