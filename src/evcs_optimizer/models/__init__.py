"""Result models — simulation output contracts."""

from evcs_optimizer.models.results import (
    KPI_FIELDS,
    GridPointResult,
    GridSearchResult,
    SimRunKPIs,
)
from evcs_optimizer.models.messages import WorkerProgress, WorkerRequest, WorkerResponse

__all__ = [
    "KPI_FIELDS",
    "SimRunKPIs",
    "GridPointResult",
    "GridSearchResult",
    "WorkerRequest",
    "WorkerProgress",
    "WorkerResponse",
]
