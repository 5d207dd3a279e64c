"""Result types — the contract between engine, API and report layers.

All models are numeric-only and frozen once built.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SimRunKPIs(BaseModel):
    """Outcome of one simulated operating year (or the mean over replicates)."""

    model_config = ConfigDict(frozen=True)

    # --- Money (€ / year) ---
    revenue: float
    """Σ energy_kwh × price over served sessions."""
    energy_sold_kwh: float
    energy_cost: float
    """energy_sold_kwh × grid_cost_per_kwh."""
    fixed_cost: float
    """fixed_cost_per_year + fixed_cost_per_stall_per_year × N."""
    profit: float
    """revenue − energy_cost − fixed_cost."""

    # --- Flow counters ---
    # Floats so the replicate mean keeps the same schema.
    arrivals: float
    served: float
    dropped_queue_full: float
    """Arrivals turned away because the waiting line was at q_max."""
    dropped_wait_tol: float
    """Queued cars that reneged after exceeding their wait tolerance."""

    # --- Service quality ---
    avg_wait_min: float
    """Mean wait among served sessions (immediate starts count as 0)."""
    p95_wait_min: float
    """95th percentile wait among served sessions (linear interpolation)."""
    utilization: float
    """Busy stall-hours / (N × operating hours), clamped to [0, 1]."""


KPI_FIELDS: tuple[str, ...] = tuple(SimRunKPIs.model_fields)
"""Field order used when KPIs are stacked into arrays."""


class GridPointResult(BaseModel):
    """Monte Carlo aggregate for one (N, p) grid cell."""

    model_config = ConfigDict(frozen=True)

    n_stalls: int
    price: float
    """Price per kWh (€), snapped to 0.001."""

    mean: SimRunKPIs
    """Replicate-mean KPIs."""
    stderr_profit: float
    """Sample std / √mc_runs of per-replicate profit (0 for a single replicate)."""
    stderr_drop_rate: float
    """Sample std / √mc_runs of per-replicate drop rate (0 for a single replicate)."""
    drop_rate: float
    """Pooled drop rate: mean dropped / mean arrivals (0 when no arrivals)."""


class GridSearchResult(BaseModel):
    """Full optimizer output: every grid point in scan order, plus the best feasible one."""

    results: list[GridPointResult]
    best: GridPointResult | None = None
    """Profit-maximizing feasible point, or ``None`` when no point is feasible."""
