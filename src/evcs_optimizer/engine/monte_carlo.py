"""Monte Carlo aggregation — repeat the year simulation for one (N, p).

Replicate ``r`` uses seed ``(base_seed + r × 1013904223) mod 2³²``; the large
odd stride keeps replicate streams far apart in Mulberry32's sequence.

Aggregation:
  - Mean KPIs: per-field pairwise sum over replicates × (1 / mc_runs).
  - ``stderr_profit`` / ``stderr_drop_rate``: sample std (n − 1) / √n of the
    per-replicate values.
  - ``drop_rate``: *pooled*, mean dropped / mean arrivals (not the mean of
    per-replicate ratios).
"""

from __future__ import annotations

import numpy as np

from evcs_optimizer.config.station import StationParams
from evcs_optimizer.engine.rng import MASK32, RNG
from evcs_optimizer.engine.simulator import simulate_year
from evcs_optimizer.engine.stats import std_err
from evcs_optimizer.models.results import KPI_FIELDS, GridPointResult, SimRunKPIs

REPLICATE_SEED_STRIDE = 1013904223


def replicate_seed(base_seed: int, replicate: int) -> int:
    return (base_seed + replicate * REPLICATE_SEED_STRIDE) & MASK32


def run_drop_rate(kpi: SimRunKPIs) -> float:
    """(queue-full + reneged) / arrivals for one replicate; 0 without arrivals."""
    if kpi.arrivals <= 0:
        return 0.0
    return (kpi.dropped_queue_full + kpi.dropped_wait_tol) / kpi.arrivals


def mean_kpis(runs: list[SimRunKPIs]) -> SimRunKPIs:
    """Field-wise mean of replicate KPIs.

    Stacked as ``(fields, runs)``; NumPy sums each contiguous row pairwise.
    """
    table = np.array(
        [[getattr(kpi, name) for kpi in runs] for name in KPI_FIELDS],
        dtype=np.float64,
    )
    means = table.sum(axis=1) * (1.0 / len(runs))
    return SimRunKPIs(**{name: float(v) for name, v in zip(KPI_FIELDS, means)})


def aggregate_replicates(n_stalls: int, price: float, runs: list[SimRunKPIs]) -> GridPointResult:
    """Fold finished replicates for one grid cell into a ``GridPointResult``."""
    mean = mean_kpis(runs)

    dropped = mean.dropped_queue_full + mean.dropped_wait_tol
    pooled_drop_rate = dropped / mean.arrivals if mean.arrivals > 0 else 0.0

    return GridPointResult(
        n_stalls=n_stalls,
        price=price,
        mean=mean,
        stderr_profit=std_err([kpi.profit for kpi in runs]),
        stderr_drop_rate=std_err([run_drop_rate(kpi) for kpi in runs]),
        drop_rate=pooled_drop_rate,
    )


def run_monte_carlo(
    params: StationParams,
    n_stalls: int,
    price: float,
    mc_runs: int,
    base_seed: int,
) -> GridPointResult:
    """Simulate ``mc_runs`` independent years for one (N, p) and aggregate them."""
    runs = [
        simulate_year(params, n_stalls, price, RNG(replicate_seed(base_seed, r)))
        for r in range(mc_runs)
    ]
    return aggregate_replicates(n_stalls, price, runs)
