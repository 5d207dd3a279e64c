"""Cross-field rules shared by the config models and the engine.

Each function returns a list of human-readable problems (empty = valid).
They read attributes only, so they also work on objects built with
``model_construct`` that skipped pydantic validation.
"""

from __future__ import annotations

import math
from typing import Any

MONTHS_PER_YEAR = 12
MAX_STALLS = 50
MAX_QUEUE = 2000
MAX_SEED = 2**32 - 1
PRICE_STEP_MIN = 0.001
"""Grid prices are snapped to this resolution."""


def _finite(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(x)


def _check_bounded_distribution(
    problems: list[str],
    label: str,
    mean: float,
    std: float,
    lo: float,
    hi: float,
) -> None:
    if not all(_finite(v) for v in (mean, std, lo, hi)):
        problems.append(f"{label} distribution values must be finite numbers")
        return
    if std < 0:
        problems.append(f"{label} std must be >= 0 (got {std})")
    if lo < 0:
        problems.append(f"{label} min must be >= 0 (got {lo})")
    if hi <= 0:
        problems.append(f"{label} max must be > 0 (got {hi})")
    if not lo <= mean <= hi:
        problems.append(f"{label} must satisfy min <= mean <= max (got {lo} / {mean} / {hi})")


def station_param_problems(params: Any) -> list[str]:
    """Positivity and ordering constraints for ``StationParams``."""
    problems: list[str] = []

    if not _finite(params.power_kw) or params.power_kw <= 0:
        problems.append(f"power_kw must be > 0 (got {params.power_kw})")
    if not isinstance(params.q_max, int) or not 0 <= params.q_max <= MAX_QUEUE:
        problems.append(f"q_max must be an integer in [0, {MAX_QUEUE}] (got {params.q_max})")
    if not isinstance(params.open_hours, int) or not 1 <= params.open_hours <= 24:
        problems.append(f"open_hours must be an integer in [1, 24] (got {params.open_hours})")

    for name in ("grid_cost_per_kwh", "fixed_cost_per_stall_per_year", "fixed_cost_per_year"):
        value = getattr(params, name)
        if not _finite(value) or value < 0:
            problems.append(f"{name} must be >= 0 (got {value})")

    arrivals = list(params.base_arrivals_per_hour_by_month)
    if len(arrivals) < MONTHS_PER_YEAR:
        problems.append(
            f"base_arrivals_per_hour_by_month needs {MONTHS_PER_YEAR} entries (got {len(arrivals)})"
        )
    else:
        bad = [i for i, x in enumerate(arrivals[:MONTHS_PER_YEAR]) if not _finite(x) or x <= 0]
        if bad:
            problems.append(f"base_arrivals_per_hour_by_month must be > 0 (months {bad})")

    temps = list(params.avg_temp_c_by_month)
    if len(temps) < MONTHS_PER_YEAR:
        problems.append(f"avg_temp_c_by_month needs {MONTHS_PER_YEAR} entries (got {len(temps)})")
    elif not all(_finite(x) for x in temps[:MONTHS_PER_YEAR]):
        problems.append("avg_temp_c_by_month values must be finite")

    if not _finite(params.temp_sensitivity):
        problems.append("temp_sensitivity must be finite")
    if not _finite(params.ref_temp_c):
        problems.append("ref_temp_c must be finite")

    if not _finite(params.p_ref) or params.p_ref <= 0:
        problems.append(f"p_ref must be > 0 (got {params.p_ref})")
    if params.price_response == "elasticity":
        if not _finite(params.price_elasticity) or params.price_elasticity <= 0:
            problems.append(f"price_elasticity must be > 0 (got {params.price_elasticity})")
    elif params.price_response == "linear":
        if not _finite(params.price_sensitivity) or params.price_sensitivity < 0:
            problems.append(f"price_sensitivity must be >= 0 (got {params.price_sensitivity})")
        lo, hi = params.min_demand_factor, params.max_demand_factor
        if not (_finite(lo) and _finite(hi)) or lo <= 0 or lo > hi:
            problems.append(
                f"demand factor bounds must satisfy 0 < min <= max (got {lo} / {hi})"
            )
    else:
        problems.append(f"unknown price_response {params.price_response!r}")

    _check_bounded_distribution(
        problems, "energy_kwh",
        params.energy_kwh_mean, params.energy_kwh_std,
        params.energy_kwh_min, params.energy_kwh_max,
    )
    _check_bounded_distribution(
        problems, "wait_tol",
        params.wait_tol_mean_min, params.wait_tol_std_min,
        params.wait_tol_min, params.wait_tol_max,
    )
    return problems


def n_grid_problems(n_grid: Any) -> list[str]:
    problems: list[str] = []
    n_min, n_max = n_grid.n_min, n_grid.n_max
    if not (_finite(n_min) and _finite(n_max)):
        problems.append("stall grid bounds must be finite")
        return problems
    if n_min != int(n_min) or n_max != int(n_max):
        problems.append("stall grid bounds must be integers")
    if n_min < 1 or n_max < 1:
        problems.append(f"n_min and n_max must be >= 1 (got {n_min} / {n_max})")
    if n_min > n_max:
        problems.append(f"n_min must be <= n_max (got {n_min} > {n_max})")
    if n_max > MAX_STALLS:
        problems.append(f"n_max must be <= {MAX_STALLS} (got {n_max})")
    return problems


def price_grid_problems(p_grid: Any) -> list[str]:
    problems: list[str] = []
    p_min, p_max, p_step = p_grid.p_min, p_grid.p_max, p_grid.p_step
    if not all(_finite(v) for v in (p_min, p_max, p_step)):
        problems.append("price grid bounds and step must be finite")
        return problems
    if p_min <= 0 or p_max <= 0:
        problems.append(f"p_min and p_max must be > 0 (got {p_min} / {p_max})")
    if p_min > p_max:
        problems.append(f"p_min must be <= p_max (got {p_min} > {p_max})")
    if p_step < PRICE_STEP_MIN:
        problems.append(f"p_step must be >= {PRICE_STEP_MIN} (got {p_step})")
    return problems


def grid_config_problems(config: Any) -> list[str]:
    """Bounds, step, replicate and threshold checks for ``GridSearchConfig``."""
    problems = n_grid_problems(config.n_grid) + price_grid_problems(config.p_grid)

    if not isinstance(config.mc_runs, int) or config.mc_runs < 1:
        problems.append(f"mc_runs must be an integer >= 1 (got {config.mc_runs})")
    if not isinstance(config.seed, int) or not 0 <= config.seed <= MAX_SEED:
        problems.append(f"seed must be a 32-bit unsigned integer (got {config.seed})")

    if config.max_drop_rate is not None:
        if not _finite(config.max_drop_rate) or not 0 <= config.max_drop_rate <= 1:
            problems.append(f"max_drop_rate must be in [0, 1] (got {config.max_drop_rate})")
    if config.max_p95_wait_min is not None:
        if not _finite(config.max_p95_wait_min) or config.max_p95_wait_min < 0:
            problems.append(f"max_p95_wait_min must be >= 0 (got {config.max_p95_wait_min})")
    return problems
