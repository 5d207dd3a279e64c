"""Engine — RNG, demand model, year simulator, Monte Carlo and grid search."""

from evcs_optimizer.engine.rng import RNG
from evcs_optimizer.engine.stats import clamp, mean, percentile, std_err
from evcs_optimizer.engine.demand import (
    arrivals_rate_per_hour,
    demand_factor_from_price,
    demand_factor_from_temp,
    sample_energy_kwh,
    sample_wait_tolerance_min,
    service_time_hours_from_energy,
)
from evcs_optimizer.engine.simulator import simulate_year
from evcs_optimizer.engine.monte_carlo import run_monte_carlo, replicate_seed
from evcs_optimizer.engine.optimizer import (
    count_grid_points,
    hash_seed,
    is_feasible,
    price_grid,
    run_grid_search,
)
from evcs_optimizer.engine.validation import validate_inputs

__all__ = [
    "RNG",
    "clamp",
    "mean",
    "percentile",
    "std_err",
    "demand_factor_from_price",
    "demand_factor_from_temp",
    "arrivals_rate_per_hour",
    "sample_energy_kwh",
    "sample_wait_tolerance_min",
    "service_time_hours_from_energy",
    "simulate_year",
    "run_monte_carlo",
    "replicate_seed",
    "price_grid",
    "hash_seed",
    "is_feasible",
    "count_grid_points",
    "run_grid_search",
    "validate_inputs",
]
