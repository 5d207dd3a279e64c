"""EV charging station Monte Carlo optimizer.

Estimates the profit-optimal number of stalls and price per kWh for a
charging station under stochastic, seasonal demand, finite queue capacity
and reneging customers.

Entry point: ``run_grid_search(params, config, on_progress=None)``.
"""

from evcs_optimizer.config import GridSearchConfig, NGrid, PriceGrid, StationParams
from evcs_optimizer.engine.optimizer import run_grid_search
from evcs_optimizer.errors import ConfigurationError, ParameterError, SimulationInputError
from evcs_optimizer.models import GridPointResult, GridSearchResult, SimRunKPIs

__version__ = "0.1.0"

__all__ = [
    "StationParams",
    "GridSearchConfig",
    "NGrid",
    "PriceGrid",
    "SimRunKPIs",
    "GridPointResult",
    "GridSearchResult",
    "run_grid_search",
    "SimulationInputError",
    "ConfigurationError",
    "ParameterError",
]
