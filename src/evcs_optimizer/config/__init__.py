"""Configuration models — station parameters and grid search settings."""

from evcs_optimizer.config.station import StationParams
from evcs_optimizer.config.grid import GridSearchConfig, NGrid, PriceGrid

__all__ = [
    "StationParams",
    "NGrid",
    "PriceGrid",
    "GridSearchConfig",
]
