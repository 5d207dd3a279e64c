"""Fail-fast input checks run by the optimizer before any simulation work.

The pydantic models already enforce these rules at construction time; the
engine re-checks so that objects built with ``model_construct`` (or by
hosts that skip validation) are rejected with a single descriptive error.
"""

from __future__ import annotations

from evcs_optimizer.config.grid import GridSearchConfig
from evcs_optimizer.config.rules import grid_config_problems, station_param_problems
from evcs_optimizer.config.station import StationParams
from evcs_optimizer.errors import ConfigurationError, ParameterError


def validate_grid_config(config: GridSearchConfig) -> None:
    problems = grid_config_problems(config)
    if problems:
        raise ConfigurationError(problems)


def validate_station_params(params: StationParams) -> None:
    problems = station_param_problems(params)
    if problems:
        raise ParameterError(problems)


def validate_inputs(params: StationParams, config: GridSearchConfig) -> None:
    """Configuration is checked first, then station parameters."""
    validate_grid_config(config)
    validate_station_params(params)
