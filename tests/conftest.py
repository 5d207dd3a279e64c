"""Shared test fixtures — small stations and grids that simulate quickly."""

from __future__ import annotations

import pytest

from evcs_optimizer.config import GridSearchConfig, NGrid, PriceGrid, StationParams


@pytest.fixture
def station() -> StationParams:
    """Reference station with a short operating day (2 h) for fast years."""
    return StationParams(
        power_kw=100.0,
        q_max=8,
        open_hours=2,
        grid_cost_per_kwh=0.20,
        fixed_cost_per_stall_per_year=4_500.0,
        fixed_cost_per_year=12_000.0,
        base_arrivals_per_hour_by_month=(1.2, 1.1, 1.0, 1.1, 1.3, 1.6, 1.8, 1.7, 1.4, 1.2, 1.1, 1.2),
        avg_temp_c_by_month=(-1, 1, 5, 10, 15, 20, 23, 22, 17, 11, 5, 1),
        temp_sensitivity=0.02,
        ref_temp_c=12.0,
        p_ref=0.60,
        price_elasticity=1.2,
        energy_kwh_mean=28.0,
        energy_kwh_std=10.0,
        energy_kwh_min=8.0,
        energy_kwh_max=70.0,
        wait_tol_mean_min=12.0,
        wait_tol_std_min=6.0,
        wait_tol_min=2.0,
        wait_tol_max=35.0,
    )


@pytest.fixture
def busy_station(station: StationParams) -> StationParams:
    """Heavily loaded station: slow chargers, high demand, short queue."""
    return station.model_copy(update={
        "power_kw": 22.0,
        "q_max": 2,
        "base_arrivals_per_hour_by_month": (3.0,) * 12,
    })


@pytest.fixture
def small_grid() -> GridSearchConfig:
    """2 stall counts × 3 prices × 3 replicates."""
    return GridSearchConfig(
        n_grid=NGrid(n_min=1, n_max=2),
        p_grid=PriceGrid(p_min=0.45, p_max=0.65, p_step=0.10),
        mc_runs=3,
        seed=12345,
    )
