"""Demand model — arrival rate, energy per session and wait tolerance.

Pure functions of (month, price, StationParams).  The sampling helpers take
the caller's :class:`~evcs_optimizer.engine.rng.RNG` so every replicate stays
reproducible.

Arrival rate per operating hour::

    λ(month, p) = base[month] × f_price(p) × f_temp(month)

where ``f_price`` is either the constant-elasticity curve
``(p / p_ref)^(−ε)`` or the clamped linear curve, selected once per
``StationParams`` via ``price_response``.
"""

from __future__ import annotations

from evcs_optimizer.config.station import StationParams
from evcs_optimizer.engine.rng import RNG
from evcs_optimizer.engine.stats import clamp

TEMP_FACTOR_MIN = 0.5
TEMP_FACTOR_MAX = 1.8

WINTER_MONTHS = frozenset({11, 0, 1})
"""Dec, Jan, Feb (0-indexed)."""

WINTER_ENERGY_BOOST = 1.08
"""Sessions draw ~8% more energy in winter (cold batteries, heating)."""

MIN_POWER_KW = 1e-6


def demand_factor_from_price(p: float, params: StationParams) -> float:
    """Multiplier on base arrivals from the price; non-increasing in ``p``."""
    if params.price_response == "linear":
        raw = 1.0 - params.price_sensitivity * (p - params.p_ref)
        return clamp(raw, params.min_demand_factor, params.max_demand_factor)
    return (p / params.p_ref) ** (-params.price_elasticity)


def demand_factor_from_temp(month: int, params: StationParams) -> float:
    """Colder than ``ref_temp_c`` → more demand (with positive sensitivity)."""
    temp = params.avg_temp_c_by_month[month]
    raw = 1.0 + params.temp_sensitivity * (params.ref_temp_c - temp)
    return clamp(raw, TEMP_FACTOR_MIN, TEMP_FACTOR_MAX)


def arrivals_rate_per_hour(month: int, p: float, params: StationParams) -> float:
    """Poisson rate of arrivals for one operating hour in ``month`` (0 = Jan)."""
    base = params.base_arrivals_per_hour_by_month[month]
    return base * demand_factor_from_price(p, params) * demand_factor_from_temp(month, params)


def sample_energy_kwh(rng: RNG, params: StationParams, month: int) -> float:
    boost = WINTER_ENERGY_BOOST if month in WINTER_MONTHS else 1.0
    x = rng.normal(params.energy_kwh_mean * boost, params.energy_kwh_std)
    return clamp(x, params.energy_kwh_min, params.energy_kwh_max)


def sample_wait_tolerance_min(rng: RNG, params: StationParams) -> float:
    x = rng.normal(params.wait_tol_mean_min, params.wait_tol_std_min)
    return clamp(x, params.wait_tol_min, params.wait_tol_max)


def service_time_hours_from_energy(energy_kwh: float, params: StationParams) -> float:
    return energy_kwh / max(MIN_POWER_KW, params.power_kw)
