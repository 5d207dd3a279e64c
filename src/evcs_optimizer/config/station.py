"""Station parameters — physical, economic, seasonal and behavioural inputs."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from evcs_optimizer.config.rules import MAX_QUEUE, station_param_problems


class StationParams(BaseModel):
    """Everything the simulator needs to know about one charging station.

    Read-only for the duration of an optimization run.  Monthly arrays are
    indexed Jan..Dec; only the first 12 entries are used.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    # --- Physical ---
    power_kw: float = Field(default=100.0, gt=0, description="Charging power per stall (kW)")
    q_max: int = Field(default=8, ge=0, le=MAX_QUEUE, description="Max cars allowed to wait in line")
    open_hours: int = Field(default=24, ge=1, le=24, description="Operating hours per day")

    # --- Economics ---
    grid_cost_per_kwh: float = Field(default=0.20, ge=0, description="Energy purchase cost (€/kWh)")
    fixed_cost_per_stall_per_year: float = Field(
        default=4_500.0, ge=0,
        description="Per-stall CAPEX amortization + maintenance (€/year)",
    )
    fixed_cost_per_year: float = Field(default=12_000.0, ge=0, description="Rent, admin etc. (€/year)")

    # --- Seasonal demand ---
    base_arrivals_per_hour_by_month: tuple[float, ...] = Field(
        default=(1.2, 1.1, 1.0, 1.1, 1.3, 1.6, 1.8, 1.7, 1.4, 1.2, 1.1, 1.2),
        min_length=12,
        description="Baseline arrivals per operating hour, Jan..Dec (at p = p_ref, ref temperature)",
    )
    avg_temp_c_by_month: tuple[float, ...] = Field(
        default=(-1.0, 1.0, 5.0, 10.0, 15.0, 20.0, 23.0, 22.0, 17.0, 11.0, 5.0, 1.0),
        min_length=12,
        description="Average ambient temperature, Jan..Dec (°C)",
    )
    temp_sensitivity: float = Field(
        default=0.02,
        description="Relative demand change per °C below ref_temp_c",
    )
    ref_temp_c: float = Field(default=12.0, description="Temperature with neutral demand effect (°C)")

    # --- Price response ---
    p_ref: float = Field(default=0.60, gt=0, description="Reference price (€/kWh)")
    price_response: Literal["elasticity", "linear"] = Field(
        default="elasticity",
        description="'elasticity': λ(p) = λ0·(p/p_ref)^(−ε).  "
                    "'linear': clamp(1 − sensitivity·(p − p_ref), min, max).",
    )
    price_elasticity: float = Field(
        default=1.2, gt=0,
        description="Constant price elasticity ε (elasticity response only)",
    )
    price_sensitivity: float = Field(
        default=0.85, ge=0,
        description="Slope of the linear response per €/kWh (linear response only)",
    )
    min_demand_factor: float = Field(default=0.55, gt=0, description="Linear response lower clamp")
    max_demand_factor: float = Field(default=1.15, gt=0, description="Linear response upper clamp")

    # --- Energy per session (kWh) ---
    energy_kwh_mean: float = Field(default=28.0, ge=0)
    energy_kwh_std: float = Field(default=10.0, ge=0)
    energy_kwh_min: float = Field(default=8.0, ge=0)
    energy_kwh_max: float = Field(default=70.0, gt=0)

    # --- Wait tolerance (minutes) ---
    wait_tol_mean_min: float = Field(default=12.0, ge=0)
    wait_tol_std_min: float = Field(default=6.0, ge=0)
    wait_tol_min: float = Field(default=2.0, ge=0)
    wait_tol_max: float = Field(default=35.0, gt=0)

    @model_validator(mode="after")
    def _check_cross_field_rules(self) -> "StationParams":
        problems = station_param_problems(self)
        if problems:
            raise ValueError("; ".join(problems))
        return self
