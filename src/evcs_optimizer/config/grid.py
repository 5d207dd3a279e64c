"""Grid search configuration — enumeration space and feasibility filter."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from evcs_optimizer.config.rules import (
    MAX_SEED,
    MAX_STALLS,
    PRICE_STEP_MIN,
    grid_config_problems,
    n_grid_problems,
    price_grid_problems,
)


class NGrid(BaseModel):
    """Inclusive range of stall counts."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    n_min: int = Field(default=1, ge=1, le=MAX_STALLS)
    n_max: int = Field(default=8, ge=1, le=MAX_STALLS)

    @model_validator(mode="after")
    def _check_order(self) -> "NGrid":
        problems = n_grid_problems(self)
        if problems:
            raise ValueError("; ".join(problems))
        return self


class PriceGrid(BaseModel):
    """Inclusive price grid ``p_min, p_min + p_step, …, p_max`` (€/kWh)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    p_min: float = Field(default=0.45, gt=0)
    p_max: float = Field(default=0.85, gt=0)
    p_step: float = Field(
        default=0.05, ge=PRICE_STEP_MIN,
        description="Grid step; prices are snapped to 0.001 €/kWh",
    )

    @model_validator(mode="after")
    def _check_order(self) -> "PriceGrid":
        problems = price_grid_problems(self)
        if problems:
            raise ValueError("; ".join(problems))
        return self


class GridSearchConfig(BaseModel):
    """Settings for one optimization run.

    ``None`` thresholds mean "unconstrained" and are distinct from ``0``.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    n_grid: NGrid = Field(default_factory=NGrid)
    p_grid: PriceGrid = Field(default_factory=PriceGrid)
    mc_runs: int = Field(
        default=120, ge=1, le=10_000,
        description="Monte Carlo replicates per (N, p) grid point",
    )
    seed: int = Field(default=12345, ge=0, le=MAX_SEED, description="32-bit master seed")

    max_drop_rate: float | None = Field(
        default=None, ge=0, le=1.0,
        description="Feasibility: pooled drop rate must not exceed this. None = unconstrained.",
    )
    max_p95_wait_min: float | None = Field(
        default=None, ge=0,
        description="Feasibility: mean P95 wait (minutes) must not exceed this. None = unconstrained.",
    )

    @model_validator(mode="after")
    def _check_rules(self) -> "GridSearchConfig":
        problems = grid_config_problems(self)
        if problems:
            raise ValueError("; ".join(problems))
        return self
