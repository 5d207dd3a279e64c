"""Plain-text report of a grid search run."""

from __future__ import annotations

from evcs_optimizer.config.station import StationParams
from evcs_optimizer.models.results import GridPointResult

NO_FEASIBLE_MESSAGE = "No feasible solution found. Relax constraints or expand the grid."


def build_summary(
    params: StationParams,
    best: GridPointResult | None,
    results: list[GridPointResult],
) -> str:
    """Human-readable summary of the best configuration and the assumptions used."""
    if best is None:
        return NO_FEASIBLE_MESSAGE

    n_values = [r.n_stalls for r in results] or [best.n_stalls]
    p_values = [r.price for r in results] or [best.price]

    if params.price_response == "linear":
        price_model = (
            f"linear, p_ref={params.p_ref:.2f}, sensitivity={params.price_sensitivity:.2f}, "
            f"factor in [{params.min_demand_factor:.2f}, {params.max_demand_factor:.2f}]"
        )
    else:
        price_model = f"elasticity, p_ref={params.p_ref:.2f}, ε={params.price_elasticity:.2f}"

    lines = [
        "EV Charging Station — Monte Carlo Simulation (1 year)",
        "",
        "Decision variables (grid search):",
        f"- N (stalls): {min(n_values)}..{max(n_values)}",
        f"- p (€/kWh): {min(p_values):.2f}..{max(p_values):.2f}",
        "",
        "Best configuration (max profit under constraints):",
        f"- N* = {best.n_stalls}",
        f"- p* = {best.price:.2f} €/kWh",
        "",
        "Key results (mean over Monte Carlo runs):",
        f"- Profit: {round(best.mean.profit):,} € / year (± {best.stderr_profit:,.0f} s.e.)",
        f"- Revenue: {round(best.mean.revenue):,} € / year",
        f"- Drop rate: {best.drop_rate * 100:.1f}%",
        f"- P95 wait: {best.mean.p95_wait_min:.1f} min",
        f"- Utilization: {best.mean.utilization * 100:.1f}%",
        "",
        "Model assumptions (parameters):",
        f"- Power per stall: {params.power_kw:g} kW",
        f"- Queue capacity: {params.q_max} cars",
        f"- Open hours/day: {params.open_hours}",
        f"- Grid cost: {params.grid_cost_per_kwh:.2f} €/kWh",
        f"- Fixed cost/year: {round(params.fixed_cost_per_year):,} €",
        f"- Fixed cost per stall/year: {round(params.fixed_cost_per_stall_per_year):,} €",
        "",
        "Seasonality: base arrivals/h by month (Jan..Dec):",
        "- " + ", ".join(f"{x:.2f}" for x in params.base_arrivals_per_hour_by_month[:12]),
        "Temperature (avg °C Jan..Dec):",
        "- " + ", ".join(f"{x:.1f}" for x in params.avg_temp_c_by_month[:12]),
        "",
        f"Price-demand: {price_model}",
    ]
    return "\n".join(lines)
