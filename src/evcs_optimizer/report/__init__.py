"""Report helpers — tabular export, Pareto front and text summary."""

from evcs_optimizer.report.export import (
    CSV_COLUMNS,
    results_to_csv,
    results_to_dataframe,
    results_to_json,
)
from evcs_optimizer.report.pareto import pareto_front
from evcs_optimizer.report.summary import NO_FEASIBLE_MESSAGE, build_summary

__all__ = [
    "CSV_COLUMNS",
    "results_to_dataframe",
    "results_to_csv",
    "results_to_json",
    "pareto_front",
    "build_summary",
    "NO_FEASIBLE_MESSAGE",
]
