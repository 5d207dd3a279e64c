"""Tabular and structured export of grid search results.

One row per grid point: N, p, mean KPIs, pooled drop rate, standard errors.
"""

from __future__ import annotations

import json

import pandas as pd

from evcs_optimizer.models.results import KPI_FIELDS, GridPointResult

CSV_COLUMNS: list[tuple[str, str, int]] = [
    # (column, source, decimals)
    ("N", "n_stalls", 0),
    ("p", "price", 3),
    ("profit_mean", "mean.profit", 2),
    ("dropRate_mean", "drop_rate", 6),
    ("p95Wait_mean", "mean.p95_wait_min", 3),
    ("util_mean", "mean.utilization", 6),
    ("revenue_mean", "mean.revenue", 2),
    ("energySoldKwh_mean", "mean.energy_sold_kwh", 2),
    ("stderrProfit", "stderr_profit", 3),
    ("stderrDropRate", "stderr_drop_rate", 6),
]


def results_to_dataframe(results: list[GridPointResult]) -> pd.DataFrame:
    """Flatten results into a DataFrame (mean KPIs prefixed ``mean_``)."""
    rows = []
    for r in results:
        row = {"n_stalls": r.n_stalls, "price": r.price}
        row.update({f"mean_{name}": getattr(r.mean, name) for name in KPI_FIELDS})
        row["drop_rate"] = r.drop_rate
        row["stderr_profit"] = r.stderr_profit
        row["stderr_drop_rate"] = r.stderr_drop_rate
        rows.append(row)
    columns = (
        ["n_stalls", "price"]
        + [f"mean_{name}" for name in KPI_FIELDS]
        + ["drop_rate", "stderr_profit", "stderr_drop_rate"]
    )
    return pd.DataFrame(rows, columns=columns)


def _lookup(result: GridPointResult, path: str) -> float:
    value: object = result
    for part in path.split("."):
        value = getattr(value, part)
    return value  # type: ignore[return-value]


def results_to_csv(results: list[GridPointResult]) -> str:
    """CSV text with a fixed column set and fixed decimals per column."""
    df = pd.DataFrame(
        {col: [_lookup(r, path) for r in results] for col, path, _ in CSV_COLUMNS},
        columns=[col for col, _, _ in CSV_COLUMNS],
    )
    for col, _, decimals in CSV_COLUMNS:
        if decimals == 0:
            df[col] = df[col].astype("int64")
        else:
            df[col] = df[col].map(lambda x, d=decimals: f"{x:.{d}f}")
    return df.to_csv(index=False, lineterminator="\n").rstrip("\n")


def results_to_json(results: list[GridPointResult], indent: int = 2) -> str:
    return json.dumps([r.model_dump() for r in results], indent=indent)
