"""Pareto front of profit (maximize) vs drop rate (minimize)."""

from __future__ import annotations

import math

from evcs_optimizer.models.results import GridPointResult


def pareto_front(results: list[GridPointResult]) -> list[GridPointResult]:
    """Non-dominated points, ordered by drop rate ascending.

    Sort by drop rate (ties: higher profit first), then keep each point
    whose profit beats every point already kept.
    """
    ordered = sorted(results, key=lambda r: (r.drop_rate, -r.mean.profit))
    front: list[GridPointResult] = []
    best_profit = -math.inf
    for point in ordered:
        if point.mean.profit > best_profit:
            front.append(point)
            best_profit = point.mean.profit
    return front
