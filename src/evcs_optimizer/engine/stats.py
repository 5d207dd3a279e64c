"""Small numeric helpers shared by the simulator and the aggregator."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0 for an empty sample."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def percentile(values: Sequence[float], q: float) -> float:
    """Quantile ``q`` in [0, 1] by linear interpolation between order statistics.

    Position ``(n − 1)·q`` in the sorted sample; 0 for an empty sample.
    ``percentile([1..10], 0.95) == 9.55``.
    """
    if len(values) == 0:
        return 0.0
    return float(np.quantile(np.asarray(values, dtype=np.float64), q, method="linear"))


def std_err(values: Sequence[float]) -> float:
    """Standard error of the mean: sample std (n − 1) / √n; 0 when n <= 1."""
    n = len(values)
    if n <= 1:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64), ddof=1) / np.sqrt(n))
