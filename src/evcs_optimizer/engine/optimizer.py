"""Grid search optimizer over stall count N and price p.

Search strategy (exhaustive grid):
  1. Validate inputs (fail fast, no partial results).
  2. Enumerate N = n_min..n_max (outer) × p over the inclusive price grid (inner).
  3. For each point derive a base seed from (seed, N, p) only, and run the
     Monte Carlo aggregator.
  4. Keep the feasible point with strictly greatest mean profit; ties keep
     the first in scan order.  No feasible point → ``best is None``.

Because every point's seeds depend only on (seed, N, p, replicate), results
are bit-identical regardless of grid size, scan order or parallelism.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from concurrent.futures import ProcessPoolExecutor

from evcs_optimizer.config.grid import GridSearchConfig, PriceGrid
from evcs_optimizer.config.station import StationParams
from evcs_optimizer.engine.monte_carlo import run_monte_carlo
from evcs_optimizer.engine.rng import MASK32
from evcs_optimizer.engine.validation import validate_inputs
from evcs_optimizer.models.results import GridPointResult, GridSearchResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
StopCheck = Callable[[], bool]

N_SEED_MULTIPLIER = 374761393
P_SEED_MULTIPLIER = 668265263


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def snap_price(p: float) -> float:
    """Round to 0.001 €/kWh."""
    return _round_half_up(p * 1000.0) / 1000.0


def price_grid(p_min: float, p_max: float, p_step: float) -> list[float]:
    """Inclusive price grid, each value snapped to 0.001.

    Values are ``p_min + i × step`` (not accumulated) so float drift cannot
    add or drop an end point: 0.45..0.85 step 0.05 gives exactly 9 prices.
    """
    steps = _round_half_up((p_max - p_min) / p_step)
    return [snap_price(p_min + i * p_step) for i in range(steps + 1)]


def prices_for(p_grid: PriceGrid) -> list[float]:
    return price_grid(p_grid.p_min, p_grid.p_max, p_grid.p_step)


def count_grid_points(config: GridSearchConfig) -> int:
    n_count = config.n_grid.n_max - config.n_grid.n_min + 1
    return n_count * len(prices_for(config.p_grid))


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


def hash_seed(seed: int, n_stalls: int, price: float) -> int:
    """Avalanche-mix (seed, N, p) into an unrelated-looking 32-bit base seed."""
    price_mills = _round_half_up(price * 1000.0)
    x = (
        (seed & MASK32)
        ^ ((n_stalls * N_SEED_MULTIPLIER) & MASK32)
        ^ ((price_mills * P_SEED_MULTIPLIER) & MASK32)
    )
    x = _imul(x ^ (x >> 13), 1274126177)
    return (x ^ (x >> 16)) & MASK32


def is_feasible(point: GridPointResult, config: GridSearchConfig) -> bool:
    """Both optional service constraints hold (unset = unconstrained)."""
    if config.max_drop_rate is not None and point.drop_rate > config.max_drop_rate:
        return False
    if config.max_p95_wait_min is not None and point.mean.p95_wait_min > config.max_p95_wait_min:
        return False
    return True


def select_best(results: list[GridPointResult], config: GridSearchConfig) -> GridPointResult | None:
    """Feasible point with strictly greatest mean profit; first wins ties."""
    best: GridPointResult | None = None
    for point in results:
        if is_feasible(point, config) and (best is None or point.mean.profit > best.mean.profit):
            best = point
    return best


def evaluate_grid_point(
    params: StationParams,
    n_stalls: int,
    price: float,
    mc_runs: int,
    seed: int,
) -> GridPointResult:
    """Run the Monte Carlo aggregator for one grid cell (picklable for workers)."""
    return run_monte_carlo(params, n_stalls, price, mc_runs, hash_seed(seed, n_stalls, price))


def _grid_points(config: GridSearchConfig) -> list[tuple[int, float]]:
    prices = prices_for(config.p_grid)
    return [
        (n, p)
        for n in range(config.n_grid.n_min, config.n_grid.n_max + 1)
        for p in prices
    ]


def _iter_serial(
    params: StationParams,
    config: GridSearchConfig,
    points: list[tuple[int, float]],
) -> Iterator[GridPointResult]:
    for n, p in points:
        yield evaluate_grid_point(params, n, p, config.mc_runs, config.seed)


def run_grid_search(
    params: StationParams,
    config: GridSearchConfig,
    on_progress: ProgressCallback | None = None,
    *,
    workers: int | None = None,
    should_stop: StopCheck | None = None,
) -> GridSearchResult:
    """Evaluate every (N, p) grid point and pick the best feasible one.

    Parameters
    ----------
    params : StationParams
        Station parameters, shared read-only by every replicate.
    config : GridSearchConfig
        Grid bounds, replicate count, master seed and optional constraints.
    on_progress : callable, optional
        Called as ``on_progress(completed, total)`` after every grid point.
    workers : int, optional
        ``> 1`` evaluates grid points in that many worker processes.
        Results are consumed in scan order, so output is identical to a
        serial run.
    should_stop : callable, optional
        Polled between grid points; returning ``True`` ends the search early
        with the results computed so far.

    Returns
    -------
    GridSearchResult
        All evaluated points in scan order (N ascending, then p ascending)
        and the best feasible point, or ``None``.

    Raises
    ------
    ConfigurationError, ParameterError
        Before any simulation work, if inputs are invalid.
    """
    validate_inputs(params, config)

    points = _grid_points(config)
    total = len(points)
    logger.info(
        "Grid search: %d points (N %d..%d, %d prices) × %d replicates, workers=%s",
        total, config.n_grid.n_min, config.n_grid.n_max,
        total // (config.n_grid.n_max - config.n_grid.n_min + 1),
        config.mc_runs, workers or 1,
    )

    results: list[GridPointResult] = []
    executor: ProcessPoolExecutor | None = None
    if workers is not None and workers > 1:
        executor = ProcessPoolExecutor(max_workers=workers)
        stream: Iterator[GridPointResult] = executor.map(
            evaluate_grid_point,
            [params] * total,
            [n for n, _ in points],
            [p for _, p in points],
            [config.mc_runs] * total,
            [config.seed] * total,
        )
    else:
        stream = _iter_serial(params, config, points)

    try:
        for point in stream:
            results.append(point)
            logger.debug(
                "N=%d p=%.3f profit=%.2f drop_rate=%.4f p95=%.2f",
                point.n_stalls, point.price, point.mean.profit,
                point.drop_rate, point.mean.p95_wait_min,
            )
            if on_progress is not None:
                on_progress(len(results), total)
            if should_stop is not None and len(results) < total and should_stop():
                logger.info("Grid search stopped early after %d/%d points", len(results), total)
                break
    finally:
        if executor is not None:
            executor.shutdown(wait=True, cancel_futures=True)

    best = select_best(results, config)
    n_feasible = sum(1 for r in results if is_feasible(r, config))
    if best is None:
        logger.info("Grid search done: no feasible solution among %d points", len(results))
    else:
        logger.info(
            "Grid search done: %d/%d feasible, best N=%d p=%.3f profit=%.2f",
            n_feasible, len(results), best.n_stalls, best.price, best.mean.profit,
        )
    return GridSearchResult(results=results, best=best)
