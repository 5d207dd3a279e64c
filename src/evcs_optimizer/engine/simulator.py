"""One-year discrete-event simulation of a charging station.

Time is measured in absolute *operating* hours since the start of the year
(``day × open_hours + hour``); closed hours are skipped entirely.  State is
N stall "free-at" times plus a FIFO waiting line bounded by ``q_max``.

Each operating hour:
  1. Draw a Poisson arrival count and place each arrival at a uniform
     random instant inside the hour (sorted ascending).
  2. For each arrival: drain the queue up to its timestamp, then start
     service on a free stall, join the queue, or drop (queue full).
  3. Drain the queue up to the end of the hour.

Queued cars renege once their elapsed wait exceeds their personal
tolerance; they are never served after that point.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass

from evcs_optimizer.config.station import StationParams
from evcs_optimizer.engine.demand import (
    arrivals_rate_per_hour,
    sample_energy_kwh,
    sample_wait_tolerance_min,
    service_time_hours_from_energy,
)
from evcs_optimizer.engine.rng import RNG
from evcs_optimizer.engine.stats import clamp, mean, percentile
from evcs_optimizer.models.results import SimRunKPIs

DAYS_PER_YEAR = 365
MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
"""Non-leap year."""

MONTH_BY_DAY: tuple[int, ...] = tuple(
    month for month, length in enumerate(MONTH_LENGTHS) for _ in range(length)
)
"""0-indexed month for each 0-indexed day of the year."""

P95 = 0.95


@dataclass(slots=True)
class QueuedCar:
    """A car waiting for a stall."""

    arrival_hour: float
    wait_tol_min: float
    energy_kwh: float


class StationState:
    """Mutable per-replicate state: stalls, waiting line and KPI accumulators.

    Created fresh for every simulated year and discarded afterwards.
    """

    def __init__(self, params: StationParams, n_stalls: int, price: float):
        self.params = params
        self.price = price
        self.busy_until: list[float] = [0.0] * n_stalls
        self.queue: deque[QueuedCar] = deque()

        self.revenue = 0.0
        self.energy_sold_kwh = 0.0
        self.busy_stall_hours = 0.0
        self.arrivals = 0
        self.served = 0
        self.dropped_queue_full = 0
        self.dropped_wait_tol = 0
        self.wait_times_min: list[float] = []

    # ── Stall queries (linear scans; N is small) ────────────────────────

    def free_stall_index(self, t: float) -> int:
        """Lowest-index stall free at ``t``, or −1."""
        for i, free_at in enumerate(self.busy_until):
            if free_at <= t:
                return i
        return -1

    def earliest_free_time(self) -> float:
        if not self.busy_until:
            return math.inf
        return min(self.busy_until)

    # ── Transitions ─────────────────────────────────────────────────────

    def start_service(self, stall: int, start: float, energy_kwh: float, wait_min: float) -> None:
        service_h = service_time_hours_from_energy(energy_kwh, self.params)
        self.busy_until[stall] = start + service_h

        self.busy_stall_hours += service_h
        self.energy_sold_kwh += energy_kwh
        self.revenue += energy_kwh * self.price
        self.served += 1
        self.wait_times_min.append(wait_min)

    def expire(self, t: float) -> None:
        """Remove every queued car whose wait at ``t`` exceeds its tolerance."""
        if not self.queue:
            return
        kept = deque(car for car in self.queue if (t - car.arrival_hour) * 60.0 <= car.wait_tol_min)
        self.dropped_wait_tol += len(self.queue) - len(kept)
        self.queue = kept

    def drain_queue(self, until: float) -> None:
        """Serve and expire queued cars at every stall-free event up to ``until``."""
        while self.queue:
            t_free = self.earliest_free_time()
            if t_free > until:
                break

            self.expire(t_free)

            # FCFS: freed stalls go to the front of the line.
            while self.queue:
                stall = self.free_stall_index(t_free)
                if stall < 0:
                    break
                car = self.queue.popleft()
                start = max(t_free, car.arrival_hour)
                waited_min = (start - car.arrival_hour) * 60.0
                if waited_min > car.wait_tol_min:
                    self.dropped_wait_tol += 1
                    continue
                self.start_service(stall, start, car.energy_kwh, waited_min)

        self.expire(until)

    def arrive(self, t: float, energy_kwh: float, wait_tol_min: float) -> None:
        self.arrivals += 1
        stall = self.free_stall_index(t)
        if stall >= 0:
            self.start_service(stall, t, energy_kwh, 0.0)
        elif len(self.queue) < self.params.q_max:
            self.queue.append(QueuedCar(t, wait_tol_min, energy_kwh))
        else:
            self.dropped_queue_full += 1


def simulate_year(
    params: StationParams,
    n_stalls: int,
    price: float,
    rng: RNG,
) -> SimRunKPIs:
    """Simulate ``365 × open_hours`` operating hours for one (N, p) pair.

    Parameters
    ----------
    params : StationParams
        Validated station parameters (read-only).
    n_stalls : int
        Number of stalls N.  ``0`` is accepted and yields zero utilization.
    price : float
        Price per kWh charged to customers.
    rng : RNG
        Stream owned exclusively by this replicate.

    Returns
    -------
    SimRunKPIs
        Yearly totals and service-quality statistics.
    """
    hours_per_day = params.open_hours
    total_hours = DAYS_PER_YEAR * hours_per_day

    state = StationState(params, n_stalls, price)
    rate_by_month = [arrivals_rate_per_hour(m, price, params) for m in range(len(MONTH_LENGTHS))]

    for day in range(DAYS_PER_YEAR):
        month = MONTH_BY_DAY[day]
        rate = rate_by_month[month]

        for h in range(hours_per_day):
            t_hour = day * hours_per_day + h

            k = rng.poisson(rate)
            if k:
                stamps = sorted(t_hour + rng.uniform() for _ in range(k))
                for t in stamps:
                    state.drain_queue(t)
                    energy_kwh = sample_energy_kwh(rng, params, month)
                    wait_tol_min = sample_wait_tolerance_min(rng, params)
                    state.arrive(t, energy_kwh, wait_tol_min)

            state.drain_queue(t_hour + 1)

    energy_cost = state.energy_sold_kwh * params.grid_cost_per_kwh
    fixed_cost = params.fixed_cost_per_year + params.fixed_cost_per_stall_per_year * n_stalls
    utilization = (
        clamp(state.busy_stall_hours / (n_stalls * total_hours), 0.0, 1.0)
        if n_stalls > 0 else 0.0
    )

    return SimRunKPIs(
        revenue=state.revenue,
        energy_sold_kwh=state.energy_sold_kwh,
        energy_cost=energy_cost,
        fixed_cost=fixed_cost,
        profit=state.revenue - energy_cost - fixed_cost,
        arrivals=state.arrivals,
        served=state.served,
        dropped_queue_full=state.dropped_queue_full,
        dropped_wait_tol=state.dropped_wait_tol,
        avg_wait_min=mean(state.wait_times_min),
        p95_wait_min=percentile(state.wait_times_min, P95),
        utilization=utilization,
    )
