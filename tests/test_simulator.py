"""Tests for engine/simulator.py — one-year queueing simulation.

Covers:
  - Calendar month mapping
  - Queue draining: FCFS assignment, reneging, hour-end expiry
  - Conservation of cars and utilization bounds
  - Cost / profit identities
  - Edge cases: zero stalls, zero queue capacity, ample capacity
  - Reproducibility per seed
"""

from __future__ import annotations

from collections import deque

import pytest

from evcs_optimizer.config.station import StationParams
from evcs_optimizer.engine.rng import RNG
from evcs_optimizer.engine.simulator import (
    DAYS_PER_YEAR,
    MONTH_BY_DAY,
    QueuedCar,
    StationState,
    simulate_year,
)


# ═══════════════════════════════════════════════════════════════════════════
# Calendar
# ═══════════════════════════════════════════════════════════════════════════

class TestCalendar:
    def test_365_days(self):
        assert len(MONTH_BY_DAY) == DAYS_PER_YEAR == 365

    @pytest.mark.parametrize("day,month", [(0, 0), (30, 0), (31, 1), (58, 1), (59, 2), (364, 11)])
    def test_month_boundaries(self, day: int, month: int):
        assert MONTH_BY_DAY[day] == month


# ═══════════════════════════════════════════════════════════════════════════
# Queue draining (hand-built states)
# ═══════════════════════════════════════════════════════════════════════════

class TestStationState:
    def test_queued_car_served_when_stall_frees(self, station: StationParams):
        state = StationState(station, n_stalls=1, price=0.5)
        state.busy_until[0] = 1.0
        state.queue.append(QueuedCar(arrival_hour=0.5, wait_tol_min=60.0, energy_kwh=50.0))

        state.drain_queue(1.5)

        assert state.served == 1
        assert state.wait_times_min == [pytest.approx(30.0)]
        assert state.busy_until[0] == pytest.approx(1.5)
        assert state.revenue == pytest.approx(25.0)
        assert not state.queue

    def test_car_reneges_before_stall_frees(self, station: StationParams):
        state = StationState(station, n_stalls=1, price=0.5)
        state.busy_until[0] = 1.0
        state.queue.append(QueuedCar(arrival_hour=0.5, wait_tol_min=10.0, energy_kwh=50.0))

        state.drain_queue(1.5)

        assert state.served == 0
        assert state.dropped_wait_tol == 1
        assert state.busy_until[0] == 1.0

    def test_expiry_without_any_stall_freeing(self, station: StationParams):
        state = StationState(station, n_stalls=1, price=0.5)
        state.busy_until[0] = 10.0
        state.queue.append(QueuedCar(arrival_hour=0.0, wait_tol_min=5.0, energy_kwh=20.0))
        state.queue.append(QueuedCar(arrival_hour=0.5, wait_tol_min=35.0, energy_kwh=20.0))

        state.drain_queue(1.0)

        assert state.dropped_wait_tol == 1
        assert [car.arrival_hour for car in state.queue] == [0.5]
        assert isinstance(state.queue, deque)

    def test_fcfs_order(self, station: StationParams):
        state = StationState(station, n_stalls=1, price=0.5)
        state.busy_until[0] = 0.2
        first = QueuedCar(arrival_hour=0.1, wait_tol_min=30.0, energy_kwh=10.0)
        second = QueuedCar(arrival_hour=0.15, wait_tol_min=30.0, energy_kwh=10.0)
        state.queue.extend([first, second])

        state.drain_queue(0.25)

        # First car starts at 0.2 for 0.1 h; second would start at 0.3 > 0.25.
        assert state.served == 1
        assert list(state.queue) == [second]
        assert state.wait_times_min == [pytest.approx(6.0)]

    def test_long_line_served_in_arrival_order(self, station: StationParams):
        state = StationState(station, n_stalls=1, price=0.5)
        state.busy_until[0] = 0.1
        for i in range(5):
            state.queue.append(QueuedCar(arrival_hour=0.01 * i, wait_tol_min=1000.0, energy_kwh=10.0))

        state.drain_queue(1.0)

        # 10 kWh at 100 kW: each session holds the stall for 0.1 h.
        assert state.served == 5
        assert state.wait_times_min == pytest.approx([6.0, 11.4, 16.8, 22.2, 27.6])
        assert not state.queue
        assert isinstance(state.queue, deque)

    def test_arrive_uses_free_stall_then_queue_then_drops(self, station: StationParams):
        tiny = station.model_copy(update={"q_max": 1})
        state = StationState(tiny, n_stalls=1, price=0.5)

        state.arrive(0.1, energy_kwh=100.0, wait_tol_min=30.0)
        state.arrive(0.2, energy_kwh=20.0, wait_tol_min=30.0)
        state.arrive(0.3, energy_kwh=20.0, wait_tol_min=30.0)

        assert state.arrivals == 3
        assert state.served == 1
        assert len(state.queue) == 1
        assert state.dropped_queue_full == 1
        assert state.wait_times_min == [0.0]

    def test_no_stalls_never_serves(self, station: StationParams):
        state = StationState(station, n_stalls=0, price=0.5)
        state.arrive(0.1, energy_kwh=20.0, wait_tol_min=1.0)
        state.drain_queue(1.0)
        assert state.served == 0
        assert state.dropped_wait_tol == 1


# ═══════════════════════════════════════════════════════════════════════════
# Full year
# ═══════════════════════════════════════════════════════════════════════════

class TestSimulateYear:
    def test_conservation(self, busy_station: StationParams):
        for seed in (1, 2, 3):
            kpi = simulate_year(busy_station, 2, 0.5, RNG(seed))
            assert kpi.arrivals > 0
            assert kpi.served <= kpi.arrivals
            assert kpi.served + kpi.dropped_queue_full + kpi.dropped_wait_tol <= kpi.arrivals

    def test_busy_station_drops_customers(self, busy_station: StationParams):
        kpi = simulate_year(busy_station, 1, 0.5, RNG(4))
        assert kpi.dropped_queue_full > 0
        assert kpi.dropped_wait_tol > 0
        assert kpi.p95_wait_min > 0

    @pytest.mark.parametrize("n_stalls", [1, 3, 10])
    def test_utilization_bounds(self, station: StationParams, n_stalls: int):
        kpi = simulate_year(station, n_stalls, 0.6, RNG(8))
        assert 0.0 <= kpi.utilization <= 1.0

    def test_zero_stalls(self, station: StationParams):
        kpi = simulate_year(station, 0, 0.6, RNG(8))
        assert kpi.utilization == 0.0
        assert kpi.served == 0
        assert kpi.revenue == 0.0
        assert kpi.fixed_cost == station.fixed_cost_per_year

    def test_cost_and_profit_identities(self, station: StationParams):
        kpi = simulate_year(station, 3, 0.55, RNG(21))
        assert kpi.energy_cost == pytest.approx(kpi.energy_sold_kwh * station.grid_cost_per_kwh)
        assert kpi.fixed_cost == pytest.approx(
            station.fixed_cost_per_year + 3 * station.fixed_cost_per_stall_per_year
        )
        assert kpi.revenue == pytest.approx(kpi.energy_sold_kwh * 0.55)
        assert kpi.profit == pytest.approx(kpi.revenue - kpi.energy_cost - kpi.fixed_cost)

    def test_zero_queue_capacity_never_reneges(self, busy_station: StationParams):
        no_queue = busy_station.model_copy(update={"q_max": 0})
        kpi = simulate_year(no_queue, 1, 0.5, RNG(5))
        assert kpi.dropped_wait_tol == 0
        assert kpi.served + kpi.dropped_queue_full == kpi.arrivals
        assert kpi.avg_wait_min == 0.0

    def test_ample_capacity_serves_everyone_immediately(self, station: StationParams):
        kpi = simulate_year(station, 50, 0.6, RNG(6))
        assert kpi.served == kpi.arrivals
        assert kpi.dropped_queue_full == 0
        assert kpi.dropped_wait_tol == 0
        assert kpi.avg_wait_min == 0.0
        assert kpi.p95_wait_min == 0.0

    def test_waits_bounded_by_tolerance(self, busy_station: StationParams):
        kpi = simulate_year(busy_station, 1, 0.5, RNG(10))
        assert kpi.p95_wait_min <= busy_station.wait_tol_max

    def test_reproducible_per_seed(self, station: StationParams):
        a = simulate_year(station, 2, 0.6, RNG(123))
        b = simulate_year(station, 2, 0.6, RNG(123))
        assert a == b

    def test_different_seeds_differ(self, station: StationParams):
        a = simulate_year(station, 2, 0.6, RNG(123))
        b = simulate_year(station, 2, 0.6, RNG(124))
        assert a != b

    def test_higher_price_fewer_arrivals_on_average(self, station: StationParams):
        cheap = sum(simulate_year(station, 2, 0.30, RNG(s)).arrivals for s in range(5))
        pricey = sum(simulate_year(station, 2, 1.20, RNG(s)).arrivals for s in range(5))
        assert pricey < cheap
