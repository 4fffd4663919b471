"""
Mock scheduler runtime.

Produces fake but plausible cumulative totals so we can develop and test
without instrumenting a real thread pool. Numbers are loosely based on a
small work-stealing pool serving a mix of I/O-bound tasks.
"""

import math
import random
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from rtmetrics.collector.intervals import RuntimeStatsReader
from rtmetrics.metrics import RuntimeTotals

# Each read() advances the simulation by this much wall time
TICK = timedelta(seconds=1)


class MockRuntime(RuntimeStatsReader):

    def __init__(self, seed: int = 42, workers: int = 4):
        self._rng = random.Random(seed)
        self._tick = 0
        self._workers = workers
        self._clock = datetime.now(timezone.utc)
        self._totals = RuntimeTotals(timestamp=self._clock, workers_count=workers)

    def read(self) -> RuntimeTotals:
        """Advance one tick and return the cumulative totals so far."""
        self._tick += 1
        self._clock += TICK
        t = self._tick
        totals = self._totals

        # Sinusoidal base load with occasional bursts from outside the pool
        base_load = 200 + 150 * math.sin(t * 0.05)
        burst = self._rng.randint(100, 400) if self._rng.random() > 0.9 else 0
        remote = max(0, int(base_load * 0.3 + burst + self._rng.gauss(0, 10)))
        local = max(0, int(base_load * 0.7 + self._rng.gauss(0, 15)))

        # Anything that didn't fit in a local queue spills to the injection queue
        local_capacity = 64 * self._workers
        overflow = max(0, local - local_capacity) // 32 + (1 if burst and self._rng.random() > 0.5 else 0)

        # Idle workers steal; the busier the pool, the less there is to gain
        utilization = min(1.0, (remote + local) / (120.0 * self._workers))
        steal_ops = int((1 - utilization) * self._workers * self._rng.uniform(2, 6))
        stolen = steal_ops * self._rng.randint(1, 4)

        parks = int((1 - utilization) * self._workers * self._rng.uniform(5, 15)) + 1
        noops = int(parks * self._rng.uniform(0.05, 0.25))

        # Tasks get polled more than once on average (wakeups after I/O)
        polls = int((remote + local) * self._rng.uniform(1.2, 1.8))
        io_ready = int(polls * self._rng.uniform(0.3, 0.6))
        forced_yields = int(polls * 0.002 * self._rng.uniform(0.5, 1.5))

        busy = TICK * self._workers * max(0.02, min(0.99, utilization + self._rng.gauss(0, 0.03)))

        totals.timestamp = self._clock
        totals.workers_count = self._workers
        totals.total_park_count += parks
        totals.total_noop_count += noops
        totals.total_steal_count += stolen
        totals.total_steal_operations += steal_ops
        totals.num_remote_schedules += remote
        totals.total_local_schedule_count += local
        totals.total_overflow_count += overflow
        totals.total_polls_count += polls
        totals.total_busy_duration += busy
        totals.budget_forced_yield_count += forced_yields
        totals.io_driver_ready_count += io_ready

        # Queues drain most of what arrived; whatever's left is current depth
        totals.injection_queue_depth = max(0, int(remote * (1 - utilization) * 0.1 + burst * 0.5))
        totals.total_local_queue_depth = max(0, int(local * utilization * 0.2 + self._rng.gauss(0, 3)))

        # Hand out a copy so callers can't see later ticks mutate it
        return replace(totals)
