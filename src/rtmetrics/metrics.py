"""
Core metric definitions for rtmetrics.

The fourteen series below mirror what a work-stealing scheduler keeps
track of internally. Names are part of the public contract -- dashboards
and alerts key on them, so don't rename.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Tuple


class MetricKind(Enum):
    GAUGE = "gauge"
    COUNTER = "counter"
    DURATION_COUNTER = "duration_counter"  # accumulates fractional seconds

    @property
    def prometheus_type(self) -> str:
        return "gauge" if self is MetricKind.GAUGE else "counter"


@dataclass(frozen=True)
class MetricDef:
    name: str
    kind: MetricKind
    description: str
    unit: Optional[str] = None

    def family_name(self, prefix: Optional[str] = None) -> str:
        """Name as it appears on the wire, minus the counter `_total` suffix."""
        name = f"{prefix}_{self.name}" if prefix else self.name
        if self.unit and not name.endswith("_" + self.unit):
            name += "_" + self.unit
        return name


# Exposition order. Do not reorder.
RUNTIME_METRICS: Tuple[MetricDef, ...] = (
    MetricDef(
        "workers_count", MetricKind.GAUGE,
        "The number of worker threads used by the runtime",
    ),
    MetricDef(
        "total_park_count", MetricKind.COUNTER,
        "The number of times worker threads parked",
    ),
    MetricDef(
        "total_noop_count", MetricKind.COUNTER,
        "The number of times worker threads unparked but performed no work before parking again",
    ),
    MetricDef(
        "total_steal_count", MetricKind.COUNTER,
        "The number of tasks worker threads stole from another worker thread",
    ),
    MetricDef(
        "total_steal_operations", MetricKind.COUNTER,
        "The number of times worker threads stole tasks from another worker thread",
    ),
    MetricDef(
        "num_remote_schedules", MetricKind.COUNTER,
        "The number of tasks scheduled from outside of the runtime",
    ),
    MetricDef(
        "total_local_schedule_count", MetricKind.COUNTER,
        "The number of tasks scheduled from worker threads",
    ),
    MetricDef(
        "total_overflow_count", MetricKind.COUNTER,
        "The number of times worker threads saturated their local queues",
    ),
    MetricDef(
        "total_polls_count", MetricKind.COUNTER,
        "The number of tasks that have been polled across all worker threads",
    ),
    MetricDef(
        "total_busy_duration", MetricKind.DURATION_COUNTER,
        "The amount of time worker threads were busy",
        unit="seconds",
    ),
    MetricDef(
        "injection_queue_depth", MetricKind.GAUGE,
        "The number of tasks currently scheduled in the runtime's injection queue",
    ),
    MetricDef(
        "total_local_queue_depth", MetricKind.GAUGE,
        "The total number of tasks currently scheduled in workers' local queues",
    ),
    MetricDef(
        "budget_forced_yield_count", MetricKind.COUNTER,
        "The number of times tasks were forced to yield back to the scheduler "
        "after exhausting their budgets",
    ),
    MetricDef(
        "io_driver_ready_count", MetricKind.COUNTER,
        "The number of ready events processed by the runtime's I/O driver",
    ),
)


@dataclass
class RuntimeSnapshot:
    """Scheduler activity over one sampling interval.

    Counter fields are deltas since the previous snapshot; gauge fields
    are the state at the moment of sampling.
    """

    # Gauges
    workers_count: int = 0
    injection_queue_depth: int = 0
    total_local_queue_depth: int = 0

    # Counters (delta since previous snapshot)
    total_park_count: int = 0
    total_noop_count: int = 0
    total_steal_count: int = 0
    total_steal_operations: int = 0
    num_remote_schedules: int = 0
    total_local_schedule_count: int = 0
    total_overflow_count: int = 0
    total_polls_count: int = 0
    total_busy_duration: timedelta = field(default_factory=timedelta)
    budget_forced_yield_count: int = 0
    io_driver_ready_count: int = 0

    # Wall time covered by this interval
    elapsed: timedelta = field(default_factory=timedelta)

    def summary(self) -> dict:
        """Return a plain dict for display or logging."""
        return {
            "workers": self.workers_count,
            "injection_queue": self.injection_queue_depth,
            "local_queues": self.total_local_queue_depth,
            "polls": self.total_polls_count,
            "steals": self.total_steal_count,
            "parks": self.total_park_count,
            "busy_s": round(self.total_busy_duration.total_seconds(), 3),
            "elapsed_s": round(self.elapsed.total_seconds(), 3),
        }


@dataclass
class RuntimeTotals:
    """Cumulative counters plus current gauges, as read from a live runtime."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    workers_count: int = 0
    injection_queue_depth: int = 0
    total_local_queue_depth: int = 0

    total_park_count: int = 0
    total_noop_count: int = 0
    total_steal_count: int = 0
    total_steal_operations: int = 0
    num_remote_schedules: int = 0
    total_local_schedule_count: int = 0
    total_overflow_count: int = 0
    total_polls_count: int = 0
    total_busy_duration: timedelta = field(default_factory=timedelta)
    budget_forced_yield_count: int = 0
    io_driver_ready_count: int = 0
