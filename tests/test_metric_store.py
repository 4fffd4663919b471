"""Tests for the in-memory metric store."""

from datetime import timedelta

import pytest

from rtmetrics.metric_store import MetricStore
from rtmetrics.metrics import RUNTIME_METRICS, RuntimeSnapshot

EXPECTED_ORDER = [
    "workers_count",
    "total_park_count",
    "total_noop_count",
    "total_steal_count",
    "total_steal_operations",
    "num_remote_schedules",
    "total_local_schedule_count",
    "total_overflow_count",
    "total_polls_count",
    "total_busy_duration",
    "injection_queue_depth",
    "total_local_queue_depth",
    "budget_forced_yield_count",
    "io_driver_ready_count",
]


def test_fourteen_metrics_in_fixed_order():
    store = MetricStore()
    assert len(store) == 14
    assert list(store) == EXPECTED_ORDER
    assert [d.name for d, _ in store.values()] == EXPECTED_ORDER


def test_everything_starts_at_zero():
    store = MetricStore()
    assert all(value == 0 for _, value in store.values())
    assert isinstance(store.get("total_busy_duration"), float)


def test_counters_accumulate():
    store = MetricStore()
    store.update(RuntimeSnapshot(total_polls_count=100, total_park_count=3))
    store.update(RuntimeSnapshot(total_polls_count=50, total_park_count=0))

    assert store.get("total_polls_count") == 150
    assert store.get("total_park_count") == 3


def test_gauges_overwrite():
    store = MetricStore()
    store.update(RuntimeSnapshot(workers_count=4, injection_queue_depth=12))
    store.update(RuntimeSnapshot(workers_count=2, injection_queue_depth=0))

    assert store.get("workers_count") == 2
    assert store.get("injection_queue_depth") == 0


def test_duration_counter_adds_seconds():
    store = MetricStore()
    store.update(RuntimeSnapshot(total_busy_duration=timedelta(milliseconds=1500)))
    store.update(RuntimeSnapshot(total_busy_duration=timedelta(milliseconds=250)))

    assert store.get("total_busy_duration") == pytest.approx(1.75)


def test_negative_gauge_passes_through():
    store = MetricStore()
    store.update(RuntimeSnapshot(total_local_queue_depth=-3))
    assert store.get("total_local_queue_depth") == -3


def test_negative_counter_delta_is_ignored():
    store = MetricStore()
    store.update(RuntimeSnapshot(total_steal_count=10))
    store.update(RuntimeSnapshot(total_steal_count=-4, total_busy_duration=timedelta(seconds=-1)))

    assert store.get("total_steal_count") == 10
    assert store.get("total_busy_duration") == 0.0


def test_unknown_metric_raises():
    store = MetricStore()
    assert "total_polls_count" in store
    assert "nope" not in store
    with pytest.raises(KeyError):
        store.get("nope")


def test_custom_definition_subset():
    store = MetricStore(RUNTIME_METRICS[:2])
    store.update(RuntimeSnapshot(workers_count=8, total_park_count=5, total_polls_count=99))

    assert list(store) == ["workers_count", "total_park_count"]
    assert store.get("total_park_count") == 5
