"""
Prometheus collector for scheduler runtime metrics.

Every scrape pulls exactly one interval from the monitor, folds it into
the running totals and hands back the fourteen metric families. Scrapes
can arrive on several threads at once (the HTTP exposition server runs
one thread per request), so pulling from the interval stream is
serialized -- each interval gets counted once, none get skipped.

Usage:

    registry = CollectorRegistry()
    register(MockMonitor(), registry, prefix="runtime")
    print(generate_latest(registry).decode())
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector, CollectorRegistry

from rtmetrics.collector.base import RuntimeMonitor
from rtmetrics.metric_store import MetricStore, Number
from rtmetrics.metrics import MetricDef, MetricKind

log = logging.getLogger(__name__)


class SourceExhaustedError(RuntimeError):
    """The interval stream ended. Monitors are supposed to be infinite."""


def _family(definition: MetricDef, prefix: Optional[str], value: Optional[Number]) -> Metric:
    name = definition.family_name(prefix)
    if definition.kind is MetricKind.GAUGE:
        return GaugeMetricFamily(name, definition.description, value=value)
    return CounterMetricFamily(
        name,
        definition.description,
        value=value,
        unit=definition.unit or "",
    )


class RuntimeCollector(Collector):

    def __init__(self, monitor: RuntimeMonitor, prefix: Optional[str] = None):
        self._source_name = monitor.name()
        self._intervals = monitor.intervals()
        self._lock = threading.Lock()
        self._metrics = MetricStore()
        self._prefix = prefix
        self._pulls = 0

    @property
    def source_name(self) -> str:
        return self._source_name

    @property
    def pulls(self) -> int:
        """How many intervals have been consumed so far."""
        return self._pulls

    def collect(self) -> List[Metric]:
        # Pull, fold and read under one lock so a scrape always renders
        # its own interval on top of everything before it. Encoding the
        # families to text happens in the registry, outside the lock.
        with self._lock:
            try:
                interval = next(self._intervals)
            except StopIteration:
                log.critical(
                    "Interval stream from %s is exhausted after %d pulls",
                    self._source_name, self._pulls,
                )
                raise SourceExhaustedError(
                    f"{self._source_name} stopped producing intervals"
                ) from None

            self._pulls += 1
            self._metrics.update(interval)
            values = self._metrics.values()

        log.debug("Pulled interval %d from %s: %s", self._pulls, self._source_name, interval.summary())
        return [_family(definition, self._prefix, value) for definition, value in values]

    def describe(self) -> List[Metric]:
        """Families without samples. Doesn't touch the interval stream."""
        return [_family(definition, self._prefix, None) for definition in self._metrics.definitions]


def register(
    monitor: RuntimeMonitor,
    registry: CollectorRegistry,
    prefix: Optional[str] = None,
) -> RuntimeCollector:
    """Register a RuntimeCollector for `monitor` with a Prometheus registry.

    Pass prefix="tokio" (or similar) to namespace the series, e.g.
    tokio_workers_count. Returns the collector so callers can
    unregister it later.
    """
    collector = RuntimeCollector(monitor, prefix=prefix)
    registry.register(collector)
    log.info("Registered runtime collector for %s (prefix=%s)", collector.source_name, prefix)
    return collector
