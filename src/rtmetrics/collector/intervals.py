"""
Interval sampling over cumulative runtime totals.

A runtime only knows its totals since startup. Prometheus counters want
the same thing, but the collector folds in deltas, so every pull here
diffs the fresh readout against the previous one.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Iterator

from rtmetrics.collector.base import RuntimeMonitor
from rtmetrics.metrics import RUNTIME_METRICS, MetricKind, RuntimeSnapshot, RuntimeTotals

log = logging.getLogger(__name__)


class RuntimeStatsReader(ABC):
    """Something that can report a runtime's cumulative totals."""

    @abstractmethod
    def read(self) -> RuntimeTotals:
        ...


def diff_totals(previous: RuntimeTotals, current: RuntimeTotals) -> RuntimeSnapshot:
    """Build the snapshot for the interval between two readouts.

    Counters that went backwards (runtime restarted under us) saturate
    at zero instead of producing a negative delta.
    """
    fields = {}
    for definition in RUNTIME_METRICS:
        now = getattr(current, definition.name)
        if definition.kind is MetricKind.GAUGE:
            fields[definition.name] = now
            continue

        delta = now - getattr(previous, definition.name)
        zero = timedelta(0) if definition.kind is MetricKind.DURATION_COUNTER else 0
        if delta < zero:
            log.debug("Counter %s went backwards, saturating delta to zero", definition.name)
            delta = zero
        fields[definition.name] = delta

    elapsed = max(timedelta(0), current.timestamp - previous.timestamp)
    return RuntimeSnapshot(elapsed=elapsed, **fields)


class TotalsMonitor(RuntimeMonitor):
    """Turns a RuntimeStatsReader into an endless stream of interval deltas."""

    def __init__(self, reader: RuntimeStatsReader, label: str = "runtime"):
        self._reader = reader
        self._label = label

    def intervals(self) -> Iterator[RuntimeSnapshot]:
        baseline = self._reader.read()
        return self._sample(baseline)

    def _sample(self, previous: RuntimeTotals) -> Iterator[RuntimeSnapshot]:
        while True:
            current = self._reader.read()
            yield diff_totals(previous, current)
            previous = current

    def name(self) -> str:
        return self._label
