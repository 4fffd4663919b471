"""
In-memory metric values for one collector.

A flat, fixed set of counters and gauges keyed by metric name. The key
set is decided once from RUNTIME_METRICS; only values change afterwards.
No locking here -- the owning collector serializes access.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Sequence, Tuple, Union

from rtmetrics.metrics import RUNTIME_METRICS, MetricDef, MetricKind, RuntimeSnapshot

log = logging.getLogger(__name__)

Number = Union[int, float]


class Counter:
    """Monotonically non-decreasing accumulator."""

    def __init__(self, initial: Number = 0):
        self._value = initial

    def inc_by(self, amount: Number) -> None:
        self._value += amount

    def get(self) -> Number:
        return self._value


class Gauge:
    """Signed instantaneous value."""

    def __init__(self):
        self._value = 0

    def set(self, value: int) -> None:
        self._value = value

    def get(self) -> int:
        return self._value


Metric = Union[Counter, Gauge]


def _new_metric(definition: MetricDef) -> Metric:
    if definition.kind is MetricKind.GAUGE:
        return Gauge()
    if definition.kind is MetricKind.DURATION_COUNTER:
        return Counter(0.0)
    return Counter(0)


class MetricStore:
    """Current value of every runtime metric, keyed by name in exposition order."""

    def __init__(self, definitions: Sequence[MetricDef] = RUNTIME_METRICS):
        self._definitions: Tuple[MetricDef, ...] = tuple(definitions)
        self._metrics: Dict[str, Metric] = {d.name: _new_metric(d) for d in self._definitions}

    def update(self, snapshot: RuntimeSnapshot) -> None:
        """Fold one interval into the store.

        Gauges take the snapshot value as-is (negative values included).
        Counters add the interval's delta; duration counters add it as
        fractional seconds. A negative counter delta would break
        monotonicity, so it's dropped.
        """
        for definition in self._definitions:
            raw = getattr(snapshot, definition.name)
            metric = self._metrics[definition.name]

            if definition.kind is MetricKind.GAUGE:
                metric.set(int(raw))
                continue

            if definition.kind is MetricKind.DURATION_COUNTER:
                amount = raw.total_seconds()
            else:
                amount = int(raw)

            if amount < 0:
                log.warning("Ignoring negative delta for counter %s: %s", definition.name, amount)
                continue
            metric.inc_by(amount)

    def get(self, name: str) -> Number:
        return self._metrics[name].get()

    def values(self) -> List[Tuple[MetricDef, Number]]:
        """Current values, in exposition order."""
        return [(d, self._metrics[d.name].get()) for d in self._definitions]

    @property
    def definitions(self) -> Tuple[MetricDef, ...]:
        return self._definitions

    def __iter__(self) -> Iterator[str]:
        return (d.name for d in self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._metrics
