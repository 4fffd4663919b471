"""
Base monitor interface.

A monitor is anything that can hand out a stream of RuntimeSnapshots,
one per sampling interval. This keeps the Prometheus side decoupled from
where the numbers actually come from (a live runtime, the mock, a
recorded replay).
"""

from abc import ABC, abstractmethod
from typing import Iterator

from rtmetrics.metrics import RuntimeSnapshot

# Single-consumer, infinite under normal operation.
SnapshotSource = Iterator[RuntimeSnapshot]


class RuntimeMonitor(ABC):
    """Interface for all runtime snapshot sources."""

    @abstractmethod
    def intervals(self) -> SnapshotSource:
        """Start a new interval stream.

        Each call returns an independent iterator; the baseline for the
        first interval is taken when this is called.
        """
        ...

    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this source."""
        ...
