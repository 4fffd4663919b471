"""
Monitors that don't need a live runtime.
Used for local development, demos and tests.
"""

from typing import Iterable, Iterator, List

from rtmetrics.collector.base import RuntimeMonitor
from rtmetrics.collector.intervals import TotalsMonitor
from rtmetrics.metrics import RuntimeSnapshot
from rtmetrics.mock.generator import MockRuntime


class MockMonitor(TotalsMonitor):
    """Wraps the simulated runtime as a standard monitor."""

    def __init__(self, seed: int = 42, workers: int = 4):
        super().__init__(MockRuntime(seed=seed, workers=workers))
        self._workers = workers

    def name(self) -> str:
        return f"Mock runtime ({self._workers} workers, simulated)"


class ReplayMonitor(RuntimeMonitor):
    """Replays a fixed list of snapshots, then runs dry."""

    def __init__(self, snapshots: Iterable[RuntimeSnapshot]):
        self._snapshots: List[RuntimeSnapshot] = list(snapshots)

    def intervals(self) -> Iterator[RuntimeSnapshot]:
        return iter(self._snapshots)

    def name(self) -> str:
        return f"Replay ({len(self._snapshots)} snapshots)"
