"""Tests for the scrape helper and JSONL output. The Rich TUI itself isn't exercised."""

import io
import json
from datetime import timedelta

from prometheus_client import CollectorRegistry
from rich.console import Console

from rtmetrics import register
from rtmetrics.collector.mock_collector import ReplayMonitor
from rtmetrics.dashboard.terminal import build_display, run_jsonl, scrape
from rtmetrics.metrics import RUNTIME_METRICS, RuntimeSnapshot


def _registry(snapshots, prefix=None):
    registry = CollectorRegistry()
    collector = register(ReplayMonitor(snapshots), registry, prefix=prefix)
    return registry, collector


def test_scrape_returns_every_metric_by_plain_name():
    registry, collector = _registry([RuntimeSnapshot(workers_count=4, total_polls_count=100)], prefix="tokio")

    values = scrape(registry, prefix="tokio")

    assert set(values) == {d.name for d in RUNTIME_METRICS}
    assert values["workers_count"] == 4
    assert values["total_polls_count"] == 100
    assert collector.pulls == 1


def test_jsonl_writes_one_line_per_scrape():
    registry, _ = _registry([
        RuntimeSnapshot(total_polls_count=100, workers_count=4),
        RuntimeSnapshot(total_polls_count=50, workers_count=2),
    ])
    out = io.StringIO()

    scrapes = run_jsonl(registry, "test", refresh_interval=0, max_scrapes=2, out=out)

    lines = [json.loads(line) for line in out.getvalue().splitlines()]
    assert scrapes == 2
    assert [line["scrape"] for line in lines] == [1, 2]
    assert lines[1]["total_polls_count"] == 150
    assert lines[1]["workers_count"] == 2
    assert lines[0]["source"] == "test"


def test_jsonl_gives_up_after_repeated_failures():
    registry, _ = _registry([])
    out = io.StringIO()

    scrapes = run_jsonl(registry, "empty", refresh_interval=0, max_scrapes=3, out=out)

    assert scrapes == 0
    assert out.getvalue() == ""


def test_build_display_renders_changes():
    previous = {d.name: 0.0 for d in RUNTIME_METRICS}
    current = dict(previous, total_polls_count=25.0, workers_count=3.0)

    console = Console(file=io.StringIO(), width=120)
    console.print(build_display(current, previous, "test source", 2))
    rendered = console.file.getvalue()

    assert "total_polls_count" in rendered
    assert "+25" in rendered
    assert "test source" in rendered


def test_scrape_keeps_count_gauges_and_unit_suffixed_counters():
    registry, _ = _registry([RuntimeSnapshot(workers_count=6, total_noop_count=31,
                                             total_busy_duration=timedelta(seconds=1.5))], prefix="rt")

    values = scrape(registry, prefix="rt")

    assert values["workers_count"] == 6
    assert values["total_noop_count"] == 31
    assert values["total_busy_duration"] == 1.5
