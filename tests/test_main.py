"""Tests for the CLI."""

import json

from click.testing import CliRunner

from rtmetrics.main import cli
from rtmetrics.metrics import RUNTIME_METRICS


def test_dump_prints_every_metric():
    result = CliRunner().invoke(cli, ["dump"])

    assert result.exit_code == 0, result.output
    for definition in RUNTIME_METRICS:
        assert f"# TYPE {definition.family_name()}" in result.output


def test_dump_multiple_scrapes_with_prefix():
    result = CliRunner().invoke(cli, ["--prefix", "tokio", "dump", "--count", "2"])

    assert result.exit_code == 0, result.output
    assert "# scrape 2/2" in result.output
    assert result.output.count("tokio_workers_count 4.0") == 2


def test_prefix_from_environment():
    result = CliRunner().invoke(cli, ["dump"], env={"RTMETRICS_PREFIX": "envrt"})

    assert result.exit_code == 0, result.output
    assert "envrt_total_polls_count_total" in result.output


def test_watch_jsonl():
    result = CliRunner().invoke(cli, ["--workers", "2", "watch", "--output", "jsonl",
                                      "--refresh", "0", "--max-scrapes", "3"])

    assert result.exit_code == 0, result.output
    lines = [json.loads(line) for line in result.output.splitlines()]
    assert len(lines) == 3
    assert all(line["workers_count"] == 2 for line in lines)
    assert lines[2]["total_polls_count"] >= lines[0]["total_polls_count"]


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "rtmetrics" in result.output
