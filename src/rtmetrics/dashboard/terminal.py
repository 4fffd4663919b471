"""Terminal views using Rich. Scrapes the registry like Prometheus would and shows what it got."""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime
from typing import Dict, Optional

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.parser import text_string_to_metric_families
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from rtmetrics import __version__
from rtmetrics.metrics import RUNTIME_METRICS, MetricKind

log = logging.getLogger(__name__)

MAX_CONSECUTIVE_ERRORS = 5


def scrape(registry: CollectorRegistry, prefix: Optional[str] = None) -> Dict[str, float]:
    """Render the registry to text, parse it back, return {metric name: value}.

    Goes through the same exposition path a real Prometheus scrape would,
    so every call consumes one interval.
    """
    text = generate_latest(registry).decode("utf-8")
    families = {family.name: family for family in text_string_to_metric_families(text)}

    values: Dict[str, float] = {}
    for definition in RUNTIME_METRICS:
        family = families.get(definition.family_name(prefix))
        if family is None or not family.samples:
            continue
        values[definition.name] = family.samples[0].value
    return values


def _format_value(kind: MetricKind, value: float) -> str:
    if kind is MetricKind.DURATION_COUNTER:
        return f"{value:,.3f}s"
    return f"{int(value):,}"


def _change(kind: MetricKind, current: float, previous: Optional[float]) -> str:
    """Counters show how much they grew, gauges show which way they moved."""
    if previous is None:
        return ""

    diff = current - previous
    if kind is MetricKind.GAUGE:
        if diff > 0:
            return f"[yellow]^ {int(diff)}[/yellow]"
        if diff < 0:
            return f"[green]v {int(-diff)}[/green]"
        return "[dim]-[/dim]"

    if diff == 0:
        return "[dim]+0[/dim]"
    if kind is MetricKind.DURATION_COUNTER:
        return f"[cyan]+{diff:.3f}s[/cyan]"
    return f"[cyan]+{int(diff):,}[/cyan]"


def build_display(
    values: Dict[str, float],
    previous: Optional[Dict[str, float]],
    source_name: str,
    scrape_count: int,
) -> Panel:
    header = Text(f"rtmetrics v{__version__}  |  {source_name}", style="bold white")
    header.append(f"\n{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}  scrape #{scrape_count}", style="dim")

    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Metric")
    table.add_column("Kind", style="dim", width=8)
    table.add_column("Value", justify="right")
    table.add_column("Change", justify="right", width=14)

    for definition in RUNTIME_METRICS:
        value = values.get(definition.name)
        if value is None:
            table.add_row(definition.name, definition.kind.prometheus_type, "[red]missing[/red]", "")
            continue
        prev = previous.get(definition.name) if previous else None
        table.add_row(
            definition.name,
            definition.kind.prometheus_type,
            _format_value(definition.kind, value),
            _change(definition.kind, value, prev),
        )

    body = Table.grid(expand=True)
    body.add_row(header)
    body.add_row(table)
    body.add_row(Text("Press Ctrl+C to stop", style="dim"))
    return Panel(body, border_style="blue")


def run_dashboard(
    registry: CollectorRegistry,
    source_name: str,
    refresh_interval: float = 2.0,
    prefix: Optional[str] = None,
):

    console = Console()

    log.info("Starting dashboard: source=%s, refresh=%.1fs", source_name, refresh_interval)
    console.print(f"\n[bold]Starting rtmetrics v{__version__}...[/bold]")
    console.print(f"Source: {source_name}")
    console.print(f"Refresh: every {refresh_interval}s\n")

    previous: Optional[Dict[str, float]] = None
    scrape_count = 0
    consecutive_errors = 0

    with Live(console=console, refresh_per_second=1, screen=True) as live:
        try:
            while True:
                try:
                    values = scrape(registry, prefix)
                    consecutive_errors = 0
                except Exception as e:
                    consecutive_errors += 1
                    log.warning("Scrape failed (attempt %d/%d): %s",
                                consecutive_errors, MAX_CONSECUTIVE_ERRORS, e)
                    if consecutive_errors >= MAX_CONSECUTIVE_ERRORS:
                        log.error("Giving up after %d failed scrapes", MAX_CONSECUTIVE_ERRORS)
                        console.print(f"\n[bold red]Giving up after {MAX_CONSECUTIVE_ERRORS} failed scrapes: {e}[/bold red]")
                        break
                    error_text = Text(f"  Scrape error (retry {consecutive_errors}/{MAX_CONSECUTIVE_ERRORS}): {e}",
                                      style="bold red")
                    live.update(Panel(error_text, border_style="red"))
                    time.sleep(refresh_interval)
                    continue

                scrape_count += 1
                live.update(build_display(values, previous, source_name, scrape_count))
                previous = values
                time.sleep(refresh_interval)
        except KeyboardInterrupt:
            pass

    console.print(f"\n[dim]Dashboard stopped after {scrape_count} scrapes.[/dim]")


def run_jsonl(
    registry: CollectorRegistry,
    source_name: str,
    refresh_interval: float = 2.0,
    prefix: Optional[str] = None,
    max_scrapes: Optional[int] = None,
    out=None,
):
    """Non-interactive output mode: prints one JSON object per scrape per line.

    For CI pipelines and log shippers where a Rich TUI isn't available.
    Stops after `max_scrapes` if given, otherwise runs until interrupted.
    """
    out = out or sys.stdout
    log.info("Starting JSONL output: source=%s, refresh=%.1fs", source_name, refresh_interval)

    scrapes = 0
    consecutive_errors = 0

    try:
        while max_scrapes is None or scrapes < max_scrapes:
            try:
                values = scrape(registry, prefix)
                consecutive_errors = 0
            except Exception as e:
                consecutive_errors += 1
                log.warning("Scrape failed (attempt %d/%d): %s",
                            consecutive_errors, MAX_CONSECUTIVE_ERRORS, e)
                if consecutive_errors >= MAX_CONSECUTIVE_ERRORS:
                    log.error("Giving up after %d failed scrapes", MAX_CONSECUTIVE_ERRORS)
                    break
                time.sleep(refresh_interval)
                continue

            scrapes += 1
            record = {"source": source_name, "scrape": scrapes}
            record.update(values)
            out.write(json.dumps(record) + "\n")
            out.flush()

            if max_scrapes is None or scrapes < max_scrapes:
                time.sleep(refresh_interval)
    except KeyboardInterrupt:
        pass

    return scrapes
