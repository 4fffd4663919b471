"""
rtmetrics entry point.

Usage:
    rtmetrics serve --port 9464           Expose /metrics over HTTP
    rtmetrics dump --count 3              Print a few scrapes and exit
    rtmetrics watch                       Live terminal view
    rtmetrics watch --output jsonl        One JSON line per scrape

Every option can also come from the environment, e.g. RTMETRICS_PREFIX=tokio
or RTMETRICS_SERVE_PORT=9464.
"""

from __future__ import annotations

import logging
import time

import click
from prometheus_client import CollectorRegistry, generate_latest, start_http_server

from rtmetrics import __version__
from rtmetrics.collector.mock_collector import MockMonitor
from rtmetrics.collector.prometheus_collector import register
from rtmetrics.dashboard.terminal import run_dashboard, run_jsonl


log = logging.getLogger("rtmetrics")


def _build_registry(ctx) -> CollectorRegistry:
    """Fresh registry with one runtime collector on it."""
    registry = CollectorRegistry()
    monitor = MockMonitor(seed=ctx.obj["seed"], workers=ctx.obj["workers"])
    collector = register(monitor, registry, prefix=ctx.obj["prefix"])
    ctx.obj["source_name"] = collector.source_name
    return registry


@click.group(context_settings={"auto_envvar_prefix": "RTMETRICS"})
@click.version_option(version=__version__, prog_name="rtmetrics")
@click.option("--seed", default=42, help="Seed for the simulated runtime")
@click.option("--workers", default=4, help="Worker thread count of the simulated runtime")
@click.option("--prefix", default=None, help="Metric name prefix (e.g. tokio -> tokio_workers_count)")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx, seed: int, workers: int, prefix: str, verbose: bool):
    """rtmetrics - scheduler runtime metrics for Prometheus."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    ctx.ensure_object(dict)
    ctx.obj["seed"] = seed
    ctx.obj["workers"] = workers
    ctx.obj["prefix"] = prefix


@cli.command()
@click.option("--addr", default="0.0.0.0", help="Address to bind the metrics server to")
@click.option("--port", default=9464, help="Port for the /metrics endpoint")
@click.pass_context
def serve(ctx, addr: str, port: int):
    """Serve /metrics until interrupted. Each scrape samples one interval."""
    registry = _build_registry(ctx)
    server, thread = start_http_server(port, addr=addr, registry=registry)
    log.info("Serving %s on http://%s:%d/metrics", ctx.obj["source_name"], addr, port)
    click.echo(f"Serving metrics at http://{addr}:{port}/metrics (Ctrl+C to stop)")

    try:
        while thread.is_alive():
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()
        server.server_close()
    click.echo("Server stopped.")


@cli.command()
@click.option("--count", default=1, type=click.IntRange(min=1), help="Number of consecutive scrapes to print")
@click.pass_context
def dump(ctx, count: int):
    """Print COUNT scrapes in Prometheus text format."""
    registry = _build_registry(ctx)
    for i in range(count):
        if count > 1:
            click.echo(f"# scrape {i + 1}/{count}")
        click.echo(generate_latest(registry).decode("utf-8"), nl=False)


@cli.command()
@click.option("--refresh", default=2.0, help="Refresh interval in seconds")
@click.option("--output", type=click.Choice(["tui", "jsonl"]), default="tui",
              help="Output mode: tui (Rich dashboard) or jsonl (one JSON line per scrape)")
@click.option("--max-scrapes", default=None, type=int, help="Stop after this many scrapes (jsonl only)")
@click.pass_context
def watch(ctx, refresh: float, output: str, max_scrapes: int):
    """Scrape the collector periodically and show the results."""
    registry = _build_registry(ctx)
    source_name = ctx.obj["source_name"]
    prefix = ctx.obj["prefix"]

    if output == "jsonl":
        run_jsonl(registry, source_name, refresh_interval=refresh, prefix=prefix, max_scrapes=max_scrapes)
    else:
        run_dashboard(registry, source_name, refresh_interval=refresh, prefix=prefix)


if __name__ == "__main__":
    cli()
