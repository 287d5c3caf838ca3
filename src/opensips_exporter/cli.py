"""Command line interface for the OpenSIPS exporter.

Example:
    $ opensips-exporter catalog
    $ opensips-exporter catalog --json
    $ opensips-exporter render statistics.yaml

Environment Variables:
    OPENSIPS_EXPORTER_CONFIG: Default configuration file path
    OPENSIPS_EXPORTER_NAMESPACE: Metric name prefix
"""

import json
import sys
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import yaml
from prometheus_client import CollectorRegistry, generate_latest
from rich.console import Console
from rich.table import Table

from opensips_exporter import create_collector
from opensips_exporter.config import ExporterConfig
from opensips_exporter.exceptions import ExporterError
from opensips_exporter.logging import LoggerManager, get_logger
from opensips_exporter.processors import build_catalogs
from opensips_exporter.statistics import snapshot_from_values

console = Console()
logger = get_logger("cli")


def _load_config(config_path: Optional[Path], namespace: Optional[str], verbose: bool) -> ExporterConfig:
    if config_path:
        config = ExporterConfig.from_file(config_path)
    else:
        config = ExporterConfig.from_env()
    if namespace:
        config.namespace = namespace
    if verbose:
        config.logging.level = "DEBUG"
    config.validate()
    return config


def _fail(ctx: click.Context, error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    if ctx.obj and ctx.obj.get("verbose"):
        import traceback
        console.print(traceback.format_exc())
    sys.exit(1)


@click.group()
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="OPENSIPS_EXPORTER_CONFIG",
    help="Path to YAML configuration file",
)
@click.option(
    "--namespace", "-n",
    default=None,
    help="Metric name prefix (default: opensips)",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], namespace: Optional[str], verbose: bool) -> None:
    """OpenSIPS exporter - OpenSIPS statistics as Prometheus metrics.

    Available Commands:
        catalog  - List every metric the exporter can produce
        render   - Render a statistics snapshot file as Prometheus text
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    try:
        config = _load_config(config_path, namespace, verbose)
    except ExporterError as e:
        _fail(ctx, e)

    manager = LoggerManager(config.logging)
    manager.configure()
    ctx.call_on_close(manager.shutdown)

    ctx.obj["config"] = config


@cli.command()
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output as JSON",
)
@click.pass_context
def catalog(ctx: click.Context, json_output: bool) -> None:
    """List every metric and the statistics it is built from."""
    config: ExporterConfig = ctx.obj["config"]

    rows: List[Dict[str, Any]] = []
    for subsystem_catalog in build_catalogs(config.namespace):
        statistics = defaultdict(list)
        for short_name in subsystem_catalog:
            entry = subsystem_catalog.get(short_name)
            statistics[entry.descriptor].append((short_name, entry.label_values))

        for descriptor in subsystem_catalog.descriptors():
            rows.append(
                {
                    "name": descriptor.exposed_name,
                    "type": descriptor.kind.value,
                    "labels": list(descriptor.label_names),
                    "statistics": {
                        f"{subsystem_catalog.subsystem}:{short_name}": list(values)
                        for short_name, values in statistics[descriptor]
                    },
                    "help": descriptor.help,
                }
            )

    if json_output:
        click.echo(json.dumps(rows, indent=2))
        return

    table = Table(title="OpenSIPS Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Labels", style="yellow")
    table.add_column("Statistics", style="white")
    table.add_column("Help", style="white")

    for row in rows:
        statistics_text = "\n".join(
            f"{name} ({', '.join(values)})" if values else name
            for name, values in row["statistics"].items()
        )
        table.add_row(
            row["name"],
            row["type"],
            ", ".join(row["labels"]) or "-",
            statistics_text,
            row["help"],
        )

    console.print(table)
    console.print(f"\n[bold]Total: {len(rows)} metric(s)[/bold]")


@cli.command()
@click.argument(
    "snapshot_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def render(ctx: click.Context, snapshot_file: Path) -> None:
    """Render a statistics snapshot as Prometheus text exposition.

    SNAPSHOT_FILE is a YAML or JSON mapping of statistic names to values:

    \b
        core:rcv_requests: 10
        core:fwd_requests: 3
        shmem:total_size: 1024
    """
    config: ExporterConfig = ctx.obj["config"]

    try:
        with open(snapshot_file, "r") as f:
            values = yaml.safe_load(f) or {}
        if not isinstance(values, dict):
            raise ExporterError(f"{snapshot_file} must contain a mapping of statistics")
        snapshot = snapshot_from_values(values)
        logger.debug(f"Loaded {len(snapshot)} statistics from {snapshot_file}")

        registry = CollectorRegistry()
        registry.register(create_collector(config, lambda: snapshot))
        output = generate_latest(registry).decode("utf-8")
    except (ExporterError, yaml.YAMLError, IOError) as e:
        _fail(ctx, e)

    click.echo(output, nl=False)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
