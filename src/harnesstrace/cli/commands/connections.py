"""
Connections Command - Components reachable from one component.
"""

import json

import click

from ..utils import (
    DEFAULT_MODEL_FILE,
    echo_path,
    load_model_or_exit,
    load_settings_or_default,
    resolve_component_or_exit,
)
from ...analysis.queries import connections_of


@click.command()
@click.argument("component")
@click.option("-m", "--model", "model_file", default=DEFAULT_MODEL_FILE,
              envvar="HARNESSTRACE_MODEL", help="Path or URL of the NDJSON wiring model")
@click.option("-d", "--depth", type=click.IntRange(min=0), default=None,
              help="Hops to expand (defaults to connections.default_depth)")
@click.option("--electrical-only", is_flag=True, help="Follow electrical relationships only")
@click.option("--json", "as_json", is_flag=True, help="Output the connections as JSON")
def connections(
    component: str,
    model_file: str,
    depth: int | None,
    electrical_only: bool,
    as_json: bool,
) -> None:
    """List components connected to COMPONENT within --depth hops."""
    model = load_model_or_exit(model_file)
    node_id = resolve_component_or_exit(model, component)

    if depth is None:
        depth = load_settings_or_default().connections.default_depth
    reached = connections_of(model, node_id, depth=depth, electrical_only=electrical_only)

    if as_json:
        click.echo(json.dumps({"component": node_id, "depth": depth, "connections": reached}, indent=2))
        return

    click.echo()
    click.echo(f"🔌 {click.style(node_id, fg='cyan', bold=True)}: "
               f"{len(reached)} connection(s) within {depth} hop(s)")
    if reached:
        echo_path(model, reached)
