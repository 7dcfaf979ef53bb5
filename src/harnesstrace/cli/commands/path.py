"""
Path Command - Shortest connection between two components.
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
from ...analysis.queries import shortest_path


@click.command()
@click.argument("source")
@click.argument("target")
@click.option("-m", "--model", "model_file", default=DEFAULT_MODEL_FILE,
              envvar="HARNESSTRACE_MODEL", help="Path or URL of the NDJSON wiring model")
@click.option("--max-hops", type=click.IntRange(min=1), default=None,
              help="Hop limit (defaults to path.max_hops)")
@click.option("--json", "as_json", is_flag=True, help="Output the path as JSON")
def path(source: str, target: str, model_file: str, max_hops: int | None, as_json: bool) -> None:
    """
    Find the shortest path between two components.

    Ignores edge direction and type; use 'trace' for a source-to-ground
    circuit.
    """
    model = load_model_or_exit(model_file)

    source_id = resolve_component_or_exit(model, source, "source")
    target_id = resolve_component_or_exit(model, target, "target")

    hops = max_hops or load_settings_or_default().path.max_hops
    found = shortest_path(model, source_id, target_id, max_hops=hops)

    if as_json:
        click.echo(json.dumps({"from": source_id, "to": target_id, "path": found}, indent=2))
        return

    if not found:
        click.echo()
        click.echo(click.style("No path found", fg="yellow") + f" within {hops} hops between:")
        click.echo(f"  Source: {source_id}")
        click.echo(f"  Target: {target_id}")
        return

    click.echo()
    click.echo(f"🔗 {click.style('Shortest Path', bold=True)} ({len(found) - 1} hops)")
    click.echo("═" * 60)
    echo_path(model, found)
