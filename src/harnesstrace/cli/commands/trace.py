"""
Trace Command - Reconstruct the circuit through one component.
"""

import click

from ..utils import (
    DEFAULT_MODEL_FILE,
    echo_info,
    echo_path,
    echo_warning,
    load_model_or_exit,
    load_settings_or_default,
    resolve_component_or_exit,
)
from ...analysis.circuit import trace as trace_circuit
from ...analysis.wiring import summarize_path


@click.command()
@click.argument("component")
@click.option("-m", "--model", "model_file", default=DEFAULT_MODEL_FILE,
              envvar="HARNESSTRACE_MODEL", help="Path or URL of the NDJSON wiring model")
@click.option("--max-hops", type=click.IntRange(min=1), default=None,
              help="Hop limit per leg (defaults to trace.max_hops)")
@click.option("--json", "as_json", is_flag=True, help="Output the traced circuit as JSON")
def trace(component: str, model_file: str, max_hops: int | None, as_json: bool) -> None:
    """
    Trace a component's circuit from power source to ground.

    Walks toward a fuse, relay, bus, module or battery on one side and a
    ground point or plane on the other, then prints both legs and the
    merged circuit.
    """
    model = load_model_or_exit(model_file)
    node_id = resolve_component_or_exit(model, component)

    hops = max_hops or load_settings_or_default().trace.max_hops
    result = trace_circuit(model, node_id, max_hops=hops)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    click.echo()
    click.echo(f"⚡ {click.style('Circuit Trace', bold=True)}: {click.style(node_id, fg='cyan')}")
    click.echo("═" * 60)

    click.echo()
    click.echo(click.style("To source:", bold=True))
    if result.source_found:
        echo_path(model, result.path_to_source)
    else:
        echo_warning(f"No power source within {hops} hops")

    click.echo()
    click.echo(click.style("To ground:", bold=True))
    if result.ground_found:
        echo_path(model, result.path_to_ground)
    else:
        echo_warning(f"No ground within {hops} hops")

    click.echo()
    click.echo(click.style(f"Complete circuit ({len(result.complete_circuit)} nodes):", bold=True))
    echo_path(model, result.complete_circuit)

    summary = summarize_path(model, result.all_highlighted)
    click.echo()
    echo_info(
        f"fuses: {summary.fuse_count}  relays: {summary.relay_count}  "
        f"connectors: {summary.connector_count}  "
        f"battery: {'yes' if summary.has_battery else 'no'}  "
        f"ground: {'yes' if summary.has_ground else 'no'}"
    )
