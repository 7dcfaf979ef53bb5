"""
Stats Command - Summary counts for a wiring model.
"""

import json
from dataclasses import asdict

import click
from rich.console import Console
from rich.table import Table

from ..utils import DEFAULT_MODEL_FILE, echo_warning, load_model_or_exit

console = Console()


@click.command()
@click.option("-m", "--model", "model_file", default=DEFAULT_MODEL_FILE,
              envvar="HARNESSTRACE_MODEL", help="Path or URL of the NDJSON wiring model")
@click.option("--json", "as_json", is_flag=True, help="Output statistics as JSON")
def stats(model_file: str, as_json: bool) -> None:
    """Show node, edge and parse statistics for a model."""
    model = load_model_or_exit(model_file)
    graph_stats = model.graph.get_stats()
    parse_stats = asdict(model.stats) if model.stats else {}

    if as_json:
        click.echo(json.dumps({"graph": graph_stats, "parse": parse_stats}, indent=2))
        return

    click.echo()
    click.echo(f"📊 {click.style('Model Statistics', bold=True)}")
    if model.metadata and model.metadata.get("model"):
        click.echo(f"   {model.metadata['model']}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Nodes", str(graph_stats["total_nodes"]))
    table.add_row("Edges", str(graph_stats["total_edges"]))
    table.add_row("Electrical edges", str(graph_stats["electrical_edges"]))
    table.add_row("Zones", str(len(model.zones)))
    table.add_row("Orphans", str(graph_stats["orphans"]))
    console.print(table)

    types = Table(title="Nodes by type")
    types.add_column("Type", style="cyan")
    types.add_column("Count", justify="right")
    for node_type, count in sorted(graph_stats["nodes_by_type"].items()):
        types.add_row(node_type, str(count))
    console.print(types)

    if parse_stats.get("skipped_lines"):
        echo_warning(f"{parse_stats['skipped_lines']} line(s) skipped while parsing")
    if parse_stats.get("dangling_edges"):
        echo_warning(f"{parse_stats['dangling_edges']} edge(s) reference unknown nodes")
    if parse_stats.get("duplicate_ids"):
        echo_warning(f"{parse_stats['duplicate_ids']} duplicate node id(s) overwritten")
