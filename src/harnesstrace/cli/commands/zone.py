"""
Zone Command - Components grouped by physical zone.
"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ..utils import DEFAULT_MODEL_FILE, echo_warning, load_model_or_exit
from ...analysis.queries import nodes_in_zone

console = Console()


@click.command()
@click.argument("zone_name", required=False)
@click.option("-m", "--model", "model_file", default=DEFAULT_MODEL_FILE,
              envvar="HARNESSTRACE_MODEL", help="Path or URL of the NDJSON wiring model")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def zone(zone_name: Optional[str], model_file: str, as_json: bool) -> None:
    """
    List the components in ZONE_NAME, or every zone with its size.
    """
    model = load_model_or_exit(model_file)

    if zone_name is None:
        counts = {z: len(nodes) for z, nodes in model.by_zone.items()}
        if as_json:
            click.echo(json.dumps(counts, indent=2))
            return
        table = Table(title="Zones")
        table.add_column("Zone", style="cyan")
        table.add_column("Components", justify="right")
        for z, count in sorted(counts.items()):
            table.add_row(z, str(count))
        console.print(table)
        return

    nodes = nodes_in_zone(model, zone_name)
    if as_json:
        click.echo(json.dumps([n.model_dump(mode="json") for n in nodes], indent=2))
        return

    if not nodes:
        echo_warning(f"No components in zone '{zone_name}'")
        return

    table = Table(title=f"Zone: {zone_name}")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Position", style="dim")
    for node in nodes:
        pos = ", ".join(f"{c:.2f}" for c in node.anchor_xyz) if node.anchor_xyz else "-"
        table.add_row(node.id, node.node_type.value, pos)
    console.print(table)
