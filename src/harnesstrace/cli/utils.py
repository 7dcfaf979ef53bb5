"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, model and settings loading, and component name
resolution used by every command.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import click
from rich.logging import RichHandler

from ..config import Settings, load_settings
from ..core.exceptions import LoadError, NodeNotFoundError
from ..core.model import ParsedModel
from ..core.types import NodeType

# Default location of the wiring model when -m is not given
DEFAULT_MODEL_FILE = "model.ndjson"

TYPE_COLORS: Dict[NodeType, str] = {
    NodeType.BATTERY: "red",
    NodeType.FUSE: "yellow",
    NodeType.RELAY: "magenta",
    NodeType.BUS: "red",
    NodeType.MODULE: "blue",
    NodeType.CONNECTOR: "cyan",
    NodeType.WIRE: "white",
    NodeType.GROUND_POINT: "green",
    NodeType.GROUND_PLANE: "green",
}


def echo_error(message: str) -> None:
    """
    Print an error message to stderr with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich. Quiet unless --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def load_model_or_exit(model_file: str) -> ParsedModel:
    """
    Load a wiring model, exiting with status 1 on failure.

    Args:
        model_file: Path or URL of an NDJSON model.
    """
    from ..parsing.ndjson import load_model

    if "://" not in model_file and not Path(model_file).exists():
        echo_error(f"Model file not found: {model_file}")
        click.echo("Pass the wiring model with -m/--model.", err=True)
        sys.exit(1)

    try:
        return load_model(model_file)
    except LoadError as e:
        echo_error(str(e))
        sys.exit(1)


def load_settings_or_default(config_path: Optional[str] = None) -> Settings:
    """Project settings, falling back to defaults when the file is invalid."""
    try:
        return load_settings(Path(config_path) if config_path else None)
    except LoadError as e:
        echo_warning(f"{e}; using defaults")
        return Settings()


def find_components(model: ParsedModel, name: str) -> List[str]:
    """Node IDs whose id, label or canonical id contains ``name`` (case-insensitive)."""
    needle = name.lower()
    matches = []
    for node in model.nodes_by_id.values():
        haystacks = [node.id, node.label, node.canonical_id or ""]
        if any(needle in h.lower() for h in haystacks):
            matches.append(node.id)
    return matches


def resolve_component(model: ParsedModel, name: str, label: str = "component") -> str:
    """
    Resolve a full or partial name to a node ID.

    Exact IDs win. Otherwise the first substring match is used, with a note
    when the name is ambiguous.

    Args:
        model (ParsedModel): The loaded wiring model.
        name (str): Full ID, or part of an ID, label or canonical id.
        label (str): What the name refers to, for messages.

    Returns:
        str: The resolved node ID.

    Raises:
        NodeNotFoundError: Nothing matches ``name``.
    """
    if model.has_node(name):
        return name

    matches = find_components(model, name)
    if not matches:
        raise NodeNotFoundError(name)

    if len(matches) > 1:
        click.echo(f"Ambiguous {label} '{name}'. Using first match: {matches[0]}", err=True)

    return matches[0]


def resolve_component_or_exit(model: ParsedModel, name: str, label: str = "component") -> str:
    """Like resolve_component, but print an error and exit 1 when nothing matches."""
    try:
        return resolve_component(model, name, label)
    except NodeNotFoundError as e:
        echo_error(f"No {label} found matching: {e.node_id}")
        sys.exit(1)


def styled_node(model: ParsedModel, node_id: str) -> str:
    """Node label colored by its type, with the id when they differ."""
    node = model.get_node(node_id)
    if node is None:
        return node_id
    color = TYPE_COLORS.get(node.node_type, "white")
    text = click.style(node.label, fg=color)
    if node.label != node_id:
        text += click.style(f" ({node_id})", dim=True)
    return text


def echo_path(model: ParsedModel, path: List[str], indent: str = "    ") -> None:
    """Print a node sequence as a tree branch."""
    for i, node_id in enumerate(path):
        connector = "└─" if i == len(path) - 1 else "├─"
        click.echo(f"{indent}{connector} {styled_node(model, node_id)}")
