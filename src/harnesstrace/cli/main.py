"""
harnesstrace CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import connections, path, stats, trace, zone
from .utils import configure_logging


@click.group()
@click.version_option(package_name="harnesstrace")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """harnesstrace: Circuit tracing for vehicle wiring models.

    Loads an NDJSON wiring model and answers questions about it:
    where a component draws power from, where it is grounded, and
    what it is connected to.

    \b
    Quick Start:
      harnesstrace stats -m harness.ndjson
      harnesstrace trace W1 -m harness.ndjson
      harnesstrace connections F1 --depth 2 -m harness.ndjson
    """
    configure_logging(verbose)


# Register commands
main.add_command(trace.trace)
main.add_command(path.path)
main.add_command(connections.connections)
main.add_command(zone.zone)
main.add_command(stats.stats)

if __name__ == "__main__":
    main()
