# src/nodeagent/cli/main.py
"""
This module is the main entry point for the node-agent CLI.

It aggregates all commands from the submodules (start, once).
"""

import logging

import typer

from ..core.config import config
from . import once, start

# --- Setup Logger ---
logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="node-agent",
    help="Watch a Kubernetes node pool and hard-reboot unhealthy nodes.",
    add_completion=False,
)


def version_callback(value: bool):
    """
    Prints the version of node-agent.
    """
    if value:
        from .. import __version__

        typer.echo(f"node-agent version: {__version__}")
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of node-agent.
    """
    from .. import __version__

    typer.echo(f"node-agent version: {__version__}")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    node-agent CLI main entry point.
    """
    pass


# Register command sub-apps
app.add_typer(start.app, name="start")
app.add_typer(once.app, name="once")


if __name__ == "__main__":
    app()
