# src/nodeagent/cli/once.py
"""
One-shot command: run a single reconciliation tick and print what happened
to each node. With --dry-run nothing is rebooted and no API key is needed.
"""

import asyncio
import logging
from typing import List

import typer
from typing_extensions import Annotated

from ..core.exceptions import NodeAgentError, RemediationFailure
from ..core.factory import close_reconciler, get_reconciler
from ..core.reconciler import Reconciler
from ..models.remediation import RemediationOutcome
from .utils import (
    ApiUrlOption,
    ClusterIdOption,
    DesiredGpuCountOption,
    KubeconfigOption,
    NodePoolIdOption,
    RebootWindowOption,
    RegionOption,
    build_watcher_config,
    format_outcomes,
)

logger = logging.getLogger(__name__)

app = typer.Typer(name="once", help="Run a single reconciliation tick.")


async def _async_once(reconciler: Reconciler) -> List[RemediationOutcome]:
    try:
        await reconciler.node_source.connect()
        return await reconciler.run_once()
    finally:
        await close_reconciler(reconciler)


@app.callback(invoke_without_command=True)
def once(
    ctx: typer.Context,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Evaluate nodes without rebooting anything.")] = False,
    cluster_id: ClusterIdOption = None,
    node_pool_id: NodePoolIdOption = None,
    region: RegionOption = None,
    api_url: ApiUrlOption = None,
    desired_gpu_count: DesiredGpuCountOption = None,
    reboot_time_window: RebootWindowOption = None,
    kubeconfig: KubeconfigOption = None,
) -> None:
    """
    Evaluate every node of the pool once and remediate the unhealthy ones.
    """
    if ctx.invoked_subcommand is not None:
        return

    watcher_config = build_watcher_config(
        cluster_id=cluster_id,
        node_pool_id=node_pool_id,
        region=region,
        api_url=api_url,
        desired_gpu_count=desired_gpu_count,
        reboot_cooldown=reboot_time_window,
        kubeconfig=kubeconfig,
    )

    try:
        reconciler = get_reconciler(watcher_config, dry_run=dry_run)
        outcomes = asyncio.run(_async_once(reconciler))
    except RemediationFailure as e:
        typer.echo(format_outcomes([*e.outcomes, RemediationOutcome.failed(e.node_name, e)]), err=True)
        raise typer.Exit(code=1)
    except NodeAgentError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_outcomes(outcomes))
