# src/nodeagent/cli/utils.py
"""Options and helpers shared by the CLI commands."""

import logging
from typing import List, Optional

import typer
from typing_extensions import Annotated

from ..core.config import WatcherConfig, config
from ..core.exceptions import ConfigurationError
from ..models.remediation import OutcomeKind, RemediationOutcome

logger = logging.getLogger(__name__)

ClusterIdOption = Annotated[Optional[str], typer.Option("--cluster-id", help="Civo cluster ID [env: CIVO_CLUSTER_ID].")]
NodePoolIdOption = Annotated[
    Optional[str], typer.Option("--node-pool-id", help="Node pool to watch [env: CIVO_NODE_POOL_ID].")
]
RegionOption = Annotated[Optional[str], typer.Option("--region", help="Civo region [env: CIVO_REGION].")]
ApiUrlOption = Annotated[Optional[str], typer.Option("--api-url", help="Civo API URL [env: CIVO_API_URL].")]
DesiredGpuCountOption = Annotated[
    Optional[str],
    typer.Option(
        "--desired-gpu-count",
        help="Exact allocatable GPU count of a healthy node, 0 disables the check [env: CIVO_NODE_DESIRED_GPU_COUNT].",
    ),
]
RebootWindowOption = Annotated[
    Optional[str],
    typer.Option(
        "--reboot-time-window",
        help="Minutes since the last Ready transition before a reboot is allowed "
        "[env: CIVO_NODE_REBOOT_TIME_WINDOW_MINUTES].",
    ),
]
KubeconfigOption = Annotated[
    Optional[str], typer.Option("--kubeconfig", help="Kubeconfig path; in-cluster config when unset [env: KUBECONFIG].")
]


def build_watcher_config(**overrides) -> WatcherConfig:
    """Resolves the engine configuration, exiting with code 1 when it is invalid."""
    try:
        return config.watcher_config(**overrides)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def format_outcomes(outcomes: List[RemediationOutcome]) -> str:
    """Renders tick outcomes as an aligned plain-text table."""
    if not outcomes:
        return "No nodes found in the node pool."

    width = max(len("NODE"), *(len(o.node_name) for o in outcomes))
    lines = [f"{'NODE':<{width}}  {'OUTCOME':<9}  DETAIL"]
    for outcome in outcomes:
        if outcome.kind == OutcomeKind.SUCCEEDED:
            detail = f"rebooting instance {outcome.instance_id}"
        elif outcome.kind == OutcomeKind.FAILED:
            detail = outcome.error
        else:
            detail = outcome.reason
        lines.append(f"{outcome.node_name:<{width}}  {outcome.kind.value:<9}  {detail}")
    return "\n".join(lines)
