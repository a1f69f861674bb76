# src/nodeagent/cli/start.py
"""
Start command for the node-agent CLI.

Runs the reconciliation loop until SIGINT or SIGTERM, optionally serving
the status endpoint next to it.
"""

import asyncio
import logging
import signal
from typing import Optional

import typer
from typing_extensions import Annotated

from ..api.app import create_server
from ..api.dependencies import register
from ..core.config import WatcherConfig, config
from ..core.exceptions import ConfigurationError, NodeAgentError
from ..core.factory import close_reconciler, get_reconciler
from ..core.reconciler import Reconciler
from ..core.scheduler import Scheduler
from ..models.remediation import OutcomeKind
from .utils import (
    ApiUrlOption,
    ClusterIdOption,
    DesiredGpuCountOption,
    KubeconfigOption,
    NodePoolIdOption,
    RebootWindowOption,
    RegionOption,
    build_watcher_config,
)

logger = logging.getLogger(__name__)

app = typer.Typer(name="start", help="Start the node-agent reconciliation loop.")


def make_reconcile_job(reconciler: Reconciler):
    """Wraps one reconciliation tick as a scheduler job."""

    async def reconcile():
        logger.info("Started the watcher process...")
        outcomes = await reconciler.run_once()
        rebooted = [o.node_name for o in outcomes if o.kind == OutcomeKind.SUCCEEDED]
        logger.info(f"Tick finished: {len(outcomes)} node(s) evaluated, {len(rebooted)} rebooted.")

    return reconcile


async def _async_start(
    watcher_config: WatcherConfig, reconciler: Reconciler, health_host: str, health_port: int
) -> None:
    try:
        await reconciler.node_source.connect()
    except NodeAgentError:
        await close_reconciler(reconciler)
        raise

    scheduler = Scheduler()
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _request_shutdown(signum):
        logger.info(f"🛑 Received {signal.Signals(signum).name}, initiating graceful shutdown...")
        stop_event.set()

    handled_signals = []
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, _request_shutdown, signum)
            handled_signals.append(signum)
        except (NotImplementedError, RuntimeError):
            # Signal handlers are unavailable outside the main thread and on Windows.
            logger.debug(f"Could not install handler for {signum}.")

    scheduler.add_job(
        make_reconcile_job(reconciler),
        interval_seconds=watcher_config.tick_interval.total_seconds(),
        name="reconcile",
    )

    waiters = {asyncio.create_task(stop_event.wait())}
    server = None
    if health_port > 0:
        register(scheduler, watcher_config)
        server = create_server(health_host, health_port)
        waiters.add(asyncio.create_task(server.serve()))

    logger.info("node-agent is running. Press CTRL+C to exit.")
    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        await scheduler.stop()
        if server is not None:
            server.should_exit = True
        for waiter in waiters:
            if not waiter.done():
                waiter.cancel()
        await asyncio.gather(*waiters, return_exceptions=True)
        await close_reconciler(reconciler)
        for signum in handled_signals:
            loop.remove_signal_handler(signum)
        logger.info("🛑 node-agent stopped.")


@app.callback(invoke_without_command=True)
def start(
    ctx: typer.Context,
    cluster_id: ClusterIdOption = None,
    node_pool_id: NodePoolIdOption = None,
    region: RegionOption = None,
    api_url: ApiUrlOption = None,
    desired_gpu_count: DesiredGpuCountOption = None,
    reboot_time_window: RebootWindowOption = None,
    kubeconfig: KubeconfigOption = None,
    interval: Annotated[
        Optional[str], typer.Option("--interval", help="Tick interval, e.g. '10s' [env: NODE_AGENT_TICK_INTERVAL].")
    ] = None,
    health_port: Annotated[
        Optional[int], typer.Option("--health-port", help="Serve the status endpoint on this port, 0 disables it.")
    ] = None,
) -> None:
    """
    Watch the node pool and reboot unhealthy nodes until interrupted.
    """
    if ctx.invoked_subcommand is not None:
        return

    logger.info("🚀 Initializing node-agent...")
    watcher_config = build_watcher_config(
        cluster_id=cluster_id,
        node_pool_id=node_pool_id,
        region=region,
        api_url=api_url,
        desired_gpu_count=desired_gpu_count,
        reboot_cooldown=reboot_time_window,
        tick_interval=interval,
        kubeconfig=kubeconfig,
    )
    logger.info(
        f"Watching node pool '{watcher_config.node_pool_id}' of cluster '{watcher_config.cluster_id}' "
        f"(desired GPUs={watcher_config.desired_gpu_count}, reboot window={watcher_config.reboot_cooldown}, "
        f"interval={watcher_config.tick_interval})."
    )

    try:
        reconciler = get_reconciler(watcher_config)
    except NodeAgentError as e:
        logger.error(f"❌ Startup failed: {e}")
        raise typer.Exit(code=1)

    port = health_port if health_port is not None else config.HEALTH_PORT
    try:
        asyncio.run(_async_start(watcher_config, reconciler, config.HEALTH_HOST, port))
    except ConfigurationError as e:
        logger.error(f"❌ Startup failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
