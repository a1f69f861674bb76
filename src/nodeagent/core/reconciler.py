# src/nodeagent/core/reconciler.py
"""
One reconciliation tick: list the pool's nodes, evaluate each in listing
order, and reboot the ones that are unhealthy and outside the cooldown window.

Error policy is fail-fast per tick. A listing failure aborts the tick before
any node is evaluated, and the first remediation failure aborts the rest of
the tick; nodes after it are picked up again by the next tick.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..collectors.base_collector import NodeSource
from ..models.remediation import SKIP_COOLDOWN, SKIP_DRY_RUN, SKIP_HEALTHY, HealthVerdict, RemediationOutcome
from . import debounce, health
from .config import WatcherConfig
from .exceptions import RemediationFailure
from .remediator import Remediator

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Reconciler:
    """Runs reconciliation ticks against a node source and a remediator."""

    def __init__(
        self,
        watcher_config: WatcherConfig,
        node_source: NodeSource,
        remediator: Optional[Remediator],
        clock: Callable[[], datetime] = utc_now,
        dry_run: bool = False,
    ):
        if remediator is None and not dry_run:
            raise ValueError("A remediator is required unless dry_run is set")
        self.config = watcher_config
        self.node_source = node_source
        self.remediator = remediator
        self.clock = clock
        self.dry_run = dry_run

    async def run_once(self) -> List[RemediationOutcome]:
        """
        Runs one tick and returns one outcome per listed node.

        Raises:
            RetrievalError: If listing the nodes failed. Nothing was evaluated.
            InstanceLookupError, RemediationError: On the first failed remediation.
                Nodes after the failing one were not evaluated; the outcomes of
                the ones before it are attached as `outcomes`.
        """
        nodes = await self.node_source.list_nodes(self.config.label_selector)
        now = self.clock()

        outcomes = []
        for node in nodes:
            if health.evaluate(node, self.config.desired_gpu_count) == HealthVerdict.HEALTHY:
                outcomes.append(RemediationOutcome.skipped(node.name, SKIP_HEALTHY))
                continue

            logger.info("Node is not ready, attempting to reboot: node=%s", node.name)
            if debounce.should_suppress(node, self.config.reboot_cooldown, now):
                logger.info("Skipping reboot because Ready/NotReady status was updated recently: node=%s", node.name)
                outcomes.append(RemediationOutcome.skipped(node.name, SKIP_COOLDOWN))
                continue

            if self.dry_run:
                logger.info("Dry run, not rebooting: node=%s", node.name)
                outcomes.append(RemediationOutcome.skipped(node.name, SKIP_DRY_RUN))
                continue

            try:
                instance_id = await self.remediator.remediate(node.name)
            except RemediationFailure as e:
                logger.error("Failed to reboot Node: node=%s error=%s", node.name, e)
                e.outcomes = list(outcomes)
                raise
            outcomes.append(RemediationOutcome.succeeded(node.name, instance_id))

        return outcomes
