# src/nodeagent/core/health.py
"""
Health predicate for pool nodes.

A node is healthy when its first reported Ready condition is 'True' and,
if a desired GPU count is configured, its allocatable GPU count matches it
exactly. Everything here is pure and needs no cluster access.
"""

import logging

from ..models.node import NODE_READY, ConditionStatus, NodeSnapshot
from ..models.remediation import HealthVerdict

logger = logging.getLogger(__name__)


def is_node_ready(node: NodeSnapshot) -> bool:
    """
    Checks the first Ready condition in reported order. Later duplicates are
    ignored, whatever their transition time.
    """
    cond = node.ready_condition
    if cond is None:
        logger.info("NodeReady condition not found: node=%s", node.name)
        return False

    logger.info("Current Node status: node=%s type=%s status=%s", node.name, NODE_READY, cond.status.value)
    return cond.status == ConditionStatus.TRUE


def has_desired_gpu_count(node: NodeSnapshot, desired: int) -> bool:
    """Strict equality check on the allocatable GPU count. A desired count of 0 skips the check."""
    if desired == 0:
        logger.debug("Desired GPU count is set to 0, so the GPU count check is skipped: node=%s", node.name)
        return True

    if node.allocatable_gpu == 0:
        logger.info("Allocatable GPU not found: node=%s", node.name)
        return False

    logger.info(
        "Checking actual GPU count with desired: node=%s actual=%d desired=%d",
        node.name,
        node.allocatable_gpu,
        desired,
    )
    return node.allocatable_gpu == desired


def evaluate(node: NodeSnapshot, desired_gpu_count: int) -> HealthVerdict:
    # Both sub-checks always run so each one logs its view of the node.
    gpu_ok = has_desired_gpu_count(node, desired_gpu_count)
    ready = is_node_ready(node)
    if gpu_ok and ready:
        return HealthVerdict.HEALTHY
    return HealthVerdict.UNHEALTHY
