# src/nodeagent/core/debounce.py
"""
Cooldown guard that keeps the agent from rebooting nodes whose Ready
condition changed too recently (just joined, mid-recovery, flapping).
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..models.node import NodeSnapshot
from ..utils.date_utils import ensure_utc

logger = logging.getLogger(__name__)


def last_ready_transition(node: NodeSnapshot) -> Optional[datetime]:
    """
    Latest transition time across every Ready condition the node reports.
    Unlike the readiness check, duplicates are resolved by recency.
    """
    latest = None
    for cond in node.ready_conditions:
        if cond.last_transition_time is None:
            continue
        ts = ensure_utc(cond.last_transition_time)
        if latest is None or ts > latest:
            latest = ts
    return latest


def should_suppress(node: NodeSnapshot, cooldown: timedelta, now: datetime) -> bool:
    """
    Returns True when the Ready condition transitioned after ``now - cooldown``.

    A node without any Ready transition is not suppressed: there is nothing to
    debounce against, so it is remediated right away.
    """
    threshold_time = ensure_utc(now) - cooldown
    last_changed = last_ready_transition(node)

    logger.info(
        "Checking if Ready/NotReady status has changed recently: node=%s lastTransitionTime=%s thresholdTime=%s",
        node.name,
        last_changed,
        threshold_time,
    )

    if last_changed is None:
        logger.error("Node is in an invalid state, NodeReady condition not found: node=%s", node.name)
        return False
    return last_changed > threshold_time
