# src/nodeagent/collectors/node_collector.py

import logging
from typing import List, Optional

from kubernetes_asyncio.client.rest import ApiException

from ..core.exceptions import ConfigurationError, RetrievalError
from ..core.k8s_client import get_core_v1_api
from ..models.node import ConditionStatus, NodeCondition, NodeSnapshot
from ..utils.date_utils import ensure_utc
from ..utils.k8s_utils import parse_quantity
from .base_collector import NodeSource

logger = logging.getLogger(__name__)

GPU_RESOURCE_NAME = "nvidia.com/gpu"


class KubernetesNodeSource(NodeSource):
    """Lists the nodes of a pool from the Kubernetes API and converts them to snapshots."""

    def __init__(self, api=None, kubeconfig: Optional[str] = None, page_size: int = 500):
        self._api = api
        self._kubeconfig = kubeconfig
        self._page_size = page_size

    async def _ensure_client(self):
        """
        Lazily initialize the Kubernetes Async client using the centralized thread-safe loader.
        """
        if self._api:
            return self._api

        self._api = await get_core_v1_api(self._kubeconfig)
        return self._api

    async def connect(self):
        """
        Loads the Kubernetes configuration up front.

        Raises:
            ConfigurationError: If no configuration could be loaded.
        """
        if not await self._ensure_client():
            raise ConfigurationError("no Kubernetes configuration found (in-cluster or kubeconfig)")

    async def list_nodes(self, selector: str) -> List[NodeSnapshot]:
        try:
            api = await self._ensure_client()
        except Exception as e:
            raise RetrievalError(f"Failed to load Kubernetes configuration: {e}", selector=selector) from e
        if not api:
            raise RetrievalError("Kubernetes client not configured; cannot list nodes", selector=selector)

        snapshots = []
        continue_token = None
        try:
            while True:
                kwargs = {"label_selector": selector, "limit": self._page_size}
                if continue_token:
                    kwargs["_continue"] = continue_token
                nodes = await api.list_node(**kwargs)

                for node in nodes.items or []:
                    snapshots.append(self.to_snapshot(node))

                continue_token = nodes.metadata._continue if nodes.metadata else None
                if not continue_token:
                    break
        except ApiException as e:
            raise RetrievalError(f"Kubernetes API error while listing nodes: {e.status} {e.reason}", selector=selector) from e
        except Exception as e:
            raise RetrievalError(f"Failed to list nodes with selector {selector!r}: {e}", selector=selector) from e

        logger.debug("Listed %d node(s) for selector %s", len(snapshots), selector)
        return snapshots

    @staticmethod
    def to_snapshot(node) -> NodeSnapshot:
        """Converts a V1Node into a NodeSnapshot."""
        status = node.status
        conditions = []
        for cond in (status.conditions if status else None) or []:
            try:
                cond_status = ConditionStatus(cond.status)
            except ValueError:
                cond_status = ConditionStatus.UNKNOWN
            transition = cond.last_transition_time
            conditions.append(
                NodeCondition(
                    type=cond.type,
                    status=cond_status,
                    last_transition_time=ensure_utc(transition) if transition else None,
                )
            )

        allocatable = (status.allocatable if status else None) or {}
        return NodeSnapshot(
            name=node.metadata.name,
            labels=node.metadata.labels or {},
            conditions=tuple(conditions),
            allocatable_gpu=KubernetesNodeSource._gpu_count(node.metadata.name, allocatable.get(GPU_RESOURCE_NAME)),
        )

    @staticmethod
    def _gpu_count(node_name: str, quantity) -> int:
        """Allocatable GPUs as an integer. Missing, negative or fractional quantities count as 0."""
        if quantity is None:
            return 0
        value = parse_quantity(quantity)
        if not value.is_finite() or value < 0 or value != value.to_integral_value():
            logger.info("Failed to convert allocatable GPU quantity to an integer: node=%s quantity=%s", node_name, quantity)
            return 0
        return int(value)

    async def close(self):
        """Close the Kubernetes API client if it exists."""
        if self._api:
            await self._api.api_client.close()
            logger.debug("KubernetesNodeSource client closed.")
            self._api = None
