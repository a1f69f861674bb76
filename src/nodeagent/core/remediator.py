# src/nodeagent/core/remediator.py

import logging

from ..core.exceptions import InstanceLookupError, ProviderError, RemediationError
from ..providers.base_provider import InstanceProvider

logger = logging.getLogger(__name__)


class Remediator:
    """
    Hard-reboots the compute instance behind a node.

    Two sequential provider calls with no local retry: locate the instance,
    then reboot it. Callers issue at most one attempt per node per tick.
    """

    def __init__(self, provider: InstanceProvider, cluster_id: str):
        self.provider = provider
        self.cluster_id = cluster_id

    async def remediate(self, node_name: str) -> str:
        """
        Returns the ID of the instance now rebooting.

        Raises:
            InstanceLookupError: If the backing instance cannot be found; no reboot is attempted.
            RemediationError: If the reboot call fails.
        """
        try:
            instance = await self.provider.find_kubernetes_cluster_instance(self.cluster_id, node_name)
        except ProviderError as e:
            raise InstanceLookupError(
                f"failed to find instance, clusterID: {self.cluster_id}, nodeName: {node_name}: {e}",
                cluster_id=self.cluster_id,
                node_name=node_name,
            ) from e

        try:
            await self.provider.hard_reboot_instance(instance.id)
        except ProviderError as e:
            raise RemediationError(
                f"failed to reboot instance, clusterID: {self.cluster_id}, instanceID: {instance.id}: {e}",
                cluster_id=self.cluster_id,
                node_name=node_name,
                instance_id=instance.id,
            ) from e

        logger.info("Instance is rebooting: instanceID=%s node=%s", instance.id, node_name)
        return instance.id
