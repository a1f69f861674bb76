# src/nodeagent/providers/base_provider.py
"""
Abstract compute provider the remediator talks to: find the instance behind
a cluster node, and hard-reboot an instance by ID.
"""

from abc import ABC, abstractmethod

from ..models.instance import Instance


class InstanceProvider(ABC):
    """
    Abstract Base Class for compute providers.
    """

    @abstractmethod
    async def find_kubernetes_cluster_instance(self, cluster_id: str, search: str) -> Instance:
        """
        Finds the instance of a cluster whose hostname or ID matches ``search``.

        Raises:
            ProviderError: If the instance cannot be found or the API call fails.
        """
        pass

    @abstractmethod
    async def hard_reboot_instance(self, instance_id: str) -> None:
        """
        Issues a hard reboot of the instance.

        Raises:
            ProviderError: If the API call fails.
        """
        pass

    async def close(self):
        """
        Clean up resources (e.g., close HTTP sessions).
        """
        pass
