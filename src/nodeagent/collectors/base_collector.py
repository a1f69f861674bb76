# src/nodeagent/collectors/base_collector.py
"""
This module defines the abstract node source the reconciler lists nodes
from. Keeping it abstract lets the reconciler run against an in-memory
source in tests and against the Kubernetes API in production.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models.node import NodeSnapshot


class NodeSource(ABC):
    """
    Abstract Base Class for node sources.
    """

    @abstractmethod
    async def list_nodes(self, selector: str) -> List[NodeSnapshot]:
        """
        Returns every node matching the label selector as a complete snapshot.

        Raises:
            RetrievalError: On any transport, authentication or API failure.
        """
        pass

    async def connect(self):
        """
        Verifies the source can be reached before the first tick.

        Raises:
            ConfigurationError: If the source's configuration cannot be loaded.
        """
        pass

    async def close(self):
        """
        Clean up resources (e.g., close API clients).
        """
        pass
