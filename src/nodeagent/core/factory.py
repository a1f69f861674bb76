# src/nodeagent/core/factory.py
"""
Factory functions wiring the reconciler to its Kubernetes and Civo collaborators.
"""

import logging
from typing import Optional

from ..collectors.base_collector import NodeSource
from ..collectors.node_collector import KubernetesNodeSource
from ..providers.base_provider import InstanceProvider
from ..providers.civo_client import CivoClient
from .config import WatcherConfig
from .reconciler import Reconciler
from .remediator import Remediator

logger = logging.getLogger(__name__)


def get_node_source(watcher_config: WatcherConfig) -> NodeSource:
    return KubernetesNodeSource(kubeconfig=watcher_config.kubeconfig)


def get_instance_provider(watcher_config: WatcherConfig) -> InstanceProvider:
    """
    Builds the Civo API client.

    Raises:
        ConfigurationError: If no API key is configured.
    """
    logger.info("Using Civo API at %s (region=%s).", watcher_config.api_url, watcher_config.region or "default")
    return CivoClient(
        api_key=watcher_config.api_key,
        api_url=watcher_config.api_url,
        region=watcher_config.region,
        cluster_id=watcher_config.cluster_id,
    )


def get_reconciler(
    watcher_config: WatcherConfig,
    node_source: Optional[NodeSource] = None,
    provider: Optional[InstanceProvider] = None,
    dry_run: bool = False,
) -> Reconciler:
    """
    Builds a Reconciler. Collaborators not passed in are built from the
    configuration; a dry run never builds a provider, so it needs no API key.
    """
    node_source = node_source or get_node_source(watcher_config)
    remediator = None
    if provider is not None or not dry_run:
        provider = provider or get_instance_provider(watcher_config)
        remediator = Remediator(provider, watcher_config.cluster_id)
    return Reconciler(watcher_config, node_source, remediator, dry_run=dry_run)


async def close_reconciler(reconciler: Reconciler):
    """Releases the API clients held by a reconciler."""
    await reconciler.node_source.close()
    if reconciler.remediator is not None:
        await reconciler.remediator.provider.close()
