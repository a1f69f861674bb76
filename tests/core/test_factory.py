# tests/core/test_factory.py

import pytest

from nodeagent.collectors.node_collector import KubernetesNodeSource
from nodeagent.core.config import WatcherConfig
from nodeagent.core.exceptions import ConfigurationError
from nodeagent.core.factory import close_reconciler, get_instance_provider, get_reconciler
from nodeagent.providers.civo_client import CivoClient


async def test_get_reconciler_builds_collaborators(watcher_config):
    reconciler = get_reconciler(watcher_config)

    assert isinstance(reconciler.node_source, KubernetesNodeSource)
    assert isinstance(reconciler.remediator.provider, CivoClient)
    assert reconciler.remediator.cluster_id == watcher_config.cluster_id
    await close_reconciler(reconciler)


def test_missing_api_key_is_a_configuration_error():
    cfg = WatcherConfig(cluster_id="cluster", node_pool_id="pool")
    with pytest.raises(ConfigurationError, match="CIVO_API_KEY not set"):
        get_instance_provider(cfg)


def test_injected_provider_needs_no_api_key(fake_node_source, fake_provider):
    cfg = WatcherConfig(cluster_id="cluster", node_pool_id="pool")

    reconciler = get_reconciler(cfg, node_source=fake_node_source, provider=fake_provider)

    assert reconciler.remediator.provider is fake_provider


def test_dry_run_needs_no_api_key(fake_node_source):
    cfg = WatcherConfig(cluster_id="cluster", node_pool_id="pool")

    reconciler = get_reconciler(cfg, node_source=fake_node_source, dry_run=True)

    assert reconciler.remediator is None
    assert reconciler.dry_run is True


async def test_close_reconciler_closes_clients(watcher_config, fake_node_source, fake_provider):
    reconciler = get_reconciler(watcher_config, node_source=fake_node_source, provider=fake_provider)

    await close_reconciler(reconciler)

    assert fake_node_source.closed
    assert fake_provider.closed
