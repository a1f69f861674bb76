# tests/conftest.py

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from nodeagent.collectors.base_collector import NodeSource
from nodeagent.core.config import WatcherConfig
from nodeagent.core.exceptions import RetrievalError, ZeroMatchesError
from nodeagent.models.instance import Instance
from nodeagent.models.node import ConditionStatus, NodeCondition, NodeSnapshot
from nodeagent.providers.base_provider import InstanceProvider

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)

TEST_CLUSTER_ID = "test-cluster-123"
TEST_NODE_POOL_ID = "test-node-pool"


class FakeNodeSource(NodeSource):
    """In-memory node source recording the selectors it was called with."""

    def __init__(self, nodes: Optional[List[NodeSnapshot]] = None, error: Optional[Exception] = None):
        self.nodes = nodes or []
        self.error = error
        self.selectors: List[str] = []
        self.closed = False

    async def list_nodes(self, selector: str) -> List[NodeSnapshot]:
        self.selectors.append(selector)
        if self.error:
            raise self.error
        return list(self.nodes)

    async def close(self):
        self.closed = True


class FakeProvider(InstanceProvider):
    """In-memory compute provider mapping node names to instance IDs."""

    def __init__(self, instances: Optional[Dict[str, str]] = None):
        self.instances = instances or {}
        self.find_errors: Dict[str, Exception] = {}
        self.reboot_errors: Dict[str, Exception] = {}
        self.find_calls: List[tuple] = []
        self.reboot_calls: List[str] = []
        self.closed = False

    async def find_kubernetes_cluster_instance(self, cluster_id: str, search: str) -> Instance:
        self.find_calls.append((cluster_id, search))
        if search in self.find_errors:
            raise self.find_errors[search]
        if search not in self.instances:
            raise ZeroMatchesError(f"unable to find {search}, zero matches")
        return Instance(id=self.instances[search], hostname=search)

    async def hard_reboot_instance(self, instance_id: str) -> None:
        self.reboot_calls.append(instance_id)
        if instance_id in self.reboot_errors:
            raise self.reboot_errors[instance_id]

    async def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def clear_agent_env_vars(monkeypatch):
    """
    Autouse fixture removing node-agent environment variables so tests never
    pick up the settings of the machine they run on.
    """
    for key in (
        "CIVO_API_KEY",
        "CIVO_API_URL",
        "CIVO_REGION",
        "CIVO_CLUSTER_ID",
        "CIVO_NODE_POOL_ID",
        "CIVO_NODE_DESIRED_GPU_COUNT",
        "CIVO_NODE_REBOOT_TIME_WINDOW_MINUTES",
        "NODE_AGENT_TICK_INTERVAL",
        "KUBECONFIG",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_node():
    """
    Factory fixture building NodeSnapshot objects.

    ``ready`` is the status of a single Ready condition ('True', 'False',
    'Unknown') or None for no Ready condition at all. ``transitioned_ago`` is
    how long before NOW it last changed.
    """

    def _make_node(
        name: str = "node-1",
        ready: Optional[str] = "True",
        transitioned_ago: timedelta = timedelta(hours=1),
        gpu: int = 0,
        extra_conditions: tuple = (),
    ) -> NodeSnapshot:
        conditions = list(extra_conditions)
        if ready is not None:
            conditions.insert(
                0,
                NodeCondition(
                    type="Ready",
                    status=ConditionStatus(ready),
                    last_transition_time=NOW - transitioned_ago,
                ),
            )
        return NodeSnapshot(name=name, conditions=tuple(conditions), allocatable_gpu=gpu)

    return _make_node


@pytest.fixture
def watcher_config():
    return WatcherConfig(
        cluster_id=TEST_CLUSTER_ID,
        node_pool_id=TEST_NODE_POOL_ID,
        region="lon1",
        api_key="test-api-key",
        desired_gpu_count=0,
        reboot_cooldown=timedelta(minutes=40),
    )


@pytest.fixture
def fake_node_source():
    return FakeNodeSource()


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def retrieval_error():
    return RetrievalError("connection refused", selector=f"kubernetes.civo.com/civo-node-pool={TEST_NODE_POOL_ID}")


@pytest.fixture
def now():
    """The fixed tick time every node built by ``make_node`` is relative to."""
    return NOW
