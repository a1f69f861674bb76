# tests/providers/test_civo_client.py

import json

import pytest
import respx
from httpx import ConnectError, Response

from nodeagent.core.exceptions import (
    ConfigurationError,
    InstanceLookupError,
    MultipleMatchesError,
    ProviderError,
    ZeroMatchesError,
)
from nodeagent.core.remediator import Remediator
from nodeagent.providers.civo_client import CivoClient

API_URL = "https://test.civo.com"
CLUSTER_ID = "test-cluster-123"
INSTANCES_PATH = f"/v2/kubernetes/clusters/{CLUSTER_ID}/instances"

INSTANCES = [
    {"id": "aaaa-1111", "hostname": "k3s-pool-abcd-node-1", "status": "ACTIVE"},
    {"id": "bbbb-2222", "hostname": "k3s-pool-abcd-node-2", "status": "ACTIVE"},
    {"id": "cccc-3333", "hostname": "k3s-pool-abcd-node-10", "status": "ACTIVE"},
]


@pytest.fixture
async def client():
    civo = CivoClient(api_key="test-api-key", api_url=API_URL, region="lon1", cluster_id=CLUSTER_ID, version="1.2.3")
    yield civo
    await civo.close()


def test_requires_api_key():
    with pytest.raises(ConfigurationError, match="CIVO_API_KEY not set"):
        CivoClient(api_key="", api_url=API_URL)


async def test_headers_carry_auth_and_user_agent(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        route = respx_mock.get(INSTANCES_PATH).mock(return_value=Response(200, json=INSTANCES))

        await client.list_kubernetes_cluster_instances(CLUSTER_ID)

        request = route.calls.last.request
        assert request.headers["Authorization"] == "bearer test-api-key"
        assert request.headers["User-Agent"] == f"node-agent/1.2.3 ({CLUSTER_ID})"
        assert request.url.params["region"] == "lon1"


async def test_find_exact_hostname_match(client):
    """An exact match wins even when the search is also a substring of other hostnames."""
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(return_value=Response(200, json=INSTANCES))

        instance = await client.find_kubernetes_cluster_instance(CLUSTER_ID, "k3s-pool-abcd-node-1")

    assert instance.id == "aaaa-1111"


async def test_find_by_id(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(return_value=Response(200, json=INSTANCES))

        instance = await client.find_kubernetes_cluster_instance(CLUSTER_ID, "bbbb-2222")

    assert instance.hostname == "k3s-pool-abcd-node-2"


async def test_find_single_partial_match(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(return_value=Response(200, json=INSTANCES))

        instance = await client.find_kubernetes_cluster_instance(CLUSTER_ID, "node-10")

    assert instance.id == "cccc-3333"


async def test_find_multiple_partial_matches(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(return_value=Response(200, json=INSTANCES))

        with pytest.raises(MultipleMatchesError):
            await client.find_kubernetes_cluster_instance(CLUSTER_ID, "k3s-pool-abcd")


async def test_find_zero_matches(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(return_value=Response(200, json=INSTANCES))

        with pytest.raises(ZeroMatchesError):
            await client.find_kubernetes_cluster_instance(CLUSTER_ID, "other-node")


async def test_list_http_error_becomes_provider_error(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(return_value=Response(401, json={"code": "authentication_failed"}))

        with pytest.raises(ProviderError) as exc_info:
            await client.list_kubernetes_cluster_instances(CLUSTER_ID)

    assert exc_info.value.status_code == 401


async def test_transport_error_becomes_provider_error(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(side_effect=ConnectError("connection refused"))

        with pytest.raises(ProviderError) as exc_info:
            await client.list_kubernetes_cluster_instances(CLUSTER_ID)

    assert exc_info.value.status_code is None


async def test_hard_reboot_instance(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        route = respx_mock.post("/v2/instances/aaaa-1111/hard_reboots").mock(
            return_value=Response(202, json={"result": "success"})
        )

        await client.hard_reboot_instance("aaaa-1111")

        assert route.call_count == 1
        assert json.loads(route.calls.last.request.content) == {"region": "lon1"}


async def test_hard_reboot_failure(client):
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.post("/v2/instances/aaaa-1111/hard_reboots").mock(return_value=Response(500, text="oops"))

        with pytest.raises(ProviderError) as exc_info:
            await client.hard_reboot_instance("aaaa-1111")

    assert exc_info.value.status_code == 500


@pytest.mark.parametrize(
    "response",
    [
        Response(200, text="<html>gateway</html>"),
        Response(200, json=[{"hostname": "k3s-pool-abcd-node-1"}]),
        Response(200, json="unexpected"),
    ],
    ids=["not-json", "missing-id", "not-a-list"],
)
async def test_malformed_instance_list_becomes_provider_error(client, response):
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(return_value=response)

        with pytest.raises(ProviderError):
            await client.list_kubernetes_cluster_instances(CLUSTER_ID)


@pytest.mark.parametrize(
    "response",
    [Response(200, text="<html>gateway</html>"), Response(200, json=[{"hostname": "k3s-pool-abcd-node-1"}])],
    ids=["not-json", "missing-id"],
)
async def test_malformed_instance_list_is_a_lookup_error(client, response):
    """The remediator reports the node and cluster for a malformed 200 response."""
    with respx.mock(base_url=API_URL) as respx_mock:
        respx_mock.get(INSTANCES_PATH).mock(return_value=response)

        with pytest.raises(InstanceLookupError) as exc_info:
            await Remediator(client, CLUSTER_ID).remediate("k3s-pool-abcd-node-1")

    assert exc_info.value.cluster_id == CLUSTER_ID
    assert exc_info.value.node_name == "k3s-pool-abcd-node-1"
    assert isinstance(exc_info.value.__cause__, ProviderError)
