# src/nodeagent/providers/civo_client.py

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .. import __version__
from ..core.exceptions import ConfigurationError, MultipleMatchesError, ProviderError, ZeroMatchesError
from ..models.instance import Instance
from ..utils.http_client import get_async_http_client
from .base_provider import InstanceProvider

logger = logging.getLogger(__name__)

AGENT_NAME = "node-agent"


class CivoClient(InstanceProvider):
    """
    Minimal async client for the Civo REST API covering what remediation needs.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str,
        region: str = "",
        cluster_id: str = "",
        version: str = __version__,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ConfigurationError("CIVO_API_KEY not set")
        if not api_url:
            raise ConfigurationError("CIVO_API_URL not set")

        self.api_url = api_url.rstrip("/")
        self.region = region
        user_agent = f"{AGENT_NAME}/{version}"
        if cluster_id:
            user_agent = f"{user_agent} ({cluster_id})"
        self.headers = {
            "Authorization": f"bearer {api_key}",
            "Accept": "application/json",
            "User-Agent": user_agent,
        }
        self._client = get_async_http_client(self.api_url, headers=self.headers, transport=transport)

    def _params(self) -> dict:
        return {"region": self.region} if self.region else {}

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Civo API returned {e.response.status_code} for {method} {path}: {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Civo API request {method} {path} failed: {e}") from e

    async def list_kubernetes_cluster_instances(self, cluster_id: str) -> List[Instance]:
        response = await self._request("GET", f"/v2/kubernetes/clusters/{cluster_id}/instances", params=self._params())
        try:
            payload = response.json()
            # The endpoint returns a bare list; paginated responses wrap it in "items".
            items = payload.get("items", []) if isinstance(payload, dict) else payload
            return [Instance(**item) for item in items]
        except (ValueError, TypeError, ValidationError) as e:
            raise ProviderError(f"Civo API returned a malformed instance list for cluster {cluster_id}: {e}") from e

    async def find_kubernetes_cluster_instance(self, cluster_id: str, search: str) -> Instance:
        """
        An exact hostname or ID match wins. Otherwise a single partial match is
        accepted; several partial matches are ambiguous.
        """
        instances = await self.list_kubernetes_cluster_instances(cluster_id)

        partial_matches = []
        for instance in instances:
            if instance.hostname == search or instance.id == search:
                return instance
            if search in instance.hostname or search in instance.id:
                partial_matches.append(instance)

        if len(partial_matches) == 1:
            return partial_matches[0]
        if len(partial_matches) > 1:
            raise MultipleMatchesError(f"unable to find {search} because there were multiple matches")
        raise ZeroMatchesError(f"unable to find {search}, zero matches")

    async def hard_reboot_instance(self, instance_id: str) -> None:
        await self._request("POST", f"/v2/instances/{instance_id}/hard_reboots", json=self._params())
        logger.debug("Hard reboot accepted by Civo API: instanceID=%s", instance_id)

    async def close(self):
        await self._client.aclose()
        logger.debug("CivoClient HTTP client closed.")
