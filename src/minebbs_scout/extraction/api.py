# ABOUTME: JSON access to the forum REST backend on top of a Fetcher
# ABOUTME: Strict reads for probing, absent-on-failure reads for related sub-resources

from collections.abc import Mapping

import httpx
from pydantic import JsonValue

from minebbs_scout.extraction.base import ExtractionError, Fetcher
from minebbs_scout.extraction.json_fields import parse_json
from minebbs_scout.models.detail import EntityType
from minebbs_scout.utils.logging import get_logger

LOOKUP_ENDPOINTS: dict[EntityType, str] = {
    "resource": "/resources/{id}",
    "thread": "/threads/{id}",
}

JSON_HEADERS = {"Accept": "application/json, text/plain, */*"}


class ApiClient:
    """Reads JSON documents from the backend rooted at ``base_url``."""

    def __init__(self, fetcher: Fetcher, base_url: str, auth_token: str | None = None):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.logger = get_logger(__name__)

    def url_for(self, endpoint: str, params: Mapping[str, str | int] | None = None) -> str:
        url = endpoint if endpoint.startswith(("http://", "https://")) else f"{self.base_url}{endpoint}"
        if params:
            url = str(httpx.URL(url, params=dict(params)))
        return url

    async def get_json(self, endpoint: str, params: Mapping[str, str | int] | None = None) -> JsonValue:
        """Fetch and decode one endpoint.

        Raises:
            TransportFailure: If the fetch fails or the status is an error
            MalformedPayload: If the body is not JSON
        """
        raw = await self.fetcher.fetch(self.url_for(endpoint, params), headers=JSON_HEADERS, auth_token=self.auth_token)
        return parse_json(raw)

    async def get_optional(self, endpoint: str) -> JsonValue | None:
        """Fetch one endpoint, reporting any failure as absent."""
        try:
            return await self.get_json(endpoint)
        except ExtractionError as e:
            self.logger.debug("Optional endpoint unavailable", endpoint=endpoint, error=str(e))
            return None

    async def lookup(self, entity_type: EntityType, candidate: str) -> JsonValue:
        """Probe the lookup endpoint of ``entity_type`` with one candidate identifier."""
        return await self.get_json(LOOKUP_ENDPOINTS[entity_type].format(id=candidate))
