# ABOUTME: httpx-backed implementation of the Fetcher protocol
# ABOUTME: Applies browser-like headers and a fixed deadline, and maps httpx errors to TransportFailure

from collections.abc import Mapping

import httpx

from minebbs_scout.config import Config, get_config
from minebbs_scout.extraction.base import TransportFailure
from minebbs_scout.utils.logging import get_logger, log_api_call


class HttpxFetcher:
    """Fetcher built on a shared ``httpx.AsyncClient``.

    The client can be injected for tests; otherwise one is created with the
    configured timeout and headers. Transport errors and non-2xx statuses are
    both reported as ``TransportFailure``, nothing is retried here.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, config: Config | None = None):
        self.config = config or get_config()
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            headers={
                "User-Agent": self.config.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
                "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
                "Referer": self.config.site_origin + "/",
            },
            timeout=self.config.request_timeout,
            follow_redirects=True,
        )
        self.logger = get_logger(__name__)

    @log_api_call("http")
    async def fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        auth_token: str | None = None,
    ) -> bytes:
        request_headers = dict(headers or {})
        if auth_token:
            request_headers["X-Cookies"] = auth_token

        try:
            response = await self.http_client.get(url, headers=request_headers)
        except httpx.TimeoutException as e:
            raise TransportFailure(url, f"Request timed out after {self.config.request_timeout}s: {e}") from e
        except httpx.HTTPError as e:
            raise TransportFailure(url, f"Request failed: {e}") from e

        self.logger.debug("Fetched", url=url, status_code=response.status_code, size=len(response.content))

        if response.is_error:
            raise TransportFailure(
                url,
                f"Server answered {response.status_code} for {url}",
                status_code=response.status_code,
            )

        return response.content

    async def close(self) -> None:
        await self.http_client.aclose()
