# ABOUTME: High-level service API orchestrating feed extraction, id resolution and aggregation
# ABOUTME: Owns the fetcher and an in-memory cache of the last identifier each URL resolved to

from minebbs_scout.config import Config, get_config
from minebbs_scout.extraction.aggregator import aggregate, fetch_posts_page
from minebbs_scout.extraction.api import ApiClient
from minebbs_scout.extraction.base import Fetcher, UnsupportedUrl
from minebbs_scout.extraction.candidates import candidates_for, detect_entity_type
from minebbs_scout.extraction.detail import parse_posts
from minebbs_scout.extraction.feed import build_feed
from minebbs_scout.extraction.fetcher import HttpxFetcher
from minebbs_scout.extraction.html import parse
from minebbs_scout.extraction.prober import Resolution, probe_candidates
from minebbs_scout.extraction.versions import CATALOG_FILTERS, parse_version_page
from minebbs_scout.models import CanonicalEntity, EntityType, FeedBundle, PostPage, VersionPage
from minebbs_scout.utils.logging import get_logger


class ScoutService:
    """Service for loading the homepage feed, entity details and the version catalog."""

    def __init__(self, fetcher: Fetcher | None = None, config: Config | None = None):
        self.config = config or get_config()
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or HttpxFetcher(config=self.config)
        self.api = ApiClient(self.fetcher, self.config.api_base, auth_token=self.config.auth_cookies)
        self._resolved_ids: dict[str, str] = {}
        self.logger = get_logger(__name__)

    async def load_feed(self) -> FeedBundle:
        """Fetch and project the forum homepage.

        Raises:
            TransportFailure: If the homepage cannot be fetched
            MalformedDocument: If the homepage is empty
        """
        url = self.config.site_origin.rstrip("/") + "/"
        raw = await self.fetcher.fetch(url)
        return build_feed(parse(raw, self.config.site_origin), self.config)

    def _ordered_candidates(self, url: str, entity_type: EntityType) -> list[str]:
        found = candidates_for(url, entity_type)
        cached = self._resolved_ids.get(url) if self.config.cache_enabled else None
        if cached is None:
            return found
        self.logger.debug("Trying cached identifier first", url=url, candidate=cached)
        return [cached, *(candidate for candidate in found if candidate != cached)]

    async def resolve(self, url: str) -> tuple[EntityType, Resolution]:
        """Probe the identifiers a URL suggests until the backend accepts one.

        Raises:
            UnsupportedUrl: If the URL is neither a resource nor a thread link
            AllCandidatesFailed: If no candidate was accepted
        """
        entity_type = detect_entity_type(url)
        if entity_type is None:
            raise UnsupportedUrl(f"Not a resource or thread link: {url}")

        async def probe(candidate: str):
            return await self.api.lookup(entity_type, candidate)

        resolution = await probe_candidates(self._ordered_candidates(url, entity_type), probe, entity_type)
        if self.config.cache_enabled:
            self._resolved_ids[url] = resolution.canonical_id
        return entity_type, resolution

    async def load_detail(self, url: str) -> CanonicalEntity:
        """Resolve a resource or thread link and aggregate its related sub-resources."""
        entity_type, resolution = await self.resolve(url)
        self.logger.info(
            "Resolved entity",
            entity_type=entity_type,
            entity_id=resolution.canonical_id,
            attempts=len(resolution.attempted),
        )
        return await aggregate(
            resolution.canonical_id,
            entity_type,
            self.api.get_optional,
            lookup_payload=resolution.payload,
            source_url=url,
        )

    async def _load_posts(self, entity_type: EntityType, thread_id: str, page: int) -> PostPage:
        page = max(page, 1)
        posts = await fetch_posts_page(entity_type, thread_id, self.api.get_optional, page=page)
        if posts is None:
            self.logger.info("No posts available", entity_type=entity_type, thread_id=thread_id, page=page)
        return PostPage(thread_id=thread_id, page=page, posts=parse_posts(posts, self.config.site_origin))

    async def load_discussion_page(self, thread_id: str, page: int = 1) -> PostPage:
        """One page of a resource's discussion thread, empty when unavailable."""
        return await self._load_posts("resource", thread_id, page)

    async def load_thread_page(self, thread_id: str, page: int = 1) -> PostPage:
        """One page of a forum thread's posts, empty when unavailable."""
        return await self._load_posts("thread", thread_id, page)

    async def load_versions(self, page: int = 1) -> VersionPage:
        """One page of the game version catalog.

        Raises:
            TransportFailure: If the catalog cannot be fetched
            MalformedPayload: If the response is not JSON or has no versions
        """
        page = max(page, 1)
        payload = await self.api.get_json(
            self.config.versions_api,
            params={"page": page, "pageSize": self.config.versions_page_size, **CATALOG_FILTERS},
        )
        return parse_version_page(payload, page)

    def forget(self, url: str | None = None) -> None:
        """Drop the cached identifier for ``url``, or every cached identifier."""
        if url is None:
            self._resolved_ids.clear()
        else:
            self._resolved_ids.pop(url, None)

    async def close(self) -> None:
        """Close the underlying fetcher when this service created it."""
        if self._owns_fetcher:
            await self.fetcher.close()
