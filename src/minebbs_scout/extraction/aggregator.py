# ABOUTME: Concurrent fan-out over the related sub-resources of a resolved entity
# ABOUTME: Every sub-fetch is absent-on-failure, a single miss never fails the aggregate

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pydantic import JsonValue

from minebbs_scout.extraction.json_fields import FieldPath, is_success, resolve, resolve_text
from minebbs_scout.models.detail import CanonicalEntity, EntityType
from minebbs_scout.utils.logging import get_logger

# Returns the decoded response, or None when the endpoint is unavailable. May also raise.
type RelatedFetch = Callable[[str], Awaitable[JsonValue | None]]

logger = get_logger(__name__)


@dataclass(frozen=True)
class RelatedEndpoint:
    """One entry of ``CanonicalEntity.related``.

    ``endpoint`` is a template over ``id``, ``thread_id`` and ``page``. When it is
    None the value is projected from the lookup response instead of fetched.
    """

    key: str
    endpoint: str | None
    paths: tuple[FieldPath, ...]


RELATED_ENDPOINTS: dict[EntityType, tuple[RelatedEndpoint, ...]] = {
    "resource": (
        RelatedEndpoint("stats", "/resources/{id}/stats", ("data",)),
        RelatedEndpoint("updates", "/resources/{id}/updates", ("data.updates",)),
        RelatedEndpoint("history", "/resources/{id}/history", ("data",)),
        RelatedEndpoint("discussion", "/resources/discussions/{thread_id}?page={page}", ("posts", "data.posts")),
    ),
    # The thread lookup already embeds everything on its first page
    "thread": (
        RelatedEndpoint("thread", None, ("data.thread",)),
        RelatedEndpoint("posts", None, ("data.posts",)),
        RelatedEndpoint("poll", None, ("data.poll",)),
    ),
}

POSTS_ENDPOINTS: dict[EntityType, RelatedEndpoint] = {
    "resource": RELATED_ENDPOINTS["resource"][3],
    "thread": RelatedEndpoint("posts", "/threads/{thread_id}?page={page}", ("data.posts",)),
}


def _project(payload: JsonValue | BaseException | None, entry: RelatedEndpoint) -> JsonValue | None:
    if isinstance(payload, BaseException):
        logger.debug("Related fetch failed", key=entry.key, error=str(payload), error_type=type(payload).__name__)
        return None
    if not is_success(payload):
        logger.debug("Related fetch not successful", key=entry.key)
        return None
    return resolve(payload, entry.paths)


async def _settle(fetch: RelatedFetch, endpoint: str) -> JsonValue | BaseException | None:
    try:
        return await fetch(endpoint)
    except Exception as e:
        return e


async def aggregate(
    canonical_id: str,
    entity_type: EntityType,
    fetch: RelatedFetch,
    lookup_payload: JsonValue = None,
    source_url: str = "",
) -> CanonicalEntity:
    """Collect the related sub-resources of a resolved entity.

    All remote sub-fetches are issued together and joined once. A sub-fetch
    that raises, returns nothing, reports no success or lacks the expected path
    leaves its key out of ``related``; an empty list or object is kept.

    Args:
        canonical_id: Identifier accepted by the lookup endpoint
        entity_type: "resource" or "thread"
        fetch: Endpoint reader returning decoded JSON or None
        lookup_payload: The successful lookup response
        source_url: URL the entity was resolved from

    Returns:
        CanonicalEntity: Never raises for partial failures
    """
    data = resolve(lookup_payload, ["data"])
    thread_id = resolve_text(data, ["threadId"], default=canonical_id)
    entries = RELATED_ENDPOINTS[entity_type]

    remote = [entry for entry in entries if entry.endpoint is not None]
    outcomes = await asyncio.gather(
        *(_settle(fetch, entry.endpoint.format(id=canonical_id, thread_id=thread_id, page=1)) for entry in remote)
    )
    fetched = dict(zip((entry.key for entry in remote), outcomes, strict=True))

    related: dict[str, JsonValue] = {}
    for entry in entries:
        if entry.endpoint is None:
            value = resolve(lookup_payload, entry.paths)
        else:
            value = _project(fetched[entry.key], entry)
        if value is not None:
            related[entry.key] = value

    entity = CanonicalEntity(
        entity_id=canonical_id,
        entity_type=entity_type,
        source_url=source_url,
        basic=data if data is not None else {},
        related=related,
    )
    if entity.missing_related:
        logger.warning(
            "Some related sub-resources are missing",
            entity_type=entity_type,
            entity_id=canonical_id,
            missing=entity.missing_related,
        )
    return entity


async def fetch_posts_page(
    entity_type: EntityType, thread_id: str, fetch: RelatedFetch, page: int = 1
) -> JsonValue | None:
    """Fetch one page of posts for a resource discussion or a thread.

    Returns the posts array, or None when the page is unavailable.
    """
    entry = POSTS_ENDPOINTS[entity_type]
    payload = await _settle(fetch, entry.endpoint.format(id=thread_id, thread_id=thread_id, page=page))
    return _project(payload, entry)
