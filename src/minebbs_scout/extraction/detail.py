# ABOUTME: Typed projections of a CanonicalEntity into resource, thread and post summaries
# ABOUTME: Every field is read through the fallback resolver so backend shape drift lands on defaults

from pydantic import JsonValue

from minebbs_scout.config import Config, get_config
from minebbs_scout.extraction.html import absolute_url
from minebbs_scout.extraction.json_fields import resolve, resolve_int, resolve_text
from minebbs_scout.models.detail import (
    CanonicalEntity,
    Poll,
    PollResponse,
    Post,
    ResourceSummary,
    ThreadSummary,
    UpdateEntry,
)
from minebbs_scout.utils.logging import get_logger, log_extraction_step

logger = get_logger(__name__)


def _as_list(value: JsonValue) -> list[JsonValue]:
    return value if isinstance(value, list) else []


def _scalar_text(value: JsonValue) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _labels(value: JsonValue) -> tuple[str, ...]:
    labels = []
    for label in _as_list(value):
        # Labels are either plain strings or {"text": ...} objects
        name = resolve_text(label, ["text"]) if isinstance(label, dict) else _scalar_text(label)
        if name:
            labels.append(name)
    return tuple(labels)


def _custom_fields(value: JsonValue) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    fields = {}
    for name, field in value.items():
        label = resolve_text(field, ["label"], default=name)
        raw = resolve(field, ["value"])
        if isinstance(raw, list):
            fields[label] = ", ".join(_scalar_text(item) for item in raw)
        else:
            fields[label] = _scalar_text(raw)
    return fields


def _updates(value: JsonValue, limit: int) -> tuple[UpdateEntry, ...]:
    return tuple(
        UpdateEntry(title=resolve_text(entry, ["title"]), version=resolve_text(entry, ["version"]))
        for entry in _as_list(value)[:limit]
    )


@log_extraction_step("summarize_resource")
def summarize_resource(entity: CanonicalEntity, config: Config | None = None) -> ResourceSummary:
    """Project a resolved resource into the fields a detail view shows."""
    config = config or get_config()
    basic = entity.basic
    # Statistics fall back from the stats sub-resource to the lookup sidebar
    view = {"stats": entity.related.get("stats"), "sidebar": resolve(basic, ["sidebar"])}

    return ResourceSummary(
        title=resolve_text(basic, ["basic.title", "title"]),
        version=resolve_text(basic, ["basic.version", "version"]),
        author_name=resolve_text(basic, ["basic.author.name", "basic.author.username", "author.name"]),
        icon_url=absolute_url(resolve_text(basic, ["basic.icon", "icon"]), config.site_origin),
        labels=_labels(resolve(basic, ["basic.labels", "labels"])),
        description_html=resolve_text(basic, ["description", "basic.description"]),
        downloads=resolve_text(view, ["stats.downloads", "sidebar.downloads"], default="-"),
        views=resolve_text(view, ["stats.views", "sidebar.views"], default="-"),
        rating=resolve_text(view, ["sidebar.rating.stars"], default="-"),
        last_update=resolve_text(view, ["stats.lastUpdateText"], default="未知"),
        custom_fields=_custom_fields(resolve(basic, ["customFields"])),
        updates=_updates(entity.related.get("updates"), config.updates_limit),
        discussion_thread_id=resolve_text(basic, ["threadId"], default=entity.entity_id),
    )


def _poll(value: JsonValue) -> Poll | None:
    if not isinstance(value, dict) or not value:
        return None
    responses = tuple(
        PollResponse(
            response=resolve_text(item, ["response", "text"]),
            percentage=resolve_text(item, ["percentage"]),
        )
        for item in _as_list(resolve(value, ["responses"]))
    )
    return Poll(title=resolve_text(value, ["title"]), responses=responses)


@log_extraction_step("summarize_thread")
def summarize_thread(entity: CanonicalEntity) -> ThreadSummary:
    """Project a resolved thread into its header and poll."""
    thread = entity.related.get("thread")
    if thread is None:
        thread = resolve(entity.basic, ["thread"])

    crumbs = [resolve_text(crumb, ["text"]) for crumb in _as_list(resolve(thread, ["breadcrumbs"]))]
    return ThreadSummary(
        title=resolve_text(thread, ["title"]),
        prefix=resolve_text(thread, ["prefix.text", "prefix"]),
        breadcrumbs=" > ".join(crumb for crumb in crumbs if crumb),
        poll=_poll(entity.related.get("poll")),
    )


def _reaction_count(post: JsonValue) -> int:
    total = resolve(post, ["reactions.total"])
    if total is not None:
        return max(resolve_int(post, ["reactions.total"]), 0)
    summary = _as_list(resolve(post, ["reactions.summary"]))
    return max(sum(resolve_int(item, ["count"]) for item in summary), 0)


def parse_post(post: JsonValue, origin: str) -> Post:
    author_name = resolve_text(post, ["author.username", "author.name"])
    return Post(
        author_name=author_name or "Guest",
        author_title=resolve_text(post, ["author.title", "author.userTitle"]),
        avatar_url=absolute_url(resolve_text(post, ["author.avatar"]), origin),
        # content is either {"html": ...} or the HTML string itself
        content_html=resolve_text(post, ["content.html", "content"]),
        date_text=resolve_text(post, ["date.text", "createdAt.display"]),
        reaction_count=_reaction_count(post),
    )


def parse_posts(posts: JsonValue, origin: str) -> tuple[Post, ...]:
    """Project a posts array, skipping entries that are not objects."""
    parsed = []
    for index, post in enumerate(_as_list(posts)):
        if not isinstance(post, dict):
            logger.debug("Skipping non-object post", index=index)
            continue
        parsed.append(parse_post(post, origin))
    return tuple(parsed)
