# ABOUTME: Projects a parsed forum homepage into a FeedBundle
# ABOUTME: Seven independent routines, each falling back to an empty result when its block is gone

import functools
import re
from collections.abc import Callable
from decimal import Decimal
from typing import TypeVar

from minebbs_scout.config import Config, get_config
from minebbs_scout.extraction import selectors as q
from minebbs_scout.extraction.html import DocumentTree, attr, select, select_first, text
from minebbs_scout.models.feed import (
    STAT_KEYS,
    Banner,
    Featured,
    FeedBundle,
    Forum,
    ForumCategory,
    LoginState,
    Notice,
    Topic,
    default_stats,
)
from minebbs_scout.utils.logging import get_logger, log_extraction_step

T = TypeVar("T")

DEFAULT_CATEGORY_NAME = "未命名分区"

_MAGNITUDES = {"k": 1_000, "m": 1_000_000}
_MAGNITUDE_TEXT = re.compile(r"^([0-9]*\.?[0-9]+)([km]?)$", re.IGNORECASE)

logger = get_logger(__name__)


def parse_magnitude(value: str | None) -> int:
    """Parse human-readable counts such as "1.2K", "3M" or "1,024".

    Returns 0 for anything it cannot read, including negative numbers.
    """
    if not value:
        return 0
    cleaned = value.strip().replace(",", "").replace(" ", "")
    match = _MAGNITUDE_TEXT.match(cleaned)
    if not match:
        return 0
    number, suffix = match.groups()
    # Decimal keeps "1.2K" at exactly 1200
    return int(Decimal(number) * _MAGNITUDES.get(suffix.lower(), 1))


def fault_isolated(default: Callable[[], T]) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Run a feed routine so that any failure yields ``default()`` instead of aborting the build."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.warning(
                    "Feed routine failed, using default",
                    routine=func.__name__,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return default()

        return wrapper

    return decorator


def _time_text(node) -> str:
    return attr(node, "data-date") or text(node)


@fault_isolated(tuple)
def extract_notices(tree: DocumentTree, config: Config) -> tuple[Notice, ...]:
    notices = []
    # Limit applies before empty titles are dropped
    for node in select(tree, q.NOTICE_LINKS)[: config.notice_limit]:
        title = text(node)
        if title:
            notices.append(Notice(title=title, link=tree.absolute(attr(node, "href"))))
    return tuple(notices)


@fault_isolated(tuple)
def extract_banners(tree: DocumentTree, config: Config) -> tuple[Banner, ...]:
    banners = []
    for node in select(tree, q.BANNER_IMAGES):
        image_url = attr(node, "src")
        if not image_url:
            continue
        anchor = node.find_parent("a")
        banners.append(
            Banner(image_url=tree.absolute(image_url), link=tree.absolute(attr(anchor, "href")))
        )
    return tuple(banners)


@fault_isolated(tuple)
def extract_featured(tree: DocumentTree, config: Config) -> tuple[Featured, ...]:
    featured = []
    for item in select(tree, q.FEATURED_ITEMS):
        title_node = select_first(item, q.FEATURED_TITLE)
        author_node = select_first(item, q.AUTHOR_LINK)
        if title_node is None or author_node is None:
            continue

        avatar = attr(select_first(item, q.FEATURED_AVATAR), "src") or config.default_avatar
        featured.append(
            Featured(
                title=text(title_node),
                author_name=text(author_node),
                publish_time=_time_text(select_first(item, q.FEATURED_TIME)),
                summary=text(select_first(item, q.FEATURED_SUMMARY)),
                author_avatar=tree.absolute(avatar),
                link=tree.absolute(attr(title_node, "href")),
            )
        )
    return tuple(featured)


def _extract_forum(tree: DocumentTree, node) -> Forum | None:
    name_node = select_first(node, q.FORUM_TITLE)
    if name_node is None:
        return None
    return Forum(
        forum_name=text(name_node),
        forum_desc=text(select_first(node, q.FORUM_DESCRIPTION)),
        topic_count=parse_magnitude(text(select_first(node, q.FORUM_TOPIC_COUNT))),
        msg_count=parse_magnitude(text(select_first(node, q.FORUM_MESSAGE_COUNT))),
        latest_topic_title=text(select_first(node, q.FORUM_LATEST_TOPIC)),
        link=tree.absolute(attr(name_node, "href")),
    )


@fault_isolated(tuple)
def extract_categories(tree: DocumentTree, config: Config) -> tuple[ForumCategory, ...]:
    categories = []
    for block in select(tree, q.CATEGORY_BLOCKS):
        forums = tuple(
            forum for forum in (_extract_forum(tree, node) for node in select(block, q.FORUM_NODES)) if forum
        )
        if not forums:
            continue
        name = text(select_first(block, q.CATEGORY_TITLE)) or DEFAULT_CATEGORY_NAME
        categories.append(ForumCategory(category_name=name, forums=forums))
    return tuple(categories)


@fault_isolated(tuple)
def extract_latest_topics(tree: DocumentTree, config: Config) -> tuple[Topic, ...]:
    topics = []
    for item in select(tree, q.TOPIC_ITEMS)[: config.topic_limit]:
        title_node = select_first(item, q.TOPIC_TITLE)
        if title_node is None:
            continue
        topics.append(
            Topic(
                title=text(title_node),
                author_name=text(select_first(item, q.AUTHOR_LINK)),
                publish_time=_time_text(select_first(item, q.TOPIC_TIME)),
                reply_count=parse_magnitude(text(select_first(item, q.TOPIC_REPLIES))),
                view_count=parse_magnitude(text(select_first(item, q.TOPIC_VIEWS))),
                link=tree.absolute(attr(title_node, "href")),
            )
        )
    return tuple(topics)


@fault_isolated(default_stats)
def extract_statistics(tree: DocumentTree, config: Config) -> dict[str, str]:
    stats = default_stats()
    scopes = [scope for scope in (select_first(tree, path) for path in q.STAT_SCOPES) if scope is not None]
    for key in STAT_KEYS:
        for scope in scopes:
            value = text(select_first(scope, q.STAT_VALUES[key]))
            if value:
                stats[key] = value
                break
    return stats


@fault_isolated(LoginState)
def extract_login_state(tree: DocumentTree, config: Config) -> LoginState:
    root = select_first(tree, q.DOCUMENT_ROOT)
    logged_in = attr(root, "data-logged-in").lower() == "true"
    username = text(select_first(tree, q.VISITOR_NAME)) if logged_in else ""
    return LoginState(logged_in=logged_in, username=username)


@log_extraction_step("build_feed")
def build_feed(tree: DocumentTree, config: Config | None = None) -> FeedBundle:
    """Project a homepage tree into a FeedBundle.

    Every routine is isolated: a block missing from today's markup leaves its
    field empty (or at its default) while the others are still filled in.
    """
    config = config or get_config()
    bundle = FeedBundle(
        notices=extract_notices(tree, config),
        banners=extract_banners(tree, config),
        featured=extract_featured(tree, config),
        categories=extract_categories(tree, config),
        latest_topics=extract_latest_topics(tree, config),
        stats=extract_statistics(tree, config),
        session=extract_login_state(tree, config),
    )
    logger.info(
        "Feed extracted",
        banners=len(bundle.banners),
        notices=len(bundle.notices),
        featured=len(bundle.featured),
        categories=len(bundle.categories),
        forums=bundle.forum_count,
        latest_topics=len(bundle.latest_topics),
        logged_in=bundle.session.logged_in,
    )
    return bundle
