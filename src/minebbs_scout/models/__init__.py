# ABOUTME: Domain records produced by the extraction engine
# ABOUTME: Homepage feed records and resolved-entity records

from .detail import (
    RELATED_KEYS,
    CanonicalEntity,
    EntityType,
    GameVersion,
    Poll,
    PollResponse,
    Post,
    PostPage,
    ResourceSummary,
    ThreadSummary,
    UpdateEntry,
    VersionPage,
)
from .feed import (
    STAT_KEYS,
    Banner,
    Featured,
    FeedBundle,
    Forum,
    ForumCategory,
    LoginState,
    Notice,
    Topic,
)

__all__ = [
    "RELATED_KEYS",
    "STAT_KEYS",
    "Banner",
    "CanonicalEntity",
    "EntityType",
    "Featured",
    "FeedBundle",
    "Forum",
    "ForumCategory",
    "GameVersion",
    "LoginState",
    "Notice",
    "Poll",
    "PollResponse",
    "Post",
    "PostPage",
    "ResourceSummary",
    "ThreadSummary",
    "Topic",
    "UpdateEntry",
    "VersionPage",
]
