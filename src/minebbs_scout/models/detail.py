# ABOUTME: Records produced by identifier resolution and related-resource aggregation
# ABOUTME: CanonicalEntity plus typed summaries of resources, threads, posts and game versions

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, JsonValue

EntityType = Literal["resource", "thread"]

RELATED_KEYS: dict[str, tuple[str, ...]] = {
    "resource": ("stats", "updates", "history", "discussion"),
    "thread": ("thread", "posts", "poll"),
}


class CanonicalEntity(BaseModel):
    """A resolved entity with its related sub-resources.

    A key missing from ``related`` means that sub-fetch failed or was not
    successful; a key mapped to an empty list or object means it succeeded with
    nothing in it.
    """

    model_config = ConfigDict(frozen=True)

    entity_id: str = Field(..., description="Identifier the backend accepted")
    entity_type: EntityType
    source_url: str = ""
    basic: JsonValue = Field(..., description="The data object of the lookup response")
    related: dict[str, JsonValue] = Field(default_factory=dict)

    @property
    def missing_related(self) -> list[str]:
        return [key for key in RELATED_KEYS[self.entity_type] if key not in self.related]


class UpdateEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    version: str = ""


class ResourceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    version: str = ""
    author_name: str = ""
    icon_url: str = ""
    labels: tuple[str, ...] = ()
    description_html: str = ""
    downloads: str = "-"
    views: str = "-"
    rating: str = "-"
    last_update: str = "未知"
    custom_fields: dict[str, str] = Field(default_factory=dict)
    updates: tuple[UpdateEntry, ...] = ()
    discussion_thread_id: str = ""


class PollResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    response: str = ""
    percentage: str = ""


class Poll(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    responses: tuple[PollResponse, ...] = ()


class ThreadSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    prefix: str = ""
    breadcrumbs: str = ""
    poll: Poll | None = None


class Post(BaseModel):
    model_config = ConfigDict(frozen=True)

    author_name: str = "Guest"
    author_title: str = ""
    avatar_url: str = ""
    content_html: str = ""
    date_text: str = ""
    reaction_count: int = Field(0, ge=0)


class PostPage(BaseModel):
    """One page of a discussion or thread."""

    model_config = ConfigDict(frozen=True)

    thread_id: str
    page: int = Field(1, ge=1)
    posts: tuple[Post, ...] = ()


class GameVersion(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str = "未知版本"
    size: str = ""
    date: str = ""
    downloads: str = "0"
    description: str = "暂无更新说明"
    share_url: str = ""
    download_url: str = ""
    mirror_url: str = ""


class VersionPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int = Field(1, ge=1)
    total_pages: int = Field(1, ge=1)
    versions: tuple[GameVersion, ...] = ()

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages
