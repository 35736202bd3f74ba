# ABOUTME: Immutable records projected from the forum homepage markup
# ABOUTME: Banners, notices, featured items, forum categories, topics, statistics and login state

from pydantic import BaseModel, ConfigDict, Field, field_validator

STAT_KEYS = ("online", "topics", "messages", "members")


class FeedRecord(BaseModel):
    """Base for homepage records: frozen, fresh per extraction call."""

    model_config = ConfigDict(frozen=True)


class Banner(FeedRecord):
    image_url: str = Field(..., description="Absolute URL of the slide image")
    link: str = Field("", description="Target of the slide, empty when the slide is not a link")


class Notice(FeedRecord):
    title: str = Field(..., min_length=1)
    link: str = ""


class Featured(FeedRecord):
    title: str
    author_name: str
    publish_time: str = ""
    summary: str = ""
    author_avatar: str = Field(..., description="Absolute avatar URL, placeholder when the item has none")
    link: str = ""


class Forum(FeedRecord):
    forum_name: str
    forum_desc: str = ""
    topic_count: int = Field(0, ge=0)
    msg_count: int = Field(0, ge=0)
    latest_topic_title: str = ""
    link: str = ""


class ForumCategory(FeedRecord):
    category_name: str
    forums: tuple[Forum, ...] = ()


class Topic(FeedRecord):
    title: str
    author_name: str = ""
    publish_time: str = ""
    reply_count: int = Field(0, ge=0)
    view_count: int = Field(0, ge=0)
    link: str = ""


class LoginState(FeedRecord):
    logged_in: bool = False
    username: str = ""


def default_stats() -> dict[str, str]:
    return {key: "0" for key in STAT_KEYS}


class FeedBundle(FeedRecord):
    """Everything the homepage yields, in document order."""

    banners: tuple[Banner, ...] = ()
    notices: tuple[Notice, ...] = ()
    featured: tuple[Featured, ...] = ()
    categories: tuple[ForumCategory, ...] = ()
    latest_topics: tuple[Topic, ...] = ()
    stats: dict[str, str] = Field(default_factory=default_stats)
    session: LoginState = Field(default_factory=LoginState)

    @field_validator("stats")
    @classmethod
    def _closed_stat_keys(cls, value: dict[str, str]) -> dict[str, str]:
        # Exactly the four known keys, missing ones default to "0"
        return {key: value.get(key) or "0" for key in STAT_KEYS}

    @property
    def forum_count(self) -> int:
        return sum(len(category.forums) for category in self.categories)
