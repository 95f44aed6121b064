"""Raw profile snapshot models (scraper input)."""

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from leadmetrics.core.parsing import normalize_count, parse_float, parse_post_count


def _coerce_flag(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _coerce_text(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value if isinstance(value, str) else None


class SnapshotModel(BaseModel):
    """Accepts the scraper's camelCase keys as well as snake_case names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ExternalLink(SnapshotModel):
    """Link attached to a profile (business accounts can have several)."""

    title: str | None = None
    url: str | None = None

    @field_validator("title", "url", mode="before")
    @classmethod
    def _text(cls, value):
        return _coerce_text(value)


class TaggedUser(SnapshotModel):
    """User tagged in a post."""

    id: str | None = None
    username: str | None = None
    full_name: str | None = None

    @field_validator("id", "username", "full_name", mode="before")
    @classmethod
    def _text(cls, value):
        return _coerce_text(value)


class RawPost(SnapshotModel):
    """One post from the snapshot's recent-post window."""

    id: str | None = None
    short_code: str | None = None
    caption: str | None = None
    likes_count: int | None = None
    comments_count: int | None = None
    timestamp: str | int | float | None = None
    type: str | None = None
    product_type: str | None = None
    video_view_count: int | None = None
    video_duration: float | None = None
    hashtags: list[str] = []
    mentions: list[str] = []
    tagged_users: list[TaggedUser] = []
    location_name: str | None = None
    location_id: str | None = None
    alt: str | None = None
    is_comments_disabled: bool = False
    is_pinned: bool = False

    @field_validator(
        "id", "short_code", "caption", "type", "product_type",
        "location_name", "location_id", "alt",
        mode="before",
    )
    @classmethod
    def _text(cls, value):
        return _coerce_text(value)

    @field_validator("likes_count", "comments_count", "video_view_count", mode="before")
    @classmethod
    def _count(cls, value):
        return parse_post_count(value)

    @field_validator("video_duration", mode="before")
    @classmethod
    def _duration(cls, value):
        return parse_float(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp(cls, value):
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return value
        return None

    @field_validator("hashtags", "mentions", mode="before")
    @classmethod
    def _strings(cls, value):
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    @field_validator("tagged_users", mode="before")
    @classmethod
    def _tagged(cls, value):
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, (dict, TaggedUser))]

    @field_validator("is_comments_disabled", "is_pinned", mode="before")
    @classmethod
    def _flag(cls, value):
        return _coerce_flag(value)

    @property
    def has_engagement(self) -> bool:
        return self.likes_count is not None or self.comments_count is not None

    @property
    def engagement(self) -> int:
        return (self.likes_count or 0) + (self.comments_count or 0)


class RawProfile(SnapshotModel):
    """Point-in-time capture of a public profile and its recent posts."""

    id: str | None = None
    username: str | None = None
    full_name: str | None = None
    biography: str | None = None
    external_url: str | None = None
    external_urls: list[ExternalLink] = []
    bio_links: list[ExternalLink] = []
    followers_count: int | None = None
    follows_count: int | None = None
    posts_count: int | None = None
    highlight_reel_count: int = 0
    igtv_video_count: int = 0
    verified: bool = False
    private: bool = False
    is_business_account: bool = False
    has_channel: bool = False
    business_category_name: str | None = None
    latest_posts: list[RawPost] = []
    scraped_at: str | int | float | None = None

    @field_validator(
        "id", "full_name", "biography", "external_url", "business_category_name",
        mode="before",
    )
    @classmethod
    def _text(cls, value):
        return _coerce_text(value)

    @field_validator("username", mode="before")
    @classmethod
    def _username(cls, value):
        text = _coerce_text(value)
        if text is None:
            return None
        return text.strip().lstrip("@") or None

    @field_validator("followers_count", "follows_count", "posts_count", mode="before")
    @classmethod
    def _optional_count(cls, value):
        if value is None:
            return None
        return normalize_count(value)

    @field_validator("highlight_reel_count", "igtv_video_count", mode="before")
    @classmethod
    def _count(cls, value):
        return normalize_count(value)

    @field_validator("verified", "private", "is_business_account", "has_channel", mode="before")
    @classmethod
    def _flag(cls, value):
        return _coerce_flag(value)

    @field_validator("external_urls", "bio_links", mode="before")
    @classmethod
    def _links(cls, value):
        if not isinstance(value, list):
            return []
        links = []
        for item in value:
            if isinstance(item, str):
                links.append({"url": item})
            elif isinstance(item, (dict, ExternalLink)):
                links.append(item)
        return links

    @field_validator("latest_posts", mode="before")
    @classmethod
    def _posts(cls, value):
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, (dict, RawPost))]

    @field_validator("scraped_at", mode="before")
    @classmethod
    def _scraped_at(cls, value):
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return value
        return None

    @property
    def followers(self) -> int:
        return self.followers_count or 0

    @property
    def following(self) -> int:
        return self.follows_count or 0

    @property
    def total_posts(self) -> int:
        return self.posts_count or 0
