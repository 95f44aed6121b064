"""Flattened, storage-ready extraction record."""

from pydantic import ConfigDict

from leadmetrics.models.base import OutputModel
from leadmetrics.models.metrics import (
    ActivityStatus,
    DominantFormat,
    HashtagFrequency,
    MentionFrequency,
    RiskLevel,
)


class ExtractedRecord(OutputModel):
    """One flat row per extraction.

    Every field is required (None is an allowed value where noted by the
    type), so a mapping that forgets a field fails at construction instead of
    silently dropping it.
    """

    model_config = ConfigDict(extra="forbid")

    version: str
    extracted_at: str | None
    username: str
    sample_size: int
    total_post_count: int

    # Profile
    followers_count: int
    follows_count: int
    posts_count: int
    authority_ratio: float | None
    authority_score: float | None
    is_business_account: bool
    verified: bool
    has_channel: bool
    business_category_name: str | None
    has_external_link: bool
    external_url: str | None
    external_links_count: int
    highlight_reel_count: int
    has_bio: bool
    bio_length: int

    # Engagement
    avg_likes_per_post: float | None
    avg_comments_per_post: float | None
    avg_engagement_per_post: float | None
    engagement_rate: float | None
    comment_to_like_ratio: float | None
    engagement_consistency: float | None

    # Frequency
    posting_frequency: float | None
    days_since_last_post: float | None
    avg_days_between_posts: float | None
    posting_consistency: float | None

    # Format
    reels_rate: float | None
    video_rate: float | None
    image_rate: float | None
    carousel_rate: float | None
    format_diversity: int | None
    dominant_format: DominantFormat | None

    # Content
    avg_hashtags_per_post: float | None
    unique_hashtag_count: int | None
    avg_caption_length: float | None
    location_tagging_rate: float | None
    alt_text_rate: float | None
    comments_enabled_rate: float | None

    # Video
    avg_video_views: float | None
    video_view_rate: float | None
    video_view_to_like_ratio: float | None

    # Risk
    fake_follower_risk_score: float | None
    risk_level: RiskLevel | None
    fake_follower_warning: str | None

    # Derived
    content_density: float | None
    activity_status: ActivityStatus | None
    viral_post_count: int | None
    sample_viral_post_rate: float | None
    viral_post_rate: float | None

    # Composite scores
    engagement_health: float
    content_sophistication: float
    account_maturity: float
    fake_follower_risk: float
    opportunity_score: float

    # Gaps
    engagement_gap: bool
    content_gap: bool
    conversion_gap: bool
    platform_gap: bool

    # Tiers
    lead_tier: str
    audience_scale: str

    # Text signals
    top_hashtags: list[HashtagFrequency]
    top_mentions: list[MentionFrequency]
