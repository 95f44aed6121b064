"""Metric group models.

Every group carries a ``_reason``. When a group cannot be calculated it is
returned as a null group: numeric fields are None, list fields are empty and
``_reason`` says why.
"""

from typing import Literal

from pydantic import Field

from leadmetrics.models.base import OutputModel

DominantFormat = Literal["reels", "video", "image", "carousel", "mixed"]
RiskLevel = Literal["low", "medium", "high"]
ActivityStatus = Literal["active", "slowing", "dormant"]


class MetricGroup(OutputModel):
    """Base for all metric groups."""

    reason: str | None = Field(default=None, alias="_reason")

    @classmethod
    def null(cls, reason: str):
        """Build the null group for ``reason``."""
        return cls(reason=reason)

    @classmethod
    def metric_fields(cls) -> list[str]:
        """Names of the metric fields (everything except ``reason``)."""
        return [name for name in cls.model_fields if name != "reason"]

    @property
    def is_null(self) -> bool:
        return self.reason is not None


class ProfileMetrics(MetricGroup):
    """Group 1: profile-level metrics, always calculable once validated."""

    username: str
    full_name: str | None = None
    followers_count: int
    follows_count: int
    posts_count: int
    authority_ratio: float | None = None
    authority_score: float | None = None
    is_business_account: bool = False
    verified: bool = False
    has_channel: bool = False
    business_category_name: str | None = None
    has_external_link: bool = False
    external_url: str | None = None
    external_links_count: int = 0
    highlight_reel_count: int = 0
    igtv_video_count: int = 0
    has_bio: bool = False
    bio_length: int = 0


class EngagementMetrics(MetricGroup):
    """Group 2a: likes and comments over the post sample.

    ``engagement_rate`` is a decimal fraction (0.044 == 4.4%).
    """

    posts_analyzed: int | None = None
    total_likes: int | None = None
    total_comments: int | None = None
    total_engagement: int | None = None
    avg_likes_per_post: float | None = None
    avg_comments_per_post: float | None = None
    avg_engagement_per_post: float | None = None
    engagement_rate: float | None = None
    comment_to_like_ratio: float | None = None
    engagement_std_dev: float | None = None
    engagement_cv: float | None = None
    engagement_consistency: float | None = None
    min_engagement_per_post: int | None = None
    max_engagement_per_post: int | None = None
    median_engagement_per_post: float | None = None
    engagement_rate_per_post: list[float] = []


class FrequencyMetrics(MetricGroup):
    """Group 2b: posting cadence, from post timestamps."""

    posts_with_timestamps: int | None = None
    oldest_post_timestamp: str | None = None
    newest_post_timestamp: str | None = None
    posting_period_days: float | None = None
    posting_frequency: float | None = None
    days_since_last_post: float | None = None
    avg_days_between_posts: float | None = None
    time_between_posts_days: list[float] = []
    posting_consistency: float | None = None


class FormatMetrics(MetricGroup):
    """Group 2c: content format mix. Rates are percentages (0-100).

    ``video_count`` includes reels; ``other_video_count`` excludes them.
    """

    reels_count: int | None = None
    video_count: int | None = None
    other_video_count: int | None = None
    image_count: int | None = None
    carousel_count: int | None = None
    reels_rate: float | None = None
    video_rate: float | None = None
    image_rate: float | None = None
    carousel_rate: float | None = None
    format_diversity: int | None = None
    dominant_format: DominantFormat | None = None


class ContentMetrics(MetricGroup):
    """Group 2d: hashtags, mentions, captions and post settings."""

    total_hashtags: int | None = None
    avg_hashtags_per_post: float | None = None
    unique_hashtag_count: int | None = None
    hashtag_diversity: float | None = None

    total_mentions: int | None = None
    avg_mentions_per_post: float | None = None
    unique_mention_count: int | None = None

    total_caption_length: int | None = None
    avg_caption_length: float | None = None
    avg_caption_length_non_empty: float | None = None
    min_caption_length: int | None = None
    max_caption_length: int | None = None

    posts_with_location: int | None = None
    location_tagging_rate: float | None = None

    posts_with_alt_text: int | None = None
    alt_text_rate: float | None = None

    posts_with_comments_disabled: int | None = None
    comments_disabled_rate: float | None = None
    comments_enabled_rate: float | None = None

    total_tagged_users: int | None = None
    avg_tagged_users_per_post: float | None = None

    pinned_posts_count: int | None = None


class VideoMetrics(MetricGroup):
    """Group 3: view counts. Never zero-filled when views are missing."""

    video_post_count: int | None = None
    total_video_views: int | None = None
    avg_video_views: float | None = None
    min_video_views: int | None = None
    max_video_views: int | None = None
    video_view_rate: float | None = None
    video_view_to_like_ratio: float | None = None
    avg_video_duration: float | None = None


class RiskScores(MetricGroup):
    """Group 4 (risk half): heuristic fake-follower risk.

    The score stacks independently capped factors. It is an indicator that
    a profile deserves a manual look, never proof of purchased followers.
    """

    fake_follower_risk_score: float | None = None
    risk_level: RiskLevel | None = None
    expected_min_engagement_rate: float | None = None
    engagement_risk_points: float | None = None
    authority_risk_points: float | None = None
    follower_post_risk_points: float | None = None
    consistency_risk_points: float | None = None
    fake_follower_warnings: list[str] = []
    disclaimer: str | None = None


class DerivedMetrics(MetricGroup):
    """Group 4 (derived half).

    Viral-post figures are based on the sampled post window only.
    ``viral_post_rate`` divides by the account's full post count and is kept
    for existing consumers; ``sample_viral_post_rate`` divides by the sample.
    """

    content_density: float | None = None
    posts_per_week: float | None = None
    activity_status: ActivityStatus | None = None
    viral_post_count: int | None = None
    sample_viral_post_rate: float | None = None
    viral_post_rate: float | None = Field(
        default=None,
        description="Deprecated: viral sample count over the full post history.",
    )
    viral_sample_size: int | None = None


class HashtagFrequency(OutputModel):
    hashtag: str
    count: int


class MentionFrequency(OutputModel):
    mention: str
    count: int


class TextDataForAI(OutputModel):
    """Normalized text signal for downstream prompt construction."""

    biography: str = ""
    recent_captions: list[str] = []
    all_hashtags: list[str] = []
    unique_hashtags: list[str] = []
    hashtag_frequency: list[HashtagFrequency] = []
    all_mentions: list[str] = []
    unique_mentions: list[str] = []
    top_mentions: list[MentionFrequency] = []
    external_link_titles: list[str] = []
    location_names: list[str] = []


METRIC_GROUPS: tuple[type[MetricGroup], ...] = (
    ProfileMetrics,
    EngagementMetrics,
    FrequencyMetrics,
    FormatMetrics,
    ContentMetrics,
    VideoMetrics,
    RiskScores,
    DerivedMetrics,
)

# Text bag fields count as metrics for completeness reporting.
TOTAL_POSSIBLE_METRICS = (
    sum(len(group.metric_fields()) for group in METRIC_GROUPS)
    + len(TextDataForAI.model_fields)
)
