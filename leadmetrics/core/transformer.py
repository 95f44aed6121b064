"""Flattening of the metric groups into a storage-ready record."""

from leadmetrics.core.scores import ScoreCalculationResult
from leadmetrics.core.tiers import audience_scale, lead_tier
from leadmetrics.models.metrics import (
    ContentMetrics,
    DerivedMetrics,
    EngagementMetrics,
    FormatMetrics,
    FrequencyMetrics,
    ProfileMetrics,
    RiskScores,
    TextDataForAI,
    VideoMetrics,
)
from leadmetrics.models.record import ExtractedRecord

RECORD_SCHEMA_VERSION = "2.0"

HEALTHY_RISK_MAX = 20
NOTABLE_RISK_MAX = 50


def fake_follower_warning(score: float | None, warnings: list[str]) -> str | None:
    """
    Reader-facing summary of the risk heuristic.

    Worded as something to look at, never as a finding of fake followers.
    """
    if score is None:
        return None
    if score <= HEALTHY_RISK_MAX:
        return "Engagement patterns look healthy and authentic"
    if score <= NOTABLE_RISK_MAX:
        if warnings:
            return f"Some engagement patterns to note: {warnings[0]}"
        return "Some engagement patterns to note; a quick manual review is suggested"
    if warnings:
        return f"Worth reviewing: {warnings[0]}"
    return "Worth reviewing: several engagement patterns differ from typical accounts"


def flatten_extraction(
    profile: ProfileMetrics,
    engagement: EngagementMetrics,
    frequency: FrequencyMetrics,
    formats: FormatMetrics,
    content: ContentMetrics,
    video: VideoMetrics,
    risk: RiskScores,
    derived: DerivedMetrics,
    text: TextDataForAI,
    score_result: ScoreCalculationResult,
    extracted_at: str | None,
    sample_size: int,
) -> ExtractedRecord:
    """
    Map the metric groups into one flat ExtractedRecord.

    Args:
        profile..derived: Metric groups (null groups map to None fields)
        text: Text bag, source of the top hashtags and mentions
        score_result: Composite scores and gap flags
        extracted_at: ISO reference time of the extraction, None when unknown
        sample_size: Number of posts in the snapshot

    Returns:
        Validated ExtractedRecord
    """
    scores, gaps = score_result.scores, score_result.gaps

    return ExtractedRecord(
        version=RECORD_SCHEMA_VERSION,
        extracted_at=extracted_at,
        username=profile.username,
        sample_size=sample_size,
        total_post_count=profile.posts_count,
        # Profile
        followers_count=profile.followers_count,
        follows_count=profile.follows_count,
        posts_count=profile.posts_count,
        authority_ratio=profile.authority_ratio,
        authority_score=profile.authority_score,
        is_business_account=profile.is_business_account,
        verified=profile.verified,
        has_channel=profile.has_channel,
        business_category_name=profile.business_category_name,
        has_external_link=profile.has_external_link,
        external_url=profile.external_url,
        external_links_count=profile.external_links_count,
        highlight_reel_count=profile.highlight_reel_count,
        has_bio=profile.has_bio,
        bio_length=profile.bio_length,
        # Engagement
        avg_likes_per_post=engagement.avg_likes_per_post,
        avg_comments_per_post=engagement.avg_comments_per_post,
        avg_engagement_per_post=engagement.avg_engagement_per_post,
        engagement_rate=engagement.engagement_rate,
        comment_to_like_ratio=engagement.comment_to_like_ratio,
        engagement_consistency=engagement.engagement_consistency,
        # Frequency
        posting_frequency=frequency.posting_frequency,
        days_since_last_post=frequency.days_since_last_post,
        avg_days_between_posts=frequency.avg_days_between_posts,
        posting_consistency=frequency.posting_consistency,
        # Format
        reels_rate=formats.reels_rate,
        video_rate=formats.video_rate,
        image_rate=formats.image_rate,
        carousel_rate=formats.carousel_rate,
        format_diversity=formats.format_diversity,
        dominant_format=formats.dominant_format,
        # Content
        avg_hashtags_per_post=content.avg_hashtags_per_post,
        unique_hashtag_count=content.unique_hashtag_count,
        avg_caption_length=content.avg_caption_length,
        location_tagging_rate=content.location_tagging_rate,
        alt_text_rate=content.alt_text_rate,
        comments_enabled_rate=content.comments_enabled_rate,
        # Video
        avg_video_views=video.avg_video_views,
        video_view_rate=video.video_view_rate,
        video_view_to_like_ratio=video.video_view_to_like_ratio,
        # Risk
        fake_follower_risk_score=risk.fake_follower_risk_score,
        risk_level=risk.risk_level,
        fake_follower_warning=fake_follower_warning(
            risk.fake_follower_risk_score, risk.fake_follower_warnings
        ),
        # Derived
        content_density=derived.content_density,
        activity_status=derived.activity_status,
        viral_post_count=derived.viral_post_count,
        sample_viral_post_rate=derived.sample_viral_post_rate,
        viral_post_rate=derived.viral_post_rate,
        # Composite scores
        engagement_health=scores.engagement_health,
        content_sophistication=scores.content_sophistication,
        account_maturity=scores.account_maturity,
        fake_follower_risk=scores.fake_follower_risk,
        opportunity_score=scores.opportunity_score,
        # Gaps
        engagement_gap=gaps.engagement_gap,
        content_gap=gaps.content_gap,
        conversion_gap=gaps.conversion_gap,
        platform_gap=gaps.platform_gap,
        # Tiers
        lead_tier=lead_tier(scores.opportunity_score),
        audience_scale=audience_scale(profile.followers_count),
        # Text signals
        top_hashtags=text.hashtag_frequency,
        top_mentions=text.top_mentions,
    )
