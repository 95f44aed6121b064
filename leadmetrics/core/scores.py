"""Composite scores and opportunity gaps.

Pure functions of the metric groups. Missing values count as 0, and every
score is clamped to 0-100 before rounding.
"""

from dataclasses import dataclass

from leadmetrics.core.stats import clamp, safe_number
from leadmetrics.models.metrics import (
    ContentMetrics,
    EngagementMetrics,
    FormatMetrics,
    FrequencyMetrics,
    ProfileMetrics,
    RiskScores,
)
from leadmetrics.models.result import CompositeScores, GapFlags

# Engagement health
ENGAGEMENT_RATE_WEIGHT = 15
ENGAGEMENT_CONSISTENCY_WEIGHT = 0.3
COMMENT_TO_LIKE_WEIGHT = 200

# Content sophistication
HASHTAG_WEIGHT = 3
CAPTION_LENGTH_DIVISOR = 10
LOCATION_RATE_WEIGHT = 0.3
FORMAT_DIVERSITY_WEIGHT = 10

# Account maturity
POSTING_CONSISTENCY_WEIGHT = 0.4
HIGHLIGHT_POINTS = 5
HIGHLIGHT_POINTS_CAP = 25
BIO_POINTS = 10
EXTERNAL_LINK_POINTS = 15
BUSINESS_ACCOUNT_POINTS = 10

# Opportunity
OPPORTUNITY_WEIGHTS = {
    "engagement_health": 0.30,
    "content_sophistication": 0.25,
    "account_maturity": 0.25,
    "authenticity": 0.20,
}

# Gaps
ENGAGEMENT_GAP_RATE = 0.01
ENGAGEMENT_GAP_MIN_FOLLOWERS = 1_000
CONTENT_GAP_MIN_HASHTAGS = 3
CONTENT_GAP_MIN_CAPTION_LENGTH = 100
CONTENT_GAP_MIN_LOCATION_RATE = 10
CONVERSION_GAP_MIN_FOLLOWERS = 5_000
PLATFORM_GAP_MIN_REELS_RATE = 20


@dataclass(frozen=True)
class ScoreCalculationResult:
    scores: CompositeScores
    gaps: GapFlags


def _score(value: float) -> float:
    return round(clamp(value), 2)


def engagement_health(engagement: EngagementMetrics) -> float:
    rate_percent = safe_number(engagement.engagement_rate) * 100
    return _score(
        rate_percent * ENGAGEMENT_RATE_WEIGHT
        + safe_number(engagement.engagement_consistency) * ENGAGEMENT_CONSISTENCY_WEIGHT
        + safe_number(engagement.comment_to_like_ratio) * COMMENT_TO_LIKE_WEIGHT
    )


def content_sophistication(content: ContentMetrics, formats: FormatMetrics) -> float:
    return _score(
        safe_number(content.avg_hashtags_per_post) * HASHTAG_WEIGHT
        + safe_number(content.avg_caption_length) / CAPTION_LENGTH_DIVISOR
        + safe_number(content.location_tagging_rate) * LOCATION_RATE_WEIGHT
        + safe_number(formats.format_diversity) * FORMAT_DIVERSITY_WEIGHT
    )


def account_maturity(profile: ProfileMetrics, frequency: FrequencyMetrics) -> float:
    score = safe_number(frequency.posting_consistency) * POSTING_CONSISTENCY_WEIGHT
    score += min(profile.highlight_reel_count * HIGHLIGHT_POINTS, HIGHLIGHT_POINTS_CAP)
    if profile.has_bio:
        score += BIO_POINTS
    if profile.has_external_link:
        score += EXTERNAL_LINK_POINTS
    if profile.is_business_account:
        score += BUSINESS_ACCOUNT_POINTS
    return _score(score)


def detect_gaps(
    profile: ProfileMetrics,
    engagement: EngagementMetrics,
    formats: FormatMetrics,
    content: ContentMetrics,
) -> GapFlags:
    """Business-side opportunity signals."""
    rate = safe_number(engagement.engagement_rate)
    return GapFlags(
        engagement_gap=(
            rate < ENGAGEMENT_GAP_RATE
            and profile.followers_count > ENGAGEMENT_GAP_MIN_FOLLOWERS
        ),
        content_gap=(
            safe_number(content.avg_hashtags_per_post) < CONTENT_GAP_MIN_HASHTAGS
            or safe_number(content.avg_caption_length) < CONTENT_GAP_MIN_CAPTION_LENGTH
            or safe_number(content.location_tagging_rate) < CONTENT_GAP_MIN_LOCATION_RATE
        ),
        conversion_gap=(
            not profile.has_external_link
            and (
                profile.is_business_account
                or profile.followers_count > CONVERSION_GAP_MIN_FOLLOWERS
            )
        ),
        platform_gap=safe_number(formats.reels_rate) < PLATFORM_GAP_MIN_REELS_RATE,
    )


def calculate_scores(
    profile: ProfileMetrics,
    engagement: EngagementMetrics,
    frequency: FrequencyMetrics,
    formats: FormatMetrics,
    content: ContentMetrics,
    risk: RiskScores,
) -> ScoreCalculationResult:
    """Compute the five composite scores and the four gap flags."""
    health = engagement_health(engagement)
    sophistication = content_sophistication(content, formats)
    maturity = account_maturity(profile, frequency)
    fake_risk = _score(safe_number(risk.fake_follower_risk_score))

    opportunity = _score(
        health * OPPORTUNITY_WEIGHTS["engagement_health"]
        + sophistication * OPPORTUNITY_WEIGHTS["content_sophistication"]
        + maturity * OPPORTUNITY_WEIGHTS["account_maturity"]
        + (100 - fake_risk) * OPPORTUNITY_WEIGHTS["authenticity"]
    )

    scores = CompositeScores(
        engagement_health=health,
        content_sophistication=sophistication,
        account_maturity=maturity,
        fake_follower_risk=fake_risk,
        opportunity_score=opportunity,
    )
    return ScoreCalculationResult(
        scores=scores,
        gaps=detect_gaps(profile, engagement, formats, content),
    )
