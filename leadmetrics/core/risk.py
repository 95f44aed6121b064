"""Fake-follower risk heuristic and derived metrics.

The risk score is a HEURISTIC INDICATOR. It adds up four independently
capped factors that are each common among accounts with purchased or
inactive followers, but every one of them also occurs naturally (new
accounts, brand pages with curated feeds, accounts that went quiet). A high
score means "worth a manual look", never "this account bought followers".
"""

from leadmetrics.core.calculators import NO_REFERENCE_TIME_REASON, record_partial, skip_group
from leadmetrics.core.stats import clamp, percentage
from leadmetrics.core.tally import MetricTally
from leadmetrics.logging import get_logger
from leadmetrics.models.metrics import (
    DerivedMetrics,
    EngagementMetrics,
    FrequencyMetrics,
    RiskScores,
)
from leadmetrics.models.snapshot import RawProfile

RISK_DISCLAIMER = (
    "This score is a heuristic indicator based on public engagement patterns. "
    "It is not proof of purchased or fake followers and should be reviewed manually."
)

# Factor 1: engagement below the expected minimum for the account's size.
# (follower ceiling, minimum engagement rate as a decimal fraction)
EXPECTED_MIN_ENGAGEMENT_TIERS = (
    (10_000, 0.015),
    (50_000, 0.010),
    (500_000, 0.0075),
)
EXPECTED_MIN_ENGAGEMENT_FLOOR = 0.005
# (share of the expected minimum, points)
ENGAGEMENT_RISK_STEPS = (
    (0.25, 35),
    (0.50, 25),
    (1.00, 15),
)

# Factor 2: following many more accounts than follow back.
AUTHORITY_RISK_STEPS = (
    (0.25, 25),
    (0.50, 18),
    (1.00, 10),
)

# Factor 3: audience implausibly large for the amount of content.
FOLLOWER_POST_MIN_FOLLOWERS = 10_000
FOLLOWER_POST_LARGE_ACCOUNT = 100_000
FOLLOWER_POST_NO_POSTS_POINTS = 20
# (followers per post above which, points), checked in order
FOLLOWER_POST_STEPS_SMALL = ((1_000, 20), (500, 10))
FOLLOWER_POST_STEPS_LARGE = ((5_000, 20), (2_000, 10))

# Factor 4: engagement too uniform for a low rate, or extremely volatile.
UNIFORM_CONSISTENCY_THRESHOLD = 85
UNIFORM_ENGAGEMENT_POINTS = 20
VOLATILE_CV_THRESHOLD = 2.0
VOLATILE_ENGAGEMENT_POINTS = 12

LOW_RISK_MAX = 20
MEDIUM_RISK_MAX = 50

# Derived
ACTIVE_MAX_DAYS = 14
SLOWING_MAX_DAYS = 60
VIRAL_ENGAGEMENT_MULTIPLIER = 2

_log = get_logger("risk")


def expected_min_engagement_rate(followers: int) -> float:
    """Minimum healthy engagement rate for an audience of ``followers``."""
    for ceiling, minimum in EXPECTED_MIN_ENGAGEMENT_TIERS:
        if followers < ceiling:
            return minimum
    return EXPECTED_MIN_ENGAGEMENT_FLOOR


def _engagement_points(rate: float | None, minimum: float) -> float:
    if rate is None:
        return 0
    for share, points in ENGAGEMENT_RISK_STEPS:
        if rate < minimum * share:
            return points
    return 0


def _authority_points(followers: int, following: int) -> float:
    if following <= 0:
        return 0
    authority_ratio = followers / following
    for threshold, points in AUTHORITY_RISK_STEPS:
        if authority_ratio < threshold:
            return points
    return 0


def _follower_post_points(followers: int, posts: int) -> float:
    if followers < FOLLOWER_POST_MIN_FOLLOWERS:
        return 0
    if posts <= 0:
        return FOLLOWER_POST_NO_POSTS_POINTS

    steps = (
        FOLLOWER_POST_STEPS_LARGE
        if followers >= FOLLOWER_POST_LARGE_ACCOUNT
        else FOLLOWER_POST_STEPS_SMALL
    )
    followers_per_post = followers / posts
    for threshold, points in steps:
        if followers_per_post > threshold:
            return points
    return 0


def _consistency_points(
    rate: float | None,
    minimum: float,
    consistency: float | None,
    cv: float | None,
) -> float:
    if (
        consistency is not None
        and rate is not None
        and consistency >= UNIFORM_CONSISTENCY_THRESHOLD
        and rate < minimum
    ):
        return UNIFORM_ENGAGEMENT_POINTS
    if cv is not None and cv > VOLATILE_CV_THRESHOLD:
        return VOLATILE_ENGAGEMENT_POINTS
    return 0


def risk_level(score: float) -> str:
    if score <= LOW_RISK_MAX:
        return "low"
    if score <= MEDIUM_RISK_MAX:
        return "medium"
    return "high"


def calculate_risk_scores(
    profile: RawProfile,
    engagement: EngagementMetrics,
    tally: MetricTally,
) -> RiskScores:
    """Group 4 (risk) - requires a follower count."""
    followers = profile.followers
    if followers <= 0:
        return skip_group(tally, RiskScores, "RiskScores", "Followers count unavailable")

    following, posts = profile.following, profile.total_posts
    rate = engagement.engagement_rate
    minimum = expected_min_engagement_rate(followers)

    engagement_points = _engagement_points(rate, minimum)
    authority_points = _authority_points(followers, following)
    follower_post_points = _follower_post_points(followers, posts)
    consistency_points = _consistency_points(
        rate, minimum, engagement.engagement_consistency, engagement.engagement_cv
    )

    warnings = []
    if engagement_points:
        warnings.append(
            f"Engagement rate {rate * 100:.2f}% is below the expected "
            f"{minimum * 100:.2f}% for an account of this size"
        )
    if authority_points:
        warnings.append(
            f"Follows more accounts than follow back (authority ratio "
            f"{followers / following:.2f})"
        )
    if follower_post_points:
        if posts <= 0:
            warnings.append("Large audience with no published posts")
        else:
            warnings.append(
                f"High follower-to-post ratio ({followers / posts:,.0f} followers per post)"
            )
    if consistency_points == UNIFORM_ENGAGEMENT_POINTS:
        warnings.append("Engagement is unusually uniform for its low rate")
    elif consistency_points:
        warnings.append("Engagement varies extremely between posts")

    score = round(
        clamp(engagement_points + authority_points + follower_post_points + consistency_points),
        2,
    )

    metrics = RiskScores(
        fake_follower_risk_score=score,
        risk_level=risk_level(score),
        expected_min_engagement_rate=minimum,
        engagement_risk_points=engagement_points,
        authority_risk_points=authority_points,
        follower_post_risk_points=follower_post_points,
        consistency_risk_points=consistency_points,
        fake_follower_warnings=warnings,
        disclaimer=RISK_DISCLAIMER,
    )
    record_partial(tally, metrics, "RiskScores", "Inputs unavailable")

    _log.debug(
        "risk_scores_calculated",
        score=score,
        risk_level=metrics.risk_level,
        factors=len(warnings),
    )
    return metrics


def activity_status(days_since_last_post: float | None) -> str | None:
    if days_since_last_post is None:
        return None
    if days_since_last_post <= ACTIVE_MAX_DAYS:
        return "active"
    if days_since_last_post <= SLOWING_MAX_DAYS:
        return "slowing"
    return "dormant"


def calculate_derived_metrics(
    profile: RawProfile,
    engagement: EngagementMetrics,
    frequency: FrequencyMetrics,
    tally: MetricTally,
) -> DerivedMetrics:
    """
    Group 4 (derived) - density, cadence and viral posts.

    Viral posts are counted within the sampled post window only; the
    sample average is the baseline, not the account's full history.
    """
    followers = profile.followers
    if followers <= 0 and engagement.is_null and frequency.is_null:
        return skip_group(
            tally, DerivedMetrics, "DerivedMetrics", "No followers or post data available"
        )

    content_density = None
    if followers > 0:
        content_density = round(profile.total_posts / followers * 1000, 4)

    posts_per_week = None
    if frequency.posting_frequency is not None:
        posts_per_week = round(frequency.posting_frequency / 30 * 7, 2)

    viral_count = sample_rate = full_history_rate = sample_size = None
    if not engagement.is_null and engagement.avg_engagement_per_post is not None:
        sample = [post.engagement for post in profile.latest_posts if post.has_engagement]
        sample_size = len(sample)
        baseline = sum(sample) / sample_size
        if baseline > 0:
            viral_count = sum(
                1 for value in sample if value >= baseline * VIRAL_ENGAGEMENT_MULTIPLIER
            )
        else:
            viral_count = 0
        sample_rate = percentage(viral_count, sample_size)
        full_history_rate = percentage(viral_count, profile.total_posts)

    metrics = DerivedMetrics(
        content_density=content_density,
        posts_per_week=posts_per_week,
        activity_status=activity_status(frequency.days_since_last_post),
        viral_post_count=viral_count,
        sample_viral_post_rate=sample_rate,
        viral_post_rate=full_history_rate,
        viral_sample_size=sample_size,
    )
    reasons = {}
    if not frequency.is_null and frequency.days_since_last_post is None:
        reasons["activity_status"] = NO_REFERENCE_TIME_REASON
    record_partial(
        tally, metrics, "DerivedMetrics", "Depends on unavailable metric groups", reasons=reasons
    )

    _log.debug(
        "derived_metrics_calculated",
        content_density=content_density,
        activity_status=metrics.activity_status,
        viral_post_count=viral_count,
    )
    return metrics
