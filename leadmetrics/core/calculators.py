"""Metric group calculators.

Each calculator takes the validated profile, the availability flags and a
MetricTally, and returns either a computed group or the group's null form
with a ``_reason``. Missing data never raises.
"""

import math
import statistics
from datetime import datetime

from leadmetrics.core.parsing import normalize_hashtag, normalize_mention, parse_timestamp, to_iso
from leadmetrics.core.stats import (
    clamp,
    coefficient_of_variation,
    median,
    percentage,
    ratio,
    std_dev,
)
from leadmetrics.core.tally import MetricTally
from leadmetrics.logging import get_logger
from leadmetrics.models.metrics import (
    ContentMetrics,
    EngagementMetrics,
    FormatMetrics,
    FrequencyMetrics,
    ProfileMetrics,
    VideoMetrics,
)
from leadmetrics.models.snapshot import RawPost, RawProfile
from leadmetrics.models.validation import DataAvailabilityFlags

# Authority: log10(followers / following) * 25, so a 10x ratio scores 25
# and a 10,000x ratio scores 100.
AUTHORITY_LOG_MULTIPLIER = 25
# Accounts following nobody get a perfect score only with a real audience.
AUTHORITY_MIN_FOLLOWERS = 100

# Fresh posts are still collecting engagement; scale them up before
# comparing against older posts.
RECENT_POST_HOURS = 24
RECENT_POST_WEIGHT = 0.5
WEEK_OLD_POST_HOURS = 24 * 7
WEEK_OLD_POST_WEIGHT = 0.8
SETTLED_POST_WEIGHT = 1.0

# postingConsistency = 100 / (1 + stdDev(gaps) / 5)
POSTING_CONSISTENCY_DIVISOR = 5
DAYS_PER_MONTH = 30
SECONDS_PER_DAY = 86_400

DOMINANT_FORMAT_SHARE = 0.5

NO_REFERENCE_TIME_REASON = "No reference time available"

_log = get_logger("calculators")


def skip_group(tally: MetricTally, group_cls, group: str, reason: str):
    _log.info("metric_group_skipped", group=group, reason=reason)
    tally.skip(group, reason, group_cls.metric_fields())
    return group_cls.null(reason)


# ---------------------------------------------------------------------------
# Group 1: profile
# ---------------------------------------------------------------------------

def authority_score(followers: int, following: int) -> float | None:
    """
    Log-scaled authority, 0-100.

    following == 0 is a special case: a perfect score when the account has
    at least AUTHORITY_MIN_FOLLOWERS, otherwise undefined (None).
    """
    if following <= 0:
        return 100.0 if followers >= AUTHORITY_MIN_FOLLOWERS else None
    if followers <= 0:
        return 0.0
    return round(clamp(math.log10(followers / following) * AUTHORITY_LOG_MULTIPLIER), 2)


def _external_links(profile: RawProfile) -> set[str]:
    urls = {profile.external_url} if profile.external_url else set()
    urls |= {link.url for link in profile.external_urls if link.url}
    urls |= {link.url for link in profile.bio_links if link.url}
    return urls


def calculate_profile_metrics(profile: RawProfile, tally: MetricTally) -> ProfileMetrics:
    """Group 1 - always calculable once the snapshot is validated."""
    followers, following = profile.followers, profile.following

    authority_ratio = ratio(followers, following)
    score = authority_score(followers, following)

    links = _external_links(profile)
    biography = profile.biography or ""

    metrics = ProfileMetrics(
        username=profile.username,
        full_name=profile.full_name,
        followers_count=followers,
        follows_count=following,
        posts_count=profile.total_posts,
        authority_ratio=authority_ratio,
        authority_score=score,
        is_business_account=profile.is_business_account,
        verified=profile.verified,
        has_channel=profile.has_channel,
        business_category_name=profile.business_category_name or None,
        has_external_link=bool(links),
        external_url=profile.external_url or None,
        external_links_count=len(links),
        highlight_reel_count=profile.highlight_reel_count,
        igtv_video_count=profile.igtv_video_count,
        has_bio=bool(biography),
        bio_length=len(biography),
    )

    skipped = [
        name for name, value in (("authority_ratio", authority_ratio), ("authority_score", score))
        if value is None
    ]
    if skipped:
        tally.skip("ProfileMetrics", "Following count is 0", skipped)
    tally.record(len(ProfileMetrics.metric_fields()) - len(skipped))

    _log.debug(
        "profile_metrics_calculated",
        followers=followers,
        following=following,
        authority_ratio=authority_ratio,
        authority_score=score,
    )
    return metrics


# ---------------------------------------------------------------------------
# Group 2a: engagement
# ---------------------------------------------------------------------------

def newest_post_time(profile: RawProfile) -> datetime | None:
    """Latest parseable post timestamp in the sample."""
    timestamps = [
        parsed for parsed in (parse_timestamp(post.timestamp) for post in profile.latest_posts)
        if parsed is not None
    ]
    return max(timestamps, default=None)


def time_weight(post_time: datetime | None, as_of: datetime | None) -> float:
    """Divisor applied to a post's engagement according to its age."""
    if post_time is None or as_of is None:
        return SETTLED_POST_WEIGHT
    age_hours = (as_of - post_time).total_seconds() / 3600
    if age_hours < RECENT_POST_HOURS:
        return RECENT_POST_WEIGHT
    if age_hours < WEEK_OLD_POST_HOURS:
        return WEEK_OLD_POST_WEIGHT
    return SETTLED_POST_WEIGHT


def calculate_engagement_metrics(
    profile: RawProfile,
    flags: DataAvailabilityFlags,
    tally: MetricTally,
    as_of: datetime | None,
) -> EngagementMetrics:
    """Group 2a - requires posts with like or comment counts.

    Post ages are measured from ``as_of``, or from the newest post when no
    reference time is known.
    """
    if not flags.has_posts:
        return skip_group(tally, EngagementMetrics, "EngagementMetrics", "No posts available")
    if not flags.has_engagement_data:
        return skip_group(tally, EngagementMetrics, "EngagementMetrics", "Posts lack engagement data")

    posts = [post for post in profile.latest_posts if post.has_engagement]
    post_count = len(posts)
    followers = profile.followers

    engagements = [post.engagement for post in posts]
    total_likes = sum(post.likes_count or 0 for post in posts)
    total_comments = sum(post.comments_count or 0 for post in posts)
    total_engagement = total_likes + total_comments

    avg_likes = total_likes / post_count
    avg_comments = total_comments / post_count
    avg_engagement = total_engagement / post_count

    engagement_rate = None
    rate_per_post: list[float] = []
    if followers > 0:
        engagement_rate = round(clamp(avg_engagement / followers, 0.0, 1.0), 6)
        rate_per_post = [round(value / followers, 6) for value in engagements]

    comment_to_like = ratio(avg_comments, avg_likes, 3)

    if as_of is None:
        as_of = newest_post_time(profile)

    # Coefficient of variation is scale free, so weighting raw engagement
    # gives the same CV as weighting per-post rates.
    weighted = [
        post.engagement / time_weight(parse_timestamp(post.timestamp), as_of)
        for post in posts
    ]
    cv = coefficient_of_variation(weighted)
    consistency = round(100 / (1 + cv), 2) if cv is not None else None

    weighted_std = None
    if followers > 0:
        deviation = std_dev([value / followers for value in weighted])
        weighted_std = round(deviation, 6) if deviation is not None else None

    metrics = EngagementMetrics(
        posts_analyzed=post_count,
        total_likes=total_likes,
        total_comments=total_comments,
        total_engagement=total_engagement,
        avg_likes_per_post=round(avg_likes, 2),
        avg_comments_per_post=round(avg_comments, 2),
        avg_engagement_per_post=round(avg_engagement, 2),
        engagement_rate=engagement_rate,
        comment_to_like_ratio=comment_to_like,
        engagement_std_dev=weighted_std,
        engagement_cv=round(cv, 4) if cv is not None else None,
        engagement_consistency=consistency,
        min_engagement_per_post=min(engagements),
        max_engagement_per_post=max(engagements),
        median_engagement_per_post=median(engagements),
        engagement_rate_per_post=rate_per_post,
    )

    record_partial(tally, metrics, "EngagementMetrics", "Insufficient data for ratio or consistency")
    _log.debug(
        "engagement_metrics_calculated",
        posts_analyzed=post_count,
        engagement_rate=engagement_rate,
        engagement_consistency=consistency,
    )
    return metrics


def record_partial(
    tally: MetricTally,
    metrics,
    group: str,
    reason: str,
    reasons: dict[str, str] | None = None,
) -> None:
    """
    Count the computed fields of a group; fields left None are skipped.

    ``reasons`` maps individual fields to a more specific skip reason.
    """
    reasons = reasons or {}
    missing = [
        name for name in metrics.metric_fields()
        if getattr(metrics, name) is None
    ]
    tally.record(len(metrics.metric_fields()) - len(missing))
    by_reason: dict[str, list[str]] = {}
    for name in missing:
        by_reason.setdefault(reasons.get(name, reason), []).append(name)
    for skip_reason, fields in by_reason.items():
        tally.skip(group, skip_reason, fields)


# ---------------------------------------------------------------------------
# Group 2b: posting frequency
# ---------------------------------------------------------------------------

def calculate_frequency_metrics(
    profile: RawProfile,
    flags: DataAvailabilityFlags,
    tally: MetricTally,
    as_of: datetime | None,
) -> FrequencyMetrics:
    """Group 2b - requires posts with parseable timestamps.

    ``days_since_last_post`` stays null without a reference time.
    """
    if not flags.has_posts:
        return skip_group(tally, FrequencyMetrics, "FrequencyMetrics", "No posts available")
    if not flags.has_timestamps:
        return skip_group(tally, FrequencyMetrics, "FrequencyMetrics", "Posts lack timestamps")

    timestamps = sorted(
        parsed for parsed in (parse_timestamp(post.timestamp) for post in profile.latest_posts)
        if parsed is not None
    )
    oldest, newest = timestamps[0], timestamps[-1]

    period_days = (newest - oldest).total_seconds() / SECONDS_PER_DAY
    days_since_last = None
    if as_of is not None:
        days_since_last = round(max(0.0, (as_of - newest).total_seconds() / SECONDS_PER_DAY), 2)

    posting_frequency = None
    if period_days > 0:
        posting_frequency = round(len(timestamps) / period_days * DAYS_PER_MONTH, 2)

    gaps = [
        (later - earlier).total_seconds() / SECONDS_PER_DAY
        for earlier, later in zip(timestamps, timestamps[1:])
    ]
    avg_gap = round(statistics.fmean(gaps), 2) if gaps else None

    posting_consistency = None
    gap_std = std_dev(gaps)
    if len(gaps) > 1 and gap_std is not None:
        posting_consistency = round(100 / (1 + gap_std / POSTING_CONSISTENCY_DIVISOR), 2)

    metrics = FrequencyMetrics(
        posts_with_timestamps=len(timestamps),
        oldest_post_timestamp=to_iso(oldest),
        newest_post_timestamp=to_iso(newest),
        posting_period_days=round(period_days, 2),
        posting_frequency=posting_frequency,
        days_since_last_post=days_since_last,
        avg_days_between_posts=avg_gap,
        time_between_posts_days=[round(gap, 2) for gap in gaps],
        posting_consistency=posting_consistency,
    )

    record_partial(
        tally,
        metrics,
        "FrequencyMetrics",
        "Too few timestamped posts",
        reasons={"days_since_last_post": NO_REFERENCE_TIME_REASON},
    )
    _log.debug(
        "frequency_metrics_calculated",
        posting_frequency=posting_frequency,
        days_since_last_post=metrics.days_since_last_post,
        posting_consistency=posting_consistency,
    )
    return metrics


# ---------------------------------------------------------------------------
# Group 2c: content format
# ---------------------------------------------------------------------------

def classify_post(post: RawPost) -> str | None:
    """Return 'reels', 'video', 'image', 'carousel', or None if unknown.

    Reels are the short-form subset of videos; each post lands in one bucket.
    """
    is_reel = post.product_type == "clips"
    if post.type == "Video" or is_reel:
        return "reels" if is_reel else "video"
    if post.type == "Image":
        return "image"
    if post.type == "Sidecar":
        return "carousel"
    return None


def calculate_format_metrics(
    profile: RawProfile,
    flags: DataAvailabilityFlags,
    tally: MetricTally,
) -> FormatMetrics:
    """Group 2c - requires posts."""
    if not flags.has_posts:
        return skip_group(tally, FormatMetrics, "FormatMetrics", "No posts available")

    posts = profile.latest_posts
    post_count = len(posts)

    counts = {"reels": 0, "video": 0, "image": 0, "carousel": 0}
    for post in posts:
        kind = classify_post(post)
        if kind is not None:
            counts[kind] += 1

    video_count = counts["reels"] + counts["video"]
    diversity = sum(1 for count in counts.values() if count > 0)

    # sorted() is stable, so ties keep reels > video > image > carousel order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    (top_format, top_count), (_, second_count) = ranked[0], ranked[1]

    dominant = None
    if top_count > post_count * DOMINANT_FORMAT_SHARE:
        dominant = top_format
    elif top_count > 0 and second_count > 0:
        dominant = "mixed"

    metrics = FormatMetrics(
        reels_count=counts["reels"],
        video_count=video_count,
        other_video_count=counts["video"],
        image_count=counts["image"],
        carousel_count=counts["carousel"],
        reels_rate=percentage(counts["reels"], post_count),
        video_rate=percentage(video_count, post_count),
        image_rate=percentage(counts["image"], post_count),
        carousel_rate=percentage(counts["carousel"], post_count),
        format_diversity=diversity,
        dominant_format=dominant,
    )

    record_partial(tally, metrics, "FormatMetrics", "No format holds a majority")
    _log.debug("format_metrics_calculated", diversity=diversity, dominant_format=dominant, **counts)
    return metrics


# ---------------------------------------------------------------------------
# Group 2d: content quality
# ---------------------------------------------------------------------------

def normalized_hashtags(post: RawPost) -> list[str]:
    return [tag for tag in map(normalize_hashtag, post.hashtags) if tag]


def normalized_mentions(post: RawPost) -> list[str]:
    return [name for name in map(normalize_mention, post.mentions) if name]


def calculate_content_metrics(
    profile: RawProfile,
    flags: DataAvailabilityFlags,
    tally: MetricTally,
) -> ContentMetrics:
    """Group 2d - requires posts."""
    if not flags.has_posts:
        return skip_group(tally, ContentMetrics, "ContentMetrics", "No posts available")

    posts = profile.latest_posts
    post_count = len(posts)

    hashtags = [tag for post in posts for tag in normalized_hashtags(post)]
    mentions = [name for post in posts for name in normalized_mentions(post)]
    unique_hashtags = len(set(hashtags))

    caption_lengths = [len(post.caption or "") for post in posts]
    non_empty = [length for length in caption_lengths if length > 0]
    total_caption_length = sum(caption_lengths)

    with_location = sum(1 for post in posts if post.location_name)
    with_alt_text = sum(1 for post in posts if post.alt)
    comments_disabled = sum(1 for post in posts if post.is_comments_disabled)
    disabled_rate = percentage(comments_disabled, post_count)
    tagged_users = sum(len(post.tagged_users) for post in posts)

    metrics = ContentMetrics(
        total_hashtags=len(hashtags),
        avg_hashtags_per_post=round(len(hashtags) / post_count, 2),
        unique_hashtag_count=unique_hashtags,
        hashtag_diversity=ratio(unique_hashtags, len(hashtags), 4),
        total_mentions=len(mentions),
        avg_mentions_per_post=round(len(mentions) / post_count, 2),
        unique_mention_count=len(set(mentions)),
        total_caption_length=total_caption_length,
        avg_caption_length=round(total_caption_length / post_count, 2),
        avg_caption_length_non_empty=(
            round(statistics.fmean(non_empty), 2) if non_empty else None
        ),
        min_caption_length=min(caption_lengths),
        max_caption_length=max(caption_lengths),
        posts_with_location=with_location,
        location_tagging_rate=percentage(with_location, post_count),
        posts_with_alt_text=with_alt_text,
        alt_text_rate=percentage(with_alt_text, post_count),
        posts_with_comments_disabled=comments_disabled,
        comments_disabled_rate=disabled_rate,
        comments_enabled_rate=round(100 - disabled_rate, 2),
        total_tagged_users=tagged_users,
        avg_tagged_users_per_post=round(tagged_users / post_count, 2),
        pinned_posts_count=sum(1 for post in posts if post.is_pinned),
    )

    record_partial(tally, metrics, "ContentMetrics", "No hashtags or captions to summarize")
    _log.debug(
        "content_metrics_calculated",
        total_hashtags=metrics.total_hashtags,
        unique_hashtags=unique_hashtags,
        avg_caption_length=metrics.avg_caption_length,
    )
    return metrics


# ---------------------------------------------------------------------------
# Group 3: video
# ---------------------------------------------------------------------------

def calculate_video_metrics(
    profile: RawProfile,
    flags: DataAvailabilityFlags,
    tally: MetricTally,
) -> VideoMetrics:
    """Group 3 - requires at least one post with a view count."""
    if not flags.has_video_data:
        return skip_group(tally, VideoMetrics, "VideoMetrics", "No video view data available")

    video_posts = [post for post in profile.latest_posts if post.video_view_count is not None]
    views = [post.video_view_count for post in video_posts]
    count = len(views)

    total_views = sum(views)
    avg_views = total_views / count
    avg_likes = sum(post.likes_count or 0 for post in video_posts) / count
    durations = [post.video_duration for post in video_posts if post.video_duration is not None]

    view_rate = None
    if profile.followers > 0:
        view_rate = round(avg_views / profile.followers, 6)

    metrics = VideoMetrics(
        video_post_count=count,
        total_video_views=total_views,
        avg_video_views=round(avg_views, 2),
        min_video_views=min(views),
        max_video_views=max(views),
        video_view_rate=view_rate,
        video_view_to_like_ratio=ratio(avg_views, avg_likes, 2),
        avg_video_duration=round(statistics.fmean(durations), 2) if durations else None,
    )

    record_partial(tally, metrics, "VideoMetrics", "Video likes, durations or followers unavailable")
    _log.debug("video_metrics_calculated", video_posts=count, avg_video_views=metrics.avg_video_views)
    return metrics
