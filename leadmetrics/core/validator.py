"""Validation pipeline - existence, privacy, and data availability."""

from collections.abc import Mapping

from pydantic import ValidationError

from leadmetrics.core.parsing import parse_timestamp
from leadmetrics.exceptions import (
    ProfileNotFoundError,
    ProfilePrivateError,
    ValidationFailedError,
)
from leadmetrics.logging import get_logger
from leadmetrics.models.snapshot import RawProfile
from leadmetrics.models.validation import (
    DataAvailabilityFlags,
    ValidationIssue,
    ValidationResult,
)

DEFAULT_MIN_POSTS_FOR_CONFIDENCE = 5

_log = get_logger("validator")


def _coerce_profile(raw) -> RawProfile:
    """Step 1: the snapshot must be an object with a username."""
    if isinstance(raw, RawProfile):
        profile = raw
    elif isinstance(raw, Mapping):
        try:
            profile = RawProfile.model_validate(dict(raw))
        except ValidationError as e:
            raise ProfileNotFoundError(
                f"Profile snapshot has an invalid shape: {e.error_count()} field error(s)"
            ) from e
    else:
        raise ProfileNotFoundError("Profile does not exist")

    if not profile.username:
        raise ProfileNotFoundError("Profile username is missing", field="username")
    return profile


def _check_privacy(profile: RawProfile) -> None:
    """Step 2: nothing can be inferred about content we cannot see."""
    if profile.private:
        raise ProfilePrivateError("Profile is private - cannot analyze", field="private")


def assess_availability(profile: RawProfile) -> DataAvailabilityFlags:
    """Step 3: derive the availability flags in one pass. Never raises."""
    has_engagement = has_timestamps = has_video = False
    has_hashtags = has_mentions = has_location = False

    for post in profile.latest_posts:
        has_engagement = has_engagement or post.has_engagement
        has_timestamps = has_timestamps or parse_timestamp(post.timestamp) is not None
        has_video = has_video or post.video_view_count is not None
        has_hashtags = has_hashtags or bool(post.hashtags)
        has_mentions = has_mentions or bool(post.mentions)
        has_location = has_location or bool(post.location_name)

    return DataAvailabilityFlags(
        profile_exists=True,
        is_private=False,
        has_profile_data=(
            profile.followers_count is not None
            and profile.follows_count is not None
            and profile.posts_count is not None
        ),
        has_posts=bool(profile.latest_posts),
        has_engagement_data=has_engagement,
        has_video_data=has_video,
        has_business_data=(
            profile.is_business_account or bool(profile.business_category_name)
        ),
        has_external_links=bool(
            profile.external_url or profile.external_urls or profile.bio_links
        ),
        has_bio=bool(profile.biography),
        has_timestamps=has_timestamps,
        has_hashtags=has_hashtags,
        has_mentions=has_mentions,
        has_location_data=has_location,
    )


def _collect_warnings(
    flags: DataAvailabilityFlags,
    post_count: int,
    min_posts_for_confidence: int,
) -> list[ValidationIssue]:
    warnings = []

    if not flags.has_posts:
        warnings.append(ValidationIssue(
            code="NO_POSTS",
            message="No posts available - post-based metrics will be null",
            field="latestPosts",
        ))

    if flags.has_posts and not flags.has_timestamps:
        warnings.append(ValidationIssue(
            code="NO_TIMESTAMPS",
            message="Posts lack timestamps - frequency metrics will be null",
            field="latestPosts.timestamp",
        ))

    if not flags.has_video_data:
        warnings.append(ValidationIssue(
            code="NO_VIDEO_DATA",
            message="No video view data available - video metrics will be null",
            field="latestPosts.videoViewCount",
        ))

    if 0 < post_count < min_posts_for_confidence:
        warnings.append(ValidationIssue(
            code="LOW_SAMPLE_SIZE",
            message=f"Only {post_count} posts available - statistical confidence is low",
            field="latestPosts",
        ))

    return warnings


def validate_snapshot(
    raw,
    min_posts_for_confidence: int = DEFAULT_MIN_POSTS_FOR_CONFIDENCE,
) -> tuple[ValidationResult, RawProfile | None]:
    """
    Run the validation pipeline over an untyped snapshot.

    Args:
        raw: Scraper output (mapping) or an already parsed RawProfile
        min_posts_for_confidence: Sample size below which LOW_SAMPLE_SIZE is raised

    Returns:
        (ValidationResult, RawProfile) on success, (ValidationResult, None)
        when the snapshot cannot be analyzed at all
    """
    flags = DataAvailabilityFlags()

    try:
        profile = _coerce_profile(raw)
        _check_privacy(profile)
    except ValidationFailedError as e:
        if isinstance(e, ProfilePrivateError):
            flags = DataAvailabilityFlags(profile_exists=True, is_private=True)
        _log.warning("validation_failed", code=e.code, reason=e.message)
        error = ValidationIssue(code=e.code, message=e.message, field=e.field)
        return ValidationResult(is_valid=False, flags=flags, errors=[error]), None

    flags = assess_availability(profile)
    warnings = _collect_warnings(flags, len(profile.latest_posts), min_posts_for_confidence)

    for warning in warnings:
        _log.info("validation_warning", code=warning.code, reason=warning.message)
    _log.debug("availability_assessed", **flags.model_dump())

    return ValidationResult(is_valid=True, flags=flags, warnings=warnings), profile
