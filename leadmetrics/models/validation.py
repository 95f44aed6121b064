"""Validation pipeline output models."""

from leadmetrics.models.base import OutputModel


class DataAvailabilityFlags(OutputModel):
    """What the snapshot contains, and therefore what can be calculated."""

    profile_exists: bool = False
    is_private: bool = False
    has_profile_data: bool = False
    has_posts: bool = False
    has_engagement_data: bool = False
    has_video_data: bool = False
    has_business_data: bool = False
    has_external_links: bool = False
    has_bio: bool = False
    has_timestamps: bool = False
    has_hashtags: bool = False
    has_mentions: bool = False
    has_location_data: bool = False


class ValidationIssue(OutputModel):
    """A validation error (terminal) or warning (informational)."""

    code: str
    message: str
    field: str | None = None


class ValidationResult(OutputModel):
    """Outcome of the validation pipeline."""

    is_valid: bool
    flags: DataAvailabilityFlags
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    def warning_codes(self) -> list[str]:
        return [warning.code for warning in self.warnings]
