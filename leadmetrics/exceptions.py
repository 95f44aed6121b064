"""Custom exception hierarchy for leadmetrics."""


class LeadmetricsError(Exception):
    """Base exception for all leadmetrics errors."""


class ValidationFailedError(LeadmetricsError):
    """Snapshot cannot be analyzed at all."""

    code = "VALIDATION_FAILED"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ProfileNotFoundError(ValidationFailedError):
    """Snapshot is missing, not an object, or has no username."""

    code = "PROFILE_NOT_FOUND"


class ProfilePrivateError(ValidationFailedError):
    """Profile is private, so its content cannot be seen."""

    code = "PROFILE_PRIVATE"


class SnapshotFileError(LeadmetricsError):
    """Snapshot file could not be read or decoded."""
