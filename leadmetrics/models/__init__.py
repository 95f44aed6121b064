"""Pydantic models for leadmetrics."""

from leadmetrics.models.snapshot import RawProfile, RawPost, ExternalLink, TaggedUser
from leadmetrics.models.validation import (
    DataAvailabilityFlags,
    ValidationIssue,
    ValidationResult,
)
from leadmetrics.models.metrics import (
    ProfileMetrics,
    EngagementMetrics,
    FrequencyMetrics,
    FormatMetrics,
    ContentMetrics,
    VideoMetrics,
    RiskScores,
    DerivedMetrics,
    TextDataForAI,
    HashtagFrequency,
    MentionFrequency,
)
from leadmetrics.models.record import ExtractedRecord
from leadmetrics.models.result import (
    CompositeScores,
    GapFlags,
    ExtractionMetadata,
    ExtractionResult,
    ExtractionSuccess,
    ExtractionFailure,
    ExtractionOutput,
)

__all__ = [
    "RawProfile",
    "RawPost",
    "ExternalLink",
    "TaggedUser",
    "DataAvailabilityFlags",
    "ValidationIssue",
    "ValidationResult",
    "ProfileMetrics",
    "EngagementMetrics",
    "FrequencyMetrics",
    "FormatMetrics",
    "ContentMetrics",
    "VideoMetrics",
    "RiskScores",
    "DerivedMetrics",
    "TextDataForAI",
    "HashtagFrequency",
    "MentionFrequency",
    "ExtractedRecord",
    "CompositeScores",
    "GapFlags",
    "ExtractionMetadata",
    "ExtractionResult",
    "ExtractionSuccess",
    "ExtractionFailure",
    "ExtractionOutput",
]
