"""Extraction result and output envelope models."""

from typing import Any, Literal, Union

from pydantic import Field, TypeAdapter

from leadmetrics.models.base import OutputModel
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
from leadmetrics.models.validation import ValidationResult


class CompositeScores(OutputModel):
    """Weighted 0-100 scores derived from the metric groups."""

    engagement_health: float
    content_sophistication: float
    account_maturity: float
    fake_follower_risk: float
    opportunity_score: float


class GapFlags(OutputModel):
    """Business-side opportunity signals, not system state."""

    engagement_gap: bool
    content_gap: bool
    conversion_gap: bool
    platform_gap: bool


class SkippedMetricReason(OutputModel):
    metric_group: str
    reason: str
    affected_metrics: list[str] = []


class ExtractionMetadata(OutputModel):
    """Processing metadata for a successful extraction."""

    username: str
    processed_at: str
    processing_time_ms: float
    reference_time: str | None
    sample_post_count: int
    total_post_count: int
    data_completeness: float
    metrics_calculated: int
    metrics_skipped: int
    skipped_reasons: list[SkippedMetricReason] = []
    extraction_version: str
    low_confidence_warning: bool = False


class ExtractionResult(OutputModel):
    """Everything computed for one snapshot. Built once, never mutated."""

    validation: ValidationResult
    metadata: ExtractionMetadata
    profile_metrics: ProfileMetrics
    engagement_metrics: EngagementMetrics
    frequency_metrics: FrequencyMetrics
    format_metrics: FormatMetrics
    content_metrics: ContentMetrics
    video_metrics: VideoMetrics
    risk_scores: RiskScores
    derived_metrics: DerivedMetrics
    text_data_for_ai: TextDataForAI = Field(alias="textDataForAI")
    scores: CompositeScores
    gaps: GapFlags
    extracted_data: ExtractedRecord


class ExtractionErrorDetail(OutputModel):
    code: str
    message: str
    details: dict[str, Any] = {}


class FailureMetadata(OutputModel):
    username: str
    processed_at: str
    processing_time_ms: float


class ExtractionSuccess(OutputModel):
    success: Literal[True] = True
    data: ExtractionResult


class ExtractionFailure(OutputModel):
    """Terminal validation failure; carries no partial metrics."""

    success: Literal[False] = False
    error: ExtractionErrorDetail
    metadata: FailureMetadata


ExtractionOutput = Union[ExtractionSuccess, ExtractionFailure]

output_adapter: TypeAdapter[ExtractionOutput] = TypeAdapter(ExtractionOutput)
