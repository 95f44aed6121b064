"""Extraction orchestrator - validation, calculators, scores, flattening."""

import time
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from functools import cache

from leadmetrics.config import ExtractorConfig
from leadmetrics.core.calculators import (
    calculate_content_metrics,
    calculate_engagement_metrics,
    calculate_format_metrics,
    calculate_frequency_metrics,
    calculate_profile_metrics,
    calculate_video_metrics,
)
from leadmetrics.core.parsing import parse_timestamp, to_iso
from leadmetrics.core.risk import calculate_derived_metrics, calculate_risk_scores
from leadmetrics.core.scores import calculate_scores
from leadmetrics.core.tally import MetricTally
from leadmetrics.core.text import extract_text_data
from leadmetrics.core.transformer import flatten_extraction
from leadmetrics.core.validator import validate_snapshot
from leadmetrics.logging import configure_logging, extraction_context, get_logger
from leadmetrics.models.metrics import (
    TOTAL_POSSIBLE_METRICS,
    ContentMetrics,
    DerivedMetrics,
    EngagementMetrics,
    FormatMetrics,
    FrequencyMetrics,
    MetricGroup,
    RiskScores,
    TextDataForAI,
    VideoMetrics,
)
from leadmetrics.models.result import (
    ExtractionErrorDetail,
    ExtractionFailure,
    ExtractionMetadata,
    ExtractionOutput,
    ExtractionResult,
    ExtractionSuccess,
    FailureMetadata,
)
from leadmetrics.models.snapshot import RawProfile
from leadmetrics.models.validation import ValidationResult

EXTRACTION_VERSION = "2.0.0"


def _snapshot_username(raw) -> str:
    if isinstance(raw, RawProfile):
        return raw.username or "unknown"
    if isinstance(raw, Mapping):
        username = raw.get("username")
        if isinstance(username, str) and username.strip():
            return username.strip().lstrip("@")
    return "unknown"


def reference_time(profile: RawProfile, as_of: datetime | None = None) -> datetime | None:
    """
    Explicit ``as_of``, else the snapshot's ``scrapedAt``.

    Returns None when neither is known; the wall clock is never used so
    repeated extractions of one snapshot agree.
    """
    if as_of is not None:
        if as_of.tzinfo is None:
            return as_of.replace(tzinfo=timezone.utc)
        return as_of.astimezone(timezone.utc)
    return parse_timestamp(profile.scraped_at)


def data_completeness(calculated: int, total: int = TOTAL_POSSIBLE_METRICS) -> float:
    if total <= 0:
        return 0.0
    return min(100.0, round(calculated / total * 100, 2))


class Extractor:
    """
    High-level extraction interface.

    Holds configuration only; each ``extract()`` call owns its tallies, so
    one Extractor can be shared freely.

    Example:
        extractor = Extractor()
        output = extractor.extract(snapshot)
        if output.success:
            print(output.data.scores.opportunity_score)
    """

    def __init__(self, config: ExtractorConfig | None = None):
        """
        Initialize extractor with optional configuration.

        Args:
            config: ExtractorConfig instance, uses defaults if None
        """
        self.config = config or ExtractorConfig()
        configure_logging(self.config)
        self._log = get_logger("extractor")

    def _run_group(
        self,
        group_cls: type[MetricGroup],
        calculate: Callable[[MetricTally], MetricGroup],
    ) -> tuple[MetricGroup, MetricTally]:
        """Run one calculator with its own tally; unexpected errors become a null group."""
        tally = MetricTally()
        try:
            return calculate(tally), tally
        except Exception as e:
            self._log.exception("metric_group_failed", group=group_cls.__name__, error=str(e))
            reason = f"Calculation failed: {e}"
            tally = MetricTally()
            tally.skip(group_cls.__name__, reason, group_cls.metric_fields())
            return group_cls.null(reason), tally

    def _run_text(self, profile: RawProfile) -> tuple[TextDataForAI, MetricTally]:
        """Build the text bag; an unexpected error leaves it empty and skipped."""
        fields = list(TextDataForAI.model_fields)
        tally = MetricTally()
        try:
            text = extract_text_data(
                profile,
                recent_caption_limit=self.config.recent_caption_limit,
                top_hashtag_limit=self.config.top_hashtag_limit,
                top_mention_limit=self.config.top_mention_limit,
            )
        except Exception as e:
            self._log.exception("metric_group_failed", group="TextDataForAI", error=str(e))
            tally.skip("TextDataForAI", f"Calculation failed: {e}", fields)
            return TextDataForAI(), tally
        tally.record(len(fields))
        return text, tally

    def _failure(self, validation: ValidationResult, username: str, start: float) -> ExtractionFailure:
        error = validation.errors[0]
        self._log.warning("extraction_rejected", code=error.code, reason=error.message)
        return ExtractionFailure(
            error=ExtractionErrorDetail(
                code=error.code,
                message=error.message,
                details={"field": error.field} if error.field else {},
            ),
            metadata=FailureMetadata(
                username=username,
                processed_at=to_iso(datetime.now(timezone.utc)),
                processing_time_ms=round((time.perf_counter() - start) * 1000, 3),
            ),
        )

    def extract(self, raw, as_of: datetime | None = None) -> ExtractionOutput:
        """
        Extract metrics, scores and gaps from one snapshot.

        Args:
            raw: Scraper output (mapping) or a parsed RawProfile
            as_of: Reference time for time-dependent metrics

        Returns:
            ExtractionSuccess, or ExtractionFailure when the snapshot
            cannot be analyzed (missing or private profile)
        """
        start = time.perf_counter()
        username = _snapshot_username(raw)

        with extraction_context(username):
            self._log.info("extraction_start")

            validation, profile = validate_snapshot(raw, self.config.min_posts_for_confidence)
            if profile is None:
                return self._failure(validation, username, start)

            flags = validation.flags
            reference = reference_time(profile, as_of)

            # Profile metrics need only validated counts and are always computed.
            profile_tally = MetricTally()
            profile_metrics = calculate_profile_metrics(profile, profile_tally)

            engagement, engagement_tally = self._run_group(
                EngagementMetrics,
                lambda tally: calculate_engagement_metrics(profile, flags, tally, reference),
            )
            frequency, frequency_tally = self._run_group(
                FrequencyMetrics,
                lambda tally: calculate_frequency_metrics(profile, flags, tally, reference),
            )
            formats, format_tally = self._run_group(
                FormatMetrics,
                lambda tally: calculate_format_metrics(profile, flags, tally),
            )
            content, content_tally = self._run_group(
                ContentMetrics,
                lambda tally: calculate_content_metrics(profile, flags, tally),
            )
            video, video_tally = self._run_group(
                VideoMetrics,
                lambda tally: calculate_video_metrics(profile, flags, tally),
            )
            risk, risk_tally = self._run_group(
                RiskScores,
                lambda tally: calculate_risk_scores(profile, engagement, tally),
            )
            derived, derived_tally = self._run_group(
                DerivedMetrics,
                lambda tally: calculate_derived_metrics(profile, engagement, frequency, tally),
            )

            text, text_tally = self._run_text(profile)

            tally = MetricTally()
            for group_tally in (
                profile_tally,
                engagement_tally,
                frequency_tally,
                format_tally,
                content_tally,
                video_tally,
                risk_tally,
                derived_tally,
                text_tally,
            ):
                tally.merge(group_tally)

            score_result = calculate_scores(
                profile_metrics, engagement, frequency, formats, content, risk
            )

            sample_size = len(profile.latest_posts)
            record = flatten_extraction(
                profile_metrics,
                engagement,
                frequency,
                formats,
                content,
                video,
                risk,
                derived,
                text,
                score_result,
                extracted_at=to_iso(reference) if reference else None,
                sample_size=sample_size,
            )

            duration_ms = (time.perf_counter() - start) * 1000
            metadata = ExtractionMetadata(
                username=profile.username,
                processed_at=to_iso(datetime.now(timezone.utc)),
                processing_time_ms=round(duration_ms, 3),
                reference_time=to_iso(reference) if reference else None,
                sample_post_count=sample_size,
                total_post_count=profile.total_posts,
                data_completeness=data_completeness(tally.calculated),
                metrics_calculated=tally.calculated,
                metrics_skipped=tally.skipped,
                skipped_reasons=tally.skipped_reasons,
                extraction_version=EXTRACTION_VERSION,
                low_confidence_warning=sample_size < self.config.min_posts_for_confidence,
            )

            self._log.info(
                "extraction_complete",
                opportunity_score=score_result.scores.opportunity_score,
                data_completeness=metadata.data_completeness,
                metrics_skipped=tally.skipped,
                duration_ms=metadata.processing_time_ms,
            )

            return ExtractionSuccess(
                data=ExtractionResult(
                    validation=validation,
                    metadata=metadata,
                    profile_metrics=profile_metrics,
                    engagement_metrics=engagement,
                    frequency_metrics=frequency,
                    format_metrics=formats,
                    content_metrics=content,
                    video_metrics=video,
                    risk_scores=risk,
                    derived_metrics=derived,
                    text_data_for_ai=text,
                    scores=score_result.scores,
                    gaps=score_result.gaps,
                    extracted_data=record,
                )
            )

    def extract_many(
        self,
        raws: Iterable,
        as_of: datetime | None = None,
    ) -> list[ExtractionOutput]:
        """
        Extract multiple snapshots.

        Args:
            raws: Snapshots (mappings or RawProfiles)
            as_of: Shared reference time, per-snapshot ``scrapedAt`` if None

        Returns:
            List of outputs in the same order as input
        """
        return [self.extract(raw, as_of=as_of) for raw in raws]


@cache
def _default_extractor() -> Extractor:
    return Extractor()


def extract(raw, as_of: datetime | None = None) -> ExtractionOutput:
    """Extract one snapshot with the default configuration."""
    return _default_extractor().extract(raw, as_of=as_of)
