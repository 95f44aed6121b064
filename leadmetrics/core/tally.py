"""Per-extraction accumulator for calculated/skipped metric counts."""

from dataclasses import dataclass, field

from leadmetrics.models.result import SkippedMetricReason


@dataclass
class MetricTally:
    """
    Counts metrics as calculators produce or skip them.

    One tally is created per group inside each ``extract()`` call and the
    per-group tallies are merged in a fixed order, so nothing is shared
    between calls.
    """

    calculated: int = 0
    skipped: int = 0
    skipped_reasons: list[SkippedMetricReason] = field(default_factory=list)

    def record(self, count: int) -> None:
        self.calculated += count

    def skip(self, group: str, reason: str, metrics: list[str]) -> None:
        self.skipped += len(metrics)
        self.skipped_reasons.append(
            SkippedMetricReason(metric_group=group, reason=reason, affected_metrics=metrics)
        )

    def merge(self, other: "MetricTally") -> None:
        self.calculated += other.calculated
        self.skipped += other.skipped
        self.skipped_reasons.extend(other.skipped_reasons)
