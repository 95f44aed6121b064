"""leadmetrics - Instagram profile extraction and lead scoring."""

from leadmetrics.models.snapshot import RawProfile, RawPost
from leadmetrics.models.result import (
    ExtractionFailure,
    ExtractionOutput,
    ExtractionResult,
    ExtractionSuccess,
)
from leadmetrics.models.record import ExtractedRecord
from leadmetrics.config import ExtractorConfig
from leadmetrics.core.orchestrator import Extractor, extract
from leadmetrics.core.exporter import to_json, to_dict, save_json, load_json, load_snapshots

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "Extractor",
    "ExtractorConfig",
    "extract",
    # Models
    "RawProfile",
    "RawPost",
    "ExtractionResult",
    "ExtractionSuccess",
    "ExtractionFailure",
    "ExtractionOutput",
    "ExtractedRecord",
    # Export utilities
    "to_json",
    "to_dict",
    "save_json",
    "load_json",
    "load_snapshots",
    "__version__",
]
