"""Export utilities for extraction outputs."""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from leadmetrics.core.parsing import to_iso
from leadmetrics.exceptions import SnapshotFileError
from leadmetrics.models.record import ExtractedRecord
from leadmetrics.models.result import ExtractionOutput, ExtractionSuccess, output_adapter

if TYPE_CHECKING:
    import pandas as pd

try:
    import pandas as pd
    PANDAS_AVAILABLE = True
except ImportError:
    PANDAS_AVAILABLE = False


def to_json(output: ExtractionOutput, indent: int = 2) -> str:
    """
    Convert an extraction output to a camelCase JSON string.

    Args:
        output: ExtractionSuccess or ExtractionFailure
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return output.model_dump_json(indent=indent, by_alias=True)


def to_dict(output: ExtractionOutput) -> dict:
    """Convert an extraction output to a JSON-compatible dict with camelCase keys."""
    return output.model_dump(mode="json", by_alias=True)


def save_json(
    output: ExtractionOutput,
    filepath: str | Path,
    indent: int = 2,
) -> Path:
    """
    Save an extraction output to a JSON file.

    Args:
        output: Output to save
        filepath: Output file path
        indent: JSON indentation level

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(output, indent=indent), encoding="utf-8")
    return path


_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename_stem(username: str) -> str:
    """Reduce a username to a file name stem that stays inside its directory."""
    stem = _UNSAFE_FILENAME_CHARS.sub("_", username).lstrip(".")
    return stem or "unknown"


def _output_username(output: ExtractionOutput) -> str:
    if isinstance(output, ExtractionSuccess):
        return output.data.metadata.username
    return output.metadata.username


def save_many_json(
    outputs: list[ExtractionOutput],
    output_dir: str | Path,
    filename_template: str = "{username}.json",
) -> list[Path]:
    """
    Save multiple outputs to individual JSON files.

    Failures are saved too, so a batch run leaves a file per snapshot.
    Usernames are sanitized and repeats get a numeric suffix
    (``unknown.json``, ``unknown-2.json``).

    Args:
        outputs: Extraction outputs
        output_dir: Directory for output files
        filename_template: Template with {username} placeholder

    Returns:
        List of paths to saved files
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    saved = []
    seen: dict[str, int] = {}
    for output in outputs:
        stem = safe_filename_stem(_output_username(output))
        seen[stem] = seen.get(stem, 0) + 1
        if seen[stem] > 1:
            stem = f"{stem}-{seen[stem]}"
        filename = filename_template.format(username=stem)
        saved.append(save_json(output, output_path / filename))

    return saved


def load_json(filepath: str | Path) -> ExtractionOutput:
    """Load an extraction output previously written by ``save_json``."""
    path = Path(filepath)
    return output_adapter.validate_json(path.read_text(encoding="utf-8"))


def load_snapshots(filepath: str | Path) -> list[dict]:
    """
    Read raw profile snapshots from a JSON file.

    The file may hold a single snapshot object or a list of them.

    Raises:
        SnapshotFileError: If the file is missing, not JSON, or not an
            object / list of objects
    """
    path = Path(filepath)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SnapshotFileError(f"Cannot read snapshot file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotFileError(f"Snapshot file {path} is not valid JSON: {e}") from e

    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list) and all(isinstance(item, dict) for item in payload):
        return payload
    raise SnapshotFileError(
        f"Snapshot file {path} must contain an object or a list of objects"
    )


def merge_records(outputs: list[ExtractionOutput]) -> dict:
    """
    Merge multiple outputs into a single export-friendly dict.

    Args:
        outputs: Extraction outputs

    Returns:
        Dict with flat 'records' and 'failures' arrays, plus counts
    """
    records = []
    failures = []

    for output in outputs:
        if isinstance(output, ExtractionSuccess):
            records.append(output.data.extracted_data.model_dump(mode="json", by_alias=True))
        else:
            failures.append({
                "username": output.metadata.username,
                "code": output.error.code,
                "message": output.error.message,
            })

    return {
        "exportedAt": to_iso(datetime.now(timezone.utc)),
        "recordsCount": len(records),
        "failuresCount": len(failures),
        "records": records,
        "failures": failures,
    }


def _check_pandas():
    """Raise ImportError if pandas is not available."""
    if not PANDAS_AVAILABLE:
        raise ImportError(
            "pandas is required for DataFrame export. Install with: pip install leadmetrics[dataframe]"
        )


def _record_row(record: ExtractedRecord) -> dict:
    row = record.model_dump(mode="json", by_alias=True)
    # Nested rankings do not fit a flat table.
    row["topHashtags"] = ",".join(item["hashtag"] for item in row["topHashtags"])
    row["topMentions"] = ",".join(item["mention"] for item in row["topMentions"])
    return row


def records_to_df(outputs: list[ExtractionOutput]) -> "pd.DataFrame":
    """
    Convert successful outputs to a DataFrame, one row per profile.

    Failures are skipped. Columns use the record's camelCase names.

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()

    rows = [
        _record_row(output.data.extracted_data)
        for output in outputs
        if isinstance(output, ExtractionSuccess)
    ]
    return pd.DataFrame(rows)


def save_csv(outputs: list[ExtractionOutput], filepath: str | Path) -> Path:
    """
    Save the flat records of successful outputs to a CSV file.

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    records_to_df(outputs).to_csv(path, index=False)
    return path
