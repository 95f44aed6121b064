"""Unit tests for exporter utilities - uses JSON fixtures, no internet."""

import json
from pathlib import Path

import pytest

from leadmetrics.core.exporter import (
    load_json,
    load_snapshots,
    merge_records,
    save_json,
    safe_filename_stem,
    save_many_json,
    to_dict,
    to_json,
)
from leadmetrics.core.orchestrator import Extractor
from leadmetrics.exceptions import SnapshotFileError
from leadmetrics.models.result import ExtractionFailure, ExtractionSuccess


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def success(load_snapshot) -> ExtractionSuccess:
    return Extractor().extract(load_snapshot("brandshop"))


@pytest.fixture
def failure(load_snapshot) -> ExtractionFailure:
    return Extractor().extract(load_snapshot("hidden"))


class TestToJson:
    """Test JSON string conversion."""

    def test_to_json_is_valid_json(self, success):
        parsed = json.loads(to_json(success))
        assert parsed["success"] is True
        assert "data" in parsed

    def test_uses_camel_case_keys(self, success):
        data = json.loads(to_json(success))["data"]
        assert "profileMetrics" in data
        assert "textDataForAI" in data
        assert "extractedData" in data
        assert "followersCount" in data["profileMetrics"]
        assert "_reason" in data["engagementMetrics"]


class TestToDict:
    """Test dictionary conversion."""

    def test_to_dict_matches_json(self, success):
        assert to_dict(success) == json.loads(to_json(success))

    def test_failure_shape(self, failure):
        d = to_dict(failure)
        assert d["success"] is False
        assert set(d["error"]) == {"code", "message", "details"}
        assert set(d["metadata"]) == {"username", "processedAt", "processingTimeMs"}


class TestSaveLoadJson:
    """Test file I/O operations."""

    def test_save_and_load_roundtrip(self, success, tmp_path):
        filepath = tmp_path / "brandshop.json"
        save_json(success, filepath)
        loaded = load_json(filepath)

        assert isinstance(loaded, ExtractionSuccess)
        assert to_dict(loaded) == to_dict(success)

    def test_failure_roundtrip(self, failure, tmp_path):
        loaded = load_json(save_json(failure, tmp_path / "hidden.json"))
        assert isinstance(loaded, ExtractionFailure)
        assert loaded.error.code == "PROFILE_PRIVATE"

    def test_save_creates_parent_dirs(self, success, tmp_path):
        filepath = tmp_path / "nested" / "dir" / "out.json"
        assert save_json(success, filepath).exists()

    def test_save_many(self, success, failure, tmp_path):
        paths = save_many_json([success, failure], tmp_path / "out")
        assert sorted(p.name for p in paths) == ["brandshop.json", "hidden.json"]

    def test_save_many_suffixes_repeated_names(self, tmp_path):
        failures = [Extractor().extract(None) for _ in range(3)]
        paths = save_many_json(failures, tmp_path)
        assert [p.name for p in paths] == ["unknown.json", "unknown-2.json", "unknown-3.json"]
        assert all(p.exists() for p in paths)

    @pytest.mark.parametrize(
        "username, stem",
        [
            ("brand.shop_1", "brand.shop_1"),
            ("../../etc/passwd", "_.._etc_passwd"),
            ("a/b", "a_b"),
            ("..", "unknown"),
            ("", "unknown"),
        ],
    )
    def test_safe_filename_stem(self, username, stem):
        assert safe_filename_stem(username) == stem


class TestLoadSnapshots:
    """Snapshot files hold one object or a list."""

    def test_single_object(self):
        snapshots = load_snapshots(FIXTURES_DIR / "brandshop.json")
        assert len(snapshots) == 1
        assert snapshots[0]["username"] == "brandshop"

    def test_list(self, tmp_path):
        path = tmp_path / "batch.json"
        path.write_text(json.dumps([{"username": "a"}, {"username": "b"}]), encoding="utf-8")
        assert [s["username"] for s in load_snapshots(path)] == ["a", "b"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotFileError):
            load_snapshots(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotFileError):
            load_snapshots(path)

    @pytest.mark.parametrize("payload", ["[1, 2]", "\"text\"", "42"])
    def test_wrong_shape(self, tmp_path, payload):
        path = tmp_path / "shape.json"
        path.write_text(payload, encoding="utf-8")
        with pytest.raises(SnapshotFileError):
            load_snapshots(path)


class TestMergeRecords:
    """Merged export of flat records."""

    def test_merge(self, success, failure):
        merged = merge_records([success, failure])
        assert merged["recordsCount"] == 1
        assert merged["failuresCount"] == 1
        assert merged["records"][0]["username"] == "brandshop"
        assert merged["failures"][0]["code"] == "PROFILE_PRIVATE"
        assert "exportedAt" in merged
