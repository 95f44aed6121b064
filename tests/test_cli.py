"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from leadmetrics import __version__
from leadmetrics.cli import app

FIXTURES_DIR = Path(__file__).parent / "fixtures"

runner = CliRunner()


@pytest.fixture
def batch_file(tmp_path, load_snapshot) -> Path:
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps([load_snapshot("brandshop"), load_snapshot("hidden")]),
        encoding="utf-8",
    )
    return path


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestExtractCommand:
    """leadmetrics extract"""

    def test_extract_single(self):
        result = runner.invoke(app, ["extract", str(FIXTURES_DIR / "brandshop.json")])
        assert result.exit_code == 0
        assert "Extracted 1/1 profiles" in result.stdout

    def test_extract_batch_reports_failures(self, batch_file):
        result = runner.invoke(app, ["extract", str(batch_file)])
        assert result.exit_code == 0
        assert "PROFILE_PRIVATE" in result.stdout
        assert "Extracted 1/2 profiles" in result.stdout

    def test_quiet_prints_json(self):
        result = runner.invoke(app, ["extract", str(FIXTURES_DIR / "brandshop.json"), "--quiet"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        assert payload["data"]["metadata"]["username"] == "brandshop"

    def test_output_dir(self, batch_file, tmp_path):
        out_dir = tmp_path / "results"
        result = runner.invoke(app, ["extract", str(batch_file), "-o", str(out_dir)])
        assert result.exit_code == 0
        assert (out_dir / "brandshop.json").exists()
        assert (out_dir / "hidden.json").exists()

    def test_output_dir_keeps_repeated_usernames(self, tmp_path):
        batch = tmp_path / "unnamed.json"
        batch.write_text(json.dumps([{}, {}]), encoding="utf-8")
        out_dir = tmp_path / "results"
        result = runner.invoke(app, ["extract", str(batch), "-o", str(out_dir)])
        assert result.exit_code == 0
        assert sorted(p.name for p in out_dir.iterdir()) == ["unknown-2.json", "unknown.json"]

    def test_as_of(self, tmp_path):
        out_dir = tmp_path / "results"
        result = runner.invoke(
            app,
            [
                "extract",
                str(FIXTURES_DIR / "brandshop.json"),
                "--as-of",
                "2024-03-10T00:00:00Z",
                "-o",
                str(out_dir),
            ],
        )
        assert result.exit_code == 0
        saved = json.loads((out_dir / "brandshop.json").read_text(encoding="utf-8"))
        assert saved["data"]["metadata"]["referenceTime"] == "2024-03-10T00:00:00Z"

    def test_bad_as_of(self):
        result = runner.invoke(
            app, ["extract", str(FIXTURES_DIR / "brandshop.json"), "--as-of", "last week"]
        )
        assert result.exit_code != 0

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["extract", str(tmp_path / "nope.json")])
        assert result.exit_code == 1


class TestValidateCommand:
    """leadmetrics validate"""

    def test_validate_shows_flags(self):
        result = runner.invoke(app, ["validate", str(FIXTURES_DIR / "brandshop.json")])
        assert result.exit_code == 0
        assert "has_posts" in result.stdout
        assert "has_video_data" in result.stdout

    def test_validate_private(self):
        result = runner.invoke(app, ["validate", str(FIXTURES_DIR / "hidden.json")])
        assert result.exit_code == 0
        assert "PROFILE_PRIVATE" in result.stdout
