"""Unit tests for DataFrame export utilities - uses JSON fixtures, no internet."""

import pytest

from leadmetrics.core.exporter import records_to_df, save_csv
from leadmetrics.core.orchestrator import Extractor

# Skip all tests if pandas not installed
pd = pytest.importorskip("pandas")


@pytest.fixture
def outputs(load_snapshot):
    extractor = Extractor()
    return [
        extractor.extract(load_snapshot("brandshop")),
        extractor.extract(load_snapshot("hidden")),
    ]


class TestRecordsToDf:
    """Test flat record DataFrame conversion."""

    def test_returns_dataframe(self, outputs):
        assert isinstance(records_to_df(outputs), pd.DataFrame)

    def test_one_row_per_success(self, outputs):
        df = records_to_df(outputs)
        assert len(df) == 1
        assert df.iloc[0]["username"] == "brandshop"

    def test_has_record_columns(self, outputs):
        df = records_to_df(outputs)
        for column in ("followersCount", "engagementRate", "opportunityScore", "leadTier"):
            assert column in df.columns

    def test_rankings_flattened(self, outputs):
        df = records_to_df(outputs)
        assert df.iloc[0]["topHashtags"] == "ceramics,pottery,handmade"

    def test_empty_input(self):
        assert records_to_df([]).empty


class TestSaveCsv:
    """Test CSV export."""

    def test_save_csv(self, outputs, tmp_path):
        path = save_csv(outputs, tmp_path / "out" / "records.csv")
        assert path.exists()
        loaded = pd.read_csv(path)
        assert list(loaded["username"]) == ["brandshop"]
