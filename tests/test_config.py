"""Unit tests for configuration management."""

from leadmetrics.config import ExtractorConfig, LogFormat


class TestExtractorConfigDefaults:
    """Test default configuration values."""

    def test_default_sample_threshold(self):
        assert ExtractorConfig().min_posts_for_confidence == 5

    def test_default_text_limits(self):
        config = ExtractorConfig()
        assert config.recent_caption_limit == 10
        assert config.top_hashtag_limit == 10
        assert config.top_mention_limit == 5

    def test_default_logging(self):
        config = ExtractorConfig()
        assert config.log_level == "INFO"
        assert config.log_format == LogFormat.CONSOLE


class TestExtractorConfigEnvVars:
    """Test configuration from environment variables."""

    def test_sample_threshold_from_env(self, monkeypatch):
        monkeypatch.setenv("LEADMETRICS_MIN_POSTS_FOR_CONFIDENCE", "12")
        assert ExtractorConfig().min_posts_for_confidence == 12

    def test_hashtag_limit_from_env(self, monkeypatch):
        monkeypatch.setenv("LEADMETRICS_TOP_HASHTAG_LIMIT", "3")
        assert ExtractorConfig().top_hashtag_limit == 3

    def test_log_format_from_env(self, monkeypatch):
        monkeypatch.setenv("LEADMETRICS_LOG_FORMAT", "json")
        assert ExtractorConfig().log_format == LogFormat.JSON

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LEADMETRICS_LOG_LEVEL", "DEBUG")
        assert ExtractorConfig().log_level == "DEBUG"

    def test_unprefixed_vars_ignored(self, monkeypatch):
        monkeypatch.setenv("TOP_HASHTAG_LIMIT", "1")
        assert ExtractorConfig().top_hashtag_limit == 10


class TestExtractorConfigOverrides:
    """Test explicit constructor overrides."""

    def test_override(self):
        config = ExtractorConfig(top_mention_limit=2, log_format=LogFormat.JSON)
        assert config.top_mention_limit == 2
        assert config.log_format == LogFormat.JSON
