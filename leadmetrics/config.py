"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic_settings import BaseSettings


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class ExtractorConfig(BaseSettings):
    """Configuration for the leadmetrics extractor.

    Scoring weights and thresholds are deliberately absent: they are pinned
    constants in ``leadmetrics.core.scores`` and ``leadmetrics.core.risk``.
    """

    # Sampling
    min_posts_for_confidence: int = 5

    # Text extraction limits
    recent_caption_limit: int = 10
    top_hashtag_limit: int = 10
    top_mention_limit: int = 5

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "LEADMETRICS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
