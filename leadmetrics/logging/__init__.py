"""Logging helpers."""

from leadmetrics.logging.setup import configure_logging, extraction_context, get_logger

__all__ = ["configure_logging", "extraction_context", "get_logger"]
