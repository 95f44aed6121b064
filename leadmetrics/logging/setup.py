"""Structlog configuration for leadmetrics."""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import structlog

from leadmetrics.config import ExtractorConfig, LogFormat


def configure_logging(config: ExtractorConfig | None = None) -> None:
    """
    Configure structlog processors and output format.

    Logs go to stderr so that extraction output written to stdout
    (``leadmetrics extract --quiet``) stays machine readable.

    Args:
        config: ExtractorConfig instance, uses defaults if None
    """
    if config is None:
        config = ExtractorConfig()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )
    # basicConfig is a no-op once the root logger has handlers.
    logging.getLogger("leadmetrics").setLevel(log_level)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.log_format == LogFormat.JSON:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None):
    """
    Get a lazy structlog logger, optionally tagged with a component name.

    The logger resolves the active configuration on every call, so
    module-level loggers created at import time still honour a later
    ``configure_logging()``.

    Args:
        name: Optional component name (``validator``, ``scores``, ...)
    """
    if name:
        return structlog.get_logger(component=name)
    return structlog.get_logger()


@contextmanager
def extraction_context(username: str | None) -> Iterator[None]:
    """Bind the profile username to every log event emitted inside the block."""
    with structlog.contextvars.bound_contextvars(username=username or "unknown"):
        yield
