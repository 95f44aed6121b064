"""Tests for structlog configuration."""

import json

import structlog

from leadmetrics.config import ExtractorConfig
from leadmetrics.core.orchestrator import Extractor
from leadmetrics.core.validator import validate_snapshot
from leadmetrics.logging import configure_logging, get_logger


class TestModuleLoggers:
    """Loggers created before configure_logging() follow the later config."""

    def test_logger_created_early_honours_level(self, caplog, capsys):
        structlog.reset_defaults()
        log = get_logger("early")
        configure_logging(ExtractorConfig(log_level="WARNING"))

        log.info("hidden_event")
        log.warning("shown_event")

        assert "hidden_event" not in caplog.text
        assert "shown_event" in caplog.text
        assert capsys.readouterr().out == ""

    def test_component_is_attached(self, caplog):
        configure_logging(ExtractorConfig(log_format="json"))
        get_logger("scores").warning("component_event")

        events = [json.loads(record.getMessage()) for record in caplog.records]
        assert {"event": "component_event", "component": "scores"}.items() <= events[-1].items()

    def test_validator_logs_stay_off_stdout(self, load_snapshot, capsys):
        Extractor(ExtractorConfig(log_level="DEBUG"))
        validate_snapshot(load_snapshot("brandshop"))
        assert capsys.readouterr().out == ""
