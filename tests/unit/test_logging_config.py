"""Tests for structured logging configuration."""

import json
import logging
import re
from io import StringIO

import pytest
import structlog

from analogix.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> None:
    """Reset structlog state after each test."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)


def _capture_log_output(
    environment: str, log_level: str = "DEBUG", **event_kw: object
) -> str:
    """Configure logging, emit a message, return captured output."""
    configure_logging(environment=environment, log_level=log_level)

    stream = StringIO()
    root = logging.getLogger()
    if not root.handlers or not isinstance(root.handlers[0], logging.StreamHandler):
        raise RuntimeError("Expected configure_logging to set up a StreamHandler")

    original_stream = root.handlers[0].stream
    root.handlers[0].stream = stream

    logger = structlog.get_logger()
    logger.info("test_event", **(event_kw or {"key": "value"}))

    root.handlers[0].stream = original_stream
    return stream.getvalue()


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_production_json(self) -> None:
        """Production environment produces valid JSON output."""
        output = _capture_log_output("production")
        parsed = json.loads(output)
        assert parsed["event"] == "test_event"
        assert parsed["key"] == "value"
        assert parsed["level"] == "info"

    def test_configure_development_console(self) -> None:
        """Development environment produces human-readable console output."""
        output = _capture_log_output("development")
        plain = re.sub(r"\x1b\[[0-9;]*m", "", output)
        assert "test_event" in plain
        assert "key=value" in plain

    def test_configure_sets_log_level(self) -> None:
        configure_logging(log_level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_configure_includes_timestamp(self) -> None:
        output = _capture_log_output("production")
        parsed = json.loads(output)
        assert "timestamp" in parsed
        # ISO format contains 'T' separator
        assert "T" in parsed["timestamp"]

    def test_http_client_loggers_quieted(self) -> None:
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("openai").level == logging.WARNING


class TestRedaction:
    """Secrets never reach the rendered log line."""

    @pytest.mark.parametrize("key", ["api_key", "credential", "authorization"])
    def test_sensitive_keys_redacted(self, key: str) -> None:
        output = _capture_log_output("production", **{key: "gsk_live_123"})
        parsed = json.loads(output)
        assert parsed[key] == "***REDACTED***"
        assert "gsk_live_123" not in output

    def test_bearer_token_in_value_redacted(self) -> None:
        output = _capture_log_output(
            "production", error="401 - invalid header Bearer gsk_live_123"
        )
        parsed = json.loads(output)
        assert parsed["error"] == "401 - invalid header Bearer ***REDACTED***"

    def test_other_values_untouched(self) -> None:
        output = _capture_log_output("production", model="m1", credential_index=1)
        parsed = json.loads(output)
        assert parsed["model"] == "m1"
        assert parsed["credential_index"] == 1
