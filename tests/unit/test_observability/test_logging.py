"""Unit tests for structured logging configuration."""

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from src.observability import configure_from_settings, configure_logging, get_logger
from src.settings import ClientSettings


@pytest.fixture(autouse=True)
def _restore_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self) -> None:
        """Test that events render as JSON lines with level and timestamp."""
        stream = io.StringIO()
        configure_logging(level="DEBUG", output=stream)

        get_logger("test").info("request_started", method="GET")

        entry = json.loads(stream.getvalue().strip())
        assert entry["event"] == "request_started"
        assert entry["method"] == "GET"
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_level_filtering(self) -> None:
        """Test that events below the configured level are dropped."""
        stream = io.StringIO()
        configure_logging(level=logging.WARNING, output=stream)
        log = get_logger("test")

        log.info("quiet")
        log.warning("loud")

        lines = stream.getvalue().strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "loud"

    def test_console_output(self) -> None:
        """Test the human-readable renderer."""
        stream = io.StringIO()
        configure_logging(output=stream, json_format=False)

        get_logger("test").info("status_informational")

        assert "status_informational" in stream.getvalue()

    def test_unknown_level(self) -> None:
        """Test that unknown level names are rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="CHATTY")

    def test_configure_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that settings drive level and format."""
        monkeypatch.setenv("SECURE_FETCH_LOG_LEVEL", "error")
        monkeypatch.setenv("SECURE_FETCH_LOG_JSON", "true")
        stream = io.StringIO()
        configure_from_settings(ClientSettings(_env_file=None), output=stream)
        log = get_logger("test")

        log.warning("auth_provider_missing")
        log.error("security_violation", rule="BASIC_AUTH")

        lines = stream.getvalue().strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["rule"] == "BASIC_AUTH"
