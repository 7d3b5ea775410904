"""
Tests for logging configuration.
"""
import logging
from datetime import datetime, timezone

from sandwich_slots.logging_config import LocalTimeFormatter, resolve_level, setup_logging


class TestLoggingConfiguration:
    """Test logging setup and configuration."""

    def test_setup_logging_default_level(self, monkeypatch):
        """Test that setup_logging defaults to INFO level."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        setup_logging()

        logger = logging.getLogger("sandwich_slots")
        assert logger.level == logging.INFO

    def test_setup_logging_respects_env_var(self, monkeypatch):
        """Test that LOG_LEVEL env var is respected."""
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()

        logger = logging.getLogger("sandwich_slots")
        assert logger.level == logging.WARNING

    def test_setup_logging_explicit_level(self):
        setup_logging(level="ERROR")

        assert logging.getLogger("sandwich_slots").level == logging.ERROR

    def test_invalid_level_defaults_to_info(self):
        assert resolve_level("INVALID_LEVEL") == "INFO"

    def test_debug_logs_not_shown_at_info_level(self, caplog):
        """Test that DEBUG logs don't appear when level is INFO."""
        setup_logging(level="INFO")

        with caplog.at_level(logging.INFO, logger="sandwich_slots"):
            logger = logging.getLogger("sandwich_slots.test")
            logger.debug("This should not appear")
            logger.info("This should appear")

            messages = [r.message for r in caplog.records]
            assert "This should not appear" not in messages
            assert "This should appear" in messages


class TestLocalTimeFormatter:

    def _record_at(self, moment):
        record = logging.LogRecord("sandwich_slots", logging.INFO, __file__, 1, "tick", None, None)
        record.created = moment.timestamp()
        return record

    def test_timestamps_use_configured_timezone(self):
        formatter = LocalTimeFormatter("%(asctime)s %(message)s", tz_name="Europe/Rome")
        # 10:00 UTC is 11:00 in Rome in March (CET)
        record = self._record_at(datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc))

        assert formatter.format(record) == "2026-03-02 11:00:00 tick"

    def test_custom_date_format(self):
        formatter = LocalTimeFormatter("%(asctime)s", datefmt="%H:%M", tz_name="UTC")
        record = self._record_at(datetime(2026, 3, 2, 12, 15, tzinfo=timezone.utc))

        assert formatter.format(record) == "12:15"
