"""
Tests for structured logging and configuration.
"""

import json
import logging


class TestLogging:
    """Structured logging tests."""

    def _record(self, msg: str = "Test message") -> logging.LogRecord:
        return logging.LogRecord(
            name="shopbias.test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg=msg,
            args=(),
            exc_info=None,
        )

    def test_json_formatter(self):
        from shopbias.logging import JSONFormatter

        output = JSONFormatter().format(self._record())
        parsed = json.loads(output)
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_json_formatter_extra_fields(self):
        from shopbias.logging import JSONFormatter

        record = self._record("Analysis complete")
        record.bias_count = 2
        record.currency = "EUR"
        record.client_ip = "203.0.113.7"
        record.unrelated = "dropped"
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["bias_count"] == 2
        assert parsed["currency"] == "EUR"
        assert "unrelated" not in parsed
        assert "client_ip" not in parsed

    def test_json_formatter_exception(self):
        from shopbias.logging import JSONFormatter

        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = logging.LogRecord(
                name="shopbias.test", level=logging.ERROR, pathname="test.py",
                lineno=1, msg="failed", args=(), exc_info=sys.exc_info(),
            )
        parsed = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in parsed["exception"]

    def test_get_logger(self):
        from shopbias.logging import get_logger
        log = get_logger("analyzer")
        assert log.name == "shopbias.analyzer"

    def test_setup_logging_single_handler(self):
        from shopbias.logging import setup_logging
        setup_logging()
        root = setup_logging()
        assert root.name == "shopbias"
        assert len(root.handlers) == 1


class TestSettings:

    def test_settings_frozen(self):
        import dataclasses
        import pytest
        from shopbias.config import settings

        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.PORT = 1

    def test_geolocation_disabled_in_tests(self):
        from shopbias.config import settings
        assert settings.GEO_ENABLED is False

    def test_version_comes_from_package(self):
        from shopbias.config import settings
        assert not hasattr(settings, "APP_VERSION")
        assert not hasattr(settings, "API_VERSION")
