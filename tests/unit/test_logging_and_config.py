"""
Unit tests for logging formatters and environment configuration.
"""

import json
import logging
import sys

import pytest

from dental_manager.core import config
from dental_manager.core.logging_config import ConsoleFormatter, JSONFormatter


def make_record(msg="Appointment created", context=None, exc_info=None):
    record = logging.LogRecord(
        name="dental_manager.services.appointment_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    if context is not None:
        record.context = context
    return record


@pytest.mark.unit
class TestFormatters:
    def test_json_formatter_includes_context(self):
        output = JSONFormatter().format(make_record(context={"appointment_id": 7}))
        data = json.loads(output)

        assert data["level"] == "INFO"
        assert data["logger"] == "dental_manager.services.appointment_service"
        assert data["message"] == "Appointment created"
        assert data["context"] == {"appointment_id": 7}
        assert "timestamp" in data

    def test_json_formatter_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record(exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]

    def test_console_formatter_does_not_mutate_record(self):
        record = make_record()
        output = ConsoleFormatter("%(levelname)s | %(message)s").format(record)

        assert "Appointment created" in output
        assert "\033[32m" in output
        assert record.levelname == "INFO"


@pytest.mark.unit
class TestConfig:
    def test_database_url_default(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert config.get_database_url() == "sqlite:///./dental_manager.db"

    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("1", True), ("YES", True), ("false", False), ("0", False)],
    )
    def test_email_enabled_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("EMAIL_ENABLED", raw)
        assert config.get_email_enabled() is expected

    def test_logging_settings(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_JSON", "true")
        monkeypatch.delenv("LOG_TO_FILE", raising=False)

        assert config.get_log_level() == "DEBUG"
        assert config.get_log_json() is True
        assert config.get_log_to_file() is False

    def test_seed_flag_defaults_off(self, monkeypatch):
        monkeypatch.delenv("SEED_DEMO_DATA", raising=False)
        assert config.get_seed_demo_data() is False
