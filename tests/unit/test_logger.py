"""Unit tests for logging infrastructure."""

import json
import logging
import sys

import pytest

from recipe_engine.utils.logger import CONTEXT_FIELDS, JSONFormatter, RichTextFormatter, get_logger


def make_record(msg="Test message", level=logging.INFO, name="test_logger", exc_info=None, **extra):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def fresh_logger_name():
    """Unique logger name with any handlers from earlier tests removed."""
    name = "recipe_engine.test_fresh"
    logging.getLogger(name).handlers.clear()
    yield name
    logging.getLogger(name).handlers.clear()


class TestJSONFormatter:
    """Test JSONFormatter produces valid JSON output."""

    def test_json_formatter_outputs_valid_json(self):
        """Test that JSONFormatter produces valid JSON."""
        parsed = json.loads(JSONFormatter().format(make_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test_logger"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_json_formatter_includes_exception_traceback(self):
        """Test that JSONFormatter includes exception traceback when present."""
        try:
            raise ValueError("Test error")
        except ValueError:
            record = make_record("Error occurred", level=logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert "exception" in parsed
        assert "ValueError" in parsed["exception"]

    def test_json_formatter_includes_pipeline_context(self):
        """Test that operation, stage and recipe_id attached via extra= are emitted."""
        record = make_record(operation="generate_recipe", stage="allergies", recipe_id="abc123")

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["operation"] == "generate_recipe"
        assert parsed["stage"] == "allergies"
        assert parsed["recipe_id"] == "abc123"

    def test_json_formatter_omits_missing_context(self):
        parsed = json.loads(JSONFormatter().format(make_record()))

        assert not set(CONTEXT_FIELDS) & set(parsed)


class TestRichTextFormatter:
    """Test RichTextFormatter produces colored text output."""

    @pytest.mark.parametrize(
        "level,icon",
        [(logging.DEBUG, "🔍"), (logging.INFO, "ℹ️"), (logging.WARNING, "⚠️"), (logging.ERROR, "❌")],
    )
    def test_rich_text_formatter_includes_icon_and_level(self, level, icon):
        """Test that RichTextFormatter includes the emoji icon and level name."""
        output = RichTextFormatter().format(make_record(level=level))

        assert icon in output
        assert logging.getLevelName(level) in output

    def test_rich_text_formatter_includes_message(self):
        output = RichTextFormatter().format(make_record("Custom message"))

        assert "Custom message" in output
        assert "] Custom message" not in output

    def test_rich_text_formatter_prefixes_stage(self):
        """Test that a stage attached via extra= prefixes the message."""
        output = RichTextFormatter().format(make_record("Relaxed", stage="cooking_time_limit"))

        assert "[cooking_time_limit] Relaxed" in output

    def test_rich_text_formatter_orders_context(self):
        output = RichTextFormatter().format(
            make_record("Done", recipe_id="abc123", operation="generate_recipe")
        )

        assert "[generate_recipe] [abc123] Done" in output

    def test_rich_text_formatter_includes_exception_traceback(self):
        """Test that RichTextFormatter includes exception traceback."""
        try:
            raise RuntimeError("Test error")
        except RuntimeError:
            record = make_record("Error occurred", level=logging.ERROR, exc_info=sys.exc_info())

        output = RichTextFormatter().format(record)

        assert "RuntimeError" in output
        assert "Test error" in output


class TestGetLogger:
    """Test get_logger function."""

    def test_get_logger_reuses_configured_instance(self, fresh_logger_name):
        """Test that a second call does not stack handlers."""
        first = get_logger(fresh_logger_name)
        second = get_logger(fresh_logger_name)

        assert first is second
        assert len(second.handlers) == 1

    def test_get_logger_respects_log_level_env(self, monkeypatch, fresh_logger_name):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert get_logger(fresh_logger_name).level == logging.DEBUG

    def test_invalid_log_level_defaults_to_info(self, monkeypatch, fresh_logger_name):
        monkeypatch.setenv("LOG_LEVEL", "INVALID")
        assert get_logger(fresh_logger_name).level == logging.INFO

    def test_log_type_defaults_to_text(self, monkeypatch, fresh_logger_name):
        monkeypatch.delenv("LOG_TYPE", raising=False)
        test_logger = get_logger(fresh_logger_name)
        assert isinstance(test_logger.handlers[0].formatter, RichTextFormatter)

    def test_log_type_json(self, monkeypatch, fresh_logger_name):
        monkeypatch.setenv("LOG_TYPE", "json")
        test_logger = get_logger(fresh_logger_name)
        assert isinstance(test_logger.handlers[0].formatter, JSONFormatter)


class TestModuleLevelLogger:
    """Test module-level logger instance."""

    def test_logger_is_importable(self):
        from recipe_engine.utils.logger import logger as imported_logger

        assert isinstance(imported_logger, logging.Logger)
        assert imported_logger.name == "recipe_engine"
        assert len(imported_logger.handlers) > 0

    def test_aiohttp_logger_is_quieted(self):
        assert logging.getLogger("aiohttp").level == logging.WARNING
