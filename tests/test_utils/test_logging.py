"""Tests for logging setup and formatters."""

import json
import logging

import pytest

from contentintel.utils.logging import (
    ColoredFormatter,
    JSONFormatter,
    create_logger_with_context,
    setup_logging,
    setup_logging_from_config,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def make_record(msg="hello", **extra):
    record = logging.LogRecord("dispatcher", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "dispatcher"
        assert data["message"] == "hello"

    def test_request_context_is_included(self):
        record = make_record(category="news", caller="a@b.com", result_origin="fallback")
        data = json.loads(JSONFormatter().format(record))
        assert data["context"] == {"category": "news", "caller": "a@b.com", "result_origin": "fallback"}

    def test_no_context_key_without_extra(self):
        assert "context" not in json.loads(JSONFormatter().format(make_record()))


class TestColoredFormatter:
    def test_level_name_restored(self):
        record = make_record()
        ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert record.levelname == "INFO"


class TestSetupLogging:
    def test_console_and_file(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(level="DEBUG", log_format="text", log_file=str(log_file))

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 2

        logging.getLogger("dispatcher").info("written")
        for handler in restore_root_logger.handlers:
            handler.flush()
        line = json.loads(log_file.read_text().splitlines()[-1])
        assert line["message"] == "written"

    def test_from_config_section(self, restore_root_logger):
        setup_logging_from_config({"level": "WARNING", "format": "json"})
        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

        setup_logging_from_config({"level": "WARNING"}, verbose=True)
        assert restore_root_logger.level == logging.DEBUG

    def test_console_disabled(self, restore_root_logger):
        setup_logging(console_enabled=False)
        assert restore_root_logger.handlers == []


class TestContextLogger:
    def test_context_is_attached(self, caplog):
        log = create_logger_with_context("dispatcher", {"category": "tool", "caller": "anonymous"})
        with caplog.at_level(logging.INFO, logger="dispatcher"):
            log.info("denied", extra={"result_origin": "engine"})
        record = caplog.records[-1]
        assert record.category == "tool"
        assert record.caller == "anonymous"
        assert record.result_origin == "engine"
