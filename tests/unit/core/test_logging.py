"""Tests for logging setup."""

import json
import logging

import pytest
import structlog

from coffeenotes.logging import QUIET_LOGGERS, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    quiet_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, quiet_level in quiet_levels.items():
        logging.getLogger(name).setLevel(quiet_level)
    structlog.reset_defaults()


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.mark.parametrize(("debug", "level"), [(True, logging.DEBUG), (False, logging.INFO)])
    def test_single_structlog_handler(self, restore_logging, debug, level):
        setup_logging(debug)

        root = logging.getLogger()
        assert root.level == level
        [handler] = root.handlers
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_chatty_libraries_quieted(self, restore_logging):
        setup_logging(debug=True)
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_stdlib_records_render_as_json(self, restore_logging):
        setup_logging(debug=False)
        [handler] = logging.getLogger().handlers
        record = logging.LogRecord("uvicorn.error", logging.WARNING, __file__, 1, "port %s busy", (8000,), None)

        event = json.loads(handler.format(record))

        assert event["event"] == "port 8000 busy"
        assert event["level"] == "warning"
        assert event["logger"] == "uvicorn.error"
        assert "timestamp" in event
