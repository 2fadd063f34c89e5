"""
Test suite for the logging configuration module
"""

import io
import json
import logging
import sys

from transaction_processor.logging_config import (
    JSONFormatter, ROOT_LOGGER_NAME, get_logger, log_action, setup_logging
)


class TestJSONFormatter:
    """Test JSON log records"""

    def test_format_drops_empty_fields(self):
        """Test that only populated fields appear"""
        record = logging.LogRecord(
            "transaction_processor.test", logging.INFO, __file__, 1,
            "hello %s", ("world",), None
        )
        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["module"] == "transaction_processor.test"
        assert entry["message"] == "hello world"
        assert "timestamp" in entry
        assert "client" not in entry
        assert "exception" not in entry

    def test_format_exception(self):
        """Test that exception info is included"""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "transaction_processor.test", logging.ERROR, __file__, 1,
                "failed", (), sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]


class TestSetupLogging:
    """Test handler setup"""

    def test_json_stream(self):
        """Test structured output through log_action"""
        stream = io.StringIO()
        setup_logging(level="DEBUG", stream=stream)

        log_action(
            get_logger("transaction_processor.accounts"), "debug", "Recorded 5",
            action="deposit", client=0, tx=9, extra={"available": "5"}
        )

        entry = json.loads(stream.getvalue())
        assert entry["action"] == "deposit"
        assert entry["client"] == 0
        assert entry["tx"] == 9
        assert entry["extra"] == {"available": "5"}

    def test_level_filters(self):
        """Test that records below the level are dropped"""
        stream = io.StringIO()
        setup_logging(level="WARNING", stream=stream)

        log_action(get_logger("transaction_processor.accounts"), "info", "quiet")
        get_logger("transaction_processor.cli").warning("loud")

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "loud"

    def test_text_format(self):
        """Test plain text output"""
        stream = io.StringIO()
        setup_logging(level="INFO", fmt="text", stream=stream)

        get_logger("transaction_processor.cli").info("Reading file a.csv")

        assert "transaction_processor.cli INFO Reading file a.csv" in stream.getvalue()

    def test_log_file(self, tmp_path):
        """Test logging to a file"""
        path = tmp_path / "processor.log"
        setup_logging(level="INFO", log_file=str(path))

        get_logger("transaction_processor.cli").info("to file")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()

        assert json.loads(path.read_text().strip())["message"] == "to file"

    def test_repeated_setup_replaces_handlers(self):
        """Test that calling setup twice does not duplicate output"""
        first = io.StringIO()
        second = io.StringIO()
        setup_logging(stream=first)
        logger = setup_logging(stream=second)

        get_logger("transaction_processor.cli").info("once")

        assert len(logger.handlers) == 1
        assert not logger.propagate
        assert first.getvalue() == ""
        assert len(second.getvalue().splitlines()) == 1
