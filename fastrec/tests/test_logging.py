"""
Unit Tests: Structured Logging

Tests:
    - JSON output with keyword fields
    - Scoped context fields
    - Level filtering and text output
"""

import io
import json

import pytest

from fastrec.observability.logging import LogLevel, get_logger, setup_logging


@pytest.fixture
def stream():
    buffer = io.StringIO()
    yield buffer
    setup_logging(LogLevel.WARNING, json_output=True)


def records(buffer):
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line]


class TestJsonLogging:
    """Tests for the JSON formatter."""

    def test_fields_serialized(self, stream):
        """Test message, level, logger and keyword fields are emitted."""
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)

        get_logger("fastrec.test").info("Built thing", count=3)

        [record] = records(stream)
        assert record["message"] == "Built thing"
        assert record["level"] == "INFO"
        assert record["logger"] == "fastrec.test"
        assert record["count"] == 3
        assert "@timestamp" in record

    def test_context_fields(self, stream):
        """Test scoped fields apply only inside the context."""
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)
        logger = get_logger("fastrec.test")

        with logger.context(source="prefs.tsv"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = records(stream)
        assert inside["source"] == "prefs.tsv"
        assert "source" not in outside

    def test_with_extra(self, stream):
        """Test child loggers carry default fields."""
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)

        get_logger("fastrec.test").with_extra(component="store").warning("slow")

        [record] = records(stream)
        assert record["component"] == "store"
        assert record["level"] == "WARNING"


class TestLevels:
    """Tests for level handling."""

    def test_debug_filtered_at_info(self, stream):
        """Test records below the configured level are dropped."""
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)
        logger = get_logger("fastrec.test")

        logger.debug("hidden")

        assert stream.getvalue() == ""
        assert not logger.is_enabled_for(LogLevel.DEBUG)

    def test_text_output(self, stream):
        """Test the plain-text format."""
        setup_logging(LogLevel.DEBUG, json_output=False, stream=stream)

        get_logger("fastrec.test").debug("plain message")

        assert "DEBUG" in stream.getvalue()
        assert "plain message" in stream.getvalue()

    def test_level_from_name(self):
        """Test level lookup by case-insensitive name."""
        assert LogLevel.from_name("warning") is LogLevel.WARNING


class TestTimed:
    """Tests for the build-summary timer."""

    def test_summary_fields(self, stream):
        """Test fields given up front and filled in the block are both logged."""
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)
        logger = get_logger("fastrec.test")

        with logger.timed("Built index", size=4) as summary:
            summary["relations"] = 9

        [record] = records(stream)
        assert record["message"] == "Built index"
        assert record["size"] == 4
        assert record["relations"] == 9
        assert record["elapsed_ms"] >= 0

    def test_nothing_logged_on_failure(self, stream):
        """Test a failing block propagates without a summary record."""
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)
        logger = get_logger("fastrec.test")

        with pytest.raises(KeyError):
            with logger.timed("Built index"):
                raise KeyError("missing")

        assert stream.getvalue() == ""
