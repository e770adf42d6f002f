"""
Unit tests for logging helpers.
"""

import json
import logging

from sync_trigger.core.logging import (
    CorrelationContext, HumanReadableFormatter, StructuredFormatter,
    configure_logging, log_with_context,
)


def make_record(**extra):
    record = logging.LogRecord(
        name="sync_trigger.test", level=logging.INFO, pathname=__file__, lineno=1,
        msg="Polled %s items", args=(3,), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    """Tests for the log formatters."""

    def test_structured_formatter(self):
        line = StructuredFormatter().format(make_record(cycle_id="c1", oihUid="o1"))

        entry = json.loads(line)
        assert entry["message"] == "Polled 3 items"
        assert entry["level"] == "INFO"
        assert entry["cycle_id"] == "c1"
        assert entry["oihUid"] == "o1"
        assert "operation_id" not in entry
        assert "timestamp" in entry

    def test_structured_without_timestamp(self):
        entry = json.loads(StructuredFormatter(include_timestamp=False).format(make_record()))
        assert "timestamp" not in entry

    def test_human_readable_formatter(self):
        line = HumanReadableFormatter(include_timestamp=False).format(
            make_record(cycle_id="c1", operation_id="listItems")
        )

        assert line == "[INFO] sync_trigger.test - Polled 3 items [cycle_id=c1 operation_id=listItems]"


class TestCorrelationContext:
    """Tests for CorrelationContext."""

    def test_nesting(self):
        assert CorrelationContext.get_current() == {}

        with CorrelationContext(cycle_id="outer", oihUid=None):
            assert CorrelationContext.get_current() == {"cycle_id": "outer"}
            with CorrelationContext(cycle_id="inner"):
                assert CorrelationContext.get_current() == {"cycle_id": "inner"}
            assert CorrelationContext.get_current() == {"cycle_id": "outer"}

        assert CorrelationContext.get_current() == {}

    def test_log_with_context(self, caplog):
        logger = logging.getLogger("tests.logging.context")

        with caplog.at_level(logging.INFO, logger="tests.logging.context"):
            with CorrelationContext(cycle_id="c9"):
                log_with_context(logger, logging.INFO, "Cycle %s", "done", operation_id="op")

        record = caplog.records[-1]
        assert record.getMessage() == "Cycle done"
        assert record.cycle_id == "c9"
        assert record.operation_id == "op"


def test_configure_logging_sets_level():
    configure_logging(level=logging.DEBUG, structured=True)
    package_logger = logging.getLogger("sync_trigger")

    assert package_logger.level == logging.DEBUG
    assert package_logger.handlers

    configure_logging(level=logging.WARNING)
    assert package_logger.level == logging.WARNING
    assert all(h.level == logging.WARNING for h in package_logger.handlers)
