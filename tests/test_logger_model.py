import logging
from datetime import datetime, timezone

from kemai.logger_model import (
    MAX_LOG_ENTRIES,
    LoggerEntry,
    LoggerTreeModel,
    LoggerTreeModelHandler,
)

NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _entry(message, level=logging.INFO):
    return LoggerEntry(date_time=NOW, message=message, level=level)


def test_sink_appends_in_order():
    model = LoggerTreeModel()
    model.sink_log(_entry("a"))
    model.sink_log(_entry("b"))
    assert [entry.message for entry in model.entries] == ["a", "b"]


def test_capacity_drops_oldest():
    model = LoggerTreeModel()
    for index in range(MAX_LOG_ENTRIES + 2):
        model.sink_log(_entry(str(index)))
    assert len(model) == MAX_LOG_ENTRIES
    assert model.entries[0].message == "2"
    assert model.entries[-1].message == str(MAX_LOG_ENTRIES + 1)


def test_display_columns():
    model = LoggerTreeModel()
    model.sink_log(_entry("hello", logging.WARNING))
    assert model.display(0, 0) == "WARNING"
    assert model.display(0, 1) == NOW
    assert model.display(0, 2) == "hello"
    assert model.display(0, 3) is None
    assert model.display(1, 0) is None


def test_foreground_by_level():
    model = LoggerTreeModel()
    for level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL):
        model.sink_log(_entry("x", level))
    assert [model.foreground(row) for row in range(5)] == ["blue", "darkGreen", "darkYellow", "darkRed", "darkRed"]


def test_headers():
    assert [LoggerTreeModel.header(section) for section in range(4)] == ["Level", "Date", "Message", None]
    assert LoggerTreeModel.column_count == 3


def test_handler_strips_markers_and_keeps_level():
    model = LoggerTreeModel()
    logger = logging.Logger("kemai-test")
    logger.addHandler(LoggerTreeModelHandler(model))
    logger.error("<=== request failed ")
    entry = model.entries[0]
    assert entry.message == "request failed"
    assert entry.level == logging.ERROR
    assert entry.date_time.tzinfo is timezone.utc