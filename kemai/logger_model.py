"""Bounded list of recent log records and a logging handler feeding it."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

MAX_LOG_ENTRIES = 500

_HEADERS = ("Level", "Date", "Message")


@dataclass
class LoggerEntry:
    date_time: datetime
    message: str
    level: int


class LoggerTreeModel:
    """Keeps the last ``MAX_LOG_ENTRIES`` log entries, oldest first."""

    column_count = len(_HEADERS)

    def __init__(self) -> None:
        self._entries: deque[LoggerEntry] = deque(maxlen=MAX_LOG_ENTRIES)
        self._lock = threading.Lock()

    def sink_log(self, entry: LoggerEntry) -> None:
        """Append ``entry``, dropping the oldest one when full."""
        with self._lock:
            self._entries.append(entry)

    @property
    def entries(self) -> list[LoggerEntry]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _entry(self, row: int) -> Optional[LoggerEntry]:
        if not 0 <= row < len(self._entries):
            return None
        return self._entries[row]

    def display(self, row: int, column: int) -> Union[str, datetime, None]:
        """Level name, date or message of the entry at ``row``."""
        entry = self._entry(row)
        if entry is None:
            return None
        if column == 0:
            return logging.getLevelName(entry.level)
        if column == 1:
            return entry.date_time
        if column == 2:
            return entry.message
        return None

    def foreground(self, row: int) -> Optional[str]:
        """Colour name used to draw the entry at ``row``."""
        entry = self._entry(row)
        if entry is None:
            return None
        if entry.level >= logging.ERROR:
            return "darkRed"
        if entry.level >= logging.WARNING:
            return "darkYellow"
        if entry.level >= logging.INFO:
            return "darkGreen"
        return "blue"

    @staticmethod
    def header(section: int) -> Optional[str]:
        if 0 <= section < len(_HEADERS):
            return _HEADERS[section]
        return None


class LoggerTreeModelHandler(logging.Handler):
    """Forwards log records into a :class:`LoggerTreeModel`."""

    def __init__(self, model: LoggerTreeModel) -> None:
        super().__init__()
        self.model = model

    def emit(self, record: logging.LogRecord) -> None:
        try:
            millis = int(record.created * 1000)
            message = record.getMessage().replace("<===", "").replace("===>", "").strip()
            entry = LoggerEntry(
                date_time=datetime.fromtimestamp(millis / 1000, tz=timezone.utc),
                message=message,
                level=record.levelno,
            )
            self.model.sink_log(entry)
        except Exception:
            self.handleError(record)