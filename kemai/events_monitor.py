"""Tracks the time sheet currently running on the server."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from .api import TimeSheet
from .reply import ApiResult

logger = logging.getLogger("kemai")


class KimaiEventsMonitor:
    """Polls the active time sheets and reports when the running one changes."""

    def __init__(self, client: Any) -> None:
        self._client = client
        self._current: Optional[TimeSheet] = None
        self._last_update: Optional[datetime] = None
        self._changed_callbacks: list[Callable[[], None]] = []

    @property
    def current_timesheet(self) -> Optional[TimeSheet]:
        return self._current

    @property
    def has_current_timesheet(self) -> bool:
        return self._current is not None

    def on_current_timesheet_changed(self, callback: Callable[[], None]) -> None:
        """Call ``callback`` whenever the running time sheet changes."""
        self._changed_callbacks.append(callback)

    def refresh_current_timesheet(self) -> None:
        """Ask the server which time sheet is running."""
        result = self._client.request_active_timesheets()
        result.on_ready(self._on_active_timesheets_received)
        result.on_error(self._on_client_error)

    def tick(self, auto_refresh: bool, delay_seconds: int, now: Optional[datetime] = None) -> bool:
        """Refresh when auto refresh is on and the last update is old enough.

        Returns whether a refresh was sent.
        """
        if not auto_refresh or self._last_update is None:
            return False
        now = now if now is not None else datetime.now()
        if int((now - self._last_update).total_seconds()) >= delay_seconds:
            self.refresh_current_timesheet()
            return True
        return False

    def _emit_changed(self) -> None:
        for callback in list(self._changed_callbacks):
            callback()

    def _on_client_error(self, result: ApiResult) -> None:
        logger.error("Client error: %s", result.error_message)

    def _on_active_timesheets_received(self, result: ApiResult) -> None:
        timesheets = result.result or []
        first_run = self._last_update is None
        is_running = self._current is not None

        if not timesheets:
            if is_running or first_run:
                self._current = None
                self._emit_changed()
        else:
            timesheet = timesheets[0]
            is_same = is_running and timesheet.id == self._current.id
            if not is_same or first_run or not is_running:
                self._current = timesheet
                self._emit_changed()

        self._last_update = datetime.now()