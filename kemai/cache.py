"""Local copy of the customers, projects, activities and recent time sheets."""

from __future__ import annotations

import logging
import threading
from enum import Enum, auto
from typing import Any, Callable, Iterable, Optional

from .api import Activity, Customer, Project, TimeSheet
from .reply import ApiResult

logger = logging.getLogger("kemai")


class CacheCategory(Enum):
    """Kinds of server data the cache keeps."""

    CUSTOMERS = auto()
    PROJECTS = auto()
    ACTIVITIES = auto()
    RECENT_TIMESHEETS = auto()


class CacheStatus(Enum):
    """Where the cache stands with respect to the server."""

    EMPTY = auto()
    SYNC_PENDING = auto()
    READY = auto()


_REQUESTS: dict[CacheCategory, Callable[[Any], ApiResult]] = {
    CacheCategory.CUSTOMERS: lambda client: client.request_customers(),
    CacheCategory.PROJECTS: lambda client: client.request_projects(),
    CacheCategory.ACTIVITIES: lambda client: client.request_activities(),
    CacheCategory.RECENT_TIMESHEETS: lambda client: client.request_recent_timesheets(),
}


class KimaiCache:
    """Fetches server data by category and serves filtered views of it."""

    def __init__(self) -> None:
        self._data: dict[CacheCategory, list] = {category: [] for category in CacheCategory}
        self._pending: set[CacheCategory] = set()
        self._status = CacheStatus.EMPTY
        self._sync_lock = threading.Lock()
        self._progress_lock = threading.Lock()
        self._started_callbacks: list[Callable[[], None]] = []
        self._finished_callbacks: list[Callable[[], None]] = []

    @property
    def status(self) -> CacheStatus:
        return self._status

    def on_synchronize_started(self, callback: Callable[[], None]) -> None:
        """Call ``callback`` each time a synchronisation begins."""
        self._started_callbacks.append(callback)

    def on_synchronize_finished(self, callback: Callable[[], None]) -> None:
        """Call ``callback`` each time every requested category has arrived."""
        self._finished_callbacks.append(callback)

    def synchronize(self, client: Any, categories: Optional[Iterable[CacheCategory]] = None) -> None:
        """Refresh the given categories, or all of them when none are given."""
        if not self._sync_lock.acquire(blocking=False):
            logger.error("Sync already in progress")
            return

        self._status = CacheStatus.SYNC_PENDING
        wanted = set(categories) if categories else set(CacheCategory)
        self._pending = set(wanted)

        for callback in list(self._started_callbacks):
            callback()

        for category in [category for category in CacheCategory if category in wanted]:
            self._data[category] = []
            result = _REQUESTS[category](client)
            handler = self._make_handler(category)
            result.on_ready(handler)
            result.on_error(handler)

    def customers(self) -> list[Customer]:
        return list(self._data[CacheCategory.CUSTOMERS])

    def projects(self, customer_id: Optional[int] = None) -> list[Project]:
        """Projects, restricted to one customer when ``customer_id`` is given."""
        projects = self._data[CacheCategory.PROJECTS]
        if customer_id is None:
            return list(projects)
        return [project for project in projects if project.customer.id == customer_id]

    def activities(self, project_id: Optional[int] = None) -> list[Activity]:
        """Activities of one project plus global ones when ``project_id`` is given."""
        activities = self._data[CacheCategory.ACTIVITIES]
        if project_id is None:
            return list(activities)
        return [
            activity
            for activity in activities
            if activity.project is None or activity.project.id == project_id
        ]

    def recent_timesheets(self) -> list[TimeSheet]:
        return list(self._data[CacheCategory.RECENT_TIMESHEETS])

    def _make_handler(self, category: CacheCategory) -> Callable[[ApiResult], None]:
        def handle(result: ApiResult) -> None:
            if not result.has_error():
                self._data[category] = list(result.result or [])
            self._update_sync_progress(category)

        return handle

    def _update_sync_progress(self, finished: CacheCategory) -> None:
        with self._progress_lock:
            self._pending.discard(finished)
            if self._pending:
                return
            self._status = CacheStatus.READY
            self._sync_lock.release()
        for callback in list(self._finished_callbacks):
            callback()