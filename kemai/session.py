"""State of a connection to one Kimai instance."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .api import ApiPlugin, Plugin, TimeSheet, TimeSheetConfig, User, Version, can_request_plugins
from .cache import CacheCategory, KimaiCache
from .events_monitor import KimaiEventsMonitor
from .reply import ApiResult

logger = logging.getLogger("kemai")

Callback = Callable[[], None]


class KemaiSession:
    """Gathers server identity, cached data and the running time sheet."""

    def __init__(self, client: Any) -> None:
        self._client = client
        self._cache = KimaiCache()
        self._monitor = KimaiEventsMonitor(client)
        self._kimai_version: Version = ()
        self._plugins: list[Plugin] = []
        self._me = User()
        self._timesheet_config = TimeSheetConfig()
        self._callbacks: dict[str, list[Callback]] = {
            "plugins": [],
            "current_timesheet": [],
            "version": [],
            "me": [],
            "timesheet_config": [],
        }
        self._monitor.on_current_timesheet_changed(lambda: self._emit("current_timesheet"))

    # -- accessors ---------------------------------------------------------

    @property
    def client(self) -> Any:
        return self._client

    @property
    def cache(self) -> KimaiCache:
        return self._cache

    @property
    def kimai_version(self) -> Version:
        return self._kimai_version

    @property
    def me(self) -> User:
        return self._me

    @property
    def timesheet_config(self) -> TimeSheetConfig:
        return self._timesheet_config

    @property
    def current_timesheet(self) -> Optional[TimeSheet]:
        return self._monitor.current_timesheet

    @property
    def has_current_timesheet(self) -> bool:
        return self._monitor.has_current_timesheet

    # -- listeners ---------------------------------------------------------

    def on_plugins_changed(self, callback: Callback) -> None:
        self._callbacks["plugins"].append(callback)

    def on_current_timesheet_changed(self, callback: Callback) -> None:
        self._callbacks["current_timesheet"].append(callback)

    def on_version_changed(self, callback: Callback) -> None:
        self._callbacks["version"].append(callback)

    def on_me_changed(self, callback: Callback) -> None:
        self._callbacks["me"].append(callback)

    def on_timesheet_config_changed(self, callback: Callback) -> None:
        self._callbacks["timesheet_config"].append(callback)

    def _emit(self, name: str) -> None:
        for callback in list(self._callbacks[name]):
            callback()

    # -- actions -----------------------------------------------------------

    def refresh_session_infos(self) -> None:
        """Ask the server who we are, which version it runs and how it tracks time."""
        self._request_me()
        self._request_version()
        self._request_timesheet_config()

    def refresh_current_timesheet(self) -> None:
        self._monitor.refresh_current_timesheet()

    def refresh_cache(
        self, categories: Union[CacheCategory, Iterable[CacheCategory], None] = None
    ) -> None:
        """Synchronise one category, several, or all of them when none are given."""
        if not self._client:
            return
        if isinstance(categories, CacheCategory):
            categories = {categories}
        self._cache.synchronize(self._client, categories)

    def has_plugin(self, api_plugin: ApiPlugin) -> bool:
        return any(plugin.api_plugin == api_plugin for plugin in self._plugins)

    def compute_tz_datetime(self, value: Optional[datetime]) -> Optional[datetime]:
        """Express ``value`` in the user's time zone when that zone is known."""
        if value is None or not self._me.timezone:
            return value
        try:
            zone = ZoneInfo(self._me.timezone)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            return value
        return value.astimezone(zone)

    # -- requests ----------------------------------------------------------

    def _on_client_error(self, result: ApiResult) -> None:
        logger.error("Client error: %s", result.error_message)

    def _request_me(self) -> None:
        def ready(result: ApiResult) -> None:
            self._me = result.result
            self._emit("me")

        self._client.request_me_user_info().on_ready(ready).on_error(self._on_client_error)

    def _request_version(self) -> None:
        def ready(result: ApiResult) -> None:
            self._kimai_version = result.result.kimai
            self._emit("version")
            if can_request_plugins(self._kimai_version):
                self._request_plugins()

        self._client.request_kimai_version().on_ready(ready).on_error(self._on_client_error)

    def _request_timesheet_config(self) -> None:
        def ready(result: ApiResult) -> None:
            self._timesheet_config = result.result
            self._emit("timesheet_config")

        self._client.request_timesheet_config().on_ready(ready).on_error(self._on_client_error)

    def _request_plugins(self) -> None:
        def ready(result: ApiResult) -> None:
            self._plugins = list(result.result or [])
            self._emit("plugins")

        self._client.request_plugins().on_ready(ready).on_error(self._on_client_error)