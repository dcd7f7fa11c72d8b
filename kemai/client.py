"""HTTP client for the Kimai JSON API."""

from __future__ import annotations

import json
import logging
from enum import Enum, auto
from typing import Any, Mapping, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

import requests

from .api import (
    Activity,
    Customer,
    KimaiVersion,
    Plugin,
    Project,
    Task,
    TimeSheet,
    TimeSheetConfig,
    TrackingMode,
    User,
)
from .parser import (
    ApiTypesParser,
    KimaiParseError,
    activity_to_json,
    customer_to_json,
    project_to_json,
    timesheet_to_json,
)
from .reply import ApiResult

APPLICATION_NAME = "Kemai"
APPLICATION_VERSION = "0.1.0"

logger = logging.getLogger("kemai")


class ApiMethod(Enum):
    """Requests the client knows how to send."""

    VERSION = auto()
    CUSTOMERS = auto()
    CUSTOMER_ADD = auto()
    PROJECTS = auto()
    PROJECT_ADD = auto()
    ACTIVITIES = auto()
    ACTIVITY_ADD = auto()
    ACTIVE_TIMESHEETS = auto()
    RECENT_TIMESHEETS = auto()
    TIMESHEETS = auto()
    USERS = auto()
    ME_USERS = auto()
    TAGS = auto()
    PLUGINS = auto()
    TASKS = auto()
    TASK_LOG = auto()
    TASK_START = auto()
    TASK_STOP = auto()
    TASK_CLOSE = auto()
    TIMESHEET_CONFIG = auto()


_METHOD_PATHS = {
    ApiMethod.VERSION: "version",
    ApiMethod.CUSTOMERS: "customers",
    ApiMethod.CUSTOMER_ADD: "customers",
    ApiMethod.PROJECTS: "projects",
    ApiMethod.PROJECT_ADD: "projects",
    ApiMethod.ACTIVITIES: "activities",
    ApiMethod.ACTIVITY_ADD: "activities",
    ApiMethod.ACTIVE_TIMESHEETS: "timesheets/active",
    ApiMethod.RECENT_TIMESHEETS: "timesheets/recent",
    ApiMethod.TIMESHEETS: "timesheets",
    ApiMethod.USERS: "users",
    ApiMethod.ME_USERS: "users/me",
    ApiMethod.TAGS: "tags",
    ApiMethod.PLUGINS: "plugins",
    ApiMethod.TASKS: "tasks",
    ApiMethod.TASK_LOG: "tasks",
    ApiMethod.TASK_START: "tasks",
    ApiMethod.TASK_STOP: "tasks",
    ApiMethod.TASK_CLOSE: "tasks",
    ApiMethod.TIMESHEET_CONFIG: "config/timesheet",
}


def api_method_path(method: ApiMethod) -> str:
    """Path segment below ``/api/`` for a request kind."""
    return _METHOD_PATHS.get(method, "")


def _compact_numbers(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _compact_numbers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_compact_numbers(item) for item in value]
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _to_post_data(payload: Any) -> bytes:
    text = json.dumps(_compact_numbers(payload), separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    return text.encode("utf-8")


def _url_from_user_input(host: str) -> tuple[str, str, str]:
    text = host.strip()
    if "://" not in text:
        text = "http://" + text
    parts = urlsplit(text)
    return parts.scheme, parts.netloc, parts.path


class KimaiClient:
    """Sends requests to one Kimai instance and returns their results."""

    def __init__(self, host: str = "", http_session: Optional[requests.Session] = None):
        self.host = host
        self.username = ""
        self.token = ""
        self.api_token = ""
        self._http = http_session if http_session is not None else requests.Session()

    def set_legacy_auth(self, username: str, token: str) -> None:
        """Authenticate with user name and API password headers (Kimai < 2.14)."""
        self.username = username
        self.token = token

    @property
    def is_using_legacy_auth(self) -> bool:
        return not self.api_token

    def prepare_request(
        self,
        method: ApiMethod,
        parameters: Optional[Mapping[str, str]] = None,
        data: bytes = b"",
        sub_path: str = "",
    ) -> requests.Request:
        """Build the URL and headers of a request; the verb is set on sending."""
        scheme, netloc, base_path = _url_from_user_input(self.host)
        path = f"{base_path}/api/{api_method_path(method)}"
        if sub_path:
            path = f"{path}/{sub_path}"
        query = urlencode(sorted((parameters or {}).items()))
        url = urlunsplit((scheme, netloc, path, query, ""))

        headers: dict[str, str] = {}
        if not self.api_token:
            headers["X-AUTH-USER"] = self.username
            headers["X-AUTH-TOKEN"] = self.token
        else:
            headers["Authorization"] = f"Bearer {self.api_token}"
        headers["User-Agent"] = f"{APPLICATION_NAME}/{APPLICATION_VERSION}"
        if data:
            headers["Content-Type"] = "application/json"
            headers["Content-Length"] = str(len(data))

        return requests.Request(url=url, headers=headers)

    def _execute(
        self,
        verb: str,
        method: ApiMethod,
        kind: type,
        many: bool = False,
        parameters: Optional[Mapping[str, str]] = None,
        data: bytes = b"",
        sub_path: str = "",
    ) -> ApiResult:
        result: ApiResult = ApiResult()
        request = self.prepare_request(method, parameters, data, sub_path)
        request.method = verb
        if data:
            request.data = data
        prepared = self._http.prepare_request(request)
        logger.debug("[%s] %s", verb, prepared.url)

        name = api_method_path(method)
        try:
            response = self._http.send(prepared)
        except requests.RequestException as exc:
            result.set_error(f"Error on request [{name}]: {exc}\n")
            return result

        if not response.ok:
            error_string = f"{response.status_code} {response.reason}"
            result.set_error(f"Error on request [{name}]: {error_string}\n{response.text}")
            return result

        logger.debug("[RECV] %s", name)
        try:
            parser = ApiTypesParser(response.content)
            value = parser.array_of(kind) if many else parser.value_of(kind)
        except KimaiParseError as exc:
            result.set_error(str(exc))
            return result
        result.set_result(value)
        return result

    def request_kimai_version(self) -> ApiResult[KimaiVersion]:
        return self._execute("GET", ApiMethod.VERSION, KimaiVersion)

    def request_me_user_info(self) -> ApiResult[User]:
        return self._execute("GET", ApiMethod.ME_USERS, User)

    def request_timesheet_config(self) -> ApiResult[TimeSheetConfig]:
        return self._execute("GET", ApiMethod.TIMESHEET_CONFIG, TimeSheetConfig)

    def request_plugins(self) -> ApiResult[list[Plugin]]:
        return self._execute("GET", ApiMethod.PLUGINS, Plugin, many=True)

    def request_customers(self) -> ApiResult[list[Customer]]:
        return self._execute("GET", ApiMethod.CUSTOMERS, Customer, many=True)

    def request_active_timesheets(self) -> ApiResult[list[TimeSheet]]:
        return self._execute("GET", ApiMethod.ACTIVE_TIMESHEETS, TimeSheet, many=True)

    def request_recent_timesheets(self) -> ApiResult[list[TimeSheet]]:
        return self._execute("GET", ApiMethod.RECENT_TIMESHEETS, TimeSheet, many=True, parameters={"size": "5"})

    def request_projects(self, customer_id: Optional[int] = None) -> ApiResult[list[Project]]:
        parameters = {} if customer_id is None else {"customer": str(customer_id)}
        return self._execute("GET", ApiMethod.PROJECTS, Project, many=True, parameters=parameters)

    def request_activities(self, project_id: Optional[int] = None) -> ApiResult[list[Activity]]:
        parameters = {} if project_id is None else {"project": str(project_id)}
        return self._execute("GET", ApiMethod.ACTIVITIES, Activity, many=True, parameters=parameters)

    def add_customer(self, customer: Customer) -> ApiResult[Customer]:
        data = _to_post_data(customer_to_json(customer))
        return self._execute("POST", ApiMethod.CUSTOMER_ADD, Customer, data=data)

    def add_project(self, project: Project) -> ApiResult[Project]:
        data = _to_post_data(project_to_json(project))
        return self._execute("POST", ApiMethod.PROJECT_ADD, Project, data=data)

    def add_activity(self, activity: Activity) -> ApiResult[Activity]:
        data = _to_post_data(activity_to_json(activity))
        return self._execute("POST", ApiMethod.ACTIVITY_ADD, Activity, data=data)

    def start_timesheet(self, timesheet: TimeSheet, tracking_mode: TrackingMode) -> ApiResult[TimeSheet]:
        data = _to_post_data(timesheet_to_json(timesheet, tracking_mode))
        return self._execute("POST", ApiMethod.TIMESHEETS, TimeSheet, data=data)

    def update_timesheet(self, timesheet: TimeSheet, tracking_mode: TrackingMode) -> ApiResult[TimeSheet]:
        data = _to_post_data(timesheet_to_json(timesheet, tracking_mode))
        return self._execute("PATCH", ApiMethod.TIMESHEETS, TimeSheet, data=data, sub_path=str(timesheet.id))

    def request_tasks(self) -> ApiResult[list[Task]]:
        return self._execute("GET", ApiMethod.TASKS, Task, many=True)

    def start_task(self, task_id: int) -> ApiResult[Task]:
        return self._execute("PATCH", ApiMethod.TASK_START, Task, sub_path=f"{task_id}/start")

    def close_task(self, task_id: int) -> ApiResult[Task]:
        return self._execute("PATCH", ApiMethod.TASK_CLOSE, Task, sub_path=f"{task_id}/close")