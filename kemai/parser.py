"""Conversion between Kimai JSON documents and the API data types."""

from __future__ import annotations

import json
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, TypeVar

from .api import (
    Activity,
    Customer,
    KimaiVersion,
    Plugin,
    Project,
    Task,
    TaskStatus,
    TimeSheet,
    TimeSheetConfig,
    TrackingMode,
    User,
    parse_version,
    plugin_by_name,
)

T = TypeVar("T")

_MISSING = object()

_TRACKING_MODES = {
    "default": TrackingMode.DEFAULT,
    "duration_fixed_begin": TrackingMode.DURATION_FIXED_BEGIN,
    "duration_only": TrackingMode.DURATION_ONLY,
    "punch": TrackingMode.PUNCH,
}

_TASK_STATUSES = {
    "pending": TaskStatus.PENDING,
    "progress": TaskStatus.PROGRESS,
    "closed": TaskStatus.CLOSED,
}

_ISO_DATETIME = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T ](\d{2}):(\d{2})(?::(\d{2})(?:[.,](\d+))?)?"
    r"(Z|[+-]\d{2}(?::?\d{2})?)?)?"
)


class KimaiParseError(ValueError):
    """Raised when a server document cannot be read as the expected type."""


# ---------------------------------------------------------------------------
# JSON value coercion, lenient in the way the server format expects
# ---------------------------------------------------------------------------


def _type_name(value: Any) -> str:
    if value is _MISSING:
        return "Undefined"
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "Bool"
    if isinstance(value, (int, float)):
        return "Double"
    if isinstance(value, str):
        return "String"
    if isinstance(value, list):
        return "Array"
    if isinstance(value, dict):
        return "Object"
    return "Undefined"


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float):
        if not value.is_integer():
            return 0
        value = int(value)
    if not -(2**31) <= value < 2**31:
        return 0
    return value


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _as_bool(value: Any) -> bool:
    return value if isinstance(value, bool) else False


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _is_number(value: Any) -> bool:
    return _type_name(value) == "Double"


def _check_type(object_name: str, value: Any, allowed: tuple[str, ...]) -> None:
    name = _type_name(value)
    if name not in allowed:
        raise KimaiParseError(f"Invalid type for {object_name}: {name}")


def _check_keys(object_name: str, obj: dict, required: tuple[str, ...]) -> None:
    for key in required:
        if key not in obj:
            raise KimaiParseError(f"Invalid {object_name} object. Key '{key}' is missing")


def _parse_iso_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    match = _ISO_DATETIME.fullmatch(value.strip())
    if match is None:
        return None
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    tzinfo = None
    if offset == "Z":
        tzinfo = timezone.utc
    elif offset:
        sign = -1 if offset[0] == "-" else 1
        digits = offset[1:].replace(":", "")
        hours = int(digits[:2])
        minutes = int(digits[2:4] or "0")
        tzinfo = timezone(sign * timedelta(hours=hours, minutes=minutes))
    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            microsecond,
            tzinfo=tzinfo,
        )
    except ValueError:
        return None


def _format_iso_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    offset = value.utcoffset()
    if offset is None:
        return text
    if value.tzinfo is timezone.utc:
        return text + "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


# ---------------------------------------------------------------------------
# Per-type readers
# ---------------------------------------------------------------------------


def _parse_kimai_version(value: Any) -> KimaiVersion:
    _check_type("KimaiVersion", value, ("Object",))
    _check_keys("KimaiVersion", value, ("version",))
    return KimaiVersion(kimai=parse_version(_as_str(value.get("version"))))


def _parse_user(value: Any) -> User:
    _check_type("User", value, ("Object", "Double"))
    if _is_number(value):
        return User(id=_as_int(value))
    _check_keys("User", value, ("id", "username", "memberships"))
    return User(
        id=_as_int(value.get("id")),
        username=_as_str(value.get("username")),
        language=_as_str(value.get("language")),
        timezone=_as_str(value.get("timezone")),
    )


def _parse_timesheet_config(value: Any) -> TimeSheetConfig:
    _check_type("TimeSheetConfig", value, ("Object",))
    _check_keys("TimeSheetConfig", value, ("trackingMode",))
    mode = _TRACKING_MODES.get(_as_str(value.get("trackingMode")), TrackingMode.DEFAULT)
    return TimeSheetConfig(tracking_mode=mode)


def _parse_plugin(value: Any) -> Plugin:
    _check_type("Plugin", value, ("Object",))
    _check_keys("Plugin", value, ("name", "version"))
    name = _as_str(value.get("name"))
    return Plugin(
        name=name,
        version=parse_version(_as_str(value.get("version"))),
        api_plugin=plugin_by_name(name),
    )


def _parse_customer(value: Any) -> Customer:
    _check_type("Customer", value, ("Object", "Double"))
    if _is_number(value):
        return Customer(id=_as_int(value))
    _check_keys("Customer", value, ("id",))
    return Customer(
        id=_as_int(value.get("id")),
        name=_as_str(value.get("name")),
        number=_as_str(value.get("number")),
        comment=_as_str(value.get("comment")),
        company=_as_str(value.get("company")),
        address=_as_str(value.get("address")),
        country_key=_as_str(value.get("country")),
        currency_key=_as_str(value.get("currency")),
        phone=_as_str(value.get("phone")),
        fax=_as_str(value.get("fax")),
        mobile=_as_str(value.get("mobile")),
        email=_as_str(value.get("email")),
        homepage=_as_str(value.get("homepage")),
        timezone=_as_str(value.get("timezone")),
        color=_as_str(value.get("color")),
        budget=_as_float(value.get("budget")),
        time_budget=_as_int(value.get("timeBudget")),
        visible=_as_bool(value.get("visible")),
    )


def _parse_project(value: Any) -> Project:
    _check_type("Project", value, ("Object", "Double"))
    if _is_number(value):
        return Project(id=_as_int(value))
    _check_keys("Project", value, ("id", "name"))
    project = Project(
        id=_as_int(value.get("id")),
        name=_as_str(value.get("name")),
        comment=_as_str(value.get("comment")),
        order_number=_as_str(value.get("orderNumber")),
        order_date=_as_str(value.get("orderDate")),
        start=_as_str(value.get("start")),
        end=_as_str(value.get("end")),
        color=_as_str(value.get("color")),
        budget=_as_float(value.get("budget")),
        time_budget=_as_int(value.get("timeBudget")),
        visible=_as_bool(value.get("visible")),
    )
    if "customer" in value:
        project.customer = _parse_customer(value["customer"])
    return project


def _parse_activity(value: Any) -> Activity:
    _check_type("Activity", value, ("Object", "Double"))
    if _is_number(value):
        return Activity(id=_as_int(value))
    _check_keys("Activity", value, ("id", "name"))
    activity = Activity(
        id=_as_int(value.get("id")),
        name=_as_str(value.get("name")),
        comment=_as_str(value.get("comment")),
        color=_as_str(value.get("color")),
        budget=_as_float(value.get("budget")),
        time_budget=_as_int(value.get("timeBudget")),
        visible=_as_bool(value.get("visible")),
    )
    # An activity may be global, with no project attached.
    if value.get("project") is not None:
        activity.project = _parse_project(value["project"])
    return activity


def _parse_timesheet(value: Any) -> TimeSheet:
    _check_type("TimeSheet", value, ("Object", "Double"))
    if _is_number(value):
        return TimeSheet(id=_as_int(value))
    _check_keys("TimeSheet", value, ("id", "begin"))
    return TimeSheet(
        id=_as_int(value.get("id")),
        project=_parse_project(value.get("project", _MISSING)),
        activity=_parse_activity(value.get("activity", _MISSING)),
        description=_as_str(value.get("description")),
        begin_at=_parse_iso_datetime(value.get("begin")),
        end_at=_parse_iso_datetime(value.get("end")),
        user=_as_int(value.get("user")),
        tags=[_as_str(tag) for tag in _as_list(value.get("tags"))],
    )


def _parse_task(value: Any) -> Task:
    _check_type("Task", value, ("Object", "Double"))
    if _is_number(value):
        return Task(id=_as_int(value))
    _check_keys("Task", value, ("id", "title"))
    task = Task(
        id=_as_int(value.get("id")),
        title=_as_str(value.get("title")),
        status=_TASK_STATUSES.get(_as_str(value.get("status")), TaskStatus.UNDEFINED),
        todo=_as_str(value.get("todo")),
        description=_as_str(value.get("description")),
        project=_parse_project(value.get("project", _MISSING)),
        activity=_parse_activity(value.get("activity", _MISSING)),
        end_at=_parse_iso_datetime(value.get("end")),
        estimation=_as_int(value.get("estimation")),
    )
    if "activeTimesheets" in value:
        task.active_timesheets = [_parse_timesheet(item) for item in _as_list(value["activeTimesheets"])]
    return task


_PARSERS: dict[type, Callable[[Any], Any]] = {
    KimaiVersion: _parse_kimai_version,
    User: _parse_user,
    TimeSheetConfig: _parse_timesheet_config,
    Plugin: _parse_plugin,
    Customer: _parse_customer,
    Project: _parse_project,
    Activity: _parse_activity,
    TimeSheet: _parse_timesheet,
    Task: _parse_task,
}


class ApiTypesParser:
    """Reads API data types out of a JSON document returned by the server."""

    def __init__(self, data: str | bytes):
        try:
            self._document = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise KimaiParseError(f"Data is not a valid json: {exc}") from exc

    @staticmethod
    def _reader(kind: type[T]) -> Callable[[Any], T]:
        try:
            return _PARSERS[kind]
        except KeyError:
            raise TypeError(f"Unsupported API type: {kind!r}") from None

    def value_of(self, kind: type[T]) -> T:
        """Read the document, which must be an object, as one value of ``kind``."""
        reader = self._reader(kind)
        if not isinstance(self._document, dict):
            raise KimaiParseError("JSON value is not an object")
        return reader(self._document)

    def array_of(self, kind: type[T]) -> list[T]:
        """Read the document, which must be an array, as a list of ``kind``."""
        reader = self._reader(kind)
        if not isinstance(self._document, list):
            raise KimaiParseError("JSON value is not an array")
        return [reader(item) for item in self._document]


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


def timesheet_to_json(timesheet: TimeSheet, tracking_mode: TrackingMode) -> dict:
    """Build the request body that starts or updates a time sheet."""
    payload: dict[str, Any] = {}
    if tracking_mode is not TrackingMode.PUNCH:
        payload["begin"] = _format_iso_datetime(timesheet.begin_at)
        if timesheet.end_at is not None:
            payload["end"] = _format_iso_datetime(timesheet.end_at)
    payload["project"] = timesheet.project.id
    payload["activity"] = timesheet.activity.id
    payload["description"] = timesheet.description
    payload["tags"] = ",".join(timesheet.tags)
    return payload


def customer_to_json(customer: Customer) -> dict:
    """Build the request body that creates a customer."""
    payload: dict[str, Any] = {}
    if customer.id > 0:
        payload["id"] = customer.id
    payload.update(
        name=customer.name,
        number=customer.number,
        comment=customer.comment,
        company=customer.company,
        address=customer.address,
        country=customer.country_key,
        currency=customer.currency_key,
        phone=customer.phone,
        fax=customer.fax,
        mobile=customer.mobile,
        email=customer.email,
        homepage=customer.homepage,
        timezone=customer.timezone,
        budget=customer.budget,
        timeBudget=customer.time_budget,
        visible=customer.visible,
    )
    return payload


def project_to_json(project: Project) -> dict:
    """Build the request body that creates a project."""
    payload: dict[str, Any] = {}
    if project.id > 0:
        payload["id"] = project.id
    payload.update(
        name=project.name,
        visible=project.visible,
        comment=project.comment,
        orderNumber=project.order_number,
        orderDate=project.order_date,
        start=project.start,
        end=project.end,
        color=project.color,
        customer=project.customer.id,
        budget=project.budget,
        timeBudget=project.time_budget,
    )
    return payload


def activity_to_json(activity: Activity) -> dict:
    """Build the request body that creates an activity."""
    payload: dict[str, Any] = {
        "name": activity.name,
        "visible": activity.visible,
        "comment": activity.comment,
    }
    if activity.project is not None:
        payload["project"] = activity.project.id
    payload["budget"] = activity.budget
    payload["timeBudget"] = activity.time_budget
    return payload