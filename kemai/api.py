"""Data types exchanged with a Kimai server, and version feature checks."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, Tuple

Version = Tuple[int, ...]

_KIMAI_VERSION_FOR_PLUGIN_REQUEST: Version = (1, 14, 1)
_KIMAI_VERSION_FOR_API_TOKEN: Version = (2, 14, 0)

_LEADING_DIGITS = re.compile(r"\d+")


class ApiPlugin(Enum):
    """Server plugins the client knows how to use."""

    UNKNOWN = auto()
    TASK_MANAGEMENT = auto()


class TrackingMode(Enum):
    """How the server expects time sheets to be recorded."""

    DEFAULT = auto()
    PUNCH = auto()
    DURATION_FIXED_BEGIN = auto()
    DURATION_ONLY = auto()


class TaskStatus(Enum):
    """State of a task from the task management plugin."""

    UNDEFINED = auto()
    PENDING = auto()
    PROGRESS = auto()
    CLOSED = auto()


@dataclass
class KimaiVersion:
    kimai: Version = ()


@dataclass
class Customer:
    id: int = 0
    visible: bool = True
    name: str = ""
    number: str = ""
    comment: str = ""
    company: str = ""
    address: str = ""
    country_key: str = ""
    currency_key: str = ""
    phone: str = ""
    fax: str = ""
    mobile: str = ""
    email: str = ""
    homepage: str = ""
    timezone: str = ""
    color: str = ""
    budget: float = 0.0
    time_budget: int = 0  # seconds


@dataclass
class Project:
    id: int = 0
    visible: bool = True
    name: str = ""
    customer: Customer = field(default_factory=Customer)
    comment: str = ""
    order_number: str = ""
    order_date: str = ""
    start: str = ""
    end: str = ""
    color: str = ""
    budget: float = 0.0
    time_budget: int = 0


@dataclass
class Activity:
    id: int = 0
    visible: bool = True
    name: str = ""
    comment: str = ""
    color: str = ""
    budget: float = 0.0
    time_budget: int = 0
    project: Optional[Project] = None


@dataclass
class TimeSheet:
    id: int = 0
    user: int = 0
    activity: Activity = field(default_factory=Activity)
    project: Project = field(default_factory=Project)
    description: str = ""
    begin_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    tags: list[str] = field(default_factory=list)


@dataclass
class User:
    id: int = 0
    username: str = ""
    language: str = ""
    timezone: str = ""


@dataclass
class Task:
    id: int = 0
    title: str = ""
    status: TaskStatus = TaskStatus.UNDEFINED
    todo: str = ""
    description: str = ""
    project: Project = field(default_factory=Project)
    activity: Activity = field(default_factory=Activity)
    user: User = field(default_factory=User)
    end_at: Optional[datetime] = None
    estimation: int = 0
    active_timesheets: list[TimeSheet] = field(default_factory=list)


@dataclass
class Plugin:
    name: str = ""
    version: Version = ()
    api_plugin: ApiPlugin = ApiPlugin.UNKNOWN


@dataclass
class TimeSheetConfig:
    tracking_mode: TrackingMode = TrackingMode.DEFAULT


def plugin_by_name(name: str) -> ApiPlugin:
    """Map a server plugin name to the known plugin it provides."""
    if name == "TaskManagementBundle":
        return ApiPlugin.TASK_MANAGEMENT
    return ApiPlugin.UNKNOWN


def parse_version(text: str) -> Version:
    """Read the leading dot-separated numeric segments of a version string."""
    segments: list[int] = []
    for part in text.split("."):
        match = _LEADING_DIGITS.match(part)
        if match is None:
            break
        segments.append(int(match.group()))
        if match.end() != len(part):
            break
    return tuple(segments)


def can_request_plugins(version: Version) -> bool:
    """Plugin listing is available from Kimai 1.14.1."""
    return tuple(version) >= _KIMAI_VERSION_FOR_PLUGIN_REQUEST


def should_use_api_token(version: Version) -> bool:
    """From Kimai 2.14 the Authorization header with an API token is preferred."""
    return tuple(version) >= _KIMAI_VERSION_FOR_API_TOKEN