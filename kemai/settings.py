"""User settings: connection profiles, application options and event handling."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional

NIL_UUID = uuid.UUID(int=0)


@dataclass
class Profile:
    id: uuid.UUID = NIL_UUID
    name: str = ""
    host: str = ""
    username: str = ""
    token: str = ""
    api_token: str = ""  # Kimai 2.14 and later


@dataclass
class KemaiOptions:
    close_to_system_tray: bool = False
    minimize_to_system_tray: bool = False
    check_update_at_startup: bool = True
    ignored_version: str = ""
    geometry: bytes = b""
    language: str = ""
    last_connected_profile: uuid.UUID = NIL_UUID


@dataclass
class EventsSettings:
    stop_on_lock: bool = False
    stop_on_idle: bool = False
    idle_delay_minutes: int = 1
    auto_refresh_current_timesheet: bool = False
    auto_refresh_current_timesheet_delay_seconds: int = 5


@dataclass
class Settings:
    profiles: list[Profile] = field(default_factory=list)
    trusted_certificates: list[str] = field(default_factory=list)
    kemai: KemaiOptions = field(default_factory=KemaiOptions)
    events: EventsSettings = field(default_factory=EventsSettings)

    def find_profile(self, profile_id: uuid.UUID) -> Optional[Profile]:
        """The stored profile with ``profile_id``, or ``None``."""
        return next((profile for profile in self.profiles if profile.id == profile_id), None)