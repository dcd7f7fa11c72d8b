"""Check for a newer release of the application."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from .api import Version, parse_version

logger = logging.getLogger("kemai")


@dataclass
class VersionDetails:
    """A release; an empty ``vn`` means no newer version was found."""

    vn: Version = ()
    description: str = ""
    url: str = ""


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


class KemaiUpdater:
    """Reads the latest release description and compares it to a version."""

    def __init__(self, releases_url: str, http_session: Optional[requests.Session] = None):
        self.releases_url = releases_url
        self._http = http_session if http_session is not None else requests.Session()
        self._finished_callbacks: list[Callable[[VersionDetails], None]] = []

    def on_check_finished(self, callback: Callable[[VersionDetails], None]) -> None:
        """Call ``callback`` with the details each time a check reports."""
        self._finished_callbacks.append(callback)

    def check_available_new_version(
        self, since_version: Version = (0, 0, 0), silence_if_no_new: bool = False
    ) -> Optional[VersionDetails]:
        """Return the newer release, empty details, or ``None`` when nothing is reported."""
        try:
            response = self._http.get(
                self.releases_url, headers={"accept": "application/vnd.github.v3+json"}
            )
        except requests.RequestException as exc:
            logger.error("Error on update check: %s", exc)
            return None
        if not response.ok:
            logger.error("Error on update check: %s %s", response.status_code, response.reason)
            return None

        try:
            document = response.json()
        except ValueError:
            document = {}
        if not isinstance(document, dict):
            document = {}

        new_version = parse_version(_as_str(document.get("tag_name")))
        if new_version > tuple(since_version):
            details = VersionDetails(
                vn=new_version,
                description=_as_str(document.get("body")),
                url=_as_str(document.get("html_url")),
            )
        elif not silence_if_no_new:
            details = VersionDetails()
        else:
            return None

        for callback in list(self._finished_callbacks):
            callback(details)
        return details