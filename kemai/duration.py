"""Reading the ``hours[:minutes]`` durations typed into budget fields."""

from __future__ import annotations

import re

_DURATION = re.compile(r"([0-9]*)(:?([0-9]{2})?)")


def is_acceptable_duration(text: str) -> bool:
    """Whether ``text`` is a complete duration such as ``12``, ``3:30`` or ``:45``."""
    return _DURATION.fullmatch(text) is not None


def parse_duration(text: str) -> int:
    """Number of seconds in ``text``; 0 when it is not a valid duration."""
    match = _DURATION.fullmatch(text)
    if match is None:
        return 0
    seconds = 0
    hours, minutes = match.group(1), match.group(3)
    if hours:
        seconds += 3600 * int(hours)
    if minutes:
        seconds += 60 * int(minutes)
    return seconds