"""Small formatting and path helpers."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Optional

from platformdirs import user_data_dir


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def duration_string(begin_at: Optional[datetime], end_at: Optional[datetime]) -> str:
    """Format the time between two instants as ``[Nd ]HH:MM:SS``."""
    if begin_at is None or end_at is None:
        return "--:--"

    seconds = int((end_at - begin_at).total_seconds())

    days = _trunc_div(seconds, 86400)
    seconds -= days * 86400
    hours = _trunc_div(seconds, 3600)
    seconds -= hours * 3600
    minutes = _trunc_div(seconds, 60)
    seconds -= minutes * 60

    prefix = f"{days}d " if days > 0 else ""
    return f"{prefix}{hours:02d}:{minutes:02d}:{seconds:02d}"


def log_dir_path() -> str:
    """Directory where the application writes its data and log files."""
    return user_data_dir("Kemai", "Kemai")


def log_file_path() -> str:
    """Full path of the application log file."""
    return os.path.join(log_dir_path(), "kemai.log")