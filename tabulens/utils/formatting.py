# tabulens/utils/formatting.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """datetime or ISO-8601 string -> datetime; None when missing or unparseable."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def format_file_size(size: Optional[int]) -> str:
    if not size or size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {_UNITS[unit]}"


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'} ago"


def format_upload_date(value: Any, now: Optional[datetime] = None) -> str:
    """Relative age of an upload: minutes, hours, days, weeks, then the date."""
    when = parse_timestamp(value)
    if when is None:
        return "Unknown"
    if now is None:
        now = datetime.now(when.tzinfo)

    diff = (now - when).total_seconds()
    mins = int(diff // 60)
    hours = int(diff // 3600)
    days = int(diff // 86400)

    if mins < 60:
        return _plural(max(mins, 0), "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(days // 7, "week")
    return f"{when.month}/{when.day}/{when.year}"


def format_upload_datetime(value: Any) -> str:
    if not value:
        return "Unknown"
    when = parse_timestamp(value)
    if when is None:
        return "Invalid date"
    return f"{when:%b} {when.day}, {when.year}, {when:%I:%M %p}"


def safe_date(value: Any) -> str:
    when = parse_timestamp(value)
    if when is None:
        return "—"
    return f"{when.month}/{when.day}/{when.year}, {when:%I:%M:%S %p}"
