"""Duration parsing and formatting utilities for qomoboro."""

import re
from datetime import datetime
from typing import Optional

_DURATION_PATTERN = re.compile(
    r'^(?:(\d+(?:\.\d+)?)\s*(?:h|hr|hours?))?\s*'
    r'(?:(\d+(?:\.\d+)?)\s*(?:m|min|minutes?))?\s*'
    r'(?:(\d+(?:\.\d+)?)\s*(?:s|sec|seconds?))?$'
)

_HHMM_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def parse_duration(text: str) -> Optional[int]:
    """
    Parse a duration string into seconds.

    Supports formats:
    - Plain number: "30" -> 30 minutes -> 1800 seconds
    - Units: "90s", "30m", "2h", "1h30m", "1.5h"

    Args:
        text: Duration string to parse

    Returns:
        Number of seconds, or None if the text is empty, malformed or zero
    """
    text = text.strip().lower()
    if not text:
        return None

    if text.isdigit():
        return int(text) * 60 or None

    match = _DURATION_PATTERN.match(text)
    if not match:
        return None

    hours, minutes, seconds = (float(g) if g else 0.0 for g in match.groups())
    total = int(hours * 3600 + minutes * 60 + seconds)
    return total or None


def format_duration(seconds: int) -> str:
    """
    Format seconds compactly: "45s", "25m", "1h30m", "2h5m10s".

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted duration string
    """
    if seconds < 60:
        return f"{seconds}s"

    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return "".join(
        f"{value}{unit}" for value, unit in ((hours, "h"), (minutes, "m"), (secs, "s")) if value
    )


def format_clock(seconds: int) -> str:
    """Format a running timer as M:SS (or H:MM:SS past one hour)."""
    hours, rest = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def is_valid_hhmm(text: str) -> bool:
    """Check that text is a zero-padded 24h "HH:MM" time."""
    return bool(_HHMM_PATTERN.match(text))


def parse_scheduled_time(text: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a scheduled time: "HH:MM" (today) or an ISO date/datetime.

    Args:
        text: Input text
        now: Reference time for "HH:MM" input (defaults to the current time)

    Returns:
        The datetime, or None if the text cannot be parsed
    """
    text = text.strip()
    if is_valid_hhmm(text):
        now = now or datetime.now()
        hour, minute = (int(part) for part in text.split(":"))
        return now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
