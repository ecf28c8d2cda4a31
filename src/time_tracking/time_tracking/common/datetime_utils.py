from __future__ import annotations

from datetime import timedelta


def millis_to_timedelta(value: int) -> timedelta:
    return timedelta(milliseconds=int(value))


def timedelta_to_millis(value: timedelta) -> int:
    # Integer arithmetic keeps large spans exact.
    return (value.days * 86_400 + value.seconds) * 1000 + value.microseconds // 1000


def format_duration(value: timedelta) -> str:
    """Render a duration as HH:MM:SS (hours may exceed 24)."""
    total_seconds = int(value.total_seconds())
    sign = "-" if total_seconds < 0 else ""
    total_seconds = abs(total_seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
