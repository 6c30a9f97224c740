from __future__ import annotations

import re
from datetime import date, datetime

from app.core.exceptions import ValidationError

TIME_PATTERN: re.Pattern[str] = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ValidationError("Time must be in HH:MM 24-hour format", details={"value": value})
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str) -> str:
    """Return ``value`` zero-padded ("9:05" -> "09:05")."""
    return minutes_to_hhmm(parse_time_to_minutes(value))


def duration_minutes(start_time: str, end_time: str) -> int:
    start = parse_time_to_minutes(start_time)
    end = parse_time_to_minutes(end_time)
    if end <= start:
        raise ValidationError(
            "End time must be after start time",
            details={"startTime": start_time, "endTime": end_time},
        )
    return end - start


def ranges_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open overlap: [09:00, 10:00) and [10:00, 11:00) do not collide."""
    return parse_time_to_minutes(start_a) < parse_time_to_minutes(end_b) and parse_time_to_minutes(
        start_b
    ) < parse_time_to_minutes(end_a)


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def same_day(date_a: date | datetime, date_b: date | datetime) -> bool:
    return _as_date(date_a) == _as_date(date_b)


def weekday_number(value: date | datetime) -> int:
    """Weekday with Sunday as 0 and Saturday as 6."""
    return (_as_date(value).weekday() + 1) % 7
