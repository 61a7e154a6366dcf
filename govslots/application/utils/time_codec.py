from __future__ import annotations

import re
from dataclasses import dataclass

from govslots.application.exceptions import InvalidTimeFormat

AM = "AM"
PM = "PM"

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_WITH_SECONDS_PATTERN = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})$")


@dataclass(frozen=True)
class DisplayParts:
    hour: int  # 1..12 in 12-hour mode, 0..23 otherwise
    minute: int
    meridiem: str | None = None  # "AM"/"PM", only in 12-hour mode


def parse_time(value: str) -> tuple[int, int]:
    """Parse a canonical "HH:MM" value. Returns (hour, minute)."""
    match = _TIME_PATTERN.match((value or "").strip())
    if not match:
        raise InvalidTimeFormat(f"Expected HH:MM, got {value!r}")
    hour = int(match.group(1))
    minute = int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise InvalidTimeFormat(f"Time out of range: {value!r}")
    return hour, minute


def _pad(n: int) -> str:
    return f"{n:02d}"


def to_minutes(value: str) -> int:
    hour, minute = parse_time(value)
    return hour * 60 + minute


def to_display_parts(value: str, use_12_hour: bool) -> DisplayParts:
    """
    Split "HH:MM" into hour/minute (and meridiem) picker parts.
    An empty value yields the picker defaults instead of an error.
    """
    if not value:
        if use_12_hour:
            return DisplayParts(hour=12, minute=0, meridiem=AM)
        return DisplayParts(hour=0, minute=0)

    hour, minute = parse_time(value)
    if not use_12_hour:
        return DisplayParts(hour=hour, minute=minute)

    hour12 = hour % 12
    if hour12 == 0:
        hour12 = 12
    return DisplayParts(hour=hour12, minute=minute, meridiem=PM if hour >= 12 else AM)


def from_display_parts(parts: DisplayParts, use_12_hour: bool) -> str:
    if not 0 <= parts.minute <= 59:
        raise InvalidTimeFormat(f"Minute out of range: {parts.minute}")

    if not use_12_hour:
        if not 0 <= parts.hour <= 23:
            raise InvalidTimeFormat(f"Hour out of range: {parts.hour}")
        return f"{_pad(parts.hour)}:{_pad(parts.minute)}"

    if not 1 <= parts.hour <= 12:
        raise InvalidTimeFormat(f"Hour out of range for 12-hour clock: {parts.hour}")
    if parts.meridiem not in (AM, PM):
        raise InvalidTimeFormat(f"Meridiem must be AM or PM, got {parts.meridiem!r}")

    hour24 = parts.hour % 12 + (12 if parts.meridiem == PM else 0)
    return f"{_pad(hour24)}:{_pad(parts.minute)}"


def format_time(value: str, use_12_hour: bool) -> str:
    """Human label for a "HH:MM" value, e.g. "09:05 AM" or "21:05"."""
    if not value:
        return ""
    parts = to_display_parts(value, use_12_hour)
    if not use_12_hour:
        return f"{_pad(parts.hour)}:{_pad(parts.minute)}"
    return f"{_pad(parts.hour)}:{_pad(parts.minute)} {parts.meridiem}"


def clamp_to_window(value: str, minimum: str | None = None, maximum: str | None = None) -> str:
    if minimum and to_minutes(value) < to_minutes(minimum):
        return minimum
    if maximum and to_minutes(value) > to_minutes(maximum):
        return maximum
    return value


def hour_options(use_12_hour: bool) -> list[int]:
    if use_12_hour:
        return list(range(1, 13))
    return list(range(24))


def minute_options(step: int = 5) -> list[int]:
    if step <= 0 or step > 60:
        raise ValueError("minute step must be between 1 and 60")
    return list(range(0, 60, step))


def strip_seconds(value: str) -> str:
    """Convert a backend "HH:MM:SS" time to the "HH:MM" form value."""
    match = _TIME_WITH_SECONDS_PATTERN.match((value or "").strip())
    if match:
        value = f"{match.group(1)}:{match.group(2)}"
    hour, minute = parse_time(value)
    return f"{_pad(hour)}:{_pad(minute)}"


def with_seconds(value: str) -> str:
    hour, minute = parse_time(value)
    return f"{_pad(hour)}:{_pad(minute)}:00"
