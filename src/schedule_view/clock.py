"""Wall-clock and weekday helpers shared by normalization, validation and sorting."""

import math
import re
from datetime import date, datetime, time

WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_WEEKDAY_INDEX: dict[str, int] = {day.lower(): i for i, day in enumerate(WEEKDAYS)}

# Both timestamps are anchored to this date before subtracting
REFERENCE_DATE = date(1970, 1, 1)

_CLOCK_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")


def weekday_index(day: str | None) -> int | None:
    """Return Monday=0 ... Sunday=6 for a day name in any case, else None."""
    if not day:
        return None
    return _WEEKDAY_INDEX.get(day.strip().lower())


def parse_clock(value: str) -> time:
    """Parse a zero-padded ``HH:MM`` or ``HH:MM:SS`` string.

    Raises:
        ValueError: If the string is not a valid time of day.
    """
    match = _CLOCK_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    hours, minutes, seconds = match.groups()
    return time(int(hours), int(minutes), int(seconds or 0))


def minutes_between(start: str, end: str) -> int:
    """Minutes from start to end on the reference date, rounded half up.

    The result is negative when end is earlier than start.

    Raises:
        ValueError: If either string is not a valid time of day.
    """
    start_at = datetime.combine(REFERENCE_DATE, parse_clock(start))
    end_at = datetime.combine(REFERENCE_DATE, parse_clock(end))
    minutes = (end_at - start_at).total_seconds() / 60
    return math.floor(minutes + 0.5)
