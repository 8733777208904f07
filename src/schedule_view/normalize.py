"""Normalization of raw backend records into canonical models.

The backend nests display data under ``class`` and ``room`` relations that
may be missing. Normalizers read them defensively and never raise, except
for DurationError when strict durations are requested.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from src.schedule_view.clock import minutes_between, weekday_index
from src.schedule_view.errors import DurationError
from src.schedule_view.logging import get_logger
from src.schedule_view.models import ClassInfo, Room, ScheduleEntity

log = get_logger(__name__)

DEFAULT_DURATION_MINUTES = 90


def _relation(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return _text(value)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _int(value: Any, default: int = 0) -> int:
    result = _optional_int(value)
    return default if result is None else result


_TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on"})


def _flag(value: Any, default: bool = False) -> bool:
    """Boolean from JSON booleans, numbers or "true"/"false"-style strings."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def calculate_duration(
    start_time: str,
    end_time: str,
    *,
    fallback: int = DEFAULT_DURATION_MINUTES,
    strict: bool = False,
) -> int:
    """Minutes between two wall-clock times.

    Returns ``fallback`` when the times are malformed or end is not after
    start. With ``strict=True`` those cases raise DurationError instead.
    """
    try:
        minutes = minutes_between(start_time, end_time)
    except (TypeError, ValueError) as e:
        if strict:
            raise DurationError(
                f"Cannot compute duration from {start_time!r} to {end_time!r}: {e}"
            ) from e
        log.debug("duration_fallback", reason="malformed", start=start_time, end=end_time)
        return fallback

    if minutes <= 0:
        if strict:
            raise DurationError(
                f"End time {end_time!r} is not after start time {start_time!r}"
            )
        log.debug("duration_fallback", reason="not_after_start", start=start_time, end=end_time)
        return fallback
    return minutes


def normalize_schedule(
    raw: Any,
    *,
    fallback_duration: int = DEFAULT_DURATION_MINUTES,
    strict_durations: bool = False,
) -> ScheduleEntity:
    """Convert one backend schedule record into a ScheduleEntity.

    Args:
        raw: Record as decoded from JSON. Non-mapping values are treated as
            an empty record.
        fallback_duration: Duration used when times cannot be subtracted.
        strict_durations: Raise DurationError instead of using the fallback.

    Returns:
        ScheduleEntity with every missing field defaulted.
    """
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    section = _relation(record, "class")
    room = _relation(record, "room")

    start_time = _text(record.get("start_time"))
    end_time = _text(record.get("end_time"))
    day = _text(record.get("day_of_week")).strip()
    if day and weekday_index(day) is None:
        log.warning("unknown_day_of_week", schedule_id=record.get("id"), day=day)

    section_name = _text(section.get("section_name"))

    return ScheduleEntity(
        id=_text(record.get("id")),
        class_id=_int(record.get("class_id")),
        room_id=_int(record.get("room_id")),
        class_name=section_name or _text(section.get("name")),
        class_code=_text(section.get("code")) or section_name,
        room_code=_text(room.get("room_code")),
        building=_text(room.get("building")),
        capacity=max(_int(room.get("capacity")), 0),
        day_of_week=day,
        start_time=start_time,
        end_time=end_time,
        duration_minutes=calculate_duration(
            start_time, end_time, fallback=fallback_duration, strict=strict_durations
        ),
        is_recurring=_flag(record.get("is_recurring")),
        is_active=_flag(record.get("is_active")),
        teacher_name=_optional_text(record.get("teacher_name")),
        teacher_email=_optional_text(record.get("teacher_email")),
        subject_name=_optional_text(record.get("subject_name")),
    )


def normalize_schedules(
    records: Iterable[Any],
    *,
    fallback_duration: int = DEFAULT_DURATION_MINUTES,
    strict_durations: bool = False,
) -> tuple[ScheduleEntity, ...]:
    """Normalize a whole fetched batch, preserving backend order."""
    return tuple(
        normalize_schedule(
            record,
            fallback_duration=fallback_duration,
            strict_durations=strict_durations,
        )
        for record in records
    )


def normalize_room(raw: Any) -> Room:
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    return Room(
        id=_int(record.get("id")),
        room_code=_text(record.get("room_code")),
        building=_text(record.get("building")),
        capacity=max(_int(record.get("capacity")), 0),
        # A room without the flag is bookable
        is_active=_flag(record.get("is_active"), default=True),
    )


def normalize_class(raw: Any) -> ClassInfo:
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    section_name = _text(record.get("section_name"))
    return ClassInfo(
        id=_int(record.get("id")),
        section_name=section_name,
        subject_id=_optional_int(record.get("subject_id")),
        semester_id=_optional_int(record.get("semester_id")),
        name=_text(record.get("name")) or section_name,
        code=_text(record.get("code")) or section_name,
    )
