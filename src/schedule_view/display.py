"""Formatting helpers shared by the admin and student schedule screens."""

from collections.abc import Iterable

from src.schedule_view.models import ScheduleEntity


def format_day(day: str) -> str:
    """'MONDAY' / 'monday' -> 'Monday'."""
    return day[:1].upper() + day[1:].lower()


def format_time(value: str) -> str:
    """Drop seconds: '09:00:00' -> '09:00'."""
    return value[:5]


def describe_schedule(entity: ScheduleEntity) -> str:
    """One-line summary used in delete confirmations."""
    return f"{entity.class_name} in {entity.room_code} ({format_day(entity.day_of_week)})"


def upcoming_classes(
    schedules: Iterable[ScheduleEntity], limit: int = 5
) -> list[ScheduleEntity]:
    """Active schedules from the current page, at most ``limit`` of them."""
    active = [entity for entity in schedules if entity.is_active]
    return active[:limit]


def format_table(schedules: Iterable[ScheduleEntity]) -> str:
    """Render schedules as a fixed-width text table."""
    headers = ["Day", "Start", "End", "Min", "Class", "Room", "Building", "Teacher"]
    rows = [
        [
            format_day(entity.day_of_week),
            format_time(entity.start_time),
            format_time(entity.end_time),
            str(entity.duration_minutes),
            entity.class_name,
            entity.room_code,
            entity.building,
            entity.teacher_name or "",
        ]
        for entity in schedules
    ]

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [
        " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows
    ]
    return "\n".join([header_line, separator, *row_lines])
