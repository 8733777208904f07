"""Comparator engine for schedule sorting.

Days sort by their position in the week, start times lexically (zero-padded
clock strings order chronologically), names and room codes by a
locale-style collation that ignores case and accents. Ties keep input
order: sorting relies on Python's stable sort and adds no secondary key.
"""

import unicodedata
from collections.abc import Iterable
from functools import cmp_to_key

from src.schedule_view.clock import WEEKDAYS, weekday_index
from src.schedule_view.models import ScheduleEntity, SortKey, SortOrder

# Unrecognised day names sort after Sunday
_UNKNOWN_DAY = len(WEEKDAYS)


def collation_key(text: str) -> tuple[str, str]:
    """Sort key approximating locale collation: accents and case are
    secondary to the base letters, raw text breaks remaining ties."""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


def _day_rank(entity: ScheduleEntity) -> int:
    index = weekday_index(entity.day_of_week)
    return _UNKNOWN_DAY if index is None else index


def _sign(a, b) -> int:
    return (a > b) - (a < b)


def compare(
    a: ScheduleEntity,
    b: ScheduleEntity,
    sort_by: SortKey,
    sort_order: SortOrder = SortOrder.ASC,
) -> int:
    """Return -1, 0 or 1 ordering a against b; DESC negates the result."""
    sort_by = SortKey(sort_by)
    if sort_by is SortKey.DAY_OF_WEEK:
        result = _sign(_day_rank(a), _day_rank(b))
    elif sort_by is SortKey.START_TIME:
        result = _sign(a.start_time, b.start_time)
    elif sort_by is SortKey.CLASS_NAME:
        result = _sign(collation_key(a.class_name), collation_key(b.class_name))
    else:
        result = _sign(collation_key(a.room_code), collation_key(b.room_code))

    if SortOrder(sort_order) is SortOrder.DESC:
        return -result
    return result


def sort_schedules(
    entities: Iterable[ScheduleEntity],
    sort_by: SortKey,
    sort_order: SortOrder = SortOrder.ASC,
) -> list[ScheduleEntity]:
    """Return a new, stably sorted list; the input is left untouched."""
    key = cmp_to_key(lambda a, b: compare(a, b, sort_by, sort_order))
    return sorted(entities, key=key)
