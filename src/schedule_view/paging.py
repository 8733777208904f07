"""Client-side pagination of an ordered schedule list."""

import math
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from src.schedule_view.models import ScheduleEntity


class Page(BaseModel):
    """One slice of the ordered result set plus the pre-slice count."""

    model_config = ConfigDict(frozen=True)

    items: tuple[ScheduleEntity, ...]
    total: int


def paginate(ordered: Sequence[ScheduleEntity], page: int, page_size: int) -> Page:
    """Slice out page ``page`` (1-based) of ``page_size`` items.

    A page past the end yields no items; ``total`` always counts the whole
    sequence and ``page`` is never clamped.

    Raises:
        ValueError: If page or page_size is below 1.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    start = (page - 1) * page_size
    return Page(items=tuple(ordered[start : start + page_size]), total=len(ordered))


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for total items (0 when there are none)."""
    return math.ceil(total / page_size) if total > 0 else 0


def has_next_page(page: int, page_size: int, total: int) -> bool:
    return page * page_size < total
