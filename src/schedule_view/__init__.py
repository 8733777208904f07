"""Client-side schedule view engine for the school administration dashboard.

Fetches every class schedule once, then filters, sorts and paginates in
memory for the admin schedule manager and the student schedule viewer.
"""

from src.schedule_view.engine import ScheduleViewEngine
from src.schedule_view.models import (
    FilterSpec,
    ScheduleDraft,
    ScheduleEntity,
    ScheduleView,
    SortKey,
    SortOrder,
    ViewerRole,
)

__all__ = [
    "ScheduleViewEngine",
    "FilterSpec",
    "ScheduleDraft",
    "ScheduleEntity",
    "ScheduleView",
    "SortKey",
    "SortOrder",
    "ViewerRole",
]
