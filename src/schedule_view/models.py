"""Pydantic models for schedule data and view state.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Entities and view snapshots are frozen: the engine replaces them, never edits them.
"""

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.schedule_view.clock import minutes_between, parse_clock, weekday_index


class SortKey(str, Enum):
    """Columns the schedule table can be sorted by."""

    DAY_OF_WEEK = "day_of_week"
    START_TIME = "start_time"
    CLASS_NAME = "class_name"
    ROOM_CODE = "room_code"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class ViewerRole(str, Enum):
    """Who is looking at the schedule list."""

    ADMIN = "admin"
    STUDENT = "student"


class ScheduleEntity(BaseModel):
    """A canonical, flattened class schedule.

    Built by normalize_schedule() from whatever shape the backend returned.
    Relation fields (class, room) are empty strings when the backend omitted
    the relation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    class_id: int = 0
    room_id: int = 0
    class_name: str = ""
    class_code: str = ""
    room_code: str = ""
    building: str = ""
    capacity: int = Field(default=0, ge=0)
    day_of_week: str = ""  # case preserved from the backend
    start_time: str = ""  # "HH:MM" or "HH:MM:SS"
    end_time: str = ""
    duration_minutes: int = Field(default=0, ge=0)
    is_recurring: bool = False
    is_active: bool = False
    teacher_name: str | None = None
    teacher_email: str | None = None
    subject_name: str | None = None


class Room(BaseModel):
    """A bookable room from the /rooms pick-list."""

    model_config = ConfigDict(frozen=True)

    id: int
    room_code: str = ""
    building: str = ""
    capacity: int = Field(default=0, ge=0)
    is_active: bool = True


class ClassInfo(BaseModel):
    """A class section from the /classes pick-list."""

    model_config = ConfigDict(frozen=True)

    id: int
    section_name: str = ""
    subject_id: int | None = None
    semester_id: int | None = None
    name: str = ""
    code: str = ""


class FilterSpec(BaseModel):
    """Every user-selected filter, sort and pagination parameter.

    Blank strings coming from form controls mean "no constraint" and are
    stored as None (ids, day) or "" (search).
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    room_id: int | None = None
    class_id: int | None = None
    day_of_week: str | None = None
    sort_by: SortKey = SortKey.DAY_OF_WEEK
    sort_order: SortOrder = SortOrder.ASC
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)

    @field_validator("search", mode="before")
    @classmethod
    def _search_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("room_id", "class_id", "day_of_week", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("sort_order", mode="before")
    @classmethod
    def _order_upper(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def with_changes(self, **changes: Any) -> "FilterSpec":
        """Return a validated copy with the given fields replaced."""
        return FilterSpec.model_validate({**self.model_dump(), **changes})


class Meta(BaseModel):
    """Pagination metadata published with each page."""

    model_config = ConfigDict(frozen=True)

    page: int
    limit: int
    total: int


class BusyFlags(BaseModel):
    """In-flight request indicators for disabling UI controls."""

    model_config = ConfigDict(frozen=True)

    is_loading: bool = False
    is_creating: bool = False
    is_updating: bool = False
    is_deleting: bool = False


class ScheduleView(BaseModel):
    """Snapshot handed to subscribers after every derivation or busy change."""

    model_config = ConfigDict(frozen=True)

    schedules: tuple[ScheduleEntity, ...] = ()
    meta: Meta
    filters: FilterSpec
    busy: BusyFlags = BusyFlags()


class ScheduleDraft(BaseModel):
    """Payload for creating or updating a schedule.

    Mirrors the admin create/edit form rules: a class and room must be
    chosen, the day must be a weekday name, and the slot must last between
    30 minutes and 4 hours.
    """

    MIN_DURATION_MINUTES: ClassVar[int] = 30
    MAX_DURATION_MINUTES: ClassVar[int] = 240

    class_id: int = Field(gt=0)
    room_id: int = Field(gt=0)
    day_of_week: str
    start_time: str
    end_time: str
    is_recurring: bool = True
    is_active: bool = True

    @field_validator("day_of_week")
    @classmethod
    def _known_day(cls, value: str) -> str:
        if weekday_index(value) is None:
            raise ValueError(f"Unknown day of week: {value!r}")
        return value.strip()

    @field_validator("start_time", "end_time")
    @classmethod
    def _clock_format(cls, value: str) -> str:
        parse_clock(value)
        return value.strip()

    @model_validator(mode="after")
    def _duration_bounds(self) -> "ScheduleDraft":
        duration = minutes_between(self.start_time, self.end_time)
        if duration <= 0:
            raise ValueError("End time must be after start time")
        if duration < self.MIN_DURATION_MINUTES:
            raise ValueError("Duration must be at least 30 minutes")
        if duration > self.MAX_DURATION_MINUTES:
            raise ValueError("Duration cannot exceed 4 hours")
        return self
