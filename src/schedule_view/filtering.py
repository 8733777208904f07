"""Filter predicate evaluation over normalized schedules.

Each set field of a FilterSpec contributes one predicate; an entity is kept
only when all of them pass. Unset fields contribute nothing.
"""

from collections.abc import Callable, Iterable

from src.schedule_view.models import FilterSpec, ScheduleEntity

Predicate = Callable[[ScheduleEntity], bool]


def _searchable_fields(entity: ScheduleEntity) -> tuple[str, ...]:
    return (
        entity.class_name,
        entity.class_code,
        entity.room_code,
        entity.building,
        entity.teacher_name or "",
        entity.subject_name or "",
    )


def matches_search(entity: ScheduleEntity, term: str) -> bool:
    """Case-insensitive substring match against any searchable field."""
    needle = term.lower()
    return any(needle in field.lower() for field in _searchable_fields(entity))


def build_predicates(spec: FilterSpec) -> list[Predicate]:
    """Translate the set fields of a FilterSpec into predicates."""
    predicates: list[Predicate] = []

    if spec.search:
        term = spec.search
        predicates.append(lambda entity: matches_search(entity, term))

    if spec.room_id is not None:
        room_id = spec.room_id
        predicates.append(lambda entity: entity.room_id == room_id)

    if spec.class_id is not None:
        class_id = spec.class_id
        predicates.append(lambda entity: entity.class_id == class_id)

    if spec.day_of_week:
        day = spec.day_of_week.strip().lower()
        predicates.append(lambda entity: entity.day_of_week.lower() == day)

    return predicates


def filter_schedules(
    entities: Iterable[ScheduleEntity], spec: FilterSpec
) -> list[ScheduleEntity]:
    """Return the entities satisfying every predicate in spec, in input order."""
    predicates = build_predicates(spec)
    return [entity for entity in entities if all(p(entity) for p in predicates)]
