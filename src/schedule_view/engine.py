"""ScheduleViewEngine - in-memory schedule list shared by admin and student screens.

The engine fetches every schedule once, keeps the normalized result as the
authoritative set, and derives the visible page locally:

    authoritative set -> filter -> sort -> paginate -> ScheduleView

Derivation re-runs whenever a fetch replaces the set or any filter field
changes, and each new ScheduleView is pushed to subscribers. Creates,
updates and deletes go to the backend and are followed by a full re-fetch;
the set is never patched in place.

Failure policy:
  - fetch_all / fetch_by_id / fetch_rooms / fetch_classes notify and return
    None (or the previous data); the authoritative set stays as it was.
  - create / update / delete notify and then re-raise so the caller can
    keep its form open.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from src.schedule_view.client import ScheduleApiClient
from src.schedule_view.config import ScheduleViewConfig
from src.schedule_view.errors import MutationError, NotFoundError, ScheduleError
from src.schedule_view.filtering import filter_schedules
from src.schedule_view.logging import get_logger
from src.schedule_view.models import (
    BusyFlags,
    ClassInfo,
    FilterSpec,
    Meta,
    Room,
    ScheduleDraft,
    ScheduleEntity,
    ScheduleView,
    SortKey,
    SortOrder,
    ViewerRole,
)
from src.schedule_view.normalize import (
    DEFAULT_DURATION_MINUTES,
    normalize_class,
    normalize_room,
    normalize_schedule,
    normalize_schedules,
)
from src.schedule_view.notify import LogNotifier, Notifier, Severity
from src.schedule_view.ordering import sort_schedules
from src.schedule_view.paging import paginate
from src.schedule_view.preferences import FilterPreferenceStore
from src.schedule_view.responses import (
    ApiResponse,
    backend_message,
    is_mutation_success,
    unwrap_collection,
    unwrap_record,
)

log = get_logger(__name__)

Subscriber = Callable[[ScheduleView], None]

_FETCH_FAILURE_MESSAGES: dict[ViewerRole, str] = {
    ViewerRole.ADMIN: "Failed to fetch schedules",
    ViewerRole.STUDENT: "Failed to fetch your schedules",
}


class ScheduleViewEngine:
    """Owns the authoritative schedule set and the current FilterSpec.

    All state changes go through methods; readers get immutable snapshots
    (tuples of frozen models), never the engine's internal containers.
    """

    def __init__(
        self,
        client: ScheduleApiClient,
        notifier: Notifier | None = None,
        *,
        role: ViewerRole = ViewerRole.ADMIN,
        default_filters: FilterSpec | None = None,
        preferences: FilterPreferenceStore | None = None,
        fallback_duration: int = DEFAULT_DURATION_MINUTES,
        strict_durations: bool = False,
    ) -> None:
        """Initialize the engine and derive the (empty) first view.

        Args:
            client: Transport for the schedule endpoints.
            notifier: Sink for user-facing messages. Defaults to logging.
            role: Which screen this engine backs; only changes messages.
            default_filters: Filters used initially and by reset_filters().
            preferences: Store to restore filters from and save them to.
            fallback_duration: Duration for records whose times don't subtract.
            strict_durations: Fail the fetch instead of using the fallback.
        """
        self._client = client
        self._notifier: Notifier = notifier or LogNotifier()
        self.role = ViewerRole(role)
        self._default_filters = default_filters or FilterSpec()
        self._preferences = preferences
        self._fallback_duration = fallback_duration
        self._strict_durations = strict_durations

        restored = preferences.load() if preferences is not None else None
        self._filters = restored or self._default_filters

        self._all_schedules: tuple[ScheduleEntity, ...] = ()
        self._rooms: tuple[Room, ...] = ()
        self._classes: tuple[ClassInfo, ...] = ()
        self._busy = BusyFlags()
        self._fetch_generation = 0
        self._fetches_in_flight = 0
        self._subscribers: list[Subscriber] = []
        self._view = self._derive()

        log.info(
            "schedule_engine_initialized",
            role=self.role.value,
            filters_restored=restored is not None,
        )

    @classmethod
    def from_config(
        cls,
        config: ScheduleViewConfig,
        notifier: Notifier | None = None,
        *,
        role: ViewerRole = ViewerRole.ADMIN,
    ) -> "ScheduleViewEngine":
        """Build an engine, its client and its preference store from settings."""
        defaults = FilterSpec(
            sort_by=config.default_sort_by,
            sort_order=config.default_sort_order,
            page_size=config.default_page_size,
        )
        preferences = (
            FilterPreferenceStore(config.state_dir) if config.persist_filters else None
        )
        return cls(
            ScheduleApiClient.from_config(config),
            notifier,
            role=role,
            default_filters=defaults,
            preferences=preferences,
            fallback_duration=config.fallback_duration_minutes,
            strict_durations=config.strict_durations,
        )

    # --- Read accessors ---

    @property
    def view(self) -> ScheduleView:
        return self._view

    @property
    def schedules(self) -> tuple[ScheduleEntity, ...]:
        """Entities on the current page."""
        return self._view.schedules

    @property
    def all_schedules(self) -> tuple[ScheduleEntity, ...]:
        return self._all_schedules

    @property
    def filters(self) -> FilterSpec:
        return self._filters

    @property
    def meta(self) -> Meta:
        return self._view.meta

    @property
    def busy(self) -> BusyFlags:
        return self._busy

    @property
    def rooms(self) -> tuple[Room, ...]:
        return self._rooms

    @property
    def classes(self) -> tuple[ClassInfo, ...]:
        return self._classes

    # --- Subscriptions ---

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback for every published view; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        view = self._view
        for callback in list(self._subscribers):
            callback(view)

    # --- Derivation ---

    def _derive(self) -> ScheduleView:
        spec = self._filters
        matching = filter_schedules(self._all_schedules, spec)
        ordered = sort_schedules(matching, spec.sort_by, spec.sort_order)
        page = paginate(ordered, spec.page, spec.page_size)
        return ScheduleView(
            schedules=page.items,
            meta=Meta(page=spec.page, limit=spec.page_size, total=page.total),
            filters=spec,
            busy=self._busy,
        )

    def _rederive(self) -> None:
        self._view = self._derive()
        self._publish()

    def _set_busy(self, **flags: bool) -> None:
        self._busy = self._busy.model_copy(update=flags)
        self._view = self._view.model_copy(update={"busy": self._busy})
        self._publish()

    # --- Filters ---

    def set_filter(self, field: str, value: Any) -> None:
        """Change one FilterSpec field and re-derive.

        Any field other than page/page_size sends the user back to page 1.
        Setting page to its current value is a no-op.

        Raises:
            ValueError: Unknown field, or a value FilterSpec rejects.
        """
        if field not in FilterSpec.model_fields:
            raise ValueError(f"Unknown filter field: {field!r}")

        if field == "page":
            if value == self._filters.page:
                return
            changes: dict[str, Any] = {"page": value}
        elif field == "page_size":
            changes = {"page_size": value}
        else:
            changes = {field: value, "page": 1}

        self._apply_filters(self._filters.with_changes(**changes), changed=field)

    def reset_filters(self) -> None:
        self._apply_filters(self._default_filters, changed="all")

    def go_to_page(self, page: int) -> None:
        self.set_filter("page", page)

    def set_page_size(self, page_size: int) -> None:
        self.set_filter("page_size", page_size)

    def toggle_sort(self, column: SortKey | str) -> None:
        """Column-header click: flip direction on the active column, else sort ASC by it."""
        column = SortKey(column)
        if self._filters.sort_by is column:
            order = (
                SortOrder.DESC
                if self._filters.sort_order is SortOrder.ASC
                else SortOrder.ASC
            )
        else:
            order = SortOrder.ASC
        spec = self._filters.with_changes(sort_by=column, sort_order=order, page=1)
        self._apply_filters(spec, changed="sort_by")

    def _apply_filters(self, spec: FilterSpec, *, changed: str) -> None:
        self._filters = spec
        log.debug(
            "filter_changed",
            field=changed,
            page=spec.page,
            page_size=spec.page_size,
            sort_by=spec.sort_by.value,
            sort_order=spec.sort_order.value,
        )
        if self._preferences is not None:
            try:
                self._preferences.save(spec)
            except OSError as e:
                log.warning("filter_prefs_save_failed", error=str(e))
        self._rederive()

    # --- Fetching ---

    async def fetch_all(self) -> ScheduleView | None:
        """Replace the authoritative set with a fresh bulk fetch.

        Completions of fetches superseded by a later call are discarded.

        Returns:
            The newly derived view, or None if the fetch failed or was stale.
        """
        self._fetch_generation += 1
        generation = self._fetch_generation
        self._fetches_in_flight += 1
        self._set_busy(is_loading=True)

        replaced = False
        try:
            response = await self._client.list_schedules()
            entities = normalize_schedules(
                unwrap_collection(response.body),
                fallback_duration=self._fallback_duration,
                strict_durations=self._strict_durations,
            )
            if generation != self._fetch_generation:
                log.info(
                    "fetch_discarded",
                    generation=generation,
                    latest=self._fetch_generation,
                )
            else:
                self._all_schedules = entities
                replaced = True
                log.info(
                    "schedules_fetched",
                    count=len(entities),
                    generation=generation,
                    role=self.role.value,
                )
        except ScheduleError as e:
            log.error(
                "schedules_fetch_failed",
                error=e.message,
                type=type(e).__name__,
                status=e.status_code,
                role=self.role.value,
            )
            self._notify_failure(e, _FETCH_FAILURE_MESSAGES[self.role])
        finally:
            self._fetches_in_flight -= 1
            self._busy = self._busy.model_copy(
                update={"is_loading": self._fetches_in_flight > 0}
            )
            self._rederive()

        return self._view if replaced else None

    async def fetch_by_id(self, schedule_id: str) -> ScheduleEntity | None:
        """Fetch one schedule for a detail view; None when missing or failed."""
        try:
            response = await self._client.get_schedule(schedule_id)
            record = unwrap_record(response.body)
            entity = (
                normalize_schedule(
                    record,
                    fallback_duration=self._fallback_duration,
                    strict_durations=self._strict_durations,
                )
                if record is not None
                else None
            )
        except NotFoundError as e:
            log.info("schedule_not_found", schedule_id=schedule_id, status=e.status_code)
            self._notify_failure(e, "Schedule not found")
            return None
        except ScheduleError as e:
            log.error(
                "schedule_fetch_failed",
                schedule_id=schedule_id,
                error=e.message,
                type=type(e).__name__,
            )
            self._notify_failure(e, "Failed to fetch schedule details")
            return None

        if entity is None:
            log.info("schedule_not_found", schedule_id=schedule_id, reason="empty_body")
            self._notifier.notify(
                backend_message(response.body) or "Schedule not found", Severity.ERROR
            )
        return entity

    async def fetch_rooms(self) -> tuple[Room, ...]:
        """Load the room pick-list; keeps the previous list on failure."""
        try:
            response = await self._client.list_rooms()
            rooms = tuple(normalize_room(r) for r in unwrap_collection(response.body))
        except ScheduleError as e:
            log.error("rooms_fetch_failed", error=e.message, type=type(e).__name__)
            self._notify_failure(e, "Failed to fetch rooms")
            return self._rooms

        self._rooms = rooms
        log.info("rooms_fetched", count=len(rooms))
        return rooms

    async def fetch_classes(self) -> tuple[ClassInfo, ...]:
        """Load the class pick-list; keeps the previous list on failure."""
        try:
            response = await self._client.list_classes()
            classes = tuple(
                normalize_class(c) for c in unwrap_collection(response.body)
            )
        except ScheduleError as e:
            log.error("classes_fetch_failed", error=e.message, type=type(e).__name__)
            self._notify_failure(e, "Failed to fetch classes")
            return self._classes

        self._classes = classes
        log.info("classes_fetched", count=len(classes))
        return classes

    # --- Mutations ---

    async def create(self, data: ScheduleDraft | Mapping[str, Any]) -> None:
        """Create a schedule, then re-fetch.

        Raises:
            ScheduleError: After notifying, if the backend rejects the request.
        """
        payload = _payload(data)
        await self._mutate(
            "create",
            busy_flag="is_creating",
            send=lambda: self._client.create_schedule(payload),
            success_message="Schedule created successfully",
            failure_message="Failed to create schedule",
        )

    async def update(
        self, schedule_id: str, data: ScheduleDraft | Mapping[str, Any]
    ) -> None:
        """Update a schedule, then re-fetch.

        Raises:
            ScheduleError: After notifying, if the backend rejects the request.
        """
        payload = _payload(data)
        await self._mutate(
            "update",
            busy_flag="is_updating",
            send=lambda: self._client.update_schedule(schedule_id, payload),
            success_message="Schedule updated successfully",
            failure_message="Failed to update schedule",
            schedule_id=schedule_id,
        )

    async def delete(self, schedule_id: str) -> None:
        """Delete a schedule, then re-fetch.

        Raises:
            ScheduleError: After notifying, if the backend rejects the request.
        """
        await self._mutate(
            "delete",
            busy_flag="is_deleting",
            send=lambda: self._client.delete_schedule(schedule_id),
            success_message="Schedule deleted successfully",
            failure_message="Failed to delete schedule",
            schedule_id=schedule_id,
        )

    async def _mutate(
        self,
        action: str,
        *,
        busy_flag: str,
        send: Callable[[], Awaitable[ApiResponse]],
        success_message: str,
        failure_message: str,
        **context: Any,
    ) -> None:
        self._set_busy(**{busy_flag: True})
        try:
            response = await send()
            if not is_mutation_success(response):
                raise MutationError(
                    f"{action} not confirmed by backend (HTTP {response.status_code})",
                    status_code=response.status_code,
                    backend_message=backend_message(response.body),
                )
            log.info("schedule_mutated", action=action, **context)
            self._notifier.notify(success_message, Severity.SUCCESS)
            # Filters are kept; the new set is derived with the current spec
            await self.fetch_all()
        except ScheduleError as e:
            log.error(
                "schedule_mutation_failed",
                action=action,
                error=e.message,
                type=type(e).__name__,
                status=e.status_code,
                **context,
            )
            self._notify_failure(e, failure_message)
            raise
        finally:
            self._set_busy(**{busy_flag: False})

    def _notify_failure(self, error: ScheduleError, fallback: str) -> None:
        self._notifier.notify(error.backend_message or fallback, Severity.ERROR)


def _payload(data: ScheduleDraft | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(data, ScheduleDraft):
        return data.model_dump()
    return dict(data)
