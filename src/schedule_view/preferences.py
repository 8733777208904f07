"""Filter preference persistence.

FilterPreferenceStore keeps the last FilterSpec as JSON on disk so a
returning user sees the same search, sort and page size. Only the filters
are stored; schedules are always re-fetched.
"""

from pathlib import Path

from pydantic import ValidationError

from src.schedule_view.logging import get_logger
from src.schedule_view.models import FilterSpec

logger = get_logger(__name__)


class FilterPreferenceStore:
    """Saves and restores the schedule list filters."""

    FILE_NAME = "schedule_filters.json"

    def __init__(self, state_dir: str = "data/state") -> None:
        """Initialize FilterPreferenceStore.

        Args:
            state_dir: Directory holding the preferences file. Created on
                first save.
        """
        self.state_dir = Path(state_dir)
        self.state_file = self.state_dir / self.FILE_NAME

    def load(self) -> FilterSpec | None:
        """Return the saved filters, or None if missing or unreadable."""
        if not self.state_file.exists():
            logger.debug("filter_prefs_load", result="missing")
            return None

        try:
            spec = FilterSpec.model_validate_json(
                self.state_file.read_text(encoding="utf-8")
            )
        except (OSError, ValidationError) as e:
            logger.warning(
                "filter_prefs_invalid",
                path=str(self.state_file),
                error=str(e),
            )
            return None

        logger.debug("filter_prefs_load", result="restored", path=str(self.state_file))
        return spec

    def save(self, spec: FilterSpec) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.state_file.write_text(spec.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("filter_prefs_saved", path=str(self.state_file))

    def clear(self) -> None:
        """Delete the saved filters, if any."""
        if self.state_file.exists():
            self.state_file.unlink()
            logger.info("filter_prefs_cleared", path=str(self.state_file))
        else:
            logger.debug("filter_prefs_clear_skipped", reason="file_not_found")
