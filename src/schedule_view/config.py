"""Schedule view configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class ScheduleViewConfig(BaseSettings):
    """Schedule view configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Backend REST API
    api_base_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL of the school administration REST API",
    )
    api_token: str = Field(
        default="",
        description="Bearer token for the API (empty = unauthenticated)",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Per-request timeout in seconds",
    )
    retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for read requests failing with a transient error",
    )
    retry_wait_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Multiplier for exponential backoff between read retries",
    )

    # Derivation defaults
    default_page_size: int = Field(
        default=10,
        ge=1,
        description="Rows per page before the user picks a page size",
    )
    default_sort_by: str = Field(
        default="day_of_week",
        description="Initial sort column (day_of_week, start_time, class_name, room_code)",
    )
    default_sort_order: str = Field(
        default="ASC",
        description="Initial sort direction (ASC or DESC)",
    )

    # Normalization
    fallback_duration_minutes: int = Field(
        default=90,
        ge=0,
        description="Duration used when start/end times cannot be subtracted",
    )
    strict_durations: bool = Field(
        default=False,
        description="Raise DurationError instead of using the fallback duration",
    )

    # Filter preference persistence
    state_dir: str = Field(
        default="data/state",
        description="Directory for persisted filter preferences",
    )
    persist_filters: bool = Field(
        default=True,
        description="Save the current filters after every change",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: ScheduleViewConfig | None = None


def get_config() -> ScheduleViewConfig:
    """Get the schedule view configuration singleton.

    Returns:
        ScheduleViewConfig: Configuration instance
    """
    global _config
    if _config is None:
        _config = ScheduleViewConfig()
    return _config
