"""User-facing notification sink.

The engine reports outcomes as a short human-readable message plus a
severity. A UI plugs in its toast implementation; the default writes the
message to the structured log.
"""

from enum import Enum
from typing import Protocol

from src.schedule_view.logging import get_logger

log = get_logger(__name__)


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notifier(Protocol):
    def notify(self, message: str, severity: Severity) -> None: ...


class LogNotifier:
    """Notifier that logs messages (used by scripts and when no UI is attached)."""

    def notify(self, message: str, severity: Severity) -> None:
        if severity is Severity.ERROR:
            log.error("notification", message=message, severity=severity.value)
        elif severity is Severity.WARNING:
            log.warning("notification", message=message, severity=severity.value)
        else:
            log.info("notification", message=message, severity=severity.value)
