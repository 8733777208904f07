"""Structured logging for the schedule view engine.

JSON lines in production, coloured console output in development.
Modules call get_logger(__name__) and log snake_case events with keyword
context instead of formatted strings.
"""

import logging
import sys

import structlog


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog processors and bridge stdlib logging.

    Args:
        json_output: Render JSON lines (production) instead of console output.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Unknown values
            fall back to INFO.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        # stderr keeps stdout free for CLI output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # requests/urllib3 log through stdlib
    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(sys.stderr)]
    root.setLevel(numeric_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound to the module name."""
    return structlog.get_logger(name)
