"""Error hierarchy for schedule API failures.

Splits failures into transient (worth retrying) and permanent (not worth
retrying) so tenacity retry policies can classify them by type.

Example usage with tenacity:
    Retrying(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
"""


class ScheduleError(Exception):
    """Base exception for all schedule view errors.

    Attributes:
        message: Human-readable description of the failure.
        status_code: HTTP status of the response, if one was received.
        backend_message: The ``message`` field of the backend error payload,
            when the backend supplied one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        backend_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.backend_message = backend_message


class TransientError(ScheduleError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, refused connections, 502/503 from the backend.
    """


class RateLimitError(TransientError):
    """HTTP 429 from the backend.

    Inherits from TransientError so read requests still retry it.
    """


class PermanentError(ScheduleError):
    """Failure that won't succeed on retry (4xx, malformed payloads)."""


class AuthenticationError(PermanentError):
    """Token missing, expired or lacking the role for this endpoint (401/403)."""


class NotFoundError(PermanentError):
    """The requested schedule does not exist (404)."""


class MalformedResponseError(PermanentError):
    """Body could not be decoded or did not match any known wrapper shape."""


class MutationError(PermanentError):
    """A create/update/delete returned 2xx but no recognisable success indicator."""


class DurationError(PermanentError):
    """Start/end times do not yield a positive duration (strict mode only)."""
