"""REST client for the schedule endpoints.

Wraps a requests.Session and exposes an async surface: each blocking call
runs in a worker thread via asyncio.to_thread so the view engine can await
it. Responses are classified into the errors.py hierarchy; GET requests
are retried on TransientError, mutations are sent exactly once.
"""

import asyncio
from typing import Any

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.schedule_view.config import ScheduleViewConfig
from src.schedule_view.errors import (
    AuthenticationError,
    MalformedResponseError,
    NotFoundError,
    PermanentError,
    RateLimitError,
    TransientError,
)
from src.schedule_view.logging import get_logger
from src.schedule_view.responses import ApiResponse, backend_message

log = get_logger(__name__)

_NO_BODY = object()


class ScheduleApiClient:
    """Thin wrapper over the /schedules, /rooms and /classes endpoints."""

    SCHEDULES_PATH = "/schedules"
    ROOMS_PATH = "/rooms"
    CLASSES_PATH = "/classes"

    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_wait_seconds: float = 0.5,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. https://school.example.com/api.
            token: Bearer token; omitted from requests when empty.
            timeout: Per-request timeout in seconds.
            retry_attempts: Total attempts for GET requests.
            retry_wait_seconds: Exponential backoff multiplier between attempts.
            session: Pre-built session (tests inject a mock here).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self.retry_wait_seconds = retry_wait_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    @classmethod
    def from_config(cls, config: ScheduleViewConfig) -> "ScheduleApiClient":
        return cls(
            config.api_base_url,
            token=config.api_token,
            timeout=config.request_timeout_seconds,
            retry_attempts=config.retry_attempts,
            retry_wait_seconds=config.retry_wait_seconds,
        )

    # --- Schedules ---

    async def list_schedules(self) -> ApiResponse:
        return await asyncio.to_thread(self._get, self.SCHEDULES_PATH)

    async def get_schedule(self, schedule_id: str) -> ApiResponse:
        return await asyncio.to_thread(
            self._get, f"{self.SCHEDULES_PATH}/{schedule_id}"
        )

    async def create_schedule(self, payload: dict[str, Any]) -> ApiResponse:
        return await asyncio.to_thread(
            self._send, "POST", self.SCHEDULES_PATH, payload
        )

    async def update_schedule(
        self, schedule_id: str, payload: dict[str, Any]
    ) -> ApiResponse:
        return await asyncio.to_thread(
            self._send, "PUT", f"{self.SCHEDULES_PATH}/{schedule_id}", payload
        )

    async def delete_schedule(self, schedule_id: str) -> ApiResponse:
        return await asyncio.to_thread(
            self._send, "DELETE", f"{self.SCHEDULES_PATH}/{schedule_id}"
        )

    # --- Reference data ---

    async def list_rooms(self) -> ApiResponse:
        return await asyncio.to_thread(self._get, self.ROOMS_PATH)

    async def list_classes(self) -> ApiResponse:
        return await asyncio.to_thread(self._get, self.CLASSES_PATH)

    # --- Transport ---

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        log.warning(
            "request_retry",
            attempt=retry_state.attempt_number,
            max_attempts=self.retry_attempts,
            error=str(error),
            type=type(error).__name__,
        )

    def _get(self, path: str) -> ApiResponse:
        """GET with retries on TransientError; the last error is re-raised."""
        retrying = Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_wait_seconds, max=10),
            retry=retry_if_exception_type(TransientError),
            before_sleep=self._log_retry,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._send("GET", path)
        raise AssertionError("unreachable")  # pragma: no cover

    def _send(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> ApiResponse:
        """Send one request and classify the outcome.

        Raises:
            TransientError: Timeout, connection failure or 5xx.
            RateLimitError: HTTP 429.
            AuthenticationError: HTTP 401/403.
            NotFoundError: HTTP 404.
            PermanentError: Any other 4xx or an unusable request.
            MalformedResponseError: 2xx with a body that is not JSON.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, json=payload, timeout=self.timeout
            )
        except requests.Timeout as e:
            log.warning("request_timeout", method=method, url=url, error=str(e))
            raise TransientError(f"Request timed out: {method} {url}") from e
        except requests.ConnectionError as e:
            log.warning("request_connection_error", method=method, url=url, error=str(e))
            raise TransientError(f"Could not connect: {method} {url}") from e
        except requests.RequestException as e:
            log.error("request_error", method=method, url=url, error=str(e))
            raise PermanentError(f"Request failed: {e}") from e

        status = response.status_code
        body = self._decode(response)
        message = backend_message(body) if body is not _NO_BODY else None
        summary = f"{method} {path} returned HTTP {status}"

        log.debug("request_completed", method=method, path=path, status=status)

        if status == 429:
            raise RateLimitError(summary, status_code=status, backend_message=message)
        if status >= 500:
            raise TransientError(summary, status_code=status, backend_message=message)
        if status in (401, 403):
            raise AuthenticationError(summary, status_code=status, backend_message=message)
        if status == 404:
            raise NotFoundError(summary, status_code=status, backend_message=message)
        if status >= 400:
            raise PermanentError(summary, status_code=status, backend_message=message)
        if body is _NO_BODY:
            raise MalformedResponseError(
                f"{method} {path} returned a non-JSON body", status_code=status
            )
        return ApiResponse(status_code=status, body=body)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        """Decoded JSON, None for an empty body, _NO_BODY if undecodable."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return _NO_BODY
