from __future__ import annotations

import unittest
from unittest import mock

import requests

from src.schedule_view.client import ScheduleApiClient
from src.schedule_view.errors import (
    AuthenticationError,
    MalformedResponseError,
    NotFoundError,
    PermanentError,
    RateLimitError,
    TransientError,
)


def _response(status: int, body=None, *, content: bytes | None = None) -> mock.Mock:
    response = mock.Mock()
    response.status_code = status
    if content is not None:
        response.content = content
        response.json.side_effect = ValueError("not json")
    elif body is None:
        response.content = b""
    else:
        response.content = b"{...}"
        response.json.return_value = body
    return response


def _client(*responses, token: str = "") -> tuple[ScheduleApiClient, mock.MagicMock]:
    session = mock.MagicMock()
    session.headers = {}
    session.request.side_effect = list(responses)
    client = ScheduleApiClient(
        "https://school.example.edu/api/",
        token=token,
        timeout=5,
        retry_attempts=3,
        retry_wait_seconds=0,
        session=session,
    )
    return client, session


class TestScheduleApiClient(unittest.IsolatedAsyncioTestCase):
    async def test_list_schedules(self) -> None:
        client, session = _client(_response(200, [{"id": 1}]))

        response = await client.list_schedules()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.body, [{"id": 1}])
        session.request.assert_called_once_with(
            "GET", "https://school.example.edu/api/schedules", json=None, timeout=5
        )

    async def test_bearer_token_header(self) -> None:
        _, session = _client(token="abc123")
        self.assertEqual(session.headers["Authorization"], "Bearer abc123")
        _, anonymous = _client()
        self.assertNotIn("Authorization", anonymous.headers)

    async def test_get_retries_transient_failures(self) -> None:
        client, session = _client(
            requests.ConnectionError("refused"),
            _response(503, {"message": "maintenance"}),
            _response(200, {"data": []}),
        )

        response = await client.list_rooms()

        self.assertEqual(response.body, {"data": []})
        self.assertEqual(session.request.call_count, 3)

    async def test_gives_up_after_configured_attempts(self) -> None:
        client, session = _client(
            requests.Timeout("slow"), requests.Timeout("slow"), requests.Timeout("slow")
        )
        with self.assertRaises(TransientError):
            await client.list_classes()
        self.assertEqual(session.request.call_count, 3)

    async def test_mutations_are_not_retried(self) -> None:
        client, session = _client(_response(502), _response(201, {"id": 3}))
        with self.assertRaises(TransientError):
            await client.create_schedule({"class_id": 1})
        self.assertEqual(session.request.call_count, 1)
        self.assertEqual(session.request.call_args.args[0], "POST")

    async def test_delete_with_empty_body(self) -> None:
        client, session = _client(_response(204))
        response = await client.delete_schedule("9")
        self.assertEqual(response.status_code, 204)
        self.assertIsNone(response.body)
        self.assertEqual(
            session.request.call_args.args,
            ("DELETE", "https://school.example.edu/api/schedules/9"),
        )

    async def test_update_sends_json(self) -> None:
        client, session = _client(_response(200, {"success": True}))
        await client.update_schedule("4", {"room_id": 2})
        self.assertEqual(session.request.call_args.kwargs["json"], {"room_id": 2})

    async def test_status_classification(self) -> None:
        cases = [
            (404, NotFoundError),
            (401, AuthenticationError),
            (403, AuthenticationError),
            (422, PermanentError),
        ]
        for status, error_type in cases:
            client, _ = _client(_response(status, {"message": "nope"}))
            with self.assertRaises(error_type) as ctx:
                await client.get_schedule("1")
            self.assertEqual(ctx.exception.status_code, status)
            self.assertEqual(ctx.exception.backend_message, "nope")

    async def test_rate_limit_is_transient(self) -> None:
        client, _ = _client(_response(429), _response(429), _response(429))
        with self.assertRaises(RateLimitError):
            await client.list_schedules()

    async def test_non_json_success_is_malformed(self) -> None:
        client, _ = _client(_response(200, content=b"<html>"))
        with self.assertRaises(MalformedResponseError):
            await client.list_schedules()

    async def test_non_json_error_has_no_backend_message(self) -> None:
        client, _ = _client(_response(400, content=b"Bad Request"))
        with self.assertRaises(PermanentError) as ctx:
            await client.get_schedule("1")
        self.assertIsNone(ctx.exception.backend_message)


if __name__ == "__main__":
    unittest.main()
