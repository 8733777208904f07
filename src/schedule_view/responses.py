"""Adapters for the wrapper shapes the backend uses around its payloads.

Collections arrive in one of three shapes:

    [ {...}, {...} ]                         bare array
    {"success": true, "data": [ {...} ]}     success envelope
    {"data": [ {...} ]}                      data envelope

Each shape is matched here, once, at the fetch boundary. Nothing past this
module inspects raw response bodies.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from src.schedule_view.errors import MalformedResponseError

MUTATION_SUCCESS_STATUSES: frozenset[int] = frozenset({200, 201, 204})


class ApiResponse(BaseModel):
    """Status code and decoded JSON body (None for empty bodies)."""

    status_code: int
    body: Any = None


def unwrap_collection(body: Any) -> list[Any]:
    """Extract the record list from any of the three collection shapes.

    Raises:
        MalformedResponseError: If the body matches none of the shapes.
    """
    match body:
        case list():
            return body
        case {"success": True, "data": list() as records}:
            return records
        case {"data": list() as records}:
            return records
        case _:
            raise MalformedResponseError(
                "Unexpected data format received",
                backend_message=backend_message(body),
            )


def unwrap_record(body: Any) -> Mapping[str, Any] | None:
    """Extract a single record from a by-id response.

    Accepts the envelopes above around one object, or an array whose first
    element is the record. Returns None when there is no record, including
    an explicit ``"success": false`` envelope.
    """
    match body:
        case {"success": False}:
            found = None
        case {"data": Mapping() as record}:
            found = record
        case {"data": [first, *_]}:
            found = first
        case [first, *_]:
            found = first
        case Mapping() if "data" not in body:
            found = body
        case _:
            found = None
    if not isinstance(found, Mapping) or not found:
        return None
    return found


def is_mutation_success(response: ApiResponse) -> bool:
    """True when a create/update/delete response signals success.

    An explicit ``"success": false`` in the body is a failure even on 200.
    """
    body = response.body
    if isinstance(body, Mapping) and "success" in body:
        return body["success"] is True
    return response.status_code in MUTATION_SUCCESS_STATUSES


def backend_message(body: Any) -> str | None:
    """The ``message`` field of an error payload, if the backend sent one."""
    if isinstance(body, Mapping):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None
