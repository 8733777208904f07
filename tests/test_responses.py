from __future__ import annotations

import unittest

from src.schedule_view.errors import MalformedResponseError
from src.schedule_view.responses import (
    ApiResponse,
    backend_message,
    is_mutation_success,
    unwrap_collection,
    unwrap_record,
)


class TestUnwrapCollection(unittest.TestCase):
    def test_accepts_all_three_wrapper_shapes(self) -> None:
        records = [{"id": 1}, {"id": 2}]
        self.assertEqual(unwrap_collection(records), records)
        self.assertEqual(unwrap_collection({"success": True, "data": records}), records)
        self.assertEqual(unwrap_collection({"data": records}), records)

    def test_rejects_unknown_shapes(self) -> None:
        for body in (None, {}, {"data": {"id": 1}}, {"items": []}, "[]"):
            with self.assertRaises(MalformedResponseError):
                unwrap_collection(body)

    def test_malformed_error_keeps_backend_message(self) -> None:
        with self.assertRaises(MalformedResponseError) as ctx:
            unwrap_collection({"message": "Database unavailable"})
        self.assertEqual(ctx.exception.backend_message, "Database unavailable")


class TestUnwrapRecord(unittest.TestCase):
    def test_envelopes_and_arrays(self) -> None:
        record = {"id": 5}
        self.assertEqual(unwrap_record({"success": True, "data": record}), record)
        self.assertEqual(unwrap_record({"data": record}), record)
        self.assertEqual(unwrap_record({"data": [record, {"id": 6}]}), record)
        self.assertEqual(unwrap_record([record, {"id": 6}]), record)
        self.assertEqual(unwrap_record(record), record)

    def test_no_record(self) -> None:
        for body in (None, [], {}, {"data": None}, {"data": []}, ["x"]):
            self.assertIsNone(unwrap_record(body))

    def test_failed_envelope_is_not_a_record(self) -> None:
        self.assertIsNone(unwrap_record({"success": False, "message": "Schedule not found"}))
        self.assertIsNone(unwrap_record({"success": False, "data": {"id": 5}}))


class TestMutationSuccess(unittest.TestCase):
    def test_status_codes(self) -> None:
        for status in (200, 201, 204):
            self.assertTrue(is_mutation_success(ApiResponse(status_code=status)))
        self.assertFalse(is_mutation_success(ApiResponse(status_code=202)))

    def test_success_flag_wins(self) -> None:
        self.assertTrue(
            is_mutation_success(ApiResponse(status_code=202, body={"success": True}))
        )
        self.assertFalse(
            is_mutation_success(
                ApiResponse(status_code=200, body={"success": False, "message": "Conflict"})
            )
        )

    def test_backend_message(self) -> None:
        self.assertEqual(backend_message({"message": "Room is booked"}), "Room is booked")
        self.assertIsNone(backend_message({"message": "  "}))
        self.assertIsNone(backend_message(["message"]))


if __name__ == "__main__":
    unittest.main()
