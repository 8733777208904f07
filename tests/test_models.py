from __future__ import annotations

import unittest

from pydantic import ValidationError

from src.schedule_view.models import FilterSpec, ScheduleDraft, SortKey, SortOrder


def _draft(**overrides) -> ScheduleDraft:
    values = {
        "class_id": 1,
        "room_id": 2,
        "day_of_week": "Monday",
        "start_time": "09:00",
        "end_time": "10:30",
    }
    values.update(overrides)
    return ScheduleDraft(**values)


class TestScheduleDraft(unittest.TestCase):
    def test_valid_draft(self) -> None:
        draft = _draft()
        self.assertTrue(draft.is_recurring)
        self.assertTrue(draft.is_active)

    def test_requires_class_and_room(self) -> None:
        with self.assertRaises(ValidationError):
            _draft(class_id=0)
        with self.assertRaises(ValidationError):
            _draft(room_id=0)

    def test_rejects_unknown_day(self) -> None:
        with self.assertRaises(ValidationError):
            _draft(day_of_week="Someday")
        self.assertEqual(_draft(day_of_week=" friday ").day_of_week, "friday")

    def test_end_must_follow_start(self) -> None:
        with self.assertRaisesRegex(ValidationError, "End time must be after start time"):
            _draft(start_time="10:00", end_time="09:00")

    def test_duration_bounds(self) -> None:
        with self.assertRaisesRegex(ValidationError, "at least 30 minutes"):
            _draft(end_time="09:15")
        with self.assertRaisesRegex(ValidationError, "cannot exceed 4 hours"):
            _draft(end_time="13:30")
        self.assertEqual(_draft(end_time="13:00").end_time, "13:00")

    def test_rejects_malformed_time(self) -> None:
        with self.assertRaises(ValidationError):
            _draft(start_time="9am")


class TestFilterSpec(unittest.TestCase):
    def test_defaults(self) -> None:
        spec = FilterSpec()
        self.assertEqual(spec.search, "")
        self.assertIs(spec.sort_by, SortKey.DAY_OF_WEEK)
        self.assertIs(spec.sort_order, SortOrder.ASC)
        self.assertEqual((spec.page, spec.page_size), (1, 10))

    def test_form_values_are_coerced(self) -> None:
        spec = FilterSpec(room_id="12", class_id=" ", day_of_week="", search=None, sort_order="desc")
        self.assertEqual(spec.room_id, 12)
        self.assertIsNone(spec.class_id)
        self.assertIsNone(spec.day_of_week)
        self.assertEqual(spec.search, "")
        self.assertIs(spec.sort_order, SortOrder.DESC)

    def test_with_changes_validates(self) -> None:
        spec = FilterSpec().with_changes(page=3)
        self.assertEqual(spec.page, 3)
        with self.assertRaises(ValidationError):
            spec.with_changes(page_size=0)

    def test_is_frozen(self) -> None:
        with self.assertRaises(ValidationError):
            FilterSpec().page = 2


if __name__ == "__main__":
    unittest.main()
