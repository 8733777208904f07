from __future__ import annotations

import unittest

from src.schedule_view.filtering import filter_schedules, matches_search
from src.schedule_view.models import FilterSpec
from tests.fakes import entity


class TestFilterSchedules(unittest.TestCase):
    def setUp(self) -> None:
        self.schedules = [
            entity("1", room_code="Room A101", room_id=1, class_id=7, day_of_week="Monday"),
            entity("2", room_code="Lab B2", room_id=2, class_id=7, day_of_week="tuesday",
                   teacher_name="Grace Hopper"),
            entity("3", room_code="Lab C3", room_id=1, class_id=8, day_of_week="MONDAY",
                   subject_name="Physics"),
            entity("4", room_code="Hall D", room_id=3, class_id=9, building="Annex",
                   day_of_week="Friday"),
        ]

    def ids(self, spec: FilterSpec) -> list[str]:
        return [e.id for e in filter_schedules(self.schedules, spec)]

    def test_empty_spec_keeps_everything_in_order(self) -> None:
        self.assertEqual(self.ids(FilterSpec()), ["1", "2", "3", "4"])

    def test_search_matches_room_code_only_where_it_appears(self) -> None:
        self.assertEqual(self.ids(FilterSpec(search="Room A")), ["1"])

    def test_search_is_case_insensitive_across_fields(self) -> None:
        self.assertEqual(self.ids(FilterSpec(search="grace")), ["2"])
        self.assertEqual(self.ids(FilterSpec(search="PHYS")), ["3"])
        self.assertEqual(self.ids(FilterSpec(search="annex")), ["4"])
        self.assertEqual(self.ids(FilterSpec(search="class 3")), ["3"])

    def test_missing_optional_fields_do_not_match(self) -> None:
        e = entity("9", teacher_name=None, subject_name=None)
        self.assertFalse(matches_search(e, "none"))

    def test_exact_id_filters(self) -> None:
        self.assertEqual(self.ids(FilterSpec(room_id=1)), ["1", "3"])
        self.assertEqual(self.ids(FilterSpec(class_id=7)), ["1", "2"])

    def test_day_filter_ignores_case(self) -> None:
        self.assertEqual(self.ids(FilterSpec(day_of_week="monday")), ["1", "3"])
        self.assertEqual(self.ids(FilterSpec(day_of_week="TUESDAY")), ["2"])

    def test_predicates_are_a_conjunction(self) -> None:
        self.assertEqual(self.ids(FilterSpec(room_id=1, class_id=8)), ["3"])
        self.assertEqual(self.ids(FilterSpec(room_id=1, day_of_week="Monday", search="lab")), ["3"])
        self.assertEqual(self.ids(FilterSpec(room_id=2, class_id=8)), [])

    def test_conjunction_equals_per_predicate_intersection(self) -> None:
        specs = [FilterSpec(room_id=1), FilterSpec(class_id=7), FilterSpec(day_of_week="monday")]
        combined = FilterSpec(room_id=1, class_id=7, day_of_week="monday")
        expected = set.intersection(*(set(self.ids(s)) for s in specs))
        self.assertEqual(set(self.ids(combined)), expected)

    def test_blank_form_values_impose_no_constraint(self) -> None:
        spec = FilterSpec(search="", room_id="", class_id="", day_of_week="")
        self.assertEqual(self.ids(spec), ["1", "2", "3", "4"])

    def test_input_is_not_modified(self) -> None:
        before = list(self.schedules)
        filter_schedules(self.schedules, FilterSpec(room_id=1))
        self.assertEqual(self.schedules, before)


if __name__ == "__main__":
    unittest.main()
