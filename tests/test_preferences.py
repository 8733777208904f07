from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from src.schedule_view.models import FilterSpec, SortKey
from src.schedule_view.preferences import FilterPreferenceStore


class TestFilterPreferenceStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.store = FilterPreferenceStore(str(Path(self._tmp.name) / "state"))

    def test_missing_file(self) -> None:
        self.assertIsNone(self.store.load())

    def test_save_and_load(self) -> None:
        spec = FilterSpec(search="lab", room_id=3, sort_by=SortKey.START_TIME, page=2)
        self.store.save(spec)
        self.assertEqual(self.store.load(), spec)

    def test_corrupt_file_is_ignored(self) -> None:
        self.store.state_dir.mkdir(parents=True)
        self.store.state_file.write_text("{not json", encoding="utf-8")
        self.assertIsNone(self.store.load())

        self.store.state_file.write_text('{"page": 0}', encoding="utf-8")
        self.assertIsNone(self.store.load())

    def test_clear(self) -> None:
        self.store.save(FilterSpec())
        self.store.clear()
        self.assertFalse(self.store.state_file.exists())
        self.store.clear()


if __name__ == "__main__":
    unittest.main()
