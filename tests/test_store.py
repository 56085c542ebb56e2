import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from sfx_catalog.models import NotFoundError, StoreError, ValidationError
from sfx_catalog.store import TAGS_KEY, JsonRecordStore


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class TestJsonRecordStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "records.json"
        self.store = JsonRecordStore(self.path, clock=_Clock())

    def test_create_and_list_newest_first(self) -> None:
        first = self.store.create_sound("Door Creak", "https://x/1", tags=["Door", " horror", ""])
        second = self.store.create_sound("Thunder", "https://x/2")
        sounds = self.store.list_sounds()
        self.assertEqual([s.id for s in sounds], [second.id, first.id])
        self.assertEqual(sounds[1].tags, ["door", "horror"])

    def test_persists_to_disk(self) -> None:
        sound = self.store.create_sound("Door", "https://x/1", equipment="zoom h6")
        reopened = JsonRecordStore(self.path)
        loaded = reopened.get_sound(sound.id)
        self.assertEqual(loaded.title, "Door")
        self.assertEqual(loaded.equipment, "zoom h6")
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertIn(f"sound:{sound.id}", raw)
        self.assertEqual(raw[f"sound:{sound.id}"]["audioUrl"], "https://x/1")

    def test_create_requires_title_and_url(self) -> None:
        with self.assertRaises(ValidationError):
            self.store.create_sound("  ", "https://x/1")
        with self.assertRaises(ValidationError):
            self.store.create_sound("Door", "")

    def test_update_and_missing(self) -> None:
        sound = self.store.create_sound("Door", "https://x/1")
        updated = self.store.update_sound(sound.id, title="Door Slam", tags=["Impact"])
        self.assertEqual(updated.id, sound.id)
        self.assertEqual(updated.tags, ["impact"])
        with self.assertRaises(NotFoundError):
            self.store.update_sound("missing", title="x")
        with self.assertRaises(ValidationError):
            self.store.update_sound(sound.id, id="other")

    def test_update_rejects_string_tags(self) -> None:
        sound = self.store.create_sound("Door", "https://x/1", tags=["wood"])
        with self.assertRaises(ValidationError):
            self.store.update_sound(sound.id, tags="door,creak")
        self.assertEqual(self.store.get_sound(sound.id).tags, ["wood"])

    def test_update_rejects_missing_title_or_url(self) -> None:
        sound = self.store.create_sound("Door", "https://x/1")
        with self.assertRaises(ValidationError):
            self.store.update_sound(sound.id, title=None)
        with self.assertRaises(ValidationError):
            self.store.update_sound(sound.id, audio_url="   ")
        self.assertEqual(self.store.get_sound(sound.id).title, "Door")

    def test_update_keeps_untouched_fields(self) -> None:
        sound = self.store.create_sound("Door", "https://x/1", tags=["wood"], equipment="Zoom H5")
        updated = self.store.update_sound(sound.id, format="WAV")
        self.assertEqual(updated.tags, ["wood"])
        self.assertEqual(updated.equipment, "Zoom H5")
        self.assertEqual(updated.format, "WAV")

    def test_failed_write_leaves_memory_unchanged(self) -> None:
        self.store.create_sound("Door", "https://x/1")
        with mock.patch.object(self.store, "_flush", side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                self.store.create_sound("Glass", "https://x/2")
        self.assertEqual([s.title for s in self.store.list_sounds()], ["Door"])
        reopened = JsonRecordStore(self.path)
        self.assertEqual([s.title for s in reopened.list_sounds()], ["Door"])

    def test_delete(self) -> None:
        sound = self.store.create_sound("Door", "https://x/1")
        self.store.delete_sound(sound.id)
        self.assertEqual(self.store.list_sounds(), [])
        with self.assertRaises(NotFoundError):
            self.store.delete_sound(sound.id)

    def test_import_records_counts_failures(self) -> None:
        report = self.store.import_records(
            [
                {"title": "Rain", "url": "https://x/rain", "tags": ["Water"]},
                {"audioUrl": "https://x/untitled", "tags": "not-a-list"},
                {"title": "No url"},
                "garbage",
            ]
        )
        self.assertEqual(report.imported, 2)
        self.assertEqual(report.failed, 2)
        titles = sorted(s.title for s in self.store.list_sounds())
        self.assertEqual(titles, ["Rain", "Untitled"])

    def test_import_records_requires_list(self) -> None:
        with self.assertRaises(ValidationError):
            self.store.import_records({"title": "x"})

    def test_suggestions_unread_first_then_newest(self) -> None:
        old = self.store.create_suggestion("Old", "", "")
        read = self.store.create_suggestion("Read", "", "")
        new = self.store.create_suggestion(" New ", " Nature ", " birds ")
        self.store.mark_suggestion_read(read.id)
        ordered = self.store.list_suggestions()
        self.assertEqual([s.id for s in ordered], [new.id, old.id, read.id])
        self.assertEqual(ordered[0].sound_name, "New")
        self.assertEqual(ordered[0].category, "Nature")

    def test_suggestion_requires_name(self) -> None:
        with self.assertRaises(ValidationError):
            self.store.create_suggestion("  ")
        with self.assertRaises(NotFoundError):
            self.store.mark_suggestion_read("nope")
        with self.assertRaises(NotFoundError):
            self.store.delete_suggestion("nope")

    def test_curated_tags_round_trip_drops_empties(self) -> None:
        self.assertEqual(self.store.get_curated_tags(), [])
        self.store.set_curated_tags(["door", " ", "Storm"])
        self.assertEqual(self.store.get_curated_tags(), ["door", "storm"])
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertIn("updatedAt", raw[TAGS_KEY])

    def test_unreadable_store_raises(self) -> None:
        bad = Path(self._tmp.name) / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with self.assertRaises(StoreError):
            JsonRecordStore(bad)


if __name__ == "__main__":
    unittest.main()
