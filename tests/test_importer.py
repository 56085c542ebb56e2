import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from sfx_catalog.config import ImporterSettings
from sfx_catalog.importer import (
    audio_url_for,
    describe_format,
    import_folder,
    read_draft,
    title_from_filename,
)
from sfx_catalog.scanner import LibraryScanner
from sfx_catalog.store import JsonRecordStore


class _FakeTags(dict):
    pass


class TestImporterHelpers(unittest.TestCase):
    def test_title_from_filename(self) -> None:
        self.assertEqual(title_from_filename(Path("/x/door_creak-heavy 02.wav")), "Door Creak Heavy 02")

    def test_describe_format_with_stream_info(self) -> None:
        info = SimpleNamespace(sample_rate=48000, bits_per_sample=24)
        self.assertEqual(describe_format(Path("a.wav"), info), "WAV 48kHz 24-bit")
        self.assertEqual(describe_format(Path("a.mp3"), SimpleNamespace(sample_rate=44100)), "MP3 44.1kHz")

    def test_describe_format_without_info(self) -> None:
        self.assertEqual(describe_format(Path("a.flac"), None), "FLAC")
        self.assertIsNone(describe_format(Path("noext"), None))

    def test_audio_url_for_prefix(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            settings = ImporterSettings(roots=[root], url_prefix="https://cdn.example.com/sfx/")
            path = root / "doors" / "creak.wav"
            self.assertEqual(audio_url_for(path, settings), "https://cdn.example.com/sfx/doors/creak.wav")

    def test_audio_url_for_without_prefix_is_file_uri(self) -> None:
        path = Path("/tmp/creak.wav")
        self.assertTrue(audio_url_for(path, ImporterSettings()).startswith("file://"))

    def test_read_draft_uses_embedded_tags(self) -> None:
        audio = SimpleNamespace(
            tags=_FakeTags(title=["Heavy Door"], genre=["Foley; Door"], comment=["wood, creak"]),
            info=SimpleNamespace(sample_rate=96000, bits_per_sample=24),
        )
        with mock.patch("sfx_catalog.importer.MutagenFile", return_value=audio):
            draft = read_draft(Path("/lib/x.wav"))
        self.assertEqual(draft.title, "Heavy Door")
        self.assertEqual([t.strip() for t in draft.tags], ["Foley", "Door", "wood", "creak"])
        self.assertEqual(draft.format, "WAV 96kHz 24-bit")

    def test_read_draft_falls_back_to_filename(self) -> None:
        with mock.patch("sfx_catalog.importer.MutagenFile", return_value=None):
            draft = read_draft(Path("/lib/glass_break.ogg"))
        self.assertEqual(draft.title, "Glass Break")
        self.assertEqual(draft.tags, [])
        self.assertEqual(draft.format, "OGG")


class TestImportFolder(unittest.TestCase):
    def test_imports_matching_files_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            root = tmp / "sfx"
            (root / "doors").mkdir(parents=True)
            (root / "doors" / "creak.wav").write_bytes(b"")
            (root / "doors" / "notes.txt").write_text("x", encoding="utf-8")
            (root / "_trash").mkdir()
            (root / "_trash" / "old.wav").write_bytes(b"")
            settings = ImporterSettings(roots=[root], exclude_patterns=["*/_trash/*"])

            self.assertEqual(
                [p.name for p in LibraryScanner(settings).iter_files()], ["creak.wav"]
            )

            store = JsonRecordStore(tmp / "records.json")
            with mock.patch("sfx_catalog.importer.MutagenFile", return_value=None):
                report = import_folder(store, settings)
            self.assertEqual(report.imported, 1)
            self.assertEqual(report.failed, 0)
            sound = store.list_sounds()[0]
            self.assertEqual(sound.title, "Creak")
            self.assertEqual(sound.format, "WAV")


if __name__ == "__main__":
    unittest.main()
