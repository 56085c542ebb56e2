import unittest

from sfx_catalog.core.catalog import CuratedTagCatalog, list_available
from sfx_catalog.models import DuplicateError, ValidationError


class TestListAvailable(unittest.TestCase):
    def test_difference_sorted(self) -> None:
        self.assertEqual(list_available(["storm", "glass", "door"], ["door", "storm"]), ["glass"])

    def test_case_insensitive(self) -> None:
        self.assertEqual(list_available(["Door", "glass"], ["DOOR"]), ["glass"])


class TestCuratedTagCatalog(unittest.TestCase):
    def test_add_glass_moves_it_out_of_available(self) -> None:
        catalog = CuratedTagCatalog(["door", "storm"])
        content = ["door", "storm", "glass"]
        self.assertEqual(catalog.available(content), ["glass"])
        self.assertEqual(catalog.add("glass"), ["door", "glass", "storm"])
        self.assertEqual(catalog.list_curated(), ["door", "glass", "storm"])
        self.assertEqual(catalog.available(content), [])

    def test_add_normalizes(self) -> None:
        catalog = CuratedTagCatalog()
        self.assertEqual(catalog.add("  Rain "), ["rain"])

    def test_add_empty_raises_validation_error(self) -> None:
        with self.assertRaises(ValidationError):
            CuratedTagCatalog().add("   ")

    def test_add_twice_raises_duplicate_and_keeps_catalog(self) -> None:
        catalog = CuratedTagCatalog()
        catalog.add("door")
        with self.assertRaises(DuplicateError):
            catalog.add("DOOR")
        self.assertEqual(catalog.list_curated(), ["door"])

    def test_remove_is_idempotent(self) -> None:
        catalog = CuratedTagCatalog(["door", "storm"])
        once = catalog.remove("Door")
        twice = catalog.remove("Door")
        self.assertEqual(once, ["storm"])
        self.assertEqual(twice, once)

    def test_remove_absent_is_not_an_error(self) -> None:
        self.assertEqual(CuratedTagCatalog(["door"]).remove("glass"), ["door"])

    def test_constructor_dedups_case_insensitively(self) -> None:
        catalog = CuratedTagCatalog(["Door", "door ", "", "storm"])
        self.assertEqual(catalog.list_curated(), ["door", "storm"])
        self.assertIn("DOOR", catalog)
        self.assertEqual(len(catalog), 2)


if __name__ == "__main__":
    unittest.main()
