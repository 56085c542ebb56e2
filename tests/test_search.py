import unittest

from sfx_catalog.core.search import (
    EXACT_TITLE,
    TAG_MATCH,
    TITLE_MATCH,
    matches_query,
    relevance_tier,
    search_sounds,
    tokenize_query,
)
from sfx_catalog.models import Sound


def _sound(sound_id: str, title: str, tags=None) -> Sound:
    return Sound(id=sound_id, title=title, audio_url=f"https://x/{sound_id}", tags=tags or [])


class TestTokenizeQuery(unittest.TestCase):
    def test_splits_on_whitespace_runs(self) -> None:
        self.assertEqual(tokenize_query("  Door\t  CREAK \n"), ["door", "creak"])

    def test_blank(self) -> None:
        self.assertEqual(tokenize_query("   "), [])


class TestSearchSounds(unittest.TestCase):
    def setUp(self) -> None:
        self.door = _sound("1", "Door Creak", ["door", "horror"])
        self.thunder = _sound("2", "Thunder", ["storm"])

    def test_empty_query_is_identity(self) -> None:
        items = [self.thunder, self.door]
        self.assertEqual(search_sounds(items, ""), items)
        self.assertEqual(search_sounds(items, "   "), items)

    def test_door_query_finds_door_creak(self) -> None:
        self.assertEqual(search_sounds([self.door, self.thunder], "door"), [self.door])

    def test_no_match_returns_empty(self) -> None:
        self.assertEqual(search_sounds([self.door, self.thunder], "explosion"), [])

    def test_empty_items(self) -> None:
        self.assertEqual(search_sounds([], "door"), [])

    def test_any_term_matches(self) -> None:
        result = search_sounds([self.door, self.thunder], "storm door")
        self.assertEqual({s.id for s in result}, {"1", "2"})

    def test_tag_contains_term(self) -> None:
        bell = _sound("3", "Ding", ["doorbell"])
        self.assertEqual(search_sounds([bell], "door"), [bell])

    def test_term_contains_tag(self) -> None:
        # "doors" is longer than the tag "door" and still matches
        self.assertEqual(search_sounds([self.door], "doors"), [self.door])

    def test_short_tag_over_matches_long_term(self) -> None:
        short = _sound("4", "Pop", ["a"])
        self.assertEqual(search_sounds([short], "crash"), [short])

    def test_exact_title_ranks_first_then_title_then_tag(self) -> None:
        tag_only = _sound("t", "Wind Gust", ["rain"])
        title_partial = _sound("p", "Rain On Roof", [])
        exact = _sound("e", "Rain", [])
        result = search_sounds([tag_only, title_partial, exact], "rain")
        self.assertEqual([s.id for s in result], ["e", "p", "t"])

    def test_stable_within_tier(self) -> None:
        a = _sound("a", "Metal Hit", ["impact"])
        b = _sound("b", "Wood Hit", ["impact"])
        c = _sound("c", "Glass", ["impact"])
        d = _sound("d", "Stone Hit", [])
        result = search_sounds([c, a, b, d], "hit impact")
        self.assertEqual([s.id for s in result], ["a", "b", "d", "c"])

    def test_filter_is_sound_and_complete(self) -> None:
        items = [
            self.door,
            self.thunder,
            _sound("3", "Glass Break", ["glass", "impact"]),
            _sound("4", "Footsteps", ["walk", "gravel"]),
            _sound("5", "Rain", ["storm", "water"]),
        ]
        for query in ("storm", "glass walk", "oo", "xyz", "impacts", "rain"):
            terms = tokenize_query(query)
            result = search_sounds(items, query)
            expected = [item for item in items if matches_query(item, terms)]
            self.assertEqual(sorted(s.id for s in result), sorted(s.id for s in expected), query)

    def test_relevance_tier_values(self) -> None:
        self.assertEqual(relevance_tier(self.thunder, ["thunder"]), EXACT_TITLE)
        self.assertEqual(relevance_tier(self.door, ["creak"]), TITLE_MATCH)
        self.assertEqual(relevance_tier(self.door, ["horror"]), TAG_MATCH)

    def test_does_not_mutate_input(self) -> None:
        items = [self.thunder, self.door]
        search_sounds(items, "door")
        self.assertEqual(items, [self.thunder, self.door])


if __name__ == "__main__":
    unittest.main()
