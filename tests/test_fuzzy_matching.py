"""Tests for spoken-name matching."""
import pytest

from custom_components.plexvoice.models import Show
from custom_components.plexvoice.utils.fuzzy_matching import (
    dice_coefficient,
    find_best_match,
    find_show_by_spoken_name,
)


class TestDiceCoefficient:
    def test_identical_strings_score_one(self):
        assert dice_coefficient("archer", "archer") == 1.0

    def test_case_and_spacing_ignored(self):
        assert dice_coefficient("  Doctor   WHO ", "doctor who") == 1.0

    def test_known_value(self):
        # night: ni ig gh ht / nacht: na ac ch ht -> one shared pair of eight
        assert dice_coefficient("night", "nacht") == pytest.approx(0.25)

    def test_disjoint_strings_score_zero(self):
        assert dice_coefficient("abc", "xyz") == 0.0

    def test_symmetric(self):
        assert dice_coefficient("the office", "office space") == dice_coefficient(
            "office space", "the office"
        )

    def test_single_character_against_other(self):
        assert dice_coefficient("a", "ab") == 0.0

    def test_empty_string(self):
        assert dice_coefficient("", "archer") == 0.0


class TestFindBestMatch:
    def test_returns_highest_scoring_candidate(self):
        titles = ["Parks and Recreation", "The Office (US)", "Office Space"]
        assert find_best_match("the office", titles) == "The Office (US)"

    def test_none_when_nothing_reaches_threshold(self):
        assert find_best_match("zzzz", ["Archer", "Doctor Who"]) is None

    def test_empty_candidates(self):
        assert find_best_match("archer", []) is None

    def test_tie_keeps_first(self):
        assert find_best_match("archer", ["Archer", "ARCHER"]) == "Archer"

    def test_key_extractor(self):
        shows = [Show("Archer", "1"), Show("Doctor Who", "2")]
        assert find_best_match("doctor who", shows, key=lambda s: s.title).rating_key == "2"

    def test_result_scores_at_least_every_other(self):
        phrase = "star trek next generation"
        titles = [
            "Star Trek",
            "Star Trek: The Next Generation",
            "Star Wars: The Clone Wars",
            "Battlestar Galactica",
        ]
        best = find_best_match(phrase, titles)
        best_score = dice_coefficient(phrase, best)
        assert best_score >= 0.2
        assert all(best_score >= dice_coefficient(phrase, t) for t in titles)

    def test_returns_candidate_exactly_when_score_reaches_threshold(self):
        phrase = "night"
        titles = ["nacht", "zzzz"]
        # nacht scores 0.25: above the floor
        assert find_best_match(phrase, titles) == "nacht"
        # raising the floor above every score yields no match
        assert find_best_match(phrase, titles, minimum=0.3) is None

    def test_score_equal_to_floor_matches(self):
        # ab bc cd de ef / ab bx xy yz zw -> one shared pair of ten
        assert dice_coefficient("abcdef", "abxyzw") == 0.2
        assert find_best_match("abcdef", ["abxyzw"]) == "abxyzw"


def test_find_show_by_spoken_name():
    shows = [Show("Archer", "1"), Show("Doctor Who", "2"), Show("The Office (US)", "3")]
    assert find_show_by_spoken_name("the office", shows) == Show("The Office (US)", "3")
    assert find_show_by_spoken_name("qqqq", shows) is None
