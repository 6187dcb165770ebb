"""Tests for the edit distance matcher."""

from __future__ import annotations

import pytest

from album_ratings.matching.levenshtein import fuzzy_match, levenshtein

WORDS = ["", "a", "kanye", "kayne", "kid a", "blonde", "blond", "igor"]


@pytest.mark.parametrize("word", WORDS)
def test_distance_to_self_is_zero(word: str) -> None:
    assert levenshtein(word, word) == 0


@pytest.mark.parametrize("a", WORDS)
@pytest.mark.parametrize("b", WORDS)
def test_distance_is_symmetric(a: str, b: str) -> None:
    assert levenshtein(a, b) == levenshtein(b, a)


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        ("kitten", "sitting", 3),
        ("", "abc", 3),
        ("blonde", "blond", 1),
        ("kanye", "kayne", 2),
        ("flaw", "lawn", 2),
    ],
)
def test_known_distances(a: str, b: str, expected: int) -> None:
    assert levenshtein(a, b) == expected


def test_fuzzy_match_normalises_and_keeps_order() -> None:
    candidates = ["Blonde", "Igor", "blond", "Channel Orange"]
    assert fuzzy_match("  BLONDE ", candidates) == ["Blonde", "blond"]
    assert fuzzy_match("igr", candidates, max_distance=1) == ["Igor"]
    assert fuzzy_match("zzzzzz", candidates) == []


def test_distance_counts_characters_not_bytes() -> None:
    assert levenshtein("björk", "bjork") == 1
    assert levenshtein("sigur rós", "sigur ros") == 1
