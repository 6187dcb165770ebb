# album_ratings/matching/levenshtein.py

"""Edit distance for fuzzy name suggestions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rapidfuzz.distance import Levenshtein

from album_ratings.text.normalize import normalize_key


def levenshtein(a: Sequence[str], b: Sequence[str]) -> int:
    """Minimum number of single-character inserts, deletes and substitutions."""
    return Levenshtein.distance(a, b)


def fuzzy_match(
    query: str,
    candidates: Iterable[str],
    max_distance: int = 3,
) -> list[str]:
    """Return candidates within max_distance of query, in the order given.

    Both sides are compared in normalized form.
    """
    needle = normalize_key(query)
    return [
        candidate
        for candidate in candidates
        if levenshtein(needle, normalize_key(candidate)) <= max_distance
    ]
