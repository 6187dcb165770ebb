# album_ratings/text/normalize.py

"""Canonical forms for album names and genres."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date

from album_ratings.domain.models import AlbumRecord

UNKNOWN_GENRE = "Unknown Genre"

# Synonym spelling -> canonical label. Matched after trim + lowercase.
GENRE_ALIASES: dict[str, str] = {
    "rap": "Rap",
    "hip hop": "Rap",
    "hip-hop": "Rap",
    "hiphop": "Rap",
    "hip-hop/rap": "Rap",
    "r&b": "R&B",
    "rnb": "R&B",
    "rhythm and blues": "R&B",
    "electronic": "Electronic",
    "edm": "Electronic",
    "dance": "Electronic",
}

CANONICAL_GENRES: frozenset[str] = frozenset(GENRE_ALIASES.values())

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")
_YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")


def normalize_key(name: str) -> str:
    """Trim and lowercase a name. All identity comparisons go through this."""
    return name.strip().lower()


def display_case(name: str) -> str:
    """Upper-case the first character of every space-separated word.

    The rest of each word is left alone, so "mbdtf" becomes "Mbdtf" and
    "good kid, m.A.A.d city" keeps its inner capitals.
    """
    return " ".join(word[:1].upper() + word[1:] for word in name.split(" "))


def capitalize_first(text: str | None) -> str:
    """First character upper, the rest lower. Non-strings yield ""."""
    if not isinstance(text, str) or not text:
        return ""
    return text[0].upper() + text[1:].lower()


def normalize_genre(genre: str | None) -> str:
    if not genre or not genre.strip():
        return UNKNOWN_GENRE
    cleaned = genre.strip()
    return GENRE_ALIASES.get(cleaned.lower(), cleaned)


def parse_release_date(value: str | None) -> date | None:
    """Parse "YYYY-MM-DD" leniently. Anything unparseable is None."""
    if not isinstance(value, str):
        return None
    match = _ISO_DATE_RE.match(value.strip())
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_year(value: str | None) -> int | None:
    """First 19xx or 20xx year appearing in value, e.g. "1994" or "released 2003"."""
    if not isinstance(value, str):
        return None
    match = _YEAR_RE.search(value)
    return int(match.group(0)) if match else None


def format_date(value: str | None) -> str:
    """Render an ISO date as e.g. "March 1, 1994". Unknown dates render empty."""
    parsed = parse_release_date(value)
    if parsed is None:
        return ""
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def generate_acronym(title: str) -> str:
    """Initials of a title, skipping a leading "the" and keeping "lp" whole."""
    words = [
        word
        for index, word in enumerate(title.lower().split())
        if not (index == 0 and word == "the")
    ]
    return "".join("lp" if word == "lp" else word[0] for word in words)


def acronym_map(records: Mapping[str, AlbumRecord]) -> dict[str, str]:
    """Map acronym -> record key. Later records win on collisions."""
    result: dict[str, str] = {}
    for key, record in records.items():
        result[generate_acronym(record.display_name or key)] = key
    return result
