# album_ratings/search/resolver.py

"""Turn free-text album input into a record, suggestions, or a new entry."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

from album_ratings.domain.errors import EmptySearchError
from album_ratings.domain.models import AlbumRecord
from album_ratings.matching.levenshtein import fuzzy_match, levenshtein
from album_ratings.text.normalize import acronym_map, display_case, normalize_key

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE = 3


@dataclass(slots=True)
class ExactMatch:
    key: str
    record: AlbumRecord


@dataclass(slots=True)
class CandidateList:
    """Near misses for the query.

    ``create_key`` / ``create_name`` are the escape hatch: rate the input as a
    brand new album instead of picking a suggestion.
    """

    query: str
    create_key: str
    create_name: str
    album_matches: list[str] = field(default_factory=list)
    artist_matches: list[str] = field(default_factory=list)
    acronym_matches: list[str] = field(default_factory=list)


@dataclass(slots=True)
class NewRecord:
    """Nothing resembles the input; the caller should create it."""

    key: str
    display_name: str


Resolution = Union[ExactMatch, CandidateList, NewRecord]


def resolve(
    text: str,
    records: Mapping[str, AlbumRecord],
    max_distance: int = DEFAULT_MAX_DISTANCE,
) -> Resolution:
    """Resolve search input against the saved records.

    An exact key match always wins, even when fuzzy candidates exist.
    Candidate lists are ordered by record key.

    Raises:
        EmptySearchError: if text is blank.
    """
    if not text or not text.strip():
        raise EmptySearchError()

    query = normalize_key(text)
    record = records.get(query)
    if record is not None:
        return ExactMatch(key=query, record=record)

    keys = sorted(records)
    album_matches = fuzzy_match(query, keys, max_distance)
    # Records without an artist are never artist matches.
    artist_matches = [
        k
        for k in keys
        if records[k].artist
        and levenshtein(query, normalize_key(records[k].artist)) <= max_distance
    ]
    acronyms = acronym_map(records)
    acronym_key = acronyms.get(query.replace(" ", ""))
    acronym_matches = [acronym_key] if acronym_key is not None else []

    if album_matches or artist_matches or acronym_matches:
        logger.debug(
            "No exact match for %r: %d album, %d artist, %d acronym candidates.",
            query,
            len(album_matches),
            len(artist_matches),
            len(acronym_matches),
        )
        return CandidateList(
            query=query,
            create_key=query,
            create_name=display_case(text.strip()),
            album_matches=album_matches,
            artist_matches=artist_matches,
            acronym_matches=acronym_matches,
        )

    return NewRecord(key=query, display_name=display_case(text.strip()))
