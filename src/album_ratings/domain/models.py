# album_ratings/domain/models.py

"""Core domain models for album ratings."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from album_ratings.domain.errors import ValidationError

MIN_SCORE = 1.0
MAX_SCORE = 10.0

_SPOTIFY_ALBUM_RE = re.compile(r"album/([a-zA-Z0-9]+)(\?|$)")


class RatingToken(str, Enum):
    """Non-numeric ratings for albums exempt from scoring."""

    SKIP = "Skip"
    INTERLUDE = "Interlude"


# Older data stored single-letter tokens.
_TOKEN_ALIASES: dict[str, RatingToken] = {
    "s": RatingToken.SKIP,
    "skip": RatingToken.SKIP,
    "i": RatingToken.INTERLUDE,
    "interlude": RatingToken.INTERLUDE,
}


@dataclass(slots=True, frozen=True)
class Rating:
    """Either a numeric score in [1, 10] or a sentinel token, never both."""

    value: float | None = None
    token: RatingToken | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.token is None):
            msg = "Rating needs exactly one of value or token."
            raise ValueError(msg)

    @classmethod
    def numeric(cls, value: float) -> Rating:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"Rating must be a number, got {value!r}.")
        if math.isnan(value) or not MIN_SCORE <= value <= MAX_SCORE:
            raise ValidationError(f"Rating must be between 1 and 10, got {value}.")
        return cls(value=float(value))

    @classmethod
    def skip(cls) -> Rating:
        return cls(token=RatingToken.SKIP)

    @classmethod
    def interlude(cls) -> Rating:
        return cls(token=RatingToken.INTERLUDE)

    @classmethod
    def parse(cls, raw: Any) -> Rating:
        """Parse a stored or typed rating: a number, a numeric string, or a token."""
        if isinstance(raw, Rating):
            return raw
        if isinstance(raw, RatingToken):
            return cls(token=raw)
        if isinstance(raw, str):
            text = raw.strip()
            token = _TOKEN_ALIASES.get(text.lower())
            if token is not None:
                return cls(token=token)
            try:
                number = float(text)
            except ValueError:
                raise ValidationError(
                    f"Rating must be 1-10, Skip or Interlude, got {raw!r}."
                ) from None
            return cls.numeric(number)
        return cls.numeric(raw)

    @property
    def is_numeric(self) -> bool:
        return self.value is not None

    def to_raw(self) -> float | str:
        if self.token is not None:
            return self.token.value
        assert self.value is not None
        return self.value

    def __str__(self) -> str:
        if self.token is not None:
            return self.token.value
        return f"{self.value:g} / 10"


@dataclass(slots=True)
class AlbumRecord:
    """A single rated album, keyed by its normalized name."""

    key: str
    rating: Rating
    display_name: str | None = None

    # Score components
    avg_song: float | None = None
    lyricism: float | None = None
    instrumentation: float | None = None
    vibe: float | None = None
    skips: int = 0
    songs: dict[str, Rating] = field(default_factory=dict)

    # Metadata
    artist: str | None = None
    genre: str | None = None
    release_date: str | None = None  # ISO "YYYY-MM-DD", kept verbatim
    cover: str | None = None
    spotify_url: str | None = None

    @property
    def numeric_rating(self) -> float | None:
        return self.rating.value

    @property
    def spotify_album_id(self) -> str | None:
        return spotify_album_id(self.spotify_url)


def spotify_album_id(url: str | None) -> str | None:
    """Extract the album id from an open.spotify.com album URL."""
    if not isinstance(url, str):
        return None
    match = _SPOTIFY_ALBUM_RE.search(url)
    return match.group(1) if match else None


class SortOption(str, Enum):
    """Orderings offered by the ratings listing."""

    RATING_DESC = "ratingDesc"
    RATING_ASC = "ratingAsc"
    ARTIST_ASC = "artistAsc"
    ARTIST_DESC = "artistDesc"
    GENRE_ASC = "genreAsc"
    GENRE_DESC = "genreDesc"
    DATE_ASC = "dateAsc"
    DATE_DESC = "dateDesc"

    @property
    def field(self) -> str:
        """The record attribute being sorted on: rating, artist, genre or date."""
        return self.value.removesuffix("Asc").removesuffix("Desc")

    @property
    def descending(self) -> bool:
        return self.value.endswith("Desc")


DEFAULT_SORT_OPTION = SortOption.RATING_DESC
