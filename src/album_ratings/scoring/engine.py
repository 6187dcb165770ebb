# album_ratings/scoring/engine.py

"""Weighted album scoring and record construction."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from album_ratings.domain.errors import ValidationError
from album_ratings.domain.models import (
    MAX_SCORE,
    MIN_SCORE,
    AlbumRecord,
    Rating,
    RatingToken,
)
from album_ratings.text.normalize import display_case, normalize_key

logger = logging.getLogger(__name__)

AVG_SONG_WEIGHT = 2.0
DETAIL_WEIGHT = 1.5
WEIGHT_TOTAL = AVG_SONG_WEIGHT + 3 * DETAIL_WEIGHT  # 6.5
SKIP_PENALTY = 0.2


@dataclass(slots=True)
class SongSummary:
    """Result of averaging per-song ratings."""

    average: float | None
    skips: int
    rated: int
    interludes: int


@dataclass(slots=True)
class RatingInput:
    """Everything a user supplies when rating an album.

    Either avg_song or songs must be given. When songs are given they take
    precedence: the average and the skip count are derived from them.
    """

    lyricism: Any = None
    instrumentation: Any = None
    vibe: Any = None
    avg_song: Any = None
    skips: Any = 0
    songs: Mapping[str, Any] = field(default_factory=dict)
    artist: str | None = None
    genre: str | None = None
    release_date: str | None = None
    cover: str | None = None
    spotify_url: str | None = None
    exempt: RatingToken | None = None


def _check_score(name: str, value: Any, problems: list[str]) -> None:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or math.isnan(value)
        or not MIN_SCORE <= value <= MAX_SCORE
    ):
        problems.append(f"{name} must be a number between 1 and 10, got {value!r}.")


def _check_skips(value: Any, problems: list[str]) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        problems.append(f"skips must be a non-negative integer, got {value!r}.")


def compute_rating(
    avg_song: float,
    lyricism: float,
    instrumentation: float,
    vibe: float,
    skips: int,
) -> float:
    """Combine the components into a single score in [1, 10].

    The average song quality weighs 2, lyricism, instrumentation and vibe
    weigh 1.5 each, and every skipped song costs 0.2. The result is clamped
    so that many skips floor at 1 and a perfect album tops out at 10.

    Raises:
        ValidationError: if any component is out of range. Inputs are never
            clamped.
    """
    problems: list[str] = []
    _check_score("avg_song", avg_song, problems)
    _check_score("lyricism", lyricism, problems)
    _check_score("instrumentation", instrumentation, problems)
    _check_score("vibe", vibe, problems)
    _check_skips(skips, problems)
    if problems:
        raise ValidationError(problems)

    weighted = (
        avg_song * AVG_SONG_WEIGHT
        + lyricism * DETAIL_WEIGHT
        + instrumentation * DETAIL_WEIGHT
        + vibe * DETAIL_WEIGHT
    ) / WEIGHT_TOTAL - skips * SKIP_PENALTY
    return max(MIN_SCORE, min(MAX_SCORE, round(weighted, 2)))


def summarize_songs(songs: Mapping[str, Any]) -> SongSummary:
    """Average numeric song ratings.

    Interludes are ignored entirely; skips are counted but not averaged.
    Raises ValidationError for entries that are not 1-10, Skip or Interlude.
    """
    total = 0.0
    rated = 0
    skips = 0
    interludes = 0
    for label, raw in songs.items():
        try:
            rating = Rating.parse(raw)
        except ValidationError as exc:
            raise ValidationError(f"{label}: {exc}") from exc
        if rating.token is RatingToken.INTERLUDE:
            interludes += 1
        elif rating.token is RatingToken.SKIP:
            skips += 1
        else:
            assert rating.value is not None
            total += rating.value
            rated += 1

    average = round(total / rated, 2) if rated else None
    return SongSummary(average=average, skips=skips, rated=rated, interludes=interludes)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_record(name: str, data: RatingInput) -> AlbumRecord:
    """Validate input and build the full record to store under name's key.

    Nothing is written here; a ValidationError leaves storage untouched.
    """
    key = normalize_key(name)
    if not key:
        raise ValidationError("Album name must not be empty.")

    songs = {label: Rating.parse(raw) for label, raw in data.songs.items()}

    if data.exempt is not None:
        rating = Rating(token=RatingToken(data.exempt))
        avg_song = data.avg_song
        skips = data.skips if isinstance(data.skips, int) and data.skips >= 0 else 0
    else:
        avg_song = data.avg_song
        skips = data.skips
        if songs:
            summary = summarize_songs(songs)
            if summary.average is None:
                msg = "No average available: rate at least one song with a number."
                raise ValidationError(msg)
            avg_song = summary.average
            skips = summary.skips
        rating = Rating.numeric(
            compute_rating(avg_song, data.lyricism, data.instrumentation, data.vibe, skips)
        )

    record = AlbumRecord(
        key=key,
        rating=rating,
        display_name=display_case(name.strip()),
        avg_song=avg_song,
        lyricism=data.lyricism,
        instrumentation=data.instrumentation,
        vibe=data.vibe,
        skips=skips,
        songs=songs,
        artist=_clean(data.artist),
        genre=_clean(data.genre),
        release_date=_clean(data.release_date),
        cover=_clean(data.cover),
        spotify_url=_clean(data.spotify_url),
    )
    logger.debug("Built record %r with rating %s.", key, rating)
    return record
