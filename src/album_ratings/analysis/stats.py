# album_ratings/analysis/stats.py

"""Per-decade, per-genre and per-artist rating statistics.

Sentinel-rated albums (Skip / Interlude) never contribute to ``count`` or
``avg_rating``; each group reports them separately as ``exempt_count``.
A group holding only sentinel albums has ``avg_rating`` None and is left out
of every ranking.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

from album_ratings.analysis.sorting import UNKNOWN_ARTIST, release_sort_date
from album_ratings.domain.models import AlbumRecord, RatingToken
from album_ratings.text.normalize import (
    CANONICAL_GENRES,
    UNKNOWN_GENRE,
    capitalize_first,
    display_case,
    normalize_genre,
    parse_year,
)

MIN_YEAR = 1900
MAX_YEAR = 2025


@dataclass(slots=True)
class GroupStats:
    """Rating summary for one decade or genre."""

    label: str
    count: int = 0
    avg_rating: float | None = None
    exempt_count: int = 0
    total: float = field(default=0.0, repr=False)

    def add(self, record: AlbumRecord) -> None:
        rating = record.rating.value
        if rating is None:
            self.exempt_count += 1
            return
        self.count += 1
        self.total += rating
        self.avg_rating = round(self.total / self.count, 2)


@dataclass(slots=True)
class ArtistAlbum:
    key: str
    name: str
    rating: str | float
    release_date: str | None
    genre: str | None
    spotify_url: str | None


@dataclass(slots=True)
class ArtistSummary:
    artist: str
    albums: list[ArtistAlbum] = field(default_factory=list)
    count: int = 0
    avg_rating: float | None = None
    exempt_count: int = 0


# ---------------------------------------------------------------------------
# Decades
# ---------------------------------------------------------------------------


def release_year(release_date: str | None) -> int | None:
    """Four-digit year in release_date, if it falls within 1900-2025."""
    year = parse_year(release_date)
    if year is None or not MIN_YEAR <= year <= MAX_YEAR:
        return None
    return year


def decade_stats(records: Mapping[str, AlbumRecord]) -> dict[str, GroupStats]:
    """Group records by decade label ("1990s"), ordered by label.

    Records without a usable year are left out entirely.
    """
    stats: dict[str, GroupStats] = {}
    for record in records.values():
        year = release_year(record.release_date)
        if year is None:
            continue
        label = f"{year // 10 * 10}s"
        stats.setdefault(label, GroupStats(label=label)).add(record)
    return dict(sorted(stats.items()))


def _ranked(groups: Iterable[GroupStats]) -> list[GroupStats]:
    return [g for g in groups if g.avg_rating is not None]


def top_decades(records: Mapping[str, AlbumRecord], n: int = 3) -> list[GroupStats]:
    """Best decades by average rating, highest first."""
    groups = _ranked(decade_stats(records).values())
    return sorted(groups, key=lambda g: -g.avg_rating)[:n]


# ---------------------------------------------------------------------------
# Genres
# ---------------------------------------------------------------------------


def genre_bucket(genre: str | None) -> str:
    """Genre label used for analytics.

    Known synonyms collapse to their canonical label; anything else is
    capitalised so "rock" and "Rock" land in the same bucket.
    """
    canonical = normalize_genre(genre)
    if canonical in CANONICAL_GENRES or canonical == UNKNOWN_GENRE:
        return canonical
    return capitalize_first(canonical)


def genre_stats(records: Mapping[str, AlbumRecord]) -> dict[str, GroupStats]:
    stats: dict[str, GroupStats] = {}
    for record in records.values():
        label = genre_bucket(record.genre)
        stats.setdefault(label, GroupStats(label=label)).add(record)
    return stats


def top_genres(records: Mapping[str, AlbumRecord], n: int = 3) -> list[GroupStats]:
    """Podium ranking: average rating descending, then album count descending."""
    groups = _ranked(genre_stats(records).values())
    return sorted(groups, key=lambda g: (-g.avg_rating, -g.count))[:n]


def genre_breakdown(records: Mapping[str, AlbumRecord]) -> list[GroupStats]:
    """Breakdown ranking: album count descending, then average rating descending.

    Unlike top_genres this is a catalogue view, so it is ordered by size first.
    """
    groups = _ranked(genre_stats(records).values())
    return sorted(groups, key=lambda g: (-g.count, -g.avg_rating))


# ---------------------------------------------------------------------------
# Artists
# ---------------------------------------------------------------------------


def _album_release_key(album: ArtistAlbum) -> date:
    return release_sort_date(album.release_date)


def group_by_artist(records: Mapping[str, AlbumRecord]) -> dict[str, ArtistSummary]:
    """Group albums by artist, each artist's albums oldest first.

    Sentinel-rated albums are listed but do not affect the average.
    """
    grouped: dict[str, ArtistSummary] = {}
    totals: dict[str, float] = {}

    for key, record in records.items():
        artist = record.artist or UNKNOWN_ARTIST
        summary = grouped.setdefault(artist, ArtistSummary(artist=artist))
        summary.albums.append(
            ArtistAlbum(
                key=key,
                name=record.display_name or display_case(key),
                rating=record.rating.to_raw(),
                release_date=record.release_date,
                genre=record.genre,
                spotify_url=record.spotify_url,
            )
        )
        if record.rating.value is None:
            summary.exempt_count += 1
            continue
        summary.count += 1
        totals[artist] = totals.get(artist, 0.0) + record.rating.value

    for artist, summary in grouped.items():
        if summary.count:
            summary.avg_rating = round(totals[artist] / summary.count, 2)
        summary.albums.sort(key=_album_release_key)

    return grouped


def artist_leaderboard(records: Mapping[str, AlbumRecord]) -> list[ArtistSummary]:
    """Artists by average rating, highest first. Unrated artists trail."""
    summaries = list(group_by_artist(records).values())
    return sorted(
        summaries,
        key=lambda s: (s.avg_rating is None, -(s.avg_rating or 0.0)),
    )


# ---------------------------------------------------------------------------
# Rating tiers
# ---------------------------------------------------------------------------

TIERS: list[tuple[float, str]] = [
    (2, "Skip"),
    (4, "Weak"),
    (6, "Mid"),
    (7, "Good"),
    (8, "Great"),
    (9, "Excellent"),
]


def rating_tier(rating: float | RatingToken | None) -> str:
    """Name of the band a rating falls in, from "Skip" up to "Masterpiece"."""
    if rating == RatingToken.INTERLUDE:
        return "Interlude"
    if rating is None or rating == RatingToken.SKIP:
        return "Skip"
    for upper, name in TIERS:
        if rating < upper:
            return name
    return "Masterpiece"
