# album_ratings/io/ratings_jsonl.py

"""Record (de)serialisation and the storage collaborators.

The persisted shape uses the camelCase field names of the original
browser storage so existing exports load unchanged.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from album_ratings.domain.models import (
    DEFAULT_SORT_OPTION,
    AlbumRecord,
    Rating,
    SortOption,
)
from album_ratings.io.jsonl import load_jsonl_as_map, write_jsonl
from album_ratings.text.normalize import normalize_key

logger = logging.getLogger(__name__)


def _songs_from_raw(raw: Any) -> dict[str, Rating]:
    if not isinstance(raw, dict):
        return {}
    songs: dict[str, Rating] = {}
    for label, entry in raw.items():
        value = entry.get("rating") if isinstance(entry, dict) else entry
        if value is None or value == "":
            continue
        songs[label] = Rating.parse(value)
    return songs


def record_from_raw(raw: dict[str, Any], key: str | None = None) -> AlbumRecord:
    """Convert a raw JSON dict into an AlbumRecord."""
    record_key = normalize_key(key if key is not None else raw["key"])
    return AlbumRecord(
        key=record_key,
        rating=Rating.parse(raw["rating"]),
        display_name=raw.get("displayName"),
        avg_song=raw.get("avgSong"),
        lyricism=raw.get("lyricism"),
        instrumentation=raw.get("instrumentation"),
        vibe=raw.get("vibe"),
        skips=int(raw.get("skips") or 0),
        songs=_songs_from_raw(raw.get("songs")),
        artist=raw.get("artist") or None,
        genre=raw.get("genre") or None,
        release_date=raw.get("releaseDate") or None,
        cover=raw.get("cover") or None,
        spotify_url=raw.get("spotifyURL") or None,
    )


def record_to_raw(record: AlbumRecord) -> dict[str, Any]:
    """Convert an AlbumRecord into a JSON-serialisable dict."""
    return {
        "key": record.key,
        "displayName": record.display_name,
        "rating": record.rating.to_raw(),
        "avgSong": record.avg_song,
        "lyricism": record.lyricism,
        "instrumentation": record.instrumentation,
        "vibe": record.vibe,
        "skips": record.skips,
        "songs": {
            label: {"rating": rating.to_raw()} for label, rating in record.songs.items()
        },
        "artist": record.artist,
        "genre": record.genre,
        "releaseDate": record.release_date,
        "cover": record.cover,
        "spotifyURL": record.spotify_url,
    }


class RecordStore(Protocol):
    """Whole-collection storage: every save rewrites everything."""

    def load(self) -> dict[str, AlbumRecord]: ...

    def save(self, records: Mapping[str, AlbumRecord]) -> None: ...


class PreferenceStore(Protocol):
    def load_sort_option(self) -> SortOption: ...

    def save_sort_option(self, option: SortOption) -> None: ...


class JsonlRecordStore:
    """Records kept in one JSONL file, one album per line."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, AlbumRecord]:
        records: dict[str, AlbumRecord] = {}
        for key, raw in load_jsonl_as_map(self.path).items():
            try:
                record = record_from_raw(raw, key)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(
                    "Skipping unreadable record %r in %s: %s", key, self.path, exc
                )
                continue
            records[record.key] = record
        return records

    def unreadable(self) -> dict[str, dict[str, Any]]:
        """Raw stored objects that do not parse as records, by key."""
        kept: dict[str, dict[str, Any]] = {}
        for key, raw in load_jsonl_as_map(self.path, log_errors=False).items():
            try:
                record_from_raw(raw, key)
            except (KeyError, TypeError, ValueError):
                kept[key] = raw
        return kept

    def save(self, records: Mapping[str, AlbumRecord]) -> None:
        """Rewrite the file from records.

        Stored lines that could not be loaded are written back unchanged
        unless records now holds an album under the same key.
        """
        raw_by_key: dict[str, dict[str, Any]] = {
            key: raw
            for key, raw in self.unreadable().items()
            if normalize_key(key) not in records
        }
        if raw_by_key:
            logger.warning(
                "Keeping %s unreadable records in %s as stored.",
                len(raw_by_key),
                self.path,
            )
        for record in records.values():
            raw_by_key[record.key] = record_to_raw(record)

        # Stable, deterministic ordering by key
        ordered = [raw_by_key[k] for k in sorted(raw_by_key)]
        write_jsonl(self.path, ordered)
        logger.debug("Wrote %s records to %s.", len(ordered), self.path)


class JsonPreferenceStore:
    """Remembers the last sort option in a small JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring invalid preferences file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def load_sort_option(self) -> SortOption:
        raw = self._read().get("sortOption")
        if raw is None:
            return DEFAULT_SORT_OPTION
        try:
            return SortOption(raw)
        except ValueError:
            logger.warning(
                "Unknown stored sort option %r, using %s.",
                raw,
                DEFAULT_SORT_OPTION.value,
            )
            return DEFAULT_SORT_OPTION

    def save_sort_option(self, option: SortOption) -> None:
        data = self._read()
        data["sortOption"] = SortOption(option).value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


class MemoryRecordStore:
    """In-process store holding records in their serialised form."""

    def __init__(self, records: Mapping[str, AlbumRecord] | None = None) -> None:
        self._raw: dict[str, dict[str, Any]] = {}
        if records:
            self.save(records)

    def load(self) -> dict[str, AlbumRecord]:
        return {key: record_from_raw(raw, key) for key, raw in self._raw.items()}

    def save(self, records: Mapping[str, AlbumRecord]) -> None:
        self._raw = {
            key: json.loads(json.dumps(record_to_raw(record)))
            for key, record in records.items()
        }


class MemoryPreferenceStore:
    def __init__(self, option: SortOption = DEFAULT_SORT_OPTION) -> None:
        self._option = option

    def load_sort_option(self) -> SortOption:
        return self._option

    def save_sort_option(self, option: SortOption) -> None:
        self._option = SortOption(option)
