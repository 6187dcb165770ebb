"""Tests for record serialisation and the storage collaborators."""

from __future__ import annotations

import json
from pathlib import Path

from album_ratings.domain.models import AlbumRecord, Rating, SortOption
from album_ratings.io.jsonl import iter_jsonl_objects
from album_ratings.io.ratings_jsonl import (
    JsonlRecordStore,
    JsonPreferenceStore,
    MemoryRecordStore,
    record_from_raw,
    record_to_raw,
)


def _full_record() -> AlbumRecord:
    return AlbumRecord(
        key="blonde",
        rating=Rating.numeric(8.76),
        display_name="Blonde",
        avg_song=8.5,
        lyricism=9,
        instrumentation=8,
        vibe=10,
        skips=1,
        songs={
            "Nikes": Rating.numeric(9),
            "Be Yourself": Rating.interlude(),
            "Pretty Sweet": Rating.skip(),
        },
        artist="Frank Ocean",
        genre="R&B",
        release_date="2016-08-20",
        cover="https://example.com/blonde.jpg",
        spotify_url="https://open.spotify.com/album/3mH6qwIy9crq0I9YQbOuDf",
    )


def test_raw_shape_uses_camel_case_fields() -> None:
    raw = record_to_raw(_full_record())
    assert raw["avgSong"] == 8.5
    assert raw["releaseDate"] == "2016-08-20"
    assert raw["spotifyURL"].endswith("3mH6qwIy9crq0I9YQbOuDf")
    assert raw["songs"]["Be Yourself"] == {"rating": "Interlude"}
    assert raw["songs"]["Nikes"] == {"rating": 9.0}


def test_jsonl_store_round_trip(tmp_path: Path) -> None:
    store = JsonlRecordStore(tmp_path / "data" / "albumRatings.jsonl")
    records = {
        "blonde": _full_record(),
        "skit": AlbumRecord(key="skit", rating=Rating.skip()),
    }
    store.save(records)

    loaded = store.load()
    assert loaded == records
    assert list(loaded["blonde"].songs) == ["Nikes", "Be Yourself", "Pretty Sweet"]


def test_save_replaces_the_whole_collection(tmp_path: Path) -> None:
    store = JsonlRecordStore(tmp_path / "albumRatings.jsonl")
    store.save({"a": AlbumRecord(key="a", rating=Rating.numeric(5))})
    store.save({"b": AlbumRecord(key="b", rating=Rating.numeric(6))})
    assert set(store.load()) == {"b"}
    assert not (tmp_path / "albumRatings.jsonl.tmp").exists()


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    assert JsonlRecordStore(tmp_path / "nothing.jsonl").load() == {}


def test_bad_lines_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "albumRatings.jsonl"
    lines = [
        json.dumps({"key": "good", "rating": 7}),
        "{not json",
        json.dumps({"rating": 7}),
        json.dumps({"key": "bad rating", "rating": 42}),
        "",
    ]
    path.write_text("\n".join(lines), encoding="utf-8")

    assert len(list(iter_jsonl_objects(path, log_errors=False))) == 3
    assert set(JsonlRecordStore(path).load()) == {"good"}


def test_save_keeps_unreadable_records(tmp_path: Path) -> None:
    path = tmp_path / "albumRatings.jsonl"
    bad = {"key": "old album", "rating": 7.5, "songs": {"Song 2": {"rating": "12"}}}
    path.write_text(json.dumps(bad) + "\n", encoding="utf-8")

    store = JsonlRecordStore(path)
    assert store.load() == {}
    records = {"new album": AlbumRecord(key="new album", rating=Rating.numeric(6))}
    store.save(records)

    stored = {obj["key"]: obj for obj in iter_jsonl_objects(path)}
    assert stored["old album"] == bad
    assert set(store.load()) == {"new album"}


def test_saving_a_key_replaces_its_unreadable_line(tmp_path: Path) -> None:
    path = tmp_path / "albumRatings.jsonl"
    path.write_text(json.dumps({"key": "old album", "rating": "great"}) + "\n", encoding="utf-8")

    store = JsonlRecordStore(path)
    store.save({"old album": AlbumRecord(key="old album", rating=Rating.numeric(8))})

    assert store.unreadable() == {}
    assert store.load()["old album"].rating == Rating.numeric(8)


def test_legacy_values_load() -> None:
    raw = {
        "rating": "S",
        "avgSong": 6,
        "skips": "2",
        "songs": {"Song 1": {"rating": "7"}, "Song 2": {"rating": "I"}, "Song 3": {"rating": ""}},
        "artist": "",
        "releaseDate": "",
        "spotifyUrl": "ignored",
    }
    record = record_from_raw(raw, key="  Old Entry ")
    assert record.key == "old entry"
    assert record.rating == Rating.skip()
    assert record.skips == 2
    assert record.songs == {"Song 1": Rating.numeric(7), "Song 2": Rating.interlude()}
    assert record.artist is None
    assert record.release_date is None
    assert record.spotify_url is None


def test_memory_store_round_trip() -> None:
    store = MemoryRecordStore()
    record = _full_record()
    store.save({"blonde": record})
    loaded = store.load()
    assert loaded == {"blonde": record}
    assert loaded["blonde"] is not record


def test_preferences_default_and_persist(tmp_path: Path) -> None:
    path = tmp_path / "albumRatings.preferences.json"
    prefs = JsonPreferenceStore(path)
    assert prefs.load_sort_option() is SortOption.RATING_DESC

    prefs.save_sort_option(SortOption.GENRE_ASC)
    assert JsonPreferenceStore(path).load_sort_option() is SortOption.GENRE_ASC
    assert json.loads(path.read_text(encoding="utf-8")) == {"sortOption": "genreAsc"}


def test_unknown_preference_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({"sortOption": "byVibes"}), encoding="utf-8")
    assert JsonPreferenceStore(path).load_sort_option() is SortOption.RATING_DESC

    path.write_text("{broken", encoding="utf-8")
    assert JsonPreferenceStore(path).load_sort_option() is SortOption.RATING_DESC
