"""Tests for the weighted scoring engine."""

from __future__ import annotations

import pytest

from album_ratings.domain.errors import ValidationError
from album_ratings.domain.models import Rating, RatingToken
from album_ratings.scoring.engine import (
    RatingInput,
    build_record,
    compute_rating,
    summarize_songs,
)


def test_perfect_and_minimum_albums() -> None:
    assert compute_rating(10, 10, 10, 10, 0) == 10.00
    assert compute_rating(1, 1, 1, 1, 0) == 1.00


def test_weighted_formula_rounds_to_two_places() -> None:
    # (8*2 + 7*1.5 + 9*1.5 + 6*1.5) / 6.5 - 0.2 = 7.338...
    assert compute_rating(8, 7, 9, 6, 1) == 7.34


def test_more_skips_never_raise_the_score() -> None:
    previous = compute_rating(9, 8, 7, 9, 0)
    for skips in range(1, 60):
        current = compute_rating(9, 8, 7, 9, skips)
        assert current <= previous
        assert current >= 1.0
        previous = current
    assert compute_rating(9, 8, 7, 9, 500) == 1.0


@pytest.mark.parametrize(
    "components",
    [
        (5.5, 2.25, 9.75, 3.0, 2),
        (1, 10, 1, 10, 0),
        (7.77, 7.77, 7.77, 7.77, 3),
    ],
)
def test_result_is_bounded_and_rounded(components: tuple) -> None:
    result = compute_rating(*components)
    assert 1.0 <= result <= 10.0
    assert result == round(result, 2)


@pytest.mark.parametrize(
    ("components", "bad_field"),
    [
        ((11, 5, 5, 5, 0), "avg_song"),
        ((5, 0, 5, 5, 0), "lyricism"),
        ((5, 5, "7", 5, 0), "instrumentation"),
        ((5, 5, 5, float("nan"), 0), "vibe"),
        ((5, 5, 5, 5, -1), "skips"),
        ((5, 5, 5, 5, 1.5), "skips"),
        ((None, 5, 5, 5, 0), "avg_song"),
    ],
)
def test_invalid_components_are_rejected(components: tuple, bad_field: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        compute_rating(*components)
    assert len(excinfo.value.problems) == 1
    assert excinfo.value.problems[0].startswith(bad_field)


def test_every_problem_is_reported() -> None:
    with pytest.raises(ValidationError) as excinfo:
        compute_rating(0, 11, 5, 5, -2)
    assert len(excinfo.value.problems) == 3


def test_summarize_songs_ignores_interludes_and_counts_skips() -> None:
    summary = summarize_songs({"Song 1": 8, "Song 2": "S", "Song 3": "I", "Song 4": "6"})
    assert summary.average == 7.0
    assert summary.skips == 1
    assert summary.rated == 2
    assert summary.interludes == 1


def test_summarize_songs_without_numbers_has_no_average() -> None:
    summary = summarize_songs({"Intro": "I", "Song 2": "Skip"})
    assert summary.average is None
    assert summary.skips == 1


def test_summarize_songs_rejects_garbage() -> None:
    with pytest.raises(ValidationError, match="Song 2"):
        summarize_songs({"Song 1": "7", "Song 2": "banger"})


def test_build_record_from_aggregate_average() -> None:
    record = build_record(
        "  To Pimp A Butterfly ",
        RatingInput(
            avg_song=9,
            lyricism=10,
            instrumentation=10,
            vibe=9,
            skips=0,
            artist=" Kendrick Lamar ",
            genre="Hip-Hop",
            release_date="2015-03-15",
            spotify_url="",
        ),
    )
    assert record.key == "to pimp a butterfly"
    assert record.display_name == "To Pimp A Butterfly"
    assert record.rating == Rating.numeric(compute_rating(9, 10, 10, 9, 0))
    assert record.artist == "Kendrick Lamar"
    assert record.genre == "Hip-Hop"
    assert record.spotify_url is None
    assert record.songs == {}


def test_build_record_derives_average_and_skips_from_songs() -> None:
    record = build_record(
        "blonde",
        RatingInput(
            lyricism=7,
            instrumentation=7,
            vibe=7,
            skips=5,
            songs={"Song 1": "8", "Song 2": "S", "Song 3": "I"},
        ),
    )
    assert record.avg_song == 8.0
    assert record.skips == 1
    # (8*2 + 7*4.5) / 6.5 - 0.2
    assert record.rating.value == 7.11
    assert record.songs["Song 2"] == Rating.skip()


def test_build_record_refuses_songs_without_numbers() -> None:
    with pytest.raises(ValidationError, match="No average available"):
        build_record(
            "interludes only",
            RatingInput(lyricism=5, instrumentation=5, vibe=5, songs={"Song 1": "I"}),
        )


def test_build_record_refuses_blank_name() -> None:
    with pytest.raises(ValidationError):
        build_record("   ", RatingInput(avg_song=5, lyricism=5, instrumentation=5, vibe=5))


def test_build_record_refuses_missing_components() -> None:
    with pytest.raises(ValidationError) as excinfo:
        build_record("igor", RatingInput(avg_song=8))
    assert len(excinfo.value.problems) == 3


def test_exempt_record_skips_scoring() -> None:
    record = build_record("skit tape", RatingInput(exempt=RatingToken.INTERLUDE))
    assert record.rating == Rating.interlude()
    assert record.rating.is_numeric is False
