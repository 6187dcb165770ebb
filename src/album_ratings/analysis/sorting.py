# album_ratings/analysis/sorting.py

"""Ordering, paging and best-in-group tagging for the ratings listing."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Generic, TypeVar, Union

from album_ratings.domain.errors import ValidationError
from album_ratings.domain.models import AlbumRecord, SortOption
from album_ratings.text.normalize import normalize_genre, parse_release_date, parse_year

T = TypeVar("T")

Entry = tuple[str, AlbumRecord]
PageButton = Union[int, str]

ELLIPSIS = "…"
MAX_VISIBLE_PAGES = 5
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_DECADE = "Unknown Decade"


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


def release_sort_date(release_date: str | None) -> date:
    """Full date if given, else January 1st of a bare year, else date.min."""
    parsed = parse_release_date(release_date)
    if parsed is not None:
        return parsed
    year = parse_year(release_date)
    return date(year, 1, 1) if year is not None else date.min


def _release_sort_key(record: AlbumRecord) -> date:
    return release_sort_date(record.release_date)


def _sort_by_rating(entries: list[Entry], descending: bool) -> list[Entry]:
    numeric = [e for e in entries if e[1].rating.is_numeric]
    # Sentinel-rated albums have no score to order by; they trail in key order.
    sentinel = sorted(
        (e for e in entries if not e[1].rating.is_numeric),
        key=lambda e: e[0].casefold(),
    )
    sign = -1 if descending else 1
    numeric.sort(key=lambda e: (sign * e[1].rating.value, e[0].casefold()))
    return numeric + sentinel


def sort_records(
    records: Mapping[str, AlbumRecord],
    sort_option: SortOption,
) -> list[Entry]:
    """Return (key, record) pairs ordered by sort_option.

    Rating sorts break ties by case-insensitive key. Other sorts are stable
    with respect to the mapping's iteration order. Missing artist or genre
    sorts as "", missing or unparseable release dates sort as earliest.
    """
    sort_option = SortOption(sort_option)
    entries = list(records.items())
    field_name = sort_option.field
    descending = sort_option.descending

    if field_name == "rating":
        return _sort_by_rating(entries, descending)
    if field_name == "artist":
        return sorted(
            entries, key=lambda e: (e[1].artist or "").casefold(), reverse=descending
        )
    if field_name == "genre":
        return sorted(
            entries, key=lambda e: (e[1].genre or "").casefold(), reverse=descending
        )
    return sorted(entries, key=lambda e: _release_sort_key(e[1]), reverse=descending)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


@dataclass
class Page(Generic[T]):
    """One window of an ordered sequence."""

    items: list[T]
    number: int
    size: int
    total_items: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size)


def paginate(items: Sequence[T], page_size: int, page_number: int) -> Page[T]:
    """Slice out 1-based page page_number. Pages past the end are empty."""
    if page_size < 1:
        msg = f"page_size must be >= 1, got {page_size}."
        raise ValidationError(msg)
    if page_number < 1:
        msg = f"page_number must be >= 1, got {page_number}."
        raise ValidationError(msg)

    start = (page_number - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        number=page_number,
        size=page_size,
        total_items=len(items),
        total_pages=total_pages(len(items), page_size),
    )


def page_buttons(current: int, total: int) -> list[PageButton]:
    """Page numbers to show in a pager, with "…" standing in for skipped runs.

    First and last page are always shown, plus the pages either side of the
    current one. With five pages or fewer every page is listed.
    """
    if total <= MAX_VISIBLE_PAGES:
        return list(range(1, total + 1))

    buttons: list[PageButton] = [1]
    if current > 3:
        buttons.append(ELLIPSIS)
    start = max(2, current - 1)
    end = min(total - 1, current + 1)
    buttons.extend(range(start, end + 1))
    if current < total - 2:
        buttons.append(ELLIPSIS)
    buttons.append(total)
    return buttons


# ---------------------------------------------------------------------------
# Best-in-group tagging
# ---------------------------------------------------------------------------


def decade_label(release_date: str | None) -> str | None:
    parsed = parse_release_date(release_date)
    year = parsed.year if parsed is not None else parse_year(release_date)
    if year is None:
        return None
    return f"{year // 10 * 10}s"


def _genre_group(record: AlbumRecord) -> str:
    return normalize_genre(record.genre)


def _artist_group(record: AlbumRecord) -> str:
    return record.artist or UNKNOWN_ARTIST


def _decade_group(record: AlbumRecord) -> str:
    return decade_label(record.release_date) or UNKNOWN_DECADE


def group_key_for(
    sort_option: SortOption,
) -> tuple[Callable[[AlbumRecord], str] | None, str]:
    """Grouping function and tag preposition for a sort option.

    Rating sorts have no grouping.
    """
    field_name = SortOption(sort_option).field
    if field_name == "genre":
        return _genre_group, "in"
    if field_name == "artist":
        return _artist_group, "by"
    if field_name == "date":
        return _decade_group, "in"
    return None, ""


@dataclass(slots=True)
class BestTags:
    """Best-rated record per group and overall.

    Ties go to the lowest record key, whatever order the records arrive in.
    """

    best_by_group: dict[str, str] = field(default_factory=dict)
    best_overall: str | None = None
    group_label: str = ""
    group_of: dict[str, str] = field(default_factory=dict)

    def is_best_in_group(self, key: str) -> bool:
        group = self.group_of.get(key)
        return group is not None and self.best_by_group.get(group) == key

    def is_best_overall(self, key: str) -> bool:
        return self.best_overall == key

    def tag_for(self, key: str) -> str | None:
        """Display text for key's badge, or None when it is not a group best."""
        if not self.is_best_in_group(key):
            return None
        return f"Best rated {self.group_label} {self.group_of[key]}"


def _beats(rating: float, key: str, best: tuple[float, str] | None) -> bool:
    if best is None:
        return True
    best_rating, best_key = best
    return rating > best_rating or (rating == best_rating and key < best_key)


def best_tags(entries: Sequence[Entry], sort_option: SortOption) -> BestTags:
    group_fn, label = group_key_for(sort_option)
    tags = BestTags(group_label=label)

    best_in: dict[str, tuple[float, str]] = {}
    overall: tuple[float, str] | None = None

    for key, record in entries:
        rating = record.rating.value
        if rating is None:
            continue
        if group_fn is not None:
            group = group_fn(record)
            tags.group_of[key] = group
            if _beats(rating, key, best_in.get(group)):
                best_in[group] = (rating, key)
        if _beats(rating, key, overall):
            overall = (rating, key)

    tags.best_by_group = {group: key for group, (_, key) in best_in.items()}
    tags.best_overall = overall[1] if overall else None
    return tags


# ---------------------------------------------------------------------------
# Listing view
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ListingRow:
    key: str
    record: AlbumRecord
    tag: str | None
    best_overall: bool


@dataclass(slots=True)
class Listing:
    """A page of the ratings listing, ready for presentation."""

    sort_option: SortOption
    page: Page[ListingRow]
    buttons: list[PageButton]


def build_listing(
    records: Mapping[str, AlbumRecord],
    sort_option: SortOption,
    page_number: int = 1,
    page_size: int = 5,
) -> Listing:
    ordered = sort_records(records, sort_option)
    tags = best_tags(ordered, sort_option)
    window = paginate(ordered, page_size, page_number)
    rows = [
        ListingRow(
            key=key,
            record=record,
            tag=tags.tag_for(key),
            best_overall=tags.is_best_overall(key),
        )
        for key, record in window.items
    ]
    page = Page(
        items=rows,
        number=window.number,
        size=window.size,
        total_items=window.total_items,
        total_pages=window.total_pages,
    )
    return Listing(
        sort_option=SortOption(sort_option),
        page=page,
        buttons=page_buttons(page_number, window.total_pages),
    )
