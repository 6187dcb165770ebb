# album_ratings/session/context.py

"""Session-scoped state and the read-modify-write operations on the collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from album_ratings.analysis.sorting import Listing, Page, build_listing, paginate
from album_ratings.analysis.stats import (
    ArtistSummary,
    GroupStats,
    artist_leaderboard,
    decade_stats,
    genre_breakdown,
    top_decades,
    top_genres,
)
from album_ratings.config import Settings
from album_ratings.domain.models import AlbumRecord, SortOption
from album_ratings.io.ratings_jsonl import (
    JsonlRecordStore,
    JsonPreferenceStore,
    PreferenceStore,
    RecordStore,
)
from album_ratings.scoring.engine import RatingInput, build_record
from album_ratings.search.resolver import Resolution, resolve
from album_ratings.text.normalize import display_case, normalize_key

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RatingSession:
    """One user's view of the ratings collection.

    Every operation loads a fresh snapshot from ``store``; writes replace the
    whole collection. Paging and sorting state lives here rather than in
    module globals.
    """

    store: RecordStore
    preferences: PreferenceStore
    page_size: int = 5
    artists_per_page: int = 5
    max_distance: int = 3
    sort_option: SortOption = field(init=False)
    current_page: int = field(default=1, init=False)
    artist_page: int = field(default=1, init=False)
    editing: str | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.sort_option = self.preferences.load_sort_option()

    @classmethod
    def from_settings(cls, settings: Settings) -> RatingSession:
        return cls(
            store=JsonlRecordStore(settings.records_path),
            preferences=JsonPreferenceStore(settings.preferences_path),
            page_size=settings.page_size,
            artists_per_page=settings.artists_per_page,
            max_distance=settings.max_distance,
        )

    @property
    def edit_mode(self) -> bool:
        return self.editing is not None

    # -- records -----------------------------------------------------------

    def records(self) -> dict[str, AlbumRecord]:
        return self.store.load()

    def get(self, key: str) -> AlbumRecord | None:
        return self.records().get(normalize_key(key))

    def rate(self, name: str, data: RatingInput) -> AlbumRecord:
        """Score and save an album, replacing any record under the same key.

        Validation happens before the collection is loaded, so a bad input
        never reaches storage.
        """
        record = build_record(name, data)
        records = self.records()
        replaced = record.key in records
        records[record.key] = record
        self.store.save(records)
        self.editing = None
        logger.info(
            "%s rating for %r: %s.",
            "Updated" if replaced else "Saved",
            record.key,
            record.rating,
        )
        return record

    def delete(self, key: str) -> bool:
        """Remove a record. Returns False if there was nothing to remove."""
        key = normalize_key(key)
        records = self.records()
        if key not in records:
            logger.debug("Nothing to delete for %r.", key)
            return False
        del records[key]
        self.store.save(records)
        if self.editing == key:
            self.editing = None
        logger.info("Deleted rating for %r.", key)
        return True

    def begin_edit(self, key: str) -> AlbumRecord | None:
        record = self.get(key)
        self.editing = record.key if record is not None else None
        return record

    def cancel_edit(self) -> None:
        self.editing = None

    def suggestions(self) -> list[str]:
        """Display names of every saved album, for autocompletion."""
        return sorted(
            record.display_name or display_case(key)
            for key, record in self.records().items()
        )

    # -- views -------------------------------------------------------------

    def listing(
        self,
        sort_option: SortOption | None = None,
        page: int | None = None,
    ) -> Listing:
        """Build the ratings listing and remember the sort option and page.

        Changing the sort option without naming a page goes back to page 1.
        """
        if sort_option is not None:
            sort_option = SortOption(sort_option)
            if sort_option is not self.sort_option:
                self.sort_option = sort_option
                self.current_page = 1
            self.preferences.save_sort_option(sort_option)
        if page is not None:
            self.current_page = page
        return build_listing(
            self.records(),
            self.sort_option,
            page_number=self.current_page,
            page_size=self.page_size,
        )

    def search(self, text: str) -> Resolution:
        return resolve(text, self.records(), max_distance=self.max_distance)

    def decades(self) -> dict[str, GroupStats]:
        return decade_stats(self.records())

    def top_decades(self, n: int = 3) -> list[GroupStats]:
        return top_decades(self.records(), n)

    def genres(self) -> list[GroupStats]:
        return genre_breakdown(self.records())

    def top_genres(self, n: int = 3) -> list[GroupStats]:
        return top_genres(self.records(), n)

    def artists(self, page: int | None = None) -> Page[ArtistSummary]:
        if page is not None:
            self.artist_page = page
        return paginate(
            artist_leaderboard(self.records()),
            self.artists_per_page,
            self.artist_page,
        )
