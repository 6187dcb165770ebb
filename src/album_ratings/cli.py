# src/album_ratings/cli.py

from __future__ import annotations

import argparse
import logging
import sys

from album_ratings.analysis.sorting import ELLIPSIS, Listing
from album_ratings.analysis.stats import rating_tier
from album_ratings.config import load_settings
from album_ratings.domain.errors import ValidationError
from album_ratings.domain.models import AlbumRecord, RatingToken, SortOption
from album_ratings.scoring.engine import RatingInput
from album_ratings.search.resolver import CandidateList, ExactMatch
from album_ratings.session.context import RatingSession
from album_ratings.text.normalize import capitalize_first, display_case, format_date

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the album-ratings CLI."""
    args = _build_arg_parser().parse_args(argv)

    _configure_logging(verbose=args.verbose)

    session = RatingSession.from_settings(load_settings())

    try:
        if args.command == "rate":
            _cmd_rate(session, args)
        elif args.command == "show":
            _cmd_show(session, args.name)
        elif args.command == "list":
            _cmd_list(session, sort_option=args.sort, page=args.page)
        elif args.command == "delete":
            _cmd_delete(session, args.name)
        elif args.command == "stats":
            _cmd_stats(session, view=args.view, page=args.page)
        elif args.command == "suggest":
            for name in session.suggestions():
                print(name)
        else:
            msg = f"Unknown command: {args.command}"
            raise ValueError(msg)
    except ValidationError as exc:
        for problem in exc.problems:
            logger.error("%s", problem)
        sys.exit(2)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Exiting.")
        sys.exit(1)


def _song_entry(text: str) -> tuple[str, str]:
    label, sep, value = text.rpartition("=")
    if not sep or not label.strip():
        msg = f"Expected LABEL=RATING, got {text!r}."
        raise argparse.ArgumentTypeError(msg)
    return label.strip(), value.strip()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="album-ratings",
        description="Rate albums and browse, rank and search your ratings.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Sub-command to run.",
    )

    # rate: create or overwrite a rating
    rate_parser = subparsers.add_parser("rate", help="Rate an album.")
    rate_parser.add_argument("name", help="Album name.")
    rate_parser.add_argument("--avg-song", type=float, help="Average song quality (1-10).")
    rate_parser.add_argument(
        "--song",
        type=_song_entry,
        action="append",
        default=[],
        metavar="LABEL=RATING",
        help="Rate one song (1-10, S for skip, I for interlude). Repeatable.",
    )
    rate_parser.add_argument("--lyricism", type=float, help="Lyricism (1-10).")
    rate_parser.add_argument("--instrumentation", type=float, help="Instrumentation (1-10).")
    rate_parser.add_argument("--vibe", type=float, help="Vibe (1-10).")
    rate_parser.add_argument("--skips", type=int, default=0, help="Skipped songs (default: %(default)s).")
    rate_parser.add_argument("--artist")
    rate_parser.add_argument("--genre")
    rate_parser.add_argument("--release-date", help="Release date as YYYY-MM-DD.")
    rate_parser.add_argument("--cover", help="Album cover URL.")
    rate_parser.add_argument("--spotify-url", help="Spotify album URL.")
    rate_parser.add_argument(
        "--exempt",
        choices=[t.value for t in RatingToken],
        help="Save the album as Skip or Interlude instead of scoring it.",
    )

    show_parser = subparsers.add_parser("show", help="Find an album and show its rating.")
    show_parser.add_argument("name", help="Album name, artist or acronym.")

    list_parser = subparsers.add_parser("list", help="List all ratings.")
    list_parser.add_argument(
        "--sort",
        choices=[o.value for o in SortOption],
        help="Sort order (default: last used).",
    )
    list_parser.add_argument("--page", type=int, default=1, help="Page number (default: %(default)s).")

    delete_parser = subparsers.add_parser("delete", help="Delete a rating.")
    delete_parser.add_argument("name", help="Album name.")

    stats_parser = subparsers.add_parser("stats", help="Show rating statistics.")
    stats_parser.add_argument("view", choices=["decades", "genres", "artists"])
    stats_parser.add_argument("--page", type=int, default=1, help="Artist page (default: %(default)s).")

    subparsers.add_parser("suggest", help="Print every saved album name.")

    return parser


def _configure_logging(*, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _print_record(record: AlbumRecord) -> None:
    name = record.display_name or display_case(record.key)
    tier = rating_tier(record.rating.value if record.rating.is_numeric else record.rating.token)
    print(f"{name}: {record.rating} ({tier})")
    details = [
        record.artist or "",
        capitalize_first(record.genre),
        format_date(record.release_date),
    ]
    if any(details):
        print("  " + " • ".join(details))
    if record.rating.is_numeric:
        print(
            f"  avg song {record.avg_song}, lyricism {record.lyricism}, "
            f"instrumentation {record.instrumentation}, vibe {record.vibe}, "
            f"skips {record.skips}"
        )
    for label, song in record.songs.items():
        print(f"  - {label}: {song.to_raw()}")
    if record.spotify_album_id:
        print(f"  https://open.spotify.com/album/{record.spotify_album_id}")


def _cmd_rate(session: RatingSession, args: argparse.Namespace) -> None:
    data = RatingInput(
        avg_song=args.avg_song,
        lyricism=args.lyricism,
        instrumentation=args.instrumentation,
        vibe=args.vibe,
        skips=args.skips,
        songs=dict(args.song),
        artist=args.artist,
        genre=args.genre,
        release_date=args.release_date,
        cover=args.cover,
        spotify_url=args.spotify_url,
        exempt=RatingToken(args.exempt) if args.exempt else None,
    )
    record = session.rate(args.name, data)
    _print_record(record)


def _cmd_show(session: RatingSession, name: str) -> None:
    result = session.search(name)
    if isinstance(result, ExactMatch):
        _print_record(result.record)
    elif isinstance(result, CandidateList):
        print(f"No album named {result.create_name!r}. Did you mean:")
        for key in dict.fromkeys(
            result.album_matches + result.artist_matches + result.acronym_matches
        ):
            print(f"  {display_case(key)}")
        print(f"Or rate it as new: album-ratings rate {result.create_name!r} ...")
    else:
        print(f"No rating for {result.display_name!r} yet.")
        print(f"Rate it with: album-ratings rate {result.display_name!r} ...")


def _print_listing(listing: Listing) -> None:
    for row in listing.page.items:
        name = row.record.display_name or display_case(row.key)
        badge = ""
        if row.tag:
            badge = f"  [{'🏆🏆' if row.best_overall else '🏆'} {row.tag}]"
        print(f"{name:<40} {row.record.rating}{badge}")
    if listing.page.total_pages > 1:
        buttons = " ".join(
            b if b == ELLIPSIS else (f"[{b}]" if b == listing.page.number else str(b))
            for b in listing.buttons
        )
        print(f"Page {listing.page.number}/{listing.page.total_pages}: {buttons}")


def _cmd_list(session: RatingSession, *, sort_option: str | None, page: int) -> None:
    listing = session.listing(
        SortOption(sort_option) if sort_option else session.sort_option,
        page,
    )
    if not listing.page.total_items:
        print("No ratings saved yet.")
        return
    _print_listing(listing)


def _cmd_delete(session: RatingSession, name: str) -> None:
    if session.delete(name):
        print("Rating deleted.")
    else:
        print(f"No rating for {display_case(name.strip())!r}.")


def _cmd_stats(session: RatingSession, *, view: str, page: int) -> None:
    if view == "decades":
        for label, stats in session.decades().items():
            print(f"{label}: {stats.count} albums, avg {stats.avg_rating}")
        podium = session.top_decades()
        if podium:
            print("Top decades: " + ", ".join(s.label for s in podium))
    elif view == "genres":
        for stats in session.genres():
            print(f"{stats.label}: {stats.count} albums, avg {stats.avg_rating}")
        podium = session.top_genres()
        if podium:
            print("Top genres: " + ", ".join(s.label for s in podium))
    else:
        artists = session.artists(page)
        for summary in artists.items:
            print(f"{summary.artist} (avg {summary.avg_rating})")
            for album in summary.albums:
                year = f" ({album.release_date[:4]})" if album.release_date else ""
                print(f"  {album.name}{year}: {album.rating}")
        if artists.total_pages > 1:
            print(f"Page {artists.number}/{artists.total_pages}")


if __name__ == "__main__":
    # python -m album_ratings.cli list --sort genreAsc --page 2
    main()
