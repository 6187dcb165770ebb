# album_ratings/config.py

"""Shared configuration and environment setup."""

from __future__ import annotations

from dataclasses import dataclass
from os import getenv
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=True)

DEFAULT_NAMESPACE = "albumRatings"
DEFAULT_PAGE_SIZE = 5
DEFAULT_ARTISTS_PER_PAGE = 5
DEFAULT_MAX_DISTANCE = 3


def get_project_root() -> Path:
    """Return the project root directory.

    Prefers ALBUM_RATINGS_PROJECT_ROOT env var. Falls back to current working directory.
    """
    if root := getenv("ALBUM_RATINGS_PROJECT_ROOT"):
        return Path(root).resolve()
    return Path.cwd()


@dataclass(slots=True, frozen=True)
class Settings:
    """Runtime settings resolved from the environment."""

    data_dir: Path
    namespace: str = DEFAULT_NAMESPACE
    page_size: int = DEFAULT_PAGE_SIZE
    artists_per_page: int = DEFAULT_ARTISTS_PER_PAGE
    max_distance: int = DEFAULT_MAX_DISTANCE

    @property
    def records_path(self) -> Path:
        return self.data_dir / f"{self.namespace}.jsonl"

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / f"{self.namespace}.preferences.json"


def _int_from_env(name: str, default: int, *, minimum: int) -> int:
    raw = getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        msg = f"{name} must be an integer, got {raw!r}."
        raise ValueError(msg) from exc
    if value < minimum:
        msg = f"{name} must be >= {minimum}, got {value}."
        raise ValueError(msg)
    return value


def load_settings() -> Settings:
    """Build Settings from ALBUM_RATINGS_* environment variables."""
    data_dir = getenv("ALBUM_RATINGS_DATA_DIR")
    return Settings(
        data_dir=Path(data_dir) if data_dir else get_project_root() / "data",
        namespace=getenv("ALBUM_RATINGS_NAMESPACE") or DEFAULT_NAMESPACE,
        page_size=_int_from_env("ALBUM_RATINGS_PAGE_SIZE", DEFAULT_PAGE_SIZE, minimum=1),
        artists_per_page=_int_from_env(
            "ALBUM_RATINGS_ARTISTS_PER_PAGE", DEFAULT_ARTISTS_PER_PAGE, minimum=1
        ),
        max_distance=_int_from_env(
            "ALBUM_RATINGS_MAX_DISTANCE", DEFAULT_MAX_DISTANCE, minimum=0
        ),
    )
