# album_ratings/domain/errors.py

"""Errors reported to callers before any record is touched."""

from __future__ import annotations


class ValidationError(ValueError):
    """Invalid user input. Carries every problem found, not just the first."""

    def __init__(self, problems: list[str] | str) -> None:
        if isinstance(problems, str):
            problems = [problems]
        self.problems: list[str] = list(problems)
        super().__init__("; ".join(self.problems))


class EmptySearchError(ValidationError):
    """Search was requested with blank input."""

    def __init__(self) -> None:
        super().__init__("Please enter an album name.")
