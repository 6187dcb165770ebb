# album_ratings/io/jsonl.py

"""Low-level JSONL read/write helpers."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def iter_jsonl_objects(
    path: Path,
    *,
    log_errors: bool = True,
) -> Iterator[dict[str, Any]]:
    """Iterate over JSON objects, one per line. Skips empty lines and invalid JSON."""
    if not path.exists():
        return

    with path.open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                if log_errors:
                    logger.warning(
                        "Skipping invalid JSON line %d in %s: %s",
                        line_number,
                        path,
                        exc,
                    )
                continue
            if isinstance(obj, dict):
                yield obj


def load_jsonl_as_map(
    path: Path,
    key_field: str = "key",
    *,
    log_errors: bool = True,
) -> dict[str, dict[str, Any]]:
    """Load JSONL into key-to-dict mapping. Later entries overwrite earlier."""
    result: dict[str, dict[str, Any]] = {}
    for obj in iter_jsonl_objects(path, log_errors=log_errors):
        val = obj.get(key_field)
        if isinstance(val, str) and val:
            result[val] = obj
        elif log_errors:
            logger.warning("Skipping object without %r in %s.", key_field, path)
    return result


def write_jsonl(path: Path, objects: Iterable[dict[str, Any]]) -> None:
    """Write objects to a JSONL file, one per line.

    Goes through a sibling temp file and a rename, so the collection on disk
    is always either the old one or the new one.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        for obj in objects:
            f.write(json.dumps(obj, ensure_ascii=False) + "\n")
    tmp_path.replace(path)
