"""
Local snapshot store for the last fetched tasks and projects.

Each collection lives in its own JSON file together with the time it was
written, so the snapshot and its freshness timestamp always change together.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Sequence

from todoist_tui.errors import CacheError
from todoist_tui.providers import Project, Task
from todoist_tui.validate import validate_json

logger = logging.getLogger(__name__)

TASKS = "tasks"
PROJECTS = "projects"

# collection -> (model, item list schema)
COLLECTIONS = {
    TASKS: (Task, "task-list"),
    PROJECTS: (Project, "project-list"),
}


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    if not s:
        return None
    try:
        parsed = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown cache collection: {collection}")


class FileCache:
    """CacheGateway implementation backed by one JSON file per collection."""

    def __init__(self, cache_dir: Path, clock: Callable[[], datetime] = now_utc):
        self._cache_dir = Path(cache_dir)
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def path_for(self, collection: str) -> Path:
        _check_collection(collection)
        return self._cache_dir / f"{collection}.json"

    def _read(self, collection: str) -> dict | None:
        path = self.path_for(collection)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            raise CacheError(f"Failed to read {path}: {e}") from e

    def last_updated(self, collection: str) -> datetime | None:
        """Timestamp of the last successful save, None if missing or unreadable."""
        try:
            data = self._read(collection)
        except CacheError as e:
            logger.warning("%s", e)
            return None
        if not isinstance(data, dict):
            return None
        return _parse_datetime(data.get("updated_at"))

    def is_stale(self, collection: str, max_age: timedelta) -> bool:
        updated_at = self.last_updated(collection)
        if updated_at is None:
            return True
        return self._clock() - updated_at > max_age

    def load(self, collection: str) -> list[Task] | list[Project]:
        """Load a snapshot. A missing file is an empty snapshot, not an error."""
        _check_collection(collection)
        model, schema_name = COLLECTIONS[collection]
        data = self._read(collection)
        if data is None:
            return []

        valid, msg = validate_json(data, "snapshot")
        if valid:
            valid, msg = validate_json(data["items"], schema_name)
        if not valid:
            raise CacheError(f"Invalid {collection} snapshot: {msg}")
        return [model.from_dict(item) for item in data["items"]]

    def save(self, collection: str, items: Sequence[Task] | Sequence[Project]) -> None:
        """Replace the whole snapshot and its timestamp in one rename."""
        path = self.path_for(collection)
        payload = {
            "collection": collection,
            "updated_at": self._clock().isoformat(),
            "items": [item.to_dict() for item in items],
        }
        with self._lock:
            try:
                self._cache_dir.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{collection}.", suffix=".tmp", dir=self._cache_dir
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(payload, f, indent=2)
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as e:
                raise CacheError(f"Failed to write {path}: {e}") from e
        logger.debug("Saved %d %s to cache", len(payload["items"]), collection)
