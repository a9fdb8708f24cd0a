"""Snapshot repository backed by JSON files on local storage."""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from calorie_tracker.errors import PersistenceError
from calorie_tracker.services.persistence import SnapshotRepository


@dataclass
class JsonFileSnapshotRepository(SnapshotRepository):
    """Stores each snapshot as ``<directory>/<key>.json``."""

    directory: Path

    @classmethod
    def create(cls, directory: str | Path) -> "JsonFileSnapshotRepository":
        """Create a repository, making the directory if needed."""
        path = Path(directory).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return cls(directory=path)

    def load(self, key: str) -> dict[str, Any] | None:
        """Return the stored envelope, or None when nothing was saved."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt snapshot file {path}", key=key) from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected snapshot in {path}", key=key)
        return data

    def save(self, key: str, envelope: dict[str, Any]) -> None:
        """Atomically replace the snapshot file."""
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.directory, prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(envelope, handle, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"
