"""
BaseForge Kernel: Snapshot Storage

A key-value blob store. Each key holds one opaque string (the serialized
workspace snapshot). Writes overwrite; there is no history.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]{1,128}$")


class SnapshotStorage:
    """
    Abstract storage interface.
    Implement with a file for local sessions, or in-memory for tests.
    """

    def get(self, key: str) -> str | None:
        """Fetch the blob stored under `key`. Returns None if not found."""
        raise NotImplementedError

    def put(self, key: str, blob: str) -> None:
        """Store `blob` under `key`, replacing anything already there."""
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(SnapshotStorage):
    """In-memory storage for testing."""

    def __init__(self) -> None:
        self.blobs: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.blobs.get(key)

    def put(self, key: str, blob: str) -> None:
        self.blobs[key] = blob

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)


class FileStorage(SnapshotStorage):
    """One `<key>.json` file per key inside `directory`."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def put(self, key: str, blob: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(blob, encoding="utf-8")
            os.replace(tmp, path)
        finally:
            tmp.unlink(missing_ok=True)
        logger.debug("storage: wrote %d bytes to %s", len(blob), path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
