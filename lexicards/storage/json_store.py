"""
JSON file persistence helpers.

Every data file is read whole, modified in memory and written back. Writes go
to a temporary file in the same directory followed by ``os.replace`` so a
crash never leaves a half-written file behind.
"""
from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

from lexicards.storage.errors import StorageError

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


class JsonFileStore:
    """A single JSON document on disk."""

    def __init__(self, path: Path, default: Any):
        self.path = Path(path)
        self.default = default

    def read(self) -> Any:
        """Load the document, returning a copy of the default when the file is missing."""
        if not self.path.exists():
            return json.loads(json.dumps(self.default))

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt data file {self.path}: {e}")
            raise StorageError(f"Corrupt data file: {self.path.name}") from e
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

    def write(self, data: Any) -> None:
        """Atomically replace the document."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    @contextmanager
    def modify(self) -> Iterator[Any]:
        """
        Read-modify-write under a per-path lock.

        The yielded object is written back when the block exits cleanly.
        """
        with _lock_for(self.path):
            data = self.read()
            yield data
            self.write(data)
