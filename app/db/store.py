"""JSON-file collections that back users, sessions and timers.

Every collection lives in a single ``<name>.json`` document and is always
loaded and saved as a whole. There is no partial update or query support,
so every mutation is a read-modify-write cycle. Hold ``store.locked()``
across that cycle so two requests in the same process cannot overwrite
each other's changes.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from ..core.errors import StorageError

logger = logging.getLogger(__name__)

USERS = "users"
TIMERS = "timers"
SESSIONS = "sessions"


class RecordStore:
    """One named collection persisted as a JSON document."""

    def __init__(self, directory: str | Path, name: str, initial: Any = None) -> None:
        self.name = name
        self.directory = Path(directory)
        self.path = self.directory / f"{name}.json"
        self.initial = [] if initial is None else initial
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"RecordStore(name={self.name!r}, path={str(self.path)!r})"

    @contextmanager
    def locked(self) -> Iterator["RecordStore"]:
        with self._lock:
            yield self

    def _ensure(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                logger.info(
                    "store.seeded",
                    extra={"extra_data": {"collection": self.name, "path": str(self.path)}},
                )
                self._dump(self.initial)
        except OSError as exc:
            raise StorageError(f"Cannot prepare collection '{self.name}'") from exc

    def read(self) -> Any:
        """Return the whole collection, creating it from the seed value when missing."""

        with self._lock:
            self._ensure()
            try:
                raw = self.path.read_text(encoding="utf-8")
            except OSError as exc:
                raise StorageError(f"Cannot read collection '{self.name}'") from exc
            try:
                return json.loads(raw)
            except json.JSONDecodeError as exc:
                raise StorageError(f"Collection '{self.name}' is not valid JSON") from exc

    def write(self, value: Any) -> None:
        """Replace the whole collection with ``value``."""

        with self._lock:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                self._dump(value)
            except (OSError, TypeError, ValueError) as exc:
                raise StorageError(f"Cannot write collection '{self.name}'") from exc

    def _dump(self, value: Any) -> None:
        # Write next to the target and swap it in so readers never see a
        # half-written document.
        payload = json.dumps(value, indent=2, ensure_ascii=False)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.name}.", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise


def build_stores(directory: str | Path) -> dict[str, RecordStore]:
    """Create the three collections the app relies on, keyed by name."""

    return {
        USERS: RecordStore(directory, USERS, []),
        TIMERS: RecordStore(directory, TIMERS, []),
        SESSIONS: RecordStore(directory, SESSIONS, {}),
    }


__all__ = ["RecordStore", "build_stores", "USERS", "TIMERS", "SESSIONS"]
