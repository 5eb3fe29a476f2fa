"""Shared file handling for the JSON-backed repositories.

Each collection lives in its own file holding a JSON array.  Writes go
to a temporary sibling first and are swapped in with ``os.replace`` so a
reader never sees a half-written file.  A per-file lock serializes the
read-modify-write cycle inside one process.
"""

from __future__ import annotations

import json
import os
import threading
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator

_FILE_LOCKS: dict[Path, threading.RLock] = {}
_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _GUARD:
        lock = _FILE_LOCKS.get(path)
        if lock is None:
            lock = _FILE_LOCKS[path] = threading.RLock()
        return lock


class JsonFileStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path).resolve()
        self._lock = _lock_for(self._file_path)
        self._ensure_file()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    # --- File helpers ---------------------------------------------------------

    def load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist_raw(self, records: list[dict]) -> None:
        tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        with self._lock:
            tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


# --- Value helpers ------------------------------------------------------------


def parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
