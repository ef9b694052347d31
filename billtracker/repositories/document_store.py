"""
Document Store Handles.

A document store keeps named JSON collections.  Record stores receive one
by injection instead of reaching for files or connections themselves, so
tests can substitute an in-memory fake.

Two implementations:

- :class:`JsonFileDocumentStore`: one ``<name>.json`` file per document
  under a data directory (the local file backend).
- :class:`SqliteDocumentStore`: rows of the ``kv_cache`` table (the
  offline cache mirror).
"""

from __future__ import annotations

import json
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

from billtracker.database import DatabaseManager
from billtracker.logger import StructuredLogger
from billtracker.utils.string_helpers import JsonValue


class DocumentStore(ABC):
    """Named JSON documents with whole-document read and write."""

    @abstractmethod
    def read(self, name: str, default: JsonValue) -> JsonValue:
        """Return the parsed document, or *default* when absent or unreadable.

        Never raises for a missing or malformed document.
        """

    @abstractmethod
    def write(self, name: str, data: JsonValue) -> None:
        """Serialize *data* and overwrite the document.

        Storage failures propagate to the caller.
        """

    @abstractmethod
    def names(self) -> list[str]:
        """Return the names of every stored document."""


class JsonFileDocumentStore(DocumentStore):
    """JSON files under *root*, one per document.

    Writes are plain overwrites (not crash-atomic).  :meth:`ensure_root`
    must have run before the first write.
    """

    SUFFIX: str = ".json"

    def __init__(self, root: Path, logger: StructuredLogger) -> None:
        self._root = root
        self._logger = logger

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> None:
        """Create the data directory if it does not exist."""
        self._root.mkdir(parents=True, exist_ok=True)

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def read(self, name: str, default: JsonValue) -> JsonValue:
        path = self._path(name)
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            return default
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            self._logger.warning(
                "Unreadable document %s, using default: %s", path, exc
            )
            return default

    def write(self, name: str, data: JsonValue) -> None:
        path = self._path(name)
        try:
            with path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, ensure_ascii=False)
        except OSError as exc:
            self._logger.error("Failed to write document %s: %s", path, exc)
            raise

    def names(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(p.stem for p in self._root.glob(f"*{self.SUFFIX}"))

    def _path(self, name: str) -> Path:
        return self._root / f"{name}{self.SUFFIX}"


class SqliteDocumentStore(DocumentStore):
    """Documents kept as rows of the ``kv_cache`` table.

    The table is created by :func:`billtracker.schema.initialize_schema`.
    """

    TABLE: str = "kv_cache"

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        self._db = db
        self._logger = logger

    def read(self, name: str, default: JsonValue) -> JsonValue:
        try:
            row = self._db.sqlite.execute(
                f"SELECT value FROM {self.TABLE} WHERE key = ?", (name,)
            ).fetchone()
        except sqlite3.Error as exc:
            self._logger.warning("Failed to read %s[%s]: %s", self.TABLE, name, exc)
            return default

        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as exc:
            self._logger.warning(
                "Malformed cache entry %s, using default: %s", name, exc
            )
            return default

    def write(self, name: str, data: JsonValue) -> None:
        payload = json.dumps(data, ensure_ascii=False)
        with self._db.write_lock:
            self._db.sqlite.execute(
                f"""
                INSERT INTO {self.TABLE} (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value      = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (name, payload),
            )
            self._db.sqlite.commit()

    def names(self) -> list[str]:
        try:
            rows = self._db.sqlite.execute(
                f"SELECT key FROM {self.TABLE} ORDER BY key"
            ).fetchall()
        except sqlite3.Error as exc:
            self._logger.warning("Failed to list %s keys: %s", self.TABLE, exc)
            return []
        return [row["key"] for row in rows]
