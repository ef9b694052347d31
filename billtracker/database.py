"""
Database Connection Layer.

Owns the two connections the record stores need:

- **Supabase (cloud PostgreSQL)**: the remote relational store holding the
  ``bills`` and ``users`` tables.  Optional: when credentials are missing
  the client is not created and the application runs offline.

- **SQLite (local)**: backs the key/value cache that mirrors remote
  results and serves requests when the remote is unreachable.

This module only manages the raw *connections*; it contains no query
logic.  Data access goes through the repositories.

Usage (dependency injection at app startup)::

    from billtracker.database import DatabaseManager
    from billtracker.logger import StructuredLogger

    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        sqlite_path=config.CACHE_DB_PATH,
        logger=StructuredLogger(name="database"),
    )
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Optional

from supabase import Client as SupabaseClient
from supabase import create_client

from billtracker.logger import StructuredLogger


class DatabaseManager:
    """Manages the Supabase client and the local SQLite cache connection.

    Fully configured at construction time.  When ``supabase_url`` or
    ``supabase_key`` is empty the Supabase client is **not** created; the
    ``supabase`` property then raises ``RuntimeError``, which the remote
    repository catches like any other remote failure.

    Parameters
    ----------
    supabase_url:
        The Supabase project URL.  May be empty to run offline.
    supabase_key:
        The Supabase anonymous key.  May be empty to run offline.
    sqlite_path:
        Filesystem path of the cache database (``":memory:"`` is accepted).
        Parent directories are created when missing.
    logger:
        A ``StructuredLogger`` instance.
    supabase_client:
        Pre-built client, used instead of ``create_client`` when given.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        sqlite_path: Path,
        logger: StructuredLogger,
        supabase_client: Optional[SupabaseClient] = None,
    ) -> None:
        self._logger: StructuredLogger = logger
        self._write_lock: threading.RLock = threading.RLock()

        # --- Supabase (optional) ---
        self._supabase: Optional[SupabaseClient] = supabase_client
        if self._supabase is not None:
            self._logger.info("Supabase client injected.")
        elif supabase_url and supabase_key:
            try:
                self._supabase = create_client(supabase_url, supabase_key)
                self._logger.info("Supabase client initialized.")
            except (ValueError, TypeError) as exc:
                self._logger.warning(
                    "Supabase credential format error: %s. Running in offline mode.",
                    exc,
                )
            except Exception as exc:
                self._logger.error(
                    "Unexpected Supabase initialization failure: %s. "
                    "Running in offline mode.",
                    exc,
                    exc_info=True,
                )
        else:
            self._logger.warning(
                "Supabase credentials not configured, running in offline mode."
            )

        # --- SQLite (always required) ---
        self._sqlite_conn: Optional[sqlite3.Connection] = self._connect_sqlite(
            sqlite_path
        )

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def supabase(self) -> SupabaseClient:
        """Return the initialised Supabase client.

        Raises
        ------
        RuntimeError
            If the client was not initialised (offline mode).
        """
        if self._supabase is None:
            raise RuntimeError(
                "Supabase client is not initialised. "
                "The application is running in offline mode."
            )
        return self._supabase

    @property
    def is_online(self) -> bool:
        """``True`` when the Supabase client is available."""
        return self._supabase is not None

    @property
    def sqlite(self) -> sqlite3.Connection:
        """Return the open SQLite connection."""
        if self._sqlite_conn is None:
            raise RuntimeError("SQLite connection has been closed.")
        return self._sqlite_conn

    @property
    def write_lock(self) -> threading.RLock:
        """Lock guarding use of the shared SQLite connection.

        The API serves sync handlers from a threadpool, so statements
        followed by ``commit()`` run under this lock::

            with db.write_lock:
                db.sqlite.execute("INSERT ...")
                db.sqlite.commit()
        """
        return self._write_lock

    # ------------------------------------------------------------------
    # Lifecycle helpers
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the local SQLite connection.

        Safe to call multiple times; subsequent calls are no-ops.
        """
        with self._write_lock:
            if self._sqlite_conn is not None:
                self._sqlite_conn.close()
                self._sqlite_conn = None
                self._logger.info("SQLite connection closed.")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _connect_sqlite(self, path: Path) -> sqlite3.Connection:
        """Open (or create) the cache database.

        Raises
        ------
        PermissionError
            If the OS denies access to the database file or its directory.
        """
        target = str(path)
        try:
            if target != ":memory:":
                Path(target).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(target, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            self._logger.info("SQLite cache opened at %s", target)
            return conn
        except PermissionError as exc:
            msg = (
                f"Cannot open the local cache database at '{target}'. "
                "The file or its directory may be read-only or locked by "
                "another process."
            )
            self._logger.error(msg)
            raise PermissionError(msg) from exc
