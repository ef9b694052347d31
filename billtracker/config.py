"""
Application Configuration.

Pydantic Settings model for the Bill Tracker backend.
All configuration is loaded from environment variables and .env files.
Inject an AppConfig instance via dependency injection where needed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Supabase (remote relational store) ---
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")
    REMOTE_BILLS_TABLE: str = "bills"
    REMOTE_USERS_TABLE: str = "users"

    # --- Local JSON document store ---
    DATA_DIR: Path = Path("data")
    USERS_DOCUMENT: str = "usuarios"
    BILLS_DOCUMENT: str = "boletos"
    ASSETS_DIR_NAME: str = "pdfs"

    # --- Local key/value cache (offline mirror) ---
    CACHE_DB_PATH: Path = Path("billtracker_cache.db")

    # --- HTTP API ---
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, ge=1)

    # --- Logging ---
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FILE: str = "billtracker.log"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Emit a startup warning when the remote store is not configured.

        Without Supabase credentials every call is served by the local
        JSON documents, mirrored into the key/value cache.
        """
        _log = logging.getLogger("billtracker.config")

        if not self.remote_enabled:
            _log.warning(
                "SUPABASE_URL / SUPABASE_ANON_KEY are empty; the remote store "
                "is disabled and the local JSON documents are authoritative."
            )

        return self

    @property
    def remote_enabled(self) -> bool:
        """``True`` when both Supabase credentials are present."""
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY.get_secret_value())

    @property
    def assets_dir(self) -> Path:
        """Directory holding uploaded attachments."""
        return self.DATA_DIR / self.ASSETS_DIR_NAME


# ---------------------------------------------------------------------------
# Module-level singleton factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` singleton.

    On first call, creates an ``AppConfig`` instance (reading from ``.env``).
    Subsequent calls return the same instance.  Uses a check-lock-check
    pattern so the fast path never touches the lock.

    Prefer direct constructor injection of ``AppConfig`` in new code.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance
