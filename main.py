"""
Bill Tracker API Server Entry Point.

Bootstraps the entire dependency graph via constructor injection,
initialises the local SQLite cache schema and the data directory, then
serves the HTTP API with uvicorn.  Every subsystem is wired here.

Usage::

    python main.py
"""

from __future__ import annotations

import atexit
import sys
import traceback

import uvicorn

from billtracker.api import create_app
from billtracker.config import get_config
from billtracker.database import DatabaseManager
from billtracker.logger import StructuredLogger, get_logger
from billtracker.schema import initialize_schema
from billtracker.services import create_services


def main() -> None:
    """Application entry point: wire dependencies and serve the API."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting Bill Tracker...")

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Database Manager (Supabase optional, SQLite cache always)
    # ------------------------------------------------------------------
    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        sqlite_path=config.CACHE_DB_PATH,
        logger=StructuredLogger(name="database"),
    )
    # DatabaseManager.close() is idempotent; this covers unclean exits.
    atexit.register(db.close)

    # ------------------------------------------------------------------
    # 3. SQLite cache schema (idempotent)
    # ------------------------------------------------------------------
    initialize_schema(db.sqlite, StructuredLogger(name="schema"))

    # ------------------------------------------------------------------
    # 4. Service Container (stores + services, single composition root)
    # ------------------------------------------------------------------
    services = create_services(db=db, config=config)

    # ------------------------------------------------------------------
    # 5. Storage bootstrap: data layout and default accounts
    # ------------------------------------------------------------------
    services["bootstrap_service"].initialize()

    # ------------------------------------------------------------------
    # 6. Serve (blocks until shutdown)
    # ------------------------------------------------------------------
    app = create_app(services=services, config=config, online=db.is_online)
    logger.info("Serving API on %s:%d", config.API_HOST, config.API_PORT)
    try:
        uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
    finally:
        db.close()
        logger.info("Bill Tracker shut down.")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        sys.stderr.write(f"FATAL: {type(exc).__name__}: {exc}\n{detail}")
        sys.exit(1)
