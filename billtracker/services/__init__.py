"""
Business Logic Services Package.

Services depend on the repository layer for data access.  The
``create_services()`` factory wires every store and service together,
returning a typed dict the HTTP layer consumes without knowing the
internal dependency graph.
"""

from __future__ import annotations

from typing import TypedDict

from billtracker.config import AppConfig
from billtracker.database import DatabaseManager
from billtracker.logger import get_logger
from billtracker.repositories.base_repository import RecordStore
from billtracker.repositories.cache_repository import CacheRepository
from billtracker.repositories.document_store import (
    JsonFileDocumentStore,
    SqliteDocumentStore,
)
from billtracker.repositories.local_file_repository import LocalFileRepository
from billtracker.repositories.remote_repository import RemoteRepository
from billtracker.services.asset_store import AssetStore
from billtracker.services.auth_service import AuthService
from billtracker.services.bill_service import BillService
from billtracker.services.bootstrap import BootstrapService
from billtracker.services.sync_service import SyncService


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    sync_service: SyncService
    bill_service: BillService
    auth_service: AuthService
    asset_store: AssetStore
    bootstrap_service: BootstrapService


def create_services(db: DatabaseManager, config: AppConfig) -> ServiceContainer:
    """
    Wire all stores and services together.

    This is the single composition root for the service layer.  The
    remote tables become the primary store when the Supabase client is
    available; otherwise the local JSON documents are.

    Args:
        db: Initialised DatabaseManager (SQLite schema already applied).
        config: Application configuration.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    logger = get_logger("services")

    # ------------------------------------------------------------------
    # 1. Stores (data-access layer)
    # ------------------------------------------------------------------
    local_repo = LocalFileRepository(
        store=JsonFileDocumentStore(root=config.DATA_DIR, logger=logger),
        logger=logger,
        users_document=config.USERS_DOCUMENT,
        bills_document=config.BILLS_DOCUMENT,
    )
    cache_repo = CacheRepository(
        store=SqliteDocumentStore(db=db, logger=logger),
        logger=logger,
    )

    primary: RecordStore
    if db.is_online:
        primary = RemoteRepository(
            db=db,
            logger=logger,
            bills_table=config.REMOTE_BILLS_TABLE,
            users_table=config.REMOTE_USERS_TABLE,
        )
    else:
        primary = local_repo

    # ------------------------------------------------------------------
    # 2. Services
    # ------------------------------------------------------------------
    sync_service = SyncService(primary=primary, cache=cache_repo, logger=logger)
    asset_store = AssetStore(root=config.assets_dir, logger=logger)

    return ServiceContainer(
        sync_service=sync_service,
        bill_service=BillService(sync=sync_service, logger=logger),
        auth_service=AuthService(sync=sync_service, logger=logger),
        asset_store=asset_store,
        bootstrap_service=BootstrapService(
            local=local_repo,
            assets=asset_store,
            sync=sync_service,
            logger=logger,
        ),
    )
