"""
Bootstrap Service.

Brings the local storage into a usable state: data and assets
directories, the two default accounts when no user exists yet, and an
empty bills document.  Idempotent; the API runs it before every action.
"""

from __future__ import annotations

from billtracker.logger import StructuredLogger
from billtracker.models.user import DEFAULT_USERS
from billtracker.repositories.local_file_repository import LocalFileRepository
from billtracker.services.asset_store import AssetStore
from billtracker.services.base_service import BaseService
from billtracker.services.sync_service import SyncService


class BootstrapService(BaseService):
    """Local layout seeding plus default accounts on the primary store."""

    def __init__(
        self,
        local: LocalFileRepository,
        assets: AssetStore,
        sync: SyncService,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._local = local
        self._assets = assets
        self._sync = sync

    def run(self) -> int:
        """Prepare the local layout. Returns the number of users seeded.

        Filesystem errors propagate.
        """
        self._local.ensure_layout()
        self._assets.ensure_directory()

        seeded = 0
        if self._local.count_users() == 0:
            for username, password in DEFAULT_USERS:
                self._local.create_user(username, password)
                seeded += 1
            self._logger.info("Seeded %d default user(s) into the local store.", seeded)
        return seeded

    def initialize(self) -> None:
        """Full startup: local layout plus default accounts wherever the
        facade's primary store lives (a no-op when that is the local store
        just seeded)."""
        self.run()
        self._sync.ensure_default_users()
        self._logger.info("Storage initialized (primary store: %s).", self._sync.primary_name)
