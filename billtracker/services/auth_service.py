"""
Authentication Service.

Username/password login against the user records behind the sync
facade.  Passwords are stored in plaintext and compared as such; there
is no session or token issued, the caller keeps the returned user.
"""

from __future__ import annotations

import hmac

from billtracker.logger import StructuredLogger
from billtracker.models.service_models import ServiceResult
from billtracker.models.user import User
from billtracker.services.base_service import BaseService
from billtracker.services.sync_service import SyncService

_INVALID_CREDENTIALS: str = "Invalid username or password"


class AuthService(BaseService):
    """Credential check for the login form."""

    def __init__(self, sync: SyncService, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._sync = sync

    def login(self, username: str, password: str) -> ServiceResult[User]:
        """Return the matching user, or a 401 failure.

        Unknown usernames and wrong passwords produce the same message.
        """
        username = username.strip()
        if not username or not password:
            return ServiceResult.fail(_INVALID_CREDENTIALS, status_code=401)

        user = self._sync.find_user(username)
        if user is None or not hmac.compare_digest(
            user.password.encode("utf-8"), password.encode("utf-8")
        ):
            self._logger.warning("Failed login attempt for %s", username)
            return ServiceResult.fail(_INVALID_CREDENTIALS, status_code=401)

        self._logger.info("User logged in: %s", username)
        return ServiceResult.ok(user)
