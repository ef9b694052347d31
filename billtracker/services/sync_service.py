"""
Sync Service.

The single entry point for bill and user persistence.  Every call goes to
the primary store first (the remote tables when Supabase is configured,
otherwise the local JSON documents).  A successful result is mirrored
into the key/value cache; a failed one (exception or failure sentinel) is
served by the cache instead, with the same filtering, ordering, id
generation and merge semantics.  When the primary answers that a bill
does not exist, the call is not-found and any cached copy is purged.

Callers never see which backend answered.
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from billtracker.logger import StructuredLogger
from billtracker.models.bill import Bill, BillCreate, BillUpdate
from billtracker.models.service_models import ServiceResult
from billtracker.models.user import DEFAULT_USERS, User
from billtracker.repositories.base_repository import (
    ABSENT,
    RecordStore,
    sort_by_due_date,
)
from billtracker.repositories.cache_repository import CacheRepository
from billtracker.services.base_service import BaseService

T = TypeVar("T")


def _succeeded(result: object) -> bool:
    """``None`` and ``False`` are the store failure sentinels."""
    return result is not None and result is not False


class SyncService(BaseService):
    """Primary-first, cache-fallback facade over the record stores."""

    def __init__(
        self,
        primary: RecordStore,
        cache: CacheRepository,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._primary = primary
        self._cache = cache

    @property
    def primary_name(self) -> str:
        return self._primary.NAME

    # ------------------------------------------------------------------
    # Bills
    # ------------------------------------------------------------------

    def list_bills(self, owner_id: str) -> list[Bill]:
        """Bills owned by *owner_id*, ascending by due date."""
        bills = self._execute_with_fallback(
            primary_op=lambda: self._primary.list_bills(owner_id),
            cache_op=lambda: self._cache.list_bills(owner_id),
            operation_name=f"list_bills ({owner_id})",
            on_primary_success=lambda result: self._cache.replace_bills(owner_id, result),
        )
        return sort_by_due_date(bills or [])

    def add_bill(self, data: BillCreate) -> ServiceResult[Bill]:
        bill = self._execute_with_fallback(
            primary_op=lambda: self._primary.add_bill(data),
            cache_op=lambda: self._cache.add_bill(data),
            operation_name="add_bill",
            on_primary_success=self._cache.merge_bill,
        )
        if bill is None:
            return ServiceResult.fail("Failed to add bill", status_code=500)
        return ServiceResult.ok(bill)

    def update_bill(self, bill_id: str, patch: BillUpdate) -> ServiceResult[Bill]:
        """Apply the fields explicitly set on *patch* to the bill."""
        if patch.is_empty:
            return ServiceResult.fail("No fields to update")

        bill = self._execute_with_fallback(
            primary_op=lambda: self._primary.update_bill(bill_id, patch),
            cache_op=lambda: self._cache.update_bill(bill_id, patch),
            operation_name=f"update_bill ({bill_id})",
            on_primary_success=self._cache.merge_bill,
            on_primary_absent=lambda: self._cache.discard_bill(bill_id),
        )
        if bill is None or bill is ABSENT:
            return ServiceResult.not_found("Bill")
        return ServiceResult.ok(bill)

    def remove_bill(self, bill_id: str) -> ServiceResult[None]:
        removed = self._execute_with_fallback(
            primary_op=lambda: self._primary.remove_bill(bill_id),
            cache_op=lambda: self._cache.remove_bill(bill_id),
            operation_name=f"remove_bill ({bill_id})",
            on_primary_success=lambda _: self._cache.discard_bill(bill_id),
            on_primary_absent=lambda: self._cache.discard_bill(bill_id),
        )
        if removed is not True:
            return ServiceResult.not_found("Bill")
        return ServiceResult.ok()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def find_user(self, username: str) -> Optional[User]:
        return self._execute_with_fallback(
            primary_op=lambda: self._primary.find_user(username),
            cache_op=lambda: self._cache.find_user(username),
            operation_name=f"find_user ({username})",
            on_primary_success=self._cache.merge_user,
        )

    def create_user(self, username: str, password: str) -> ServiceResult[User]:
        user = self._execute_with_fallback(
            primary_op=lambda: self._primary.create_user(username, password),
            cache_op=lambda: self._cache.create_user(username, password),
            operation_name=f"create_user ({username})",
            on_primary_success=self._cache.merge_user,
        )
        if user is None:
            return ServiceResult.fail("Failed to create user", status_code=500)
        return ServiceResult.ok(user)

    def ensure_default_users(self) -> int:
        """Create each default account that cannot be found. Returns the count."""
        created = 0
        for username, password in DEFAULT_USERS:
            if self.find_user(username) is not None:
                continue
            if self.create_user(username, password).success:
                created += 1
        if created:
            self._logger.info("Created %d default user(s).", created)
        return created

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _execute_with_fallback(
        self,
        primary_op: Callable[[], Optional[T]],
        cache_op: Callable[[], Optional[T]],
        *,
        operation_name: str,
        on_primary_success: Optional[Callable[[T], None]] = None,
        on_primary_absent: Optional[Callable[[], None]] = None,
    ) -> Optional[T]:
        """Run *primary_op*, falling back to *cache_op* on failure.

        Execution order:
        1. Call ``primary_op()``.  If it returns ``ABSENT`` the record does
           not exist in the authoritative store: invoke
           ``on_primary_absent`` and return ``ABSENT`` without touching
           the cache result.
        2. If it returns neither ``None`` nor ``False``, invoke
           ``on_primary_success`` with the result and return it.
        3. Otherwise (sentinel or exception) return ``cache_op()``.
        4. If the cache raises too, log and return ``None``.

        Errors raised by the two hooks are logged but never mask the
        primary result.
        """
        try:
            result = primary_op()
        except Exception as exc:
            self._logger.warning(
                "Primary store (%s) failed for %s: %s",
                self._primary.NAME,
                operation_name,
                exc,
            )
            result = None

        if result is ABSENT:
            self._logger.info(
                "%s: no such record in the primary store (%s).",
                operation_name,
                self._primary.NAME,
            )
            if on_primary_absent is not None:
                self._run_mirror_hook(on_primary_absent, operation_name)
            return result

        if _succeeded(result):
            if on_primary_success is not None:
                self._run_mirror_hook(lambda: on_primary_success(result), operation_name)
            return result

        self._logger.info("Serving %s from cache.", operation_name)
        try:
            return cache_op()
        except Exception as exc:
            self._logger.error(
                "Cache fallback also failed for %s: %s", operation_name, exc
            )
            return None

    def _run_mirror_hook(self, hook: Callable[[], None], operation_name: str) -> None:
        try:
            hook()
        except Exception as exc:
            self._logger.warning("Cache mirroring failed for %s: %s", operation_name, exc)
