"""
Remote Repository.

Supabase (PostgREST) adapter for the ``bills`` and ``users`` tables.
Columns are snake_case; records cross the boundary through the shared
key helpers in :mod:`billtracker.utils.string_helpers`.

Every method issues a single request.  Any failure (offline client,
network error, PostgREST error, malformed row) is logged and reported as
the failure sentinel so the sync facade can fall back to the cache.
An update or delete that reaches the server but matches no row returns
``ABSENT`` instead.  Nothing here raises.

Amounts are sent as decimal strings, which PostgREST accepts for
``numeric`` columns.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union

from supabase import Client as SupabaseClient

from billtracker.database import DatabaseManager
from billtracker.logger import StructuredLogger
from billtracker.models.bill import STORAGE_CONTEXT, Bill, BillCreate, BillUpdate
from billtracker.models.user import User
from billtracker.repositories.base_repository import (
    ABSENT,
    Absent,
    RecordStore,
    sort_by_due_date,
)
from billtracker.utils.string_helpers import (
    JsonValue,
    denormalize_keys,
    normalize_keys,
)


class RemoteRepository(RecordStore):
    """Bill and user access against the remote relational store."""

    NAME = "remote"

    def __init__(
        self,
        db: DatabaseManager,
        logger: StructuredLogger,
        bills_table: str = "bills",
        users_table: str = "users",
    ) -> None:
        super().__init__(logger)
        self._db = db
        self._bills_table = bills_table
        self._users_table = users_table

    @property
    def supabase(self) -> SupabaseClient:
        """Returns the Supabase client (raises ``RuntimeError`` when offline)."""
        return self._db.supabase

    # ------------------------------------------------------------------
    # Bills
    # ------------------------------------------------------------------

    def list_bills(self, owner_id: str) -> Optional[list[Bill]]:
        try:
            response = (
                self.supabase.table(self._bills_table)
                .select("*")
                .eq("owner_id", owner_id)
                .order("due_date")
                .execute()
            )
            # Sorted again so the column ordering of the server cannot leak through.
            return sort_by_due_date(_row_to_bill(row) for row in response.data or [])
        except Exception as exc:
            self._logger.warning("Remote list_bills failed for %s: %s", owner_id, exc)
            return None

    def add_bill(self, data: BillCreate) -> Optional[Bill]:
        row = normalize_keys(
            data.model_dump(mode="json", by_alias=True, context=STORAGE_CONTEXT)
        )
        row["created_at"] = _now_iso()
        try:
            response = self.supabase.table(self._bills_table).insert(row).execute()
            if not response.data:
                self._logger.warning("Remote insert returned no bill row.")
                return None
            bill = _row_to_bill(response.data[0])
            self._logger.info("Bill inserted remotely: %s", bill.id)
            return bill
        except Exception as exc:
            self._logger.warning("Remote add_bill failed: %s", exc)
            return None

    def update_bill(
        self, bill_id: str, patch: BillUpdate
    ) -> Union[Bill, Absent, None]:
        try:
            response = (
                self.supabase.table(self._bills_table)
                .update(patch.changes(mode="json", context=STORAGE_CONTEXT))
                .eq("id", bill_id)
                .execute()
            )
            if not response.data:
                self._logger.warning("Remote update matched no bill: %s", bill_id)
                return ABSENT
            return _row_to_bill(response.data[0])
        except Exception as exc:
            self._logger.warning("Remote update_bill failed for %s: %s", bill_id, exc)
            return None

    def remove_bill(self, bill_id: str) -> Union[bool, Absent]:
        try:
            response = (
                self.supabase.table(self._bills_table)
                .delete()
                .eq("id", bill_id)
                .execute()
            )
            if not response.data:
                self._logger.warning("Remote delete matched no bill: %s", bill_id)
                return ABSENT
            self._logger.info("Bill deleted remotely: %s", bill_id)
            return True
        except Exception as exc:
            self._logger.warning("Remote remove_bill failed for %s: %s", bill_id, exc)
            return False

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def find_user(self, username: str) -> Optional[User]:
        try:
            response = (
                self.supabase.table(self._users_table)
                .select("*")
                .eq("username", username)
                .maybe_single()
                .execute()
            )
            # Some client versions return None instead of an empty response.
            if response is None or not response.data:
                return None
            return _row_to_user(response.data)
        except Exception as exc:
            self._logger.warning("Remote find_user failed for %s: %s", username, exc)
            return None

    def create_user(self, username: str, password: str) -> Optional[User]:
        row = {"username": username, "password": password, "created_at": _now_iso()}
        try:
            response = self.supabase.table(self._users_table).insert(row).execute()
            if not response.data:
                self._logger.warning("Remote insert returned no user row.")
                return None
            self._logger.info("User created remotely: %s", username)
            return _row_to_user(response.data[0])
        except Exception as exc:
            self._logger.warning("Remote create_user failed for %s: %s", username, exc)
            return None


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _wire_row(row: dict[str, JsonValue]) -> dict[str, JsonValue]:
    record = denormalize_keys(row)
    # Server-assigned keys may be integers or UUIDs.
    record["id"] = str(record["id"])
    return record


def _row_to_bill(row: dict[str, JsonValue]) -> Bill:
    return Bill.model_validate(_wire_row(row))


def _row_to_user(row: dict[str, JsonValue]) -> User:
    return User.model_validate(_wire_row(row))
