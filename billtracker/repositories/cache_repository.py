"""
Cache Repository.

Key/value mirror of the authoritative store, used when the primary
backend fails.  Bills are partitioned per owner under ``bills_<ownerId>``;
users live under ``usuarios``.  Values are whole JSON collections in the
wire (camelCase) shape.

The cache is best-effort and never authoritative.  Updates and removals
by id do not know the owner, so they scan every bills partition and act
on the first one that holds the id.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional, Union

from billtracker.logger import StructuredLogger
from billtracker.models.bill import Bill, BillCreate, BillUpdate
from billtracker.models.user import User
from billtracker.repositories.base_repository import (
    ABSENT,
    Absent,
    RecordStore,
    as_record_list,
    bills_for_owner,
    index_of,
    parse_bills,
    parse_users,
    to_record,
)
from billtracker.repositories.document_store import DocumentStore
from billtracker.utils.ids import generate_id


class CacheRepository(RecordStore):
    """Fallback backend over any :class:`DocumentStore`."""

    NAME = "cache"

    BILLS_PREFIX: str = "bills_"
    USERS_KEY: str = "usuarios"

    def __init__(self, store: DocumentStore, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._store = store

    @classmethod
    def bills_key(cls, owner_id: str) -> str:
        return f"{cls.BILLS_PREFIX}{owner_id}"

    # ------------------------------------------------------------------
    # RecordStore
    # ------------------------------------------------------------------

    def list_bills(self, owner_id: str) -> list[Bill]:
        bills = parse_bills(self._store.read(self.bills_key(owner_id), []), self._logger)
        return bills_for_owner(bills, owner_id)

    def add_bill(self, data: BillCreate) -> Bill:
        bill = Bill.from_create(data, bill_id=generate_id())
        self.merge_bill(bill)
        self._logger.info("Bill added to cache: %s", bill.id)
        return bill

    def update_bill(self, bill_id: str, patch: BillUpdate) -> Union[Bill, Absent]:
        located = self._locate(bill_id)
        if located is None:
            self._logger.warning("Bill not found in any cache partition: %s", bill_id)
            return ABSENT

        key, records, position = located
        updated = Bill.model_validate(records[position]).merged(patch)
        records[position] = to_record(updated)
        self._store.write(key, records)
        return updated

    def remove_bill(self, bill_id: str) -> Union[bool, Absent]:
        located = self._locate(bill_id)
        if located is None:
            self._logger.warning("Bill not found in any cache partition: %s", bill_id)
            return ABSENT

        key, records, position = located
        del records[position]
        self._store.write(key, records)
        return True

    def find_user(self, username: str) -> Optional[User]:
        users = parse_users(self._store.read(self.USERS_KEY, []), self._logger)
        return next((user for user in users if user.username == username), None)

    def create_user(self, username: str, password: str) -> User:
        user = User(id=generate_id(), username=username, password=password)
        self.merge_user(user)
        return user

    # ------------------------------------------------------------------
    # Mirror operations
    # ------------------------------------------------------------------

    def replace_bills(self, owner_id: str, bills: Iterable[Bill]) -> None:
        """Overwrite the owner's partition with a fresh authoritative result."""
        self._store.write(self.bills_key(owner_id), [to_record(bill) for bill in bills])

    def merge_bill(self, bill: Bill) -> None:
        """Insert *bill* into its owner's partition, or replace it by id."""
        key = self.bills_key(bill.owner_id)
        records = as_record_list(self._store.read(key, []))
        position = index_of(records, bill.id)
        if position == -1:
            records.append(to_record(bill))
        else:
            records[position] = to_record(bill)
        self._store.write(key, records)

    def discard_bill(self, bill_id: str) -> None:
        """Drop *bill_id* from whichever partition holds it, if any."""
        located = self._locate(bill_id)
        if located is not None:
            key, records, position = located
            del records[position]
            self._store.write(key, records)

    def merge_user(self, user: User) -> None:
        """Insert *user* into the user list, or replace it by id."""
        records = as_record_list(self._store.read(self.USERS_KEY, []))
        position = index_of(records, user.id)
        if position == -1:
            records.append(to_record(user))
        else:
            records[position] = to_record(user)
        self._store.write(self.USERS_KEY, records)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _locate(self, bill_id: str) -> Optional[tuple[str, list, int]]:
        """Find the partition holding *bill_id*: ``(key, records, position)``."""
        for key in self._store.names():
            if not key.startswith(self.BILLS_PREFIX):
                continue
            records = as_record_list(self._store.read(key, []))
            position = index_of(records, bill_id)
            if position != -1:
                return key, records, position
        return None
