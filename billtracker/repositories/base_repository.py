"""
Base Repository.

Defines the ``RecordStore`` capability every backend implements (remote
Supabase tables, local JSON documents, key/value cache) and the
collection helpers they share, so filtering, ordering and record
(de)serialisation behave identically whichever backend serves a call.

Failure convention: a backend that cannot serve a call returns ``None``
(or ``False`` for removals).  The sync facade reads that sentinel as
"serve from the cache instead".  A backend that was reachable but holds
no bill with the requested id returns :data:`ABSENT`, which the facade
reports as not-found without consulting the cache.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Optional, Union

from pydantic import ValidationError

from billtracker.logger import StructuredLogger
from billtracker.models.bill import STORAGE_CONTEXT, Bill, BillCreate, BillUpdate
from billtracker.models.user import User
from billtracker.utils.string_helpers import JsonValue


class Absent(enum.Enum):
    """Marker type for "the store answered, the record does not exist"."""

    RECORD = "absent"


ABSENT = Absent.RECORD


class RecordStore(ABC):
    """Bill and user persistence behind one contract."""

    NAME: str = "store"

    def __init__(self, logger: StructuredLogger) -> None:
        self._logger = logger

    @abstractmethod
    def list_bills(self, owner_id: str) -> Optional[list[Bill]]:
        """Bills owned by *owner_id*, ascending by due date."""

    @abstractmethod
    def add_bill(self, data: BillCreate) -> Optional[Bill]:
        """Persist a new bill and return it with its id and timestamp."""

    @abstractmethod
    def update_bill(
        self, bill_id: str, patch: BillUpdate
    ) -> Union[Bill, Absent, None]:
        """Apply *patch* to the bill with *bill_id*; :data:`ABSENT` when missing."""

    @abstractmethod
    def remove_bill(self, bill_id: str) -> Union[bool, Absent]:
        """Delete the bill with *bill_id*; :data:`ABSENT` when missing."""

    @abstractmethod
    def find_user(self, username: str) -> Optional[User]:
        """Look a user up by username."""

    @abstractmethod
    def create_user(self, username: str, password: str) -> Optional[User]:
        """Persist a new user account."""


# ---------------------------------------------------------------------------
# Shared collection helpers
# ---------------------------------------------------------------------------


def sort_by_due_date(bills: Iterable[Bill]) -> list[Bill]:
    """Canonical order: due date ascending, ties keep their stored order."""
    return sorted(bills, key=lambda bill: bill.due_date)


def bills_for_owner(bills: Iterable[Bill], owner_id: str) -> list[Bill]:
    """Filter to *owner_id* and apply the canonical order."""
    return sort_by_due_date(bill for bill in bills if bill.owner_id == owner_id)


def parse_bills(records: JsonValue, logger: StructuredLogger) -> list[Bill]:
    """Turn a stored JSON collection into bills.

    A non-list document counts as empty; individual malformed records
    are skipped with a warning.
    """
    if not isinstance(records, list):
        return []
    bills: list[Bill] = []
    for record in records:
        try:
            bills.append(Bill.model_validate(record))
        except ValidationError as exc:
            logger.warning("Skipping malformed bill record: %s", exc)
    return bills


def parse_users(records: JsonValue, logger: StructuredLogger) -> list[User]:
    """Same as :func:`parse_bills` for user collections."""
    if not isinstance(records, list):
        return []
    users: list[User] = []
    for record in records:
        try:
            users.append(User.model_validate(record))
        except ValidationError as exc:
            logger.warning("Skipping malformed user record: %s", exc)
    return users


def to_record(model: Bill | User) -> dict[str, JsonValue]:
    """Wire representation stored in documents and cache entries (exact amounts)."""
    return model.model_dump(mode="json", by_alias=True, context=STORAGE_CONTEXT)


def as_record_list(records: JsonValue) -> list[JsonValue]:
    """The stored collection as a mutable list (empty when malformed)."""
    return list(records) if isinstance(records, list) else []


def index_of(records: list[JsonValue], record_id: str) -> int:
    """Position of the record whose ``id`` is *record_id*, or ``-1``."""
    for position, record in enumerate(records):
        if isinstance(record, dict) and record.get("id") == record_id:
            return position
    return -1
