"""
Local File Repository.

Bills and users kept as two JSON documents (``boletos.json`` and
``usuarios.json``) under the data directory.  Every operation loads the
whole document, changes it in memory and writes the whole document back;
there is no indexing and no partial write.  Concurrent writers race and
the last write wins.
"""

from __future__ import annotations

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
from billtracker.repositories.document_store import JsonFileDocumentStore
from billtracker.utils.ids import generate_id


class LocalFileRepository(RecordStore):
    """JSON-document backend.

    Reads never raise: a missing or malformed document is an empty
    collection.  Write failures propagate.
    """

    NAME = "local"

    def __init__(
        self,
        store: JsonFileDocumentStore,
        logger: StructuredLogger,
        users_document: str = "usuarios",
        bills_document: str = "boletos",
    ) -> None:
        super().__init__(logger)
        self._store = store
        self._users_document = users_document
        self._bills_document = bills_document

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def ensure_layout(self) -> None:
        """Create the data directory and an empty bills document if missing."""
        self._store.ensure_root()
        if not self._store.exists(self._bills_document):
            self._store.write(self._bills_document, [])

    def count_users(self) -> int:
        return len(parse_users(self._store.read(self._users_document, []), self._logger))

    # ------------------------------------------------------------------
    # Bills
    # ------------------------------------------------------------------

    def list_bills(self, owner_id: str) -> list[Bill]:
        bills = parse_bills(self._store.read(self._bills_document, []), self._logger)
        return bills_for_owner(bills, owner_id)

    def add_bill(self, data: BillCreate) -> Bill:
        records = as_record_list(self._store.read(self._bills_document, []))
        bill = Bill.from_create(data, bill_id=generate_id())
        records.append(to_record(bill))
        self._store.write(self._bills_document, records)
        self._logger.info("Bill added to local store: %s", bill.id)
        return bill

    def update_bill(self, bill_id: str, patch: BillUpdate) -> Union[Bill, Absent]:
        records = as_record_list(self._store.read(self._bills_document, []))
        position = index_of(records, bill_id)
        if position == -1:
            self._logger.warning("Bill not found in local store: %s", bill_id)
            return ABSENT

        updated = Bill.model_validate(records[position]).merged(patch)
        records[position] = to_record(updated)
        self._store.write(self._bills_document, records)
        self._logger.info("Bill updated in local store: %s", bill_id)
        return updated

    def remove_bill(self, bill_id: str) -> Union[bool, Absent]:
        records = as_record_list(self._store.read(self._bills_document, []))
        remaining = [
            record
            for record in records
            if not (isinstance(record, dict) and record.get("id") == bill_id)
        ]
        if len(remaining) == len(records):
            self._logger.warning("Bill not found for removal: %s", bill_id)
            return ABSENT

        self._store.write(self._bills_document, remaining)
        self._logger.info("Bill removed from local store: %s", bill_id)
        return True

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def find_user(self, username: str) -> Optional[User]:
        users = parse_users(self._store.read(self._users_document, []), self._logger)
        return next((user for user in users if user.username == username), None)

    def create_user(self, username: str, password: str) -> User:
        records = as_record_list(self._store.read(self._users_document, []))
        user = User(id=generate_id(), username=username, password=password)
        records.append(to_record(user))
        self._store.write(self._users_document, records)
        self._logger.info("User created in local store: %s", username)
        return user
