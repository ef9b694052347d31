"""Pytest configuration and fixtures."""

import copy
import json
import os
import tempfile
from pathlib import Path

# Keep the rotating log file out of the working tree; must precede the
# first configuration load.
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "billtracker-tests.log"))

import pytest  # noqa: E402

from billtracker.database import DatabaseManager  # noqa: E402
from billtracker.logger import StructuredLogger  # noqa: E402
from billtracker.models.bill import BillCreate  # noqa: E402
from billtracker.repositories.base_repository import RecordStore  # noqa: E402
from billtracker.repositories.cache_repository import CacheRepository  # noqa: E402
from billtracker.repositories.document_store import (  # noqa: E402
    DocumentStore,
    JsonFileDocumentStore,
    SqliteDocumentStore,
)
from billtracker.repositories.local_file_repository import LocalFileRepository  # noqa: E402
from billtracker.repositories.remote_repository import RemoteRepository  # noqa: E402
from billtracker.schema import initialize_schema  # noqa: E402


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class MemoryDocumentStore(DocumentStore):
    """In-memory document store; values go through JSON like the real ones."""

    def __init__(self):
        self.documents = {}
        self.fail_writes = False

    def read(self, name, default):
        if name not in self.documents:
            return default
        return copy.deepcopy(self.documents[name])

    def write(self, name, data):
        if self.fail_writes:
            raise OSError("disk full")
        self.documents[name] = json.loads(json.dumps(data))

    def names(self):
        return sorted(self.documents)


class FailingStore(RecordStore):
    """Primary store that is always unavailable.

    ``mode="raise"`` raises on every call; ``mode="sentinel"`` returns the
    failure sentinels instead.
    """

    NAME = "failing"

    def __init__(self, logger, mode="raise"):
        super().__init__(logger)
        self.mode = mode
        self.calls = 0

    def _fail(self, sentinel=None):
        self.calls += 1
        if self.mode == "raise":
            raise ConnectionError("remote unreachable")
        return sentinel

    def list_bills(self, owner_id):
        return self._fail()

    def add_bill(self, data):
        return self._fail()

    def update_bill(self, bill_id, patch):
        return self._fail()

    def remove_bill(self, bill_id):
        return self._fail(False)

    def find_user(self, username):
        return self._fail()

    def create_user(self, username, password):
        return self._fail()


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, client, table):
        self._client = client
        self.table = table
        self.operation = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.single = False

    def select(self, columns="*"):
        self.operation = "select"
        return self

    def insert(self, row):
        self.operation = "insert"
        self.payload = row
        return self

    def update(self, row):
        self.operation = "update"
        self.payload = row
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column):
        self.order_by = column
        return self

    def maybe_single(self):
        self.single = True
        return self

    def execute(self):
        self._client.requests.append(self)
        if self._client.fail:
            raise ConnectionError("network down")
        return FakeResponse(self._client.respond(self))


class FakeSupabase:
    """Minimal in-memory table server answering :class:`FakeQuery` requests."""

    def __init__(self):
        self.tables = {"bills": [], "users": []}
        self.requests = []
        self.fail = False
        self._next_id = 1

    def table(self, name):
        return FakeQuery(self, name)

    def respond(self, query):
        rows = self.tables.setdefault(query.table, [])
        matches = [
            row for row in rows if all(row.get(col) == val for col, val in query.filters)
        ]

        if query.operation == "select":
            if query.order_by:
                matches = sorted(matches, key=lambda row: row[query.order_by])
            if query.single:
                return dict(matches[0]) if matches else None
            return [dict(row) for row in matches]

        if query.operation == "insert":
            row = dict(query.payload)
            row.setdefault("id", f"srv-{self._next_id}")
            self._next_id += 1
            rows.append(row)
            return [dict(row)]

        if query.operation == "update":
            for row in matches:
                row.update(query.payload)
            return [dict(row) for row in matches]

        if query.operation == "delete":
            self.tables[query.table] = [row for row in rows if row not in matches]
            return [dict(row) for row in matches]

        raise AssertionError(f"unexpected operation {query.operation}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def logger():
    return StructuredLogger(name="billtracker.tests")


@pytest.fixture
def memory_store():
    return MemoryDocumentStore()


@pytest.fixture
def cache(memory_store, logger):
    return CacheRepository(store=memory_store, logger=logger)


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def local_repo(data_dir, logger):
    repo = LocalFileRepository(
        store=JsonFileDocumentStore(root=data_dir, logger=logger),
        logger=logger,
    )
    repo.ensure_layout()
    return repo


@pytest.fixture
def sqlite_db(logger):
    """Offline DatabaseManager over an in-memory cache database."""
    db = DatabaseManager(
        supabase_url="",
        supabase_key="",
        sqlite_path=Path(":memory:"),
        logger=logger,
    )
    initialize_schema(db.sqlite, logger)
    yield db
    db.close()


@pytest.fixture
def sqlite_store(sqlite_db, logger):
    return SqliteDocumentStore(db=sqlite_db, logger=logger)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def online_db(fake_supabase, logger):
    db = DatabaseManager(
        supabase_url="",
        supabase_key="",
        sqlite_path=Path(":memory:"),
        logger=logger,
        supabase_client=fake_supabase,
    )
    initialize_schema(db.sqlite, logger)
    yield db
    db.close()


@pytest.fixture
def remote_repo(online_db, logger):
    return RemoteRepository(db=online_db, logger=logger)


@pytest.fixture
def failing_store(logger):
    return FailingStore(logger)


def _make_bill(**overrides):
    """BillCreate with sensible defaults; accepts wire (camelCase) overrides."""
    fields = {
        "name": "Electricity",
        "amount": "120.50",
        "dueDate": "2025-05-10",
        "ownerId": "user-1",
    }
    fields.update(overrides)
    return BillCreate.model_validate(fields)


@pytest.fixture
def make_bill():
    return _make_bill


@pytest.fixture
def sentinel_store(logger):
    return FailingStore(logger, mode="sentinel")
