"""
Repository Layer Package.

Provides the record stores behind the sync facade: the Supabase tables
(remote), the JSON documents (local) and the key/value cache.  Services
never touch files, ``db.supabase`` or ``db.sqlite`` directly.

Usage:
    from billtracker.repositories import CacheRepository, RemoteRepository
"""

from billtracker.repositories.base_repository import RecordStore
from billtracker.repositories.cache_repository import CacheRepository
from billtracker.repositories.document_store import (
    DocumentStore,
    JsonFileDocumentStore,
    SqliteDocumentStore,
)
from billtracker.repositories.local_file_repository import LocalFileRepository
from billtracker.repositories.remote_repository import RemoteRepository

__all__ = [
    "CacheRepository",
    "DocumentStore",
    "JsonFileDocumentStore",
    "LocalFileRepository",
    "RecordStore",
    "RemoteRepository",
    "SqliteDocumentStore",
]
