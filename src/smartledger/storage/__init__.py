"""Snapshot storage layer for smartledger application."""

from smartledger.storage.base import STORAGE_KEY, MemorySnapshotStore, SnapshotStore
from smartledger.storage.factories import create_sqlite_store

__all__ = ["STORAGE_KEY", "MemorySnapshotStore", "SnapshotStore", "create_sqlite_store"]
