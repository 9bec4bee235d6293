"""Document store layer for networth."""

from networth.database.base import DocumentStore
from networth.database.factories import create_sqlite_store

__all__ = ["DocumentStore", "create_sqlite_store"]
