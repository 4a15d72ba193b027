"""Persistence layer for nexus."""

from nexus.database.base import Collection, Store
from nexus.database.factories import create_store, create_sqlite_store

__all__ = ["Collection", "Store", "create_store", "create_sqlite_store"]
