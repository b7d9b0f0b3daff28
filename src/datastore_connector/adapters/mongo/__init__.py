"""MongoDB-backed document store (Motor)."""

from __future__ import annotations

from .connection import MongoConnectionManager
from .store import MongoDocumentStore, build_filter

__all__ = ["MongoConnectionManager", "MongoDocumentStore", "build_filter"]
