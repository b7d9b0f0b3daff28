"""Store adapters: an in-memory double and the MongoDB-backed store."""

from __future__ import annotations

from .memory import InMemoryDocumentStore

__all__ = ["InMemoryDocumentStore"]
