"""InMemoryDocumentStore — dict-backed fake for unit tests."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import StoreError
from ..keys import IIDGenerator, SequentialIDGenerator, StoreKey
from ..ports import IDocumentStore, StoreEntity
from ..query import KeyPredicate, PropertyPredicate

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ..query import Predicate

logger = logging.getLogger("datastore_connector.memory")


def _matches(identifier: Any, data: Mapping[str, Any], predicate: Predicate) -> bool:
    if isinstance(predicate, KeyPredicate):
        return bool(predicate.key.identifier == identifier)
    if isinstance(predicate, PropertyPredicate):
        return predicate.name in data and bool(data[predicate.name] == predicate.value)
    raise StoreError(f"Unsupported predicate {predicate!r}", operation="query")


class InMemoryDocumentStore(IDocumentStore):
    """In-memory implementation of ``IDocumentStore``.

    Records live in ``{kind: {identifier: data}}`` and are copied on the
    way in and out, so callers never share state with the store. Query
    results come back in insertion order.
    """

    def __init__(self, id_generator: IIDGenerator | None = None) -> None:
        self._kinds: dict[str, dict[Any, dict[str, Any]]] = {}
        self._id_generator = id_generator or SequentialIDGenerator()

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def query(
        self,
        kind: str,
        predicates: Sequence[Predicate],
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[StoreEntity]:
        if (limit is not None and limit < 0) or (offset is not None and offset < 0):
            raise StoreError(
                f"negative paging: limit={limit}, offset={offset}",
                operation="query",
            )
        rows = self._kinds.get(kind, {})
        matched = [
            StoreEntity(StoreKey(kind, identifier), copy.deepcopy(data))
            for identifier, data in rows.items()
            if all(_matches(identifier, data, p) for p in predicates)
        ]
        start = offset or 0
        end = None if limit is None else start + limit
        return matched[start:end]

    async def get(self, key: StoreKey) -> StoreEntity | None:
        data = self._kinds.get(key.kind, {}).get(key.identifier)
        if data is None:
            return None
        return StoreEntity(key, copy.deepcopy(data))

    async def save(self, key: StoreKey, data: Mapping[str, Any]) -> StoreKey:
        if not key.is_bound:
            key = key.bind(self._id_generator.next_id())
            logger.debug("save: assigned %s", key)
        self._kinds.setdefault(key.kind, {})[key.identifier] = copy.deepcopy(
            dict(data)
        )
        return key

    async def update(self, key: StoreKey, data: Mapping[str, Any]) -> None:
        rows = self._kinds.get(key.kind, {})
        if key.identifier not in rows:
            raise StoreError(f"No entity to update at {key}", operation="update")
        rows[key.identifier] = copy.deepcopy(dict(data))

    async def delete(self, key: StoreKey) -> None:
        self._kinds.get(key.kind, {}).pop(key.identifier, None)

    # ── Test helpers ─────────────────────────────────────────────

    def snapshot(self, kind: str) -> dict[Any, dict[str, Any]]:
        """Copy of every stored property bag of ``kind``, keyed by identifier."""
        return copy.deepcopy(self._kinds.get(kind, {}))

    def clear(self) -> None:
        self._kinds.clear()

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._kinds.values())
