"""MongoDocumentStore — one collection per kind, identifier stored as ``_id``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...exceptions import StoreConnectionError, StoreError
from ...keys import IIDGenerator, ObjectIdGenerator, StoreKey
from ...ports import IDocumentStore, StoreEntity
from ...query import KeyPredicate, PropertyPredicate

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ...query import Predicate
    from .connection import MongoConnectionManager

logger = logging.getLogger("datastore_connector.mongo")


def _compile_predicate(predicate: Predicate) -> dict[str, Any]:
    if isinstance(predicate, KeyPredicate):
        return {"_id": predicate.key.identifier}
    if isinstance(predicate, PropertyPredicate):
        return {predicate.name: {"$eq": predicate.value}}
    raise StoreError(f"Unsupported predicate {predicate!r}", operation="query")


def build_filter(predicates: Sequence[Predicate]) -> dict[str, Any]:
    """Compile conjunctive predicates into a MongoDB filter document."""
    compiled = [_compile_predicate(p) for p in predicates]
    if not compiled:
        return {}
    if len(compiled) == 1:
        return compiled[0]
    return {"$and": compiled}


class MongoDocumentStore(IDocumentStore):
    """Key-addressed document store over MongoDB.

    Every kind maps to a collection (prefixed by ``namespace`` when set).
    Property bags are stored as documents whose ``_id`` is the key
    identifier; ``_id`` is removed again when reading.
    """

    def __init__(
        self,
        connection: MongoConnectionManager,
        *,
        namespace: str | None = None,
        id_generator: IIDGenerator | None = None,
    ) -> None:
        self._connection = connection
        self._namespace = namespace
        self._id_generator = id_generator or ObjectIdGenerator()

    def collection_name(self, kind: str) -> str:
        return f"{self._namespace}.{kind}" if self._namespace else kind

    def _collection(self, kind: str) -> Any:
        return self._connection.collection(self.collection_name(kind))

    @staticmethod
    def _to_entity(kind: str, doc: Mapping[str, Any]) -> StoreEntity:
        data = dict(doc)
        identifier = data.pop("_id")
        return StoreEntity(StoreKey(kind, identifier), data)

    async def connect(self) -> None:
        await self._connection.connect()

    async def close(self) -> None:
        self._connection.close()

    async def health_check(self) -> bool:
        """Return True when the database answers a ping."""
        try:
            await self._connection.ping()
        except StoreConnectionError as exc:
            logger.warning("health check failed: %s", exc)
            return False
        return True

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
        # Mongo reads limit=0 as "no limit"; here it means an empty page
        if limit == 0:
            return []
        match = build_filter(predicates)
        logger.debug(
            "query %s: %s skip=%s limit=%s",
            self.collection_name(kind),
            match,
            offset,
            limit,
        )
        cursor = self._collection(kind).find(
            match, skip=offset or 0, limit=limit or 0
        )
        return [self._to_entity(kind, doc) async for doc in cursor]

    async def get(self, key: StoreKey) -> StoreEntity | None:
        doc = await self._collection(key.kind).find_one({"_id": key.identifier})
        if doc is None:
            return None
        return self._to_entity(key.kind, doc)

    async def save(self, key: StoreKey, data: Mapping[str, Any]) -> StoreKey:
        if not key.is_bound:
            key = key.bind(self._id_generator.next_id())
            logger.debug("save: assigned %s", key)
        doc = {k: v for k, v in data.items() if k != "_id"}
        doc["_id"] = key.identifier
        await self._collection(key.kind).replace_one(
            {"_id": key.identifier}, doc, upsert=True
        )
        return key

    async def update(self, key: StoreKey, data: Mapping[str, Any]) -> None:
        doc = {k: v for k, v in data.items() if k != "_id"}
        result = await self._collection(key.kind).replace_one(
            {"_id": key.identifier}, doc, upsert=False
        )
        if result.matched_count == 0:
            raise StoreError(f"No entity to update at {key}", operation="update")

    async def delete(self, key: StoreKey) -> None:
        await self._collection(key.kind).delete_one({"_id": key.identifier})
