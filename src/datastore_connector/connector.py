"""DocumentStoreConnector — ORM CRUD surface over a key-addressed document store."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import (
    ConnectorError,
    EntityNotFoundError,
    StoreError,
    UnsupportedQueryError,
    ValidationError,
)
from .instrumentation import get_hook_registry
from .keys import StoreKey, resolve_key
from .ports import IConnector
from .query import compile_filter
from .records import decode_record, merge_record, strip_identifier
from .schema import project

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .ports import IDocumentStore
    from .schema import ISchemaRegistry, ModelDefinition

logger = logging.getLogger("datastore_connector.connector")


class DocumentStoreConnector(IConnector):
    """Translate ORM CRUD calls into store queries and whole-record writes.

    The connector holds no state between calls beyond the read-only schema
    registry. Every store failure surfaces as :class:`StoreError` with the
    store's exception chained; nothing is retried.

    ``update_attributes`` reads, merges and writes back without a
    transaction. Two concurrent updates of the same record race and the
    later write wins whole, discarding the other's changes.
    """

    relational = False

    def __init__(
        self,
        store: IDocumentStore,
        registry: ISchemaRegistry,
        *,
        name: str = "datastore",
    ) -> None:
        self._store = store
        self._registry = registry
        self.name = name

    @property
    def store(self) -> IDocumentStore:
        return self._store

    def types(self) -> list[str]:
        return ["db", "nosql", self.name]

    def get_model_definition(self, model: str) -> ModelDefinition:
        return self._registry.get_model_definition(model)

    def id_name(self, model: str) -> str:
        return self.get_model_definition(model).id_field

    # ── Lifecycle ────────────────────────────────────────────────

    async def connect(self) -> None:
        await self._store.connect()

    async def disconnect(self) -> None:
        await self._store.close()

    # ── Store calls ──────────────────────────────────────────────

    async def _call_store(
        self,
        operation: str,
        key_or_kind: StoreKey | str,
        call: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Issue one store call through the hook registry, mapping failures."""
        if isinstance(key_or_kind, StoreKey):
            kind = key_or_kind.kind
            attributes: dict[str, Any] = {
                "datastore.kind": kind,
                "datastore.operation": operation,
            }
            if key_or_kind.is_bound:
                attributes["datastore.identifier"] = key_or_kind.identifier
        else:
            kind = key_or_kind
            attributes = {"datastore.kind": kind, "datastore.operation": operation}

        try:
            return await get_hook_registry().execute_all(
                f"datastore.{operation}.{kind}", attributes, call
            )
        except ConnectorError:
            raise
        except Exception as exc:
            logger.debug("%s: store error on %s: %s", operation, kind, exc)
            raise StoreError(
                f"Store {operation} failed for {kind}: {exc}", operation=operation
            ) from exc

    # ── Reads ────────────────────────────────────────────────────

    async def find(
        self, model: str, filter_: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Return the records matching ``filter_`` in store order."""
        logger.debug("find: %s %r", model, filter_)
        definition = self.get_model_definition(model)
        query = compile_filter(definition, filter_)

        entities = await self._call_store(
            "query",
            model,
            lambda: self._store.query(
                query.kind, query.predicates, query.limit, query.offset
            ),
        )
        logger.debug("find: %d result(s) for %s", len(entities), model)
        return [decode_record(entity, definition.id_field) for entity in entities]

    async def all(
        self, model: str, filter_: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        return await self.find(model, filter_)

    async def find_by_id(self, model: str, entity_id: Any) -> list[dict[str, Any]]:
        """Look up one record; an empty list means it does not exist."""
        logger.debug("find_by_id: %s %r", model, entity_id)
        return await self.find(
            model, {"where": {self.id_name(model): entity_id}, "limit": 1}
        )

    async def count(self, model: str, where: Mapping[str, Any] | None = None) -> int:
        """Count matches by materialising them.

        The store has no aggregate; cost grows with the number of matches.
        The ORM calls this with identifier-scoped clauses, so the result is
        usually 0 or 1.
        """
        logger.debug("count: %s %r, redirecting to find", model, where)
        return len(await self.find(model, {"where": where} if where else None))

    # ── Writes ───────────────────────────────────────────────────

    async def create(self, model: str, data: Mapping[str, Any] | None) -> Any:
        """Insert a record and return its (possibly store-assigned) identifier."""
        logger.debug("create: %s %r", model, data)
        if not data:
            raise ValidationError("Cannot save an empty entity into the store")

        definition = self.get_model_definition(model)
        entity_id = data.get(definition.id_field)
        if entity_id is not None:
            logger.debug("create: using preset %s=%r", definition.id_field, entity_id)
        else:
            logger.debug(
                "create: no %s on %s, will be assigned on insert",
                definition.id_field,
                model,
            )
        projected = project(definition, data)
        if not projected:
            raise ValidationError(
                {"__root__": [f"Payload has no properties declared by {model}"]}
            )
        key = resolve_key(model, entity_id)
        record = strip_identifier(projected, definition.id_field)

        saved_key = await self._call_store(
            "save", key, lambda: self._store.save(key, record)
        )
        if saved_key is None or not saved_key.is_bound:
            raise StoreError(
                f"Store did not return an identifier for {model}", operation="save"
            )
        logger.debug("create: stored %s", saved_key)
        return saved_key.identifier

    async def update_attributes(
        self, model: str, entity_id: Any, data: Mapping[str, Any] | None
    ) -> Any:
        """Overlay ``data`` onto the stored record and write it back whole."""
        logger.debug("update_attributes: %s %r %r", model, entity_id, data)
        if entity_id is None:
            raise ValidationError(
                {"id": ["Cannot update an entity without an existing ID"]}
            )

        definition = self.get_model_definition(model)
        logger.debug("update_attributes: fetching pre-existing data first")
        found = await self.find_by_id(model, entity_id)
        if not found:
            raise EntityNotFoundError(model, entity_id)

        incoming = project(definition, data or {})
        record = merge_record(found[0], incoming, definition.id_field)
        key = resolve_key(model, entity_id)

        logger.debug("update_attributes: execute %s %r", key, record)
        await self._call_store("update", key, lambda: self._store.update(key, record))
        return entity_id

    async def destroy_all(
        self, model: str, where: Mapping[str, Any] | None = None
    ) -> None:
        """Delete the record named by the identifier in ``where``.

        Only the identifier is honoured; this is not a predicate delete.
        """
        logger.debug("destroy_all: %s %r", model, where)
        id_field = self.id_name(model)
        entity_id = (where or {}).get(id_field)
        if entity_id is None:
            raise ValidationError(
                {id_field: ["destroy_all requires an identifier in the where clause"]}
            )
        if isinstance(entity_id, Mapping):
            raise UnsupportedQueryError(
                f"destroy_all only accepts an identifier equality on {id_field!r}",
                clause={id_field: entity_id},
            )
        ignored = sorted(k for k in (where or {}) if k != id_field)
        if ignored:
            logger.warning(
                "destroy_all: ignoring non-identifier clauses on %s: %s",
                model,
                ", ".join(ignored),
            )

        key = resolve_key(model, entity_id)
        logger.debug("destroy_all: execute %s", key)
        await self._call_store("delete", key, lambda: self._store.delete(key))
