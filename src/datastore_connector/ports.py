"""Ports: the store boundary and the CRUD surface consumed by the ORM."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .keys import StoreKey
    from .query import Predicate


@dataclass
class StoreEntity:
    """A raw stored record: its key plus an opaque property bag."""

    key: StoreKey
    data: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class IDocumentStore(Protocol):
    """
    Key-addressed document store with conjunctive equality queries.

    ``save`` inserts (binding an unbound key) and returns the bound key;
    ``update`` replaces the whole property bag of an existing record.
    """

    async def connect(self) -> None: ...

    async def close(self) -> None: ...

    async def query(
        self,
        kind: str,
        predicates: Sequence[Predicate],
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[StoreEntity]: ...

    async def get(self, key: StoreKey) -> StoreEntity | None: ...

    async def save(self, key: StoreKey, data: Mapping[str, Any]) -> StoreKey: ...

    async def update(self, key: StoreKey, data: Mapping[str, Any]) -> None: ...

    async def delete(self, key: StoreKey) -> None: ...


@runtime_checkable
class IConnector(Protocol):
    """
    CRUD surface a host ORM drives.

    Records are plain dicts with the identifier under the model's id field.
    ``find_by_id`` returns a list of at most one record; an empty list means
    not found.
    """

    relational: bool

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def find(
        self, model: str, filter_: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    async def all(
        self, model: str, filter_: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    async def find_by_id(self, model: str, entity_id: Any) -> list[dict[str, Any]]: ...

    async def create(self, model: str, data: Mapping[str, Any] | None) -> Any: ...

    async def update_attributes(
        self, model: str, entity_id: Any, data: Mapping[str, Any] | None
    ) -> Any: ...

    async def destroy_all(
        self, model: str, where: Mapping[str, Any] | None = None
    ) -> None: ...

    async def count(
        self, model: str, where: Mapping[str, Any] | None = None
    ) -> int: ...
