"""Store keys and identifier generation."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class StoreKey:
    """Address of one record: ``(kind, identifier)``.

    An unbound key (``identifier is None``) asks the store to assign an
    identifier on the next write.
    """

    kind: str
    identifier: Any = None

    @property
    def is_bound(self) -> bool:
        return self.identifier is not None

    def bind(self, identifier: Any) -> StoreKey:
        """Return a copy of this key bound to ``identifier``."""
        return StoreKey(self.kind, identifier)

    def __str__(self) -> str:
        if self.is_bound:
            return f"{self.kind}:{self.identifier}"
        return f"{self.kind}:<unbound>"


def resolve_key(model: str, identifier: Any = None) -> StoreKey:
    """Map a model and an optional identifier onto a store key."""
    return StoreKey(model, identifier)


class IIDGenerator(Protocol):
    """
    Protocol for identifier generation strategies used when a store
    binds an unbound key.
    """

    def next_id(self) -> Any:
        """Generates the next unique identifier."""
        ...


class SequentialIDGenerator(IIDGenerator):
    """Monotonic integer identifiers starting at ``start``."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)


class ObjectIdGenerator(IIDGenerator):
    """String form of a fresh BSON ObjectId."""

    def next_id(self) -> str:
        from bson import ObjectId

        return str(ObjectId())
