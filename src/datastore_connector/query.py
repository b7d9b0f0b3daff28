"""Compile ORM-style filter trees into conjunctive store queries."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from .exceptions import UnsupportedQueryError, ValidationError
from .keys import StoreKey, resolve_key

if TYPE_CHECKING:
    from .schema import ModelDefinition

logger = logging.getLogger("datastore_connector.query")

AND = "and"
OR = "or"

_PAGING_KEYS = frozenset({"limit", "offset"})
_FILTER_KEYS = frozenset({"where"}) | _PAGING_KEYS


@dataclass(frozen=True)
class KeyPredicate:
    """Key equality: matches the single record addressed by ``key``."""

    key: StoreKey


@dataclass(frozen=True)
class PropertyPredicate:
    """Property equality: ``name == value``."""

    name: str
    value: Any


Predicate = Union[KeyPredicate, PropertyPredicate]


@dataclass(frozen=True)
class NativeQuery:
    """A store query: predicates are implicitly AND-ed."""

    kind: str
    predicates: tuple[Predicate, ...] = ()
    limit: int | None = None
    offset: int | None = None

    @property
    def key_predicates(self) -> tuple[KeyPredicate, ...]:
        return tuple(p for p in self.predicates if isinstance(p, KeyPredicate))

    @property
    def property_predicates(self) -> tuple[PropertyPredicate, ...]:
        return tuple(p for p in self.predicates if isinstance(p, PropertyPredicate))


def _is_plain_property(name: Any) -> bool:
    """Operator names (``$...``) and nested paths (``a.b``) are not properties."""
    return (
        isinstance(name, str)
        and bool(name)
        and not name.startswith("$")
        and "." not in name
    )


def _compile_where(
    definition: ModelDefinition,
    where: Mapping[str, Any],
    out: list[Predicate],
) -> None:
    """Recursively append the predicates of ``where`` to ``out``."""
    if not isinstance(where, Mapping):
        raise ValidationError({"where": ["where clause must be a mapping"]})
    for name, value in where.items():
        if name == OR:
            logger.warning(
                "find: unsupported OR clause on %s: %r", definition.name, value
            )
            raise UnsupportedQueryError(
                f"OR clauses are not supported by the store (model {definition.name!r})",
                clause={OR: value},
            )
        if name == AND:
            if not isinstance(value, (list, tuple)):
                raise ValidationError({AND: ["and clause must be a list of filters"]})
            for sub in value:
                _compile_where(definition, sub, out)
            continue
        if not _is_plain_property(name):
            logger.warning(
                "find: rejecting non-property filter key on %s: %r",
                definition.name,
                name,
            )
            raise UnsupportedQueryError(
                f"Filter keys must name a single top-level property; got {name!r}",
                clause={name: value},
            )
        if isinstance(value, Mapping):
            raise UnsupportedQueryError(
                f"Only equality is supported; got operator clause on {name!r}",
                clause={name: value},
            )
        if name == definition.id_field:
            if value is None:
                raise ValidationError({name: ["identifier filter must not be null"]})
            logger.debug("find: adding filter __key__ = %r", value)
            out.append(KeyPredicate(resolve_key(definition.name, value)))
        else:
            logger.debug("find: adding filter %s = %r", name, value)
            out.append(PropertyPredicate(name, value))


def _paging_value(filter_: Mapping[str, Any], name: str) -> int | None:
    value = filter_.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError({name: [f"{name} must be an integer"]})
    return value


def compile_filter(
    definition: ModelDefinition, filter_: Mapping[str, Any] | None
) -> NativeQuery:
    """Compile ``{where?, limit?, offset?}`` into a :class:`NativeQuery`.

    Identifier equality becomes a key predicate, every other leaf a property
    equality predicate. ``or`` clauses and operator objects raise
    :class:`UnsupportedQueryError` instead of returning a partial answer.
    """
    if not filter_:
        return NativeQuery(kind=definition.name)
    if not isinstance(filter_, Mapping):
        raise ValidationError({"filter": ["filter must be a mapping"]})

    ignored = sorted(set(filter_) - _FILTER_KEYS)
    if ignored:
        logger.warning(
            "find: ignoring unsupported filter keys on %s: %s",
            definition.name,
            ", ".join(ignored),
        )

    predicates: list[Predicate] = []
    where = filter_.get("where")
    if where:
        _compile_where(definition, where, predicates)

    query = NativeQuery(
        kind=definition.name,
        predicates=tuple(predicates),
        limit=_paging_value(filter_, "limit"),
        offset=_paging_value(filter_, "offset"),
    )
    logger.debug("find: compiled %s", query)
    return query
