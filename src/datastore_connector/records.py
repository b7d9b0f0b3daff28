"""Record shaping: merge-as-update and decoding of stored entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .ports import StoreEntity


def strip_identifier(record: Mapping[str, Any], id_field: str) -> dict[str, Any]:
    """Copy ``record`` without ``id_field``; identifiers live in the key."""
    return {k: v for k, v in record.items() if k != id_field}


def merge_record(
    prior: Mapping[str, Any] | None,
    incoming: Mapping[str, Any],
    id_field: str,
) -> dict[str, Any]:
    """Overlay ``incoming`` onto ``prior`` and drop the identifier field.

    The overlay is shallow: a nested value in ``incoming`` replaces the
    prior value whole. Neither argument is mutated.
    """
    if prior is None:
        raise NotFoundError("Cannot merge onto a missing record")
    merged = dict(prior)
    merged.update(incoming)
    return strip_identifier(merged, id_field)


def decode_record(entity: StoreEntity, id_field: str) -> dict[str, Any]:
    """Turn a stored entity into an ORM row with its identifier injected."""
    record = dict(entity.data)
    record[id_field] = entity.key.identifier
    return record
