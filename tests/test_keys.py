"""Tests for store keys and identifier generators."""

from __future__ import annotations

from bson import ObjectId

from datastore_connector.keys import (
    ObjectIdGenerator,
    SequentialIDGenerator,
    StoreKey,
    resolve_key,
)


def test_resolve_key_with_identifier_is_bound() -> None:
    key = resolve_key("Note", 42)
    assert key == StoreKey("Note", 42)
    assert key.is_bound


def test_resolve_key_without_identifier_is_unbound() -> None:
    key = resolve_key("Note")
    assert key.kind == "Note"
    assert key.identifier is None
    assert not key.is_bound


def test_zero_is_a_bound_identifier() -> None:
    assert resolve_key("Note", 0).is_bound


def test_bind_returns_new_key() -> None:
    unbound = resolve_key("Note")
    bound = unbound.bind("abc")
    assert bound == StoreKey("Note", "abc")
    assert unbound.identifier is None


def test_str_representation() -> None:
    assert str(resolve_key("Note", 7)) == "Note:7"
    assert str(resolve_key("Note")) == "Note:<unbound>"


def test_sequential_generator_counts_up() -> None:
    gen = SequentialIDGenerator()
    assert [gen.next_id() for _ in range(3)] == [1, 2, 3]
    assert SequentialIDGenerator(start=100).next_id() == 100


def test_object_id_generator_returns_valid_strings() -> None:
    gen = ObjectIdGenerator()
    first, second = gen.next_id(), gen.next_id()
    assert ObjectId.is_valid(first)
    assert first != second
