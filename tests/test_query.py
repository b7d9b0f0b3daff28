"""Unit tests for filter compilation."""

from __future__ import annotations

import logging

import pytest

from datastore_connector.exceptions import UnsupportedQueryError, ValidationError
from datastore_connector.keys import StoreKey
from datastore_connector.query import (
    KeyPredicate,
    NativeQuery,
    PropertyPredicate,
    compile_filter,
)
from datastore_connector.schema import ModelDefinition


@pytest.fixture
def note():
    return ModelDefinition.of("Note", ["id", "title", "rank"])


def test_empty_filter_matches_everything(note) -> None:
    assert compile_filter(note, None) == NativeQuery(kind="Note")
    assert compile_filter(note, {}) == NativeQuery(kind="Note")
    assert compile_filter(note, {"where": {}}) == NativeQuery(kind="Note")


def test_property_equality(note) -> None:
    query = compile_filter(note, {"where": {"title": "hello"}})
    assert query.predicates == (PropertyPredicate("title", "hello"),)


def test_non_string_values_are_compiled(note) -> None:
    query = compile_filter(note, {"where": {"rank": 3}})
    assert query.predicates == (PropertyPredicate("rank", 3),)


def test_identifier_routes_to_key_predicate(note) -> None:
    query = compile_filter(note, {"where": {"id": 7}})
    assert query.predicates == (KeyPredicate(StoreKey("Note", 7)),)
    assert query.key_predicates == query.predicates
    assert query.property_predicates == ()


def test_custom_identifier_field() -> None:
    author = ModelDefinition.of("Author", ["uid", "name"], id_field="uid")
    query = compile_filter(author, {"where": {"uid": "a1", "id": "x"}})
    assert query.predicates == (
        KeyPredicate(StoreKey("Author", "a1")),
        PropertyPredicate("id", "x"),
    )


def test_and_is_flattened_into_conjunction(note) -> None:
    query = compile_filter(
        note,
        {"where": {"and": [{"title": "t"}, {"and": [{"rank": 1}, {"id": 2}]}]}},
    )
    assert query.predicates == (
        PropertyPredicate("title", "t"),
        PropertyPredicate("rank", 1),
        KeyPredicate(StoreKey("Note", 2)),
    )


def test_or_is_rejected(note, caplog) -> None:
    where = {"or": [{"rank": 1}, {"rank": 2}]}
    with caplog.at_level(logging.WARNING, logger="datastore_connector.query"):
        with pytest.raises(UnsupportedQueryError) as exc_info:
            compile_filter(note, {"where": where})
    assert exc_info.value.clause == where
    assert "OR" in caplog.text


def test_nested_or_inside_and_is_rejected(note) -> None:
    with pytest.raises(UnsupportedQueryError):
        compile_filter(
            note, {"where": {"and": [{"title": "t"}, {"or": [{"rank": 1}]}]}}
        )


def test_operator_objects_are_rejected(note) -> None:
    with pytest.raises(UnsupportedQueryError) as exc_info:
        compile_filter(note, {"where": {"rank": {"gt": 5}}})
    assert exc_info.value.clause == {"rank": {"gt": 5}}


def test_null_identifier_rejected(note) -> None:
    with pytest.raises(ValidationError):
        compile_filter(note, {"where": {"id": None}})


def test_and_requires_list(note) -> None:
    with pytest.raises(ValidationError):
        compile_filter(note, {"where": {"and": {"title": "t"}}})


def test_limit_and_offset_passed_through(note) -> None:
    query = compile_filter(note, {"where": {"title": "t"}, "limit": 10, "offset": 5})
    assert query.limit == 10
    assert query.offset == 5


@pytest.mark.parametrize("bad", ["10", 1.5, True])
def test_limit_must_be_integer(note, bad) -> None:
    with pytest.raises(ValidationError) as exc_info:
        compile_filter(note, {"limit": bad})
    assert "limit" in exc_info.value.errors


def test_unknown_filter_keys_are_logged(note, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="datastore_connector.query"):
        query = compile_filter(note, {"where": {"title": "t"}, "order": "rank DESC"})
    assert query.predicates == (PropertyPredicate("title", "t"),)
    assert "order" in caplog.text


@pytest.mark.parametrize(
    "where",
    [
        {"$expr": [1, 1]},
        {"$where": "true"},
        {"and": [{"title": "t"}, {"$expr": ["$rank", 2]}]},
    ],
)
def test_operator_keys_are_rejected(note, where) -> None:
    with pytest.raises(UnsupportedQueryError) as exc_info:
        compile_filter(note, {"where": where})
    assert next(iter(exc_info.value.clause)).startswith("$")


def test_nested_paths_are_rejected(note) -> None:
    with pytest.raises(UnsupportedQueryError) as exc_info:
        compile_filter(note, {"where": {"tags.x": 1}})
    assert exc_info.value.clause == {"tags.x": 1}


def test_empty_property_name_rejected(note) -> None:
    with pytest.raises(UnsupportedQueryError):
        compile_filter(note, {"where": {"": 1}})
