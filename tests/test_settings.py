"""Tests for DatastoreSettings."""

from __future__ import annotations

import pytest

from datastore_connector import DatastoreSettings, ValidationError


def test_defaults() -> None:
    settings = DatastoreSettings.from_mapping(
        {"url": "mongodb://db:27017", "database": "project-1"}
    )
    assert settings.namespace is None
    assert settings.server_selection_timeout_ms == 5000
    assert settings.connect_timeout_ms == 10000


def test_instance_passes_through() -> None:
    settings = DatastoreSettings(url="mongodb://db", database="p")
    assert DatastoreSettings.from_mapping(settings) is settings


def test_missing_fields_reported_per_field() -> None:
    with pytest.raises(ValidationError) as exc_info:
        DatastoreSettings.from_mapping({"namespace": "acme"})
    assert set(exc_info.value.errors) == {"url", "database"}


def test_unknown_keys_rejected() -> None:
    with pytest.raises(ValidationError) as exc_info:
        DatastoreSettings.from_mapping(
            {"url": "mongodb://db", "database": "p", "keyFilename": "x.json"}
        )
    assert "keyFilename" in exc_info.value.errors


def test_timeouts_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        DatastoreSettings.from_mapping(
            {"url": "mongodb://db", "database": "p", "connect_timeout_ms": 0}
        )
