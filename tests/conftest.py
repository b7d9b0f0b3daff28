"""Shared fixtures for the datastore connector tests."""

from __future__ import annotations

import pytest
from mongomock_motor import AsyncMongoMockClient
from pydantic import BaseModel

from datastore_connector import (
    DocumentStoreConnector,
    InMemoryDocumentStore,
    ModelDefinition,
    MongoConnectionManager,
    MongoDocumentStore,
    SchemaRegistry,
)

# Sample model (name avoids pytest collecting it as a test class)
class AuthorModel(BaseModel):
    """Author read model, registered from its pydantic fields."""

    uid: str | None = None
    name: str
    country: str = ""


@pytest.fixture
def registry():
    """Schema registry with a ``Note`` kind and an ``Author`` kind."""
    schemas = SchemaRegistry(
        [ModelDefinition.of("Note", ["id", "title", "body", "rank", "tags"])]
    )
    schemas.register_model(AuthorModel, name="Author", id_field="uid")
    return schemas


@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def connector(memory_store, registry):
    return DocumentStoreConnector(memory_store, registry)


@pytest.fixture
def mongo_connection():
    """Connection manager wired to a mongomock client."""
    return MongoConnectionManager(
        "mongodb://mock:27017", database="test_db", client=AsyncMongoMockClient()
    )


@pytest.fixture
def mongo_store(mongo_connection):
    return MongoDocumentStore(mongo_connection, namespace="test")


@pytest.fixture
def mongo_connector(mongo_store, registry):
    return DocumentStoreConnector(mongo_store, registry)
