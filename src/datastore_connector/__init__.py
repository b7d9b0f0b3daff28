"""Document-store connector for ORM-style CRUD.

Translates where/limit/offset filters and partial updates into conjunctive
equality queries and whole-record writes against a key-addressed store.
"""

from __future__ import annotations

from .adapters.memory import InMemoryDocumentStore
from .adapters.mongo import MongoConnectionManager, MongoDocumentStore
from .connector import DocumentStoreConnector
from .exceptions import (
    ConnectorError,
    EntityNotFoundError,
    NotFoundError,
    StoreConnectionError,
    StoreError,
    UnknownModelError,
    UnsupportedQueryError,
    ValidationError,
)
from .factory import initialize
from .instrumentation import (
    HookRegistry,
    LoggingHook,
    get_hook_registry,
    install_logging_hook,
    set_hook_registry,
)
from .keys import (
    IIDGenerator,
    ObjectIdGenerator,
    SequentialIDGenerator,
    StoreKey,
    resolve_key,
)
from .ports import IConnector, IDocumentStore, StoreEntity
from .query import KeyPredicate, NativeQuery, PropertyPredicate, compile_filter
from .records import decode_record, merge_record, strip_identifier
from .schema import ISchemaRegistry, ModelDefinition, SchemaRegistry, project
from .settings import DatastoreSettings

__all__ = [
    # Connector
    "DocumentStoreConnector",
    "initialize",
    "DatastoreSettings",
    # Ports
    "IConnector",
    "IDocumentStore",
    "StoreEntity",
    # Stores
    "InMemoryDocumentStore",
    "MongoConnectionManager",
    "MongoDocumentStore",
    # Translation
    "StoreKey",
    "resolve_key",
    "IIDGenerator",
    "SequentialIDGenerator",
    "ObjectIdGenerator",
    "ModelDefinition",
    "ISchemaRegistry",
    "SchemaRegistry",
    "project",
    "KeyPredicate",
    "PropertyPredicate",
    "NativeQuery",
    "compile_filter",
    "merge_record",
    "decode_record",
    "strip_identifier",
    # Instrumentation
    "HookRegistry",
    "LoggingHook",
    "get_hook_registry",
    "set_hook_registry",
    "install_logging_hook",
    # Exceptions
    "ConnectorError",
    "ValidationError",
    "UnknownModelError",
    "NotFoundError",
    "EntityNotFoundError",
    "UnsupportedQueryError",
    "StoreError",
    "StoreConnectionError",
]
