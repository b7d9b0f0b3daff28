"""Bootstrap a connector from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .adapters.mongo import MongoConnectionManager, MongoDocumentStore
from .connector import DocumentStoreConnector
from .settings import DatastoreSettings

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .schema import ISchemaRegistry

logger = logging.getLogger("datastore_connector.factory")


async def initialize(
    settings: DatastoreSettings | Mapping[str, Any],
    registry: ISchemaRegistry,
    *,
    name: str = "datastore",
) -> DocumentStoreConnector:
    """Build, connect and return a connector backed by MongoDB."""
    resolved = DatastoreSettings.from_mapping(settings)
    connection = MongoConnectionManager(
        resolved.url,
        database=resolved.database,
        server_selection_timeout_ms=resolved.server_selection_timeout_ms,
        connect_timeout_ms=resolved.connect_timeout_ms,
    )
    store = MongoDocumentStore(connection, namespace=resolved.namespace)
    connector = DocumentStoreConnector(store, registry, name=name)
    await connector.connect()
    logger.info(
        "Connector %s ready (database=%s, namespace=%s)",
        name,
        resolved.database,
        resolved.namespace,
    )
    return connector
