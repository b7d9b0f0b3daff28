"""MongoConnectionManager — one Motor client bound to one database."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...exceptions import StoreConnectionError

if TYPE_CHECKING:
    from motor.motor_asyncio import (
        AsyncIOMotorClient,
        AsyncIOMotorCollection,
        AsyncIOMotorDatabase,
    )

logger = logging.getLogger("datastore_connector.mongo")


class MongoConnectionManager:
    """Hand out collections of a single database over a lazily built client.

    A ready-made client (e.g. a mongomock one in tests) may be injected;
    an injected client is treated as already connected.
    """

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        *,
        database: str,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        client: AsyncIOMotorClient[Any] | None = None,
        **client_options: Any,
    ) -> None:
        self._url = url
        self._database_name = database
        self._client_options = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "connectTimeoutMS": connect_timeout_ms,
            **client_options,
        }
        self._client = client
        self._database: AsyncIOMotorDatabase[Any] | None = (
            client.get_database(database) if client is not None else None
        )

    @property
    def database_name(self) -> str:
        return self._database_name

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    async def connect(self) -> AsyncIOMotorDatabase[Any]:
        """Build the client on first use and return the bound database."""
        if self._database is not None:
            return self._database
        try:
            from motor.motor_asyncio import AsyncIOMotorClient
        except ImportError as e:
            raise StoreConnectionError(
                "motor is required; install with motor>=3.3.0"
            ) from e
        try:
            self._client = AsyncIOMotorClient(self._url, **self._client_options)
        except Exception as e:
            raise StoreConnectionError(str(e)) from e
        self._database = self._client.get_database(self._database_name)
        logger.debug("connected to database %s", self._database_name)
        return self._database

    def collection(self, name: str) -> AsyncIOMotorCollection[Any]:
        if self._database is None:
            raise StoreConnectionError("Not connected; call connect() first")
        return self._database.get_collection(name)

    async def ping(self) -> None:
        """Round-trip to the server; raises when it cannot be reached."""
        if self._database is None:
            raise StoreConnectionError("Not connected; call connect() first")
        try:
            await self._database.command("ping")
        except Exception as e:
            raise StoreConnectionError(f"ping failed: {e}") from e

    def close(self) -> None:
        """Drop the client; Motor's close() is synchronous."""
        if self._client is not None:
            self._client.close()
        self._client = None
        self._database = None
