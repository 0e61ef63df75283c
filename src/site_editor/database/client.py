"""Async Cosmos DB client initialization."""

from __future__ import annotations

import logging

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient as AzureCosmosClient
from azure.cosmos.aio import DatabaseProxy
from azure.cosmos.exceptions import CosmosHttpResponseError

from site_editor.config import CosmosConfig

logger = logging.getLogger(__name__)

CONTAINERS: dict[str, str] = {
    "documents": "/id",
    "edit_requests": "/id",
    "snapshots": "/document_id",
    "escalations": "/id",
}


class CosmosClient:
    """Manages the async Cosmos DB client and database reference."""

    def __init__(self, config: CosmosConfig) -> None:
        self._config = config
        self._client: AzureCosmosClient | None = None
        self._database: DatabaseProxy | None = None

    async def initialize(self, *, create_containers: bool = False) -> None:
        """Create the client and obtain a database reference.

        With ``create_containers`` the database and every container are
        created if missing, which is what the local emulator needs.
        """
        self._client = AzureCosmosClient(self._config.endpoint, credential=self._config.key)
        if not create_containers:
            self._database = self._client.get_database_client(self._config.database)
            return
        try:
            self._database = await self._client.create_database_if_not_exists(
                self._config.database
            )
            for name, partition_path in CONTAINERS.items():
                await self._database.create_container_if_not_exists(
                    id=name, partition_key=PartitionKey(path=partition_path)
                )
        except CosmosHttpResponseError as exc:
            await self.close()
            msg = f"Cosmos DB is not reachable at {self._config.endpoint}: {exc.message}"
            raise ConnectionError(msg) from exc
        logger.info("Cosmos containers ready — database=%s", self._config.database)

    async def close(self) -> None:
        """Close the underlying client."""
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None

    @property
    def database(self) -> DatabaseProxy:
        if self._database is None:
            raise RuntimeError("CosmosClient not initialized — call initialize() first")
        return self._database
