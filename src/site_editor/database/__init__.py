"""Cosmos DB access layer."""

from site_editor.database.client import CosmosClient

__all__ = ["CosmosClient"]
