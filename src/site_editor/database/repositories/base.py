"""Generic repository over a single Cosmos DB container."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, cast

from azure.cosmos.exceptions import CosmosResourceNotFoundError

from site_editor.models.base import DocumentBase

if TYPE_CHECKING:
    from azure.cosmos.aio import DatabaseProxy


def to_cosmos_timestamp(value: datetime) -> str:
    """Format a datetime the way pydantic serializes it into documents."""
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


T = TypeVar("T", bound=DocumentBase)


class BaseRepository(Generic[T]):
    """CRUD and query helpers shared by every container repository."""

    container_name: ClassVar[str]
    model_class: type[T]

    def __init__(self, database: DatabaseProxy) -> None:
        self._container = database.get_container_client(self.container_name)

    @staticmethod
    def _dump(item: DocumentBase) -> dict[str, Any]:
        return item.model_dump(mode="json")

    async def create(self, item: T) -> T:
        """Insert a new document."""
        await self._container.create_item(body=self._dump(item))
        return item

    async def get(self, item_id: str, partition_key: str) -> T | None:
        """Fetch one document, or None when it does not exist."""
        try:
            data = cast(
                "dict[str, Any]",
                await self._container.read_item(item=item_id, partition_key=partition_key),
            )
        except CosmosResourceNotFoundError:
            return None
        return self.model_class.model_validate(data)

    async def update(self, item: T, partition_key: str) -> T:  # noqa: ARG002
        """Replace a document with the in-memory copy."""
        item.touch()
        await self._container.replace_item(item=item.id, body=self._dump(item))
        return item

    async def query(
        self,
        query: str,
        parameters: list[dict[str, Any]] | None = None,
    ) -> list[T]:
        """Run a SQL query and validate each row into the model class."""
        results: list[T] = []
        async for item in self._container.query_items(query=query, parameters=parameters or []):
            results.append(self.model_class.model_validate(item))
        return results
