"""Repository for the snapshots container (partitioned by /document_id)."""

from __future__ import annotations

from site_editor.database.repositories.base import BaseRepository
from site_editor.models.snapshot import VersionSnapshot


class SnapshotRepository(BaseRepository[VersionSnapshot]):
    container_name = "snapshots"
    model_class = VersionSnapshot

    async def list_by_document(self, document_id: str) -> list[VersionSnapshot]:
        """Fetch every snapshot of a document, newest version first."""
        return await self.query(
            "SELECT * FROM c WHERE c.document_id = @document_id ORDER BY c.version DESC",
            [{"name": "@document_id", "value": document_id}],
        )

    async def delete(self, snapshot: VersionSnapshot) -> None:
        """Hard-delete a pruned snapshot."""
        await self._container.delete_item(item=snapshot.id, partition_key=snapshot.document_id)
