"""Version history archive — a bounded rolling backup of saved document versions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from site_editor.models.snapshot import SnapshotSource, VersionSnapshot

if TYPE_CHECKING:
    from site_editor.database.repositories.snapshots import SnapshotRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_SNAPSHOTS = 20


class VersionArchive:
    """Append snapshots and prune the oldest beyond ``max_snapshots`` per document."""

    def __init__(
        self,
        snapshots: SnapshotRepository,
        *,
        max_snapshots: int = DEFAULT_MAX_SNAPSHOTS,
    ) -> None:
        self._snapshots = snapshots
        self._max_snapshots = max(1, max_snapshots)

    async def record(
        self,
        document_id: str,
        content: str,
        version: int,
        source: SnapshotSource,
    ) -> VersionSnapshot:
        snapshot = VersionSnapshot(
            document_id=document_id,
            content=content,
            version=version,
            source=source,
        )
        await self._snapshots.create(snapshot)
        await self._prune(document_id)
        logger.info(
            "Snapshot recorded — document=%s version=%s source=%s",
            document_id,
            version,
            source,
        )
        return snapshot

    async def _prune(self, document_id: str) -> None:
        existing = await self._snapshots.list_by_document(document_id)
        for stale in existing[self._max_snapshots :]:
            await self._snapshots.delete(stale)
            logger.debug(
                "Snapshot pruned — document=%s version=%s", document_id, stale.version
            )

    async def history(self, document_id: str) -> list[VersionSnapshot]:
        """Snapshots newest first."""
        return await self._snapshots.list_by_document(document_id)

    async def latest(self, document_id: str) -> VersionSnapshot | None:
        snapshots = await self.history(document_id)
        return snapshots[0] if snapshots else None
