"""Version store — the only write path to a subject's document."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from site_editor.exceptions import DocumentNotFound

if TYPE_CHECKING:
    from site_editor.database.repositories.documents import DocumentRepository
    from site_editor.models.document import SiteDocument
    from site_editor.models.snapshot import SnapshotSource
    from site_editor.services.archive import VersionArchive

logger = logging.getLogger(__name__)


class VersionStore:
    """Compare-and-swap saves plus archive bookkeeping.

    ``save`` either commits exactly one new version or raises
    ``VersionConflict``. It never retries. Archiving happens after the
    commit and cannot fail it.
    """

    def __init__(self, documents: DocumentRepository, archive: VersionArchive) -> None:
        self._documents = documents
        self._archive = archive

    async def read(self, subject_id: str) -> SiteDocument:
        """Return the current document or raise ``DocumentNotFound``."""
        document = await self._documents.get_for_subject(subject_id)
        if document is None:
            raise DocumentNotFound(subject_id)
        return document

    async def save(
        self,
        subject_id: str,
        new_content: str,
        expected_version: int,
        *,
        source: SnapshotSource,
    ) -> SiteDocument:
        document = await self._documents.save(subject_id, new_content, expected_version)
        try:
            await self._archive.record(document.id, new_content, document.version, source)
        except Exception:
            logger.exception(
                "Snapshot failed after save — subject=%s version=%s",
                subject_id,
                document.version,
            )
        return document
