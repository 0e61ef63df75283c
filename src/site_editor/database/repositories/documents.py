"""Repository for the documents container (partitioned by /id == subject id)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, cast

from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from site_editor.database.repositories.base import BaseRepository, to_cosmos_timestamp
from site_editor.exceptions import DocumentNotFound, VersionConflict
from site_editor.models.document import SiteDocument

logger = logging.getLogger(__name__)

_HTTP_PRECONDITION_FAILED = 412


class DocumentRepository(BaseRepository[SiteDocument]):
    """Data access for site documents, including the conditional save."""

    container_name = "documents"
    model_class = SiteDocument

    async def get_for_subject(self, subject_id: str) -> SiteDocument | None:
        """Fetch the document owned by a subject."""
        return await self.get(subject_id, subject_id)

    async def create_for_subject(
        self,
        subject_id: str,
        content: str,
        *,
        subject_name: str = "",
    ) -> SiteDocument:
        """Create the subject's document at version 1."""
        document = SiteDocument(
            id=subject_id,
            subject_id=subject_id,
            content=content,
            version=1,
            subject_name=subject_name,
        )
        return await self.create(document)

    async def save(self, subject_id: str, new_content: str, expected_version: int) -> SiteDocument:
        """Set content and bump the version only if the stored version still matches.

        This is one server-side conditional patch: ``/content`` is set and
        ``/version`` incremented where ``c.version = expected_version``. A
        precondition failure means another writer got there first and is
        raised as ``VersionConflict``; it is never retried here.
        """
        operations: list[dict[str, Any]] = [
            {"op": "set", "path": "/content", "value": new_content},
            {"op": "incr", "path": "/version", "value": 1},
            {"op": "set", "path": "/updated_at", "value": to_cosmos_timestamp(datetime.now(UTC))},
        ]
        try:
            data = cast(
                "dict[str, Any]",
                await self._container.patch_item(
                    item=subject_id,
                    partition_key=subject_id,
                    patch_operations=operations,
                    filter_predicate=f"FROM c WHERE c.version = {int(expected_version)}",
                ),
            )
        except CosmosResourceNotFoundError as exc:
            raise DocumentNotFound(subject_id) from exc
        except CosmosHttpResponseError as exc:
            if exc.status_code == _HTTP_PRECONDITION_FAILED:
                logger.info(
                    "Save rejected — subject=%s expected_version=%s",
                    subject_id,
                    expected_version,
                )
                raise VersionConflict(subject_id, expected_version) from exc
            raise

        document = self.model_class.model_validate(data)
        logger.info("Document saved — subject=%s version=%s", subject_id, document.version)
        return document
