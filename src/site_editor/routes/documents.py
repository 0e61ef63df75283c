"""Document routes — read, manual save and version history."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from site_editor.auth.middleware import require_authenticated_user
from site_editor.database.repositories.documents import DocumentRepository
from site_editor.models.snapshot import SnapshotSource
from site_editor.routes.deps import get_archive, get_documents, get_version_store
from site_editor.services.archive import VersionArchive
from site_editor.services.version_store import VersionStore

logger = logging.getLogger(__name__)

MAX_DOCUMENT_BYTES = 2 * 1024 * 1024

router = APIRouter(
    prefix="/documents",
    tags=["documents"],
    dependencies=[Depends(require_authenticated_user)],
)


class SaveDocumentBody(BaseModel):
    content: str
    expected_version: int = Field(ge=0)
    subject_name: str = ""


@router.get("/{subject_id}")
async def get_document(
    store: Annotated[VersionStore, Depends(get_version_store)],
    subject_id: str,
) -> dict[str, Any]:
    document = await store.read(subject_id)
    return document.model_dump(mode="json")


@router.put("/{subject_id}")
async def save_document(
    store: Annotated[VersionStore, Depends(get_version_store)],
    documents: Annotated[DocumentRepository, Depends(get_documents)],
    archive: Annotated[VersionArchive, Depends(get_archive)],
    subject_id: str,
    body: SaveDocumentBody,
) -> dict[str, Any]:
    """Save operator-edited content against ``expected_version``.

    ``expected_version=0`` creates the document when the subject has none.
    A stale version is answered with 409 and nothing is written.
    """
    if len(body.content.encode("utf-8")) > MAX_DOCUMENT_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Document exceeds the 2 MB limit",
        )

    if body.expected_version == 0 and await documents.get_for_subject(subject_id) is None:
        document = await documents.create_for_subject(
            subject_id, body.content, subject_name=body.subject_name
        )
        await archive.record(document.id, document.content, document.version, SnapshotSource.OPERATOR)
        logger.info("Document created — subject=%s", subject_id)
        return document.model_dump(mode="json")

    document = await store.save(
        subject_id,
        body.content,
        body.expected_version,
        source=SnapshotSource.OPERATOR,
    )
    return document.model_dump(mode="json")


@router.get("/{subject_id}/history")
async def document_history(
    archive: Annotated[VersionArchive, Depends(get_archive)],
    subject_id: str,
) -> list[dict[str, Any]]:
    """Archived versions, newest first."""
    return [snapshot.model_dump(mode="json") for snapshot in await archive.history(subject_id)]
