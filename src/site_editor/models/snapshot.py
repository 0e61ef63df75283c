"""Version snapshot model — rolling backups written after each save."""

from __future__ import annotations

from enum import StrEnum

from site_editor.models.base import DocumentBase


class SnapshotSource(StrEnum):
    """Enumerate the writers that produce a new document version."""

    AI_EDIT = "ai_edit"
    OPERATOR = "operator"
    UNDO = "undo"
    REJECT = "reject"


class VersionSnapshot(DocumentBase):
    """An immutable copy of document content at a given version."""

    document_id: str
    content: str
    source: SnapshotSource
    version: int
