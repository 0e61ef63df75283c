"""Escalation model — operator-facing records raised by the edit pipeline."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from site_editor.models.base import DocumentBase


class EscalationKind(StrEnum):
    COMPLEX_EDIT = "complex_edit"
    EDIT_FAILED = "edit_failed"
    UNDO_UNAVAILABLE = "undo_unavailable"
    VERSION_CONFLICT = "version_conflict"
    BURST_HOLD = "burst_hold"
    HOURLY_CAP = "hourly_cap"
    HIGH_MAINTENANCE = "high_maintenance"


class EscalationPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Escalation(DocumentBase):
    """Something an operator needs to look at.

    ``reason`` may contain technical detail; it is never shown to the
    requester. ``draft_content`` is a non-authoritative proposal and is never
    written to the live document.
    """

    subject_id: str
    kind: EscalationKind
    reason: str = ""
    priority: EscalationPriority = EscalationPriority.MEDIUM
    edit_request_id: str | None = None
    draft_content: str | None = None
    draft_summary: str | None = None
    resolved_at: datetime | None = None
