"""Escalation service — records operator work items and alerts the operator channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from site_editor.models.escalation import Escalation, EscalationKind, EscalationPriority

if TYPE_CHECKING:
    from site_editor.database.repositories.escalations import EscalationRepository
    from site_editor.services.notifications import Notifier

logger = logging.getLogger(__name__)

_PRIORITIES: dict[EscalationKind, EscalationPriority] = {
    EscalationKind.COMPLEX_EDIT: EscalationPriority.MEDIUM,
    EscalationKind.EDIT_FAILED: EscalationPriority.HIGH,
    EscalationKind.UNDO_UNAVAILABLE: EscalationPriority.HIGH,
    EscalationKind.VERSION_CONFLICT: EscalationPriority.HIGH,
    EscalationKind.BURST_HOLD: EscalationPriority.LOW,
    EscalationKind.HOURLY_CAP: EscalationPriority.MEDIUM,
    EscalationKind.HIGH_MAINTENANCE: EscalationPriority.LOW,
}


class EscalationService:
    def __init__(self, escalations: EscalationRepository, notifier: Notifier) -> None:
        self._escalations = escalations
        self._notifier = notifier

    async def escalate(
        self,
        subject_id: str,
        kind: EscalationKind,
        reason: str,
        *,
        edit_request_id: str | None = None,
        priority: EscalationPriority | None = None,
    ) -> Escalation:
        """Store an escalation and send its reason to the operator channel."""
        escalation = Escalation(
            subject_id=subject_id,
            kind=kind,
            reason=reason,
            priority=priority or _PRIORITIES[kind],
            edit_request_id=edit_request_id,
        )
        await self._escalations.create(escalation)
        logger.info(
            "Escalation raised — subject=%s kind=%s request=%s",
            subject_id,
            kind,
            edit_request_id,
        )
        await self._notifier.notify_operator(
            subject_id,
            f"[{escalation.priority}] {kind}: {reason}",
            trigger=kind,
            edit_request_id=edit_request_id,
        )
        return escalation

    async def attach_draft(self, escalation: Escalation, content: str, summary: str) -> Escalation:
        """Attach a non-authoritative draft for the operator to review.

        Only the draft fields are written, so a resolution recorded while the
        draft was being generated is kept.
        """
        return await self._escalations.set_draft(escalation.id, content, summary)

    async def list_open(self, limit: int = 100) -> list[Escalation]:
        return await self._escalations.list_open(limit)
