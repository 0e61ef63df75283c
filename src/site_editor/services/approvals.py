"""Operator approvals — list, approve, reject and re-process edit requests."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from site_editor.exceptions import InvalidTransition
from site_editor.models.edit_request import EditFlowState
from site_editor.models.snapshot import SnapshotSource
from site_editor.services.notifications import NotificationTrigger

if TYPE_CHECKING:
    from site_editor.database.repositories.edit_requests import EditRequestRepository
    from site_editor.database.repositories.escalations import EscalationRepository
    from site_editor.models.edit_request import EditRequest
    from site_editor.pipeline.router import EditRouter
    from site_editor.services.notifications import Notifier
    from site_editor.services.version_store import VersionStore

logger = logging.getLogger(__name__)

_REVIEWABLE = frozenset({EditFlowState.AWAITING_APPROVAL, EditFlowState.ESCALATED})


class ApprovalService:
    """Human decisions on edit requests.

    Approving an escalated request records that an operator handled it by
    hand; nothing is written to the document here. Rejecting a request whose
    edit was already saved restores the pre-edit snapshot against the version
    that edit produced, so any later save surfaces as ``VersionConflict``.
    """

    def __init__(
        self,
        *,
        edit_requests: EditRequestRepository,
        escalations: EscalationRepository,
        version_store: VersionStore,
        router: EditRouter,
        notifier: Notifier,
    ) -> None:
        self._edit_requests = edit_requests
        self._escalations = escalations
        self._version_store = version_store
        self._router = router
        self._notifier = notifier

    async def list_requests(
        self,
        *,
        state: EditFlowState | None = None,
        subject_id: str | None = None,
        limit: int = 100,
    ) -> list[EditRequest]:
        return await self._edit_requests.list_recent(
            state=state, subject_id=subject_id, limit=limit
        )

    async def get(self, edit_request_id: str) -> EditRequest | None:
        return await self._edit_requests.get_by_id(edit_request_id)

    @staticmethod
    def _require_reviewable(edit_request: EditRequest, target: EditFlowState) -> None:
        if edit_request.state not in _REVIEWABLE:
            raise InvalidTransition(edit_request.state.value, target.value)

    async def approve(self, edit_request: EditRequest, approved_by: str) -> EditRequest:
        self._require_reviewable(edit_request, EditFlowState.CONFIRMED)
        edit_request.transition(EditFlowState.CONFIRMED)
        edit_request.approved_by = approved_by
        edit_request.approved_at = datetime.now(UTC)
        edit_request.awaiting_reply = False
        await self._edit_requests.save(edit_request)
        await self._resolve_escalations(edit_request)
        logger.info("Edit approved — id=%s by=%s", edit_request.id, approved_by)

        await self._notifier.promote(edit_request)
        await self._notifier.notify_requester(
            NotificationTrigger.EDIT_APPROVED,
            edit_request.subject_id,
            edit_request_id=edit_request.id,
        )
        return edit_request

    async def reject(self, edit_request: EditRequest, reason: str, rejected_by: str) -> EditRequest:
        self._require_reviewable(edit_request, EditFlowState.FAILED)
        if edit_request.saved_version is not None and edit_request.pre_edit_snapshot is not None:
            # Only the version this edit produced may be reverted; anything
            # saved since then is a conflict.
            await self._version_store.save(
                edit_request.subject_id,
                edit_request.pre_edit_snapshot,
                edit_request.saved_version,
                source=SnapshotSource.REJECT,
            )
            logger.info(
                "Rejected edit reverted — id=%s subject=%s",
                edit_request.id,
                edit_request.subject_id,
            )

        edit_request.transition(EditFlowState.FAILED)
        edit_request.rejection_reason = reason or "rejected"
        edit_request.approved_by = None
        edit_request.approved_at = None
        edit_request.awaiting_reply = False
        await self._edit_requests.save(edit_request)
        await self._resolve_escalations(edit_request)
        logger.info("Edit rejected — id=%s by=%s", edit_request.id, rejected_by)

        await self._notifier.notify_requester(
            NotificationTrigger.EDIT_REJECTED,
            edit_request.subject_id,
            edit_request_id=edit_request.id,
        )
        return edit_request

    async def process(self, edit_request: EditRequest) -> EditRequest:
        """Re-run routing for a pending request."""
        return await self._router.process(edit_request)

    async def _resolve_escalations(self, edit_request: EditRequest) -> None:
        for escalation in await self._escalations.get_for_request(edit_request.id):
            if escalation.resolved_at is None:
                await self._escalations.resolve(escalation)
