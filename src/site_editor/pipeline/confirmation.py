"""Confirmation handler — acts on the requester's reply after an edit was shown."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from site_editor.agents.classifier import ReplyIntent
from site_editor.exceptions import DocumentNotFound, UndoUnavailable, VersionConflict
from site_editor.models.edit_request import ComplexityTier, EditFlowState
from site_editor.models.escalation import EscalationKind
from site_editor.models.snapshot import SnapshotSource
from site_editor.services.notifications import NotificationTrigger

if TYPE_CHECKING:
    from site_editor.agents.classifier import ReplyClassifier
    from site_editor.database.repositories.edit_requests import EditRequestRepository
    from site_editor.models.edit_request import EditRequest
    from site_editor.pipeline.router import EditRouter
    from site_editor.services.escalations import EscalationService
    from site_editor.services.notifications import Notifier
    from site_editor.services.version_store import VersionStore

logger = logging.getLogger(__name__)

REQUESTER_APPROVER = "requester"


@dataclass(frozen=True)
class ConfirmationOutcome:
    """What happened to a reply.

    ``handled`` is False for unrelated messages, which belong to whatever
    general conversation handling sits outside the edit pipeline.
    """

    handled: bool
    intent: ReplyIntent
    reply_text: str | None = None
    follow_up_request: EditRequest | None = None


class ConfirmationHandler:
    def __init__(
        self,
        *,
        edit_requests: EditRequestRepository,
        classifier: ReplyClassifier,
        version_store: VersionStore,
        router: EditRouter,
        notifier: Notifier,
        escalations: EscalationService,
    ) -> None:
        self._edit_requests = edit_requests
        self._classifier = classifier
        self._version_store = version_store
        self._router = router
        self._notifier = notifier
        self._escalations = escalations

    async def handle_reply(
        self,
        edit_request_id: str,
        message: str,
        *,
        complexity: ComplexityTier = ComplexityTier.MEDIUM,
    ) -> ConfirmationOutcome:
        """Classify ``message`` and confirm, undo or chain a follow-up edit."""
        edit_request = await self._edit_requests.get_by_id(edit_request_id)
        if edit_request is None or not edit_request.awaiting_reply:
            return ConfirmationOutcome(handled=False, intent=ReplyIntent.UNRELATED)

        intent = await self._classifier.classify(message)
        logger.info("Reply received — request=%s intent=%s", edit_request_id, intent)

        if intent == ReplyIntent.CONFIRM:
            return await self._confirm(edit_request)
        if intent == ReplyIntent.UNDO:
            return await self._undo(edit_request)
        if intent == ReplyIntent.MORE_EDITS:
            return await self._more_edits(edit_request, message, complexity)
        return ConfirmationOutcome(handled=False, intent=intent)

    async def _confirm(self, edit_request: EditRequest) -> ConfirmationOutcome:
        if edit_request.state == EditFlowState.AWAITING_APPROVAL:
            edit_request.transition(EditFlowState.CONFIRMED)
        edit_request.approved_by = REQUESTER_APPROVER
        edit_request.approved_at = datetime.now(UTC)
        edit_request.awaiting_reply = False
        await self._edit_requests.save(edit_request)
        await self._notifier.promote(edit_request)
        sent = await self._notifier.notify_requester(
            NotificationTrigger.EDIT_CONFIRMED,
            edit_request.subject_id,
            edit_request_id=edit_request.id,
        )
        return ConfirmationOutcome(
            handled=True, intent=ReplyIntent.CONFIRM, reply_text=sent.message
        )

    async def _undo(self, edit_request: EditRequest) -> ConfirmationOutcome:
        edit_request.awaiting_reply = False
        try:
            await self.revert(edit_request)
        except UndoUnavailable as exc:
            return await self._escalate_undo(
                edit_request, EscalationKind.UNDO_UNAVAILABLE, str(exc)
            )
        except (VersionConflict, DocumentNotFound) as exc:
            return await self._escalate_undo(
                edit_request, EscalationKind.VERSION_CONFLICT, str(exc)
            )

        sent = await self._notifier.notify_requester(
            NotificationTrigger.EDIT_REVERTED,
            edit_request.subject_id,
            edit_request_id=edit_request.id,
        )
        return ConfirmationOutcome(handled=True, intent=ReplyIntent.UNDO, reply_text=sent.message)

    async def revert(self, edit_request: EditRequest) -> None:
        """Save the pre-edit snapshot as a new version and reset the request.

        Raises ``UndoUnavailable`` when there is nothing truthful to restore,
        and ``VersionConflict`` when the document moved past the version this
        edit saved.
        """
        if edit_request.pre_edit_snapshot is None or edit_request.saved_version is None:
            raise UndoUnavailable(edit_request.id)
        saved = await self._version_store.save(
            edit_request.subject_id,
            edit_request.pre_edit_snapshot,
            edit_request.saved_version,
            source=SnapshotSource.UNDO,
        )
        edit_request.transition(EditFlowState.PENDING)
        edit_request.post_edit_content = None
        edit_request.edit_summary = None
        edit_request.saved_version = None
        edit_request.approved_by = None
        edit_request.approved_at = None
        edit_request.awaiting_reply = False
        await self._edit_requests.save(edit_request)
        logger.info(
            "Edit undone — request=%s subject=%s version=%s",
            edit_request.id,
            edit_request.subject_id,
            saved.version,
        )

    async def _escalate_undo(
        self, edit_request: EditRequest, kind: EscalationKind, reason: str
    ) -> ConfirmationOutcome:
        await self._edit_requests.save(edit_request)
        await self._escalations.escalate(
            edit_request.subject_id,
            kind,
            f"undo could not be applied: {reason}",
            edit_request_id=edit_request.id,
        )
        sent = await self._notifier.notify_requester(
            NotificationTrigger.UNDO_ESCALATED,
            edit_request.subject_id,
            edit_request_id=edit_request.id,
        )
        return ConfirmationOutcome(handled=True, intent=ReplyIntent.UNDO, reply_text=sent.message)

    async def _more_edits(
        self,
        edit_request: EditRequest,
        message: str,
        complexity: ComplexityTier,
    ) -> ConfirmationOutcome:
        # A follow-up is not an approval: a medium edit stays in review.
        edit_request.awaiting_reply = False
        await self._edit_requests.save(edit_request)
        follow_up = await self._router.submit(edit_request.subject_id, message, complexity)
        return ConfirmationOutcome(
            handled=True,
            intent=ReplyIntent.MORE_EDITS,
            follow_up_request=follow_up,
        )
