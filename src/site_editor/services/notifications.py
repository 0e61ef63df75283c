"""Requester and operator notifications, keyed by trigger and subject."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from site_editor.events.contracts import Audience, NotificationRequest

if TYPE_CHECKING:
    from site_editor.events import EventPublisher
    from site_editor.models.edit_request import EditRequest

logger = logging.getLogger(__name__)

NOTIFICATION_EVENT = "notification"
PROMOTION_EVENT = "edit-promoted"


class NotificationTrigger(StrEnum):
    EDIT_LIVE = "edit_live"
    EDIT_IN_REVIEW = "edit_in_review"
    EDIT_ESCALATED = "edit_escalated"
    EDIT_FAILED = "edit_failed"
    EDIT_BATCHING = "edit_batching"
    EDIT_CONFIRMED = "edit_confirmed"
    EDIT_REVERTED = "edit_reverted"
    UNDO_ESCALATED = "undo_escalated"
    EDIT_APPROVED = "edit_approved"
    EDIT_REJECTED = "edit_rejected"
    OPERATOR_ALERT = "operator_alert"


# Requester copy never mentions technical detail, and only EDIT_LIVE,
# EDIT_CONFIRMED and EDIT_APPROVED say a change is live.
REQUESTER_MESSAGES: dict[NotificationTrigger, str] = {
    NotificationTrigger.EDIT_LIVE: "Done! That change is live on your site now{preview}.",
    NotificationTrigger.EDIT_IN_REVIEW: (
        "I made that change{preview}. The team is giving it a quick review before it goes live."
    ),
    NotificationTrigger.EDIT_ESCALATED: (
        "Got it! I've passed that to the team and a person will follow up with you shortly."
    ),
    NotificationTrigger.EDIT_FAILED: (
        "I'll pass that to the team, a person will follow up with you shortly!"
    ),
    NotificationTrigger.EDIT_BATCHING: (
        "Thanks! We're batching your requests together so nothing gets missed. "
        "A person will follow up once they're all in."
    ),
    NotificationTrigger.EDIT_CONFIRMED: "Done! Your changes are going live now.",
    NotificationTrigger.EDIT_REVERTED: (
        "No problem, I reverted that change. Let me know if you'd like something different!"
    ),
    NotificationTrigger.UNDO_ESCALATED: (
        "Got it. A person from the team will handle reverting that for you shortly."
    ),
    NotificationTrigger.EDIT_APPROVED: "Good news, your change has been approved and is live now!",
    NotificationTrigger.EDIT_REJECTED: (
        "The team took another look at that change and a person will follow up with you."
    ),
}


class Notifier:
    """Build requester and operator messages and hand them to the event publisher."""

    def __init__(self, publisher: EventPublisher, *, preview_base_url: str = "") -> None:
        self._publisher = publisher
        self._preview_base_url = preview_base_url.rstrip("/")

    def preview_url(self, subject_id: str) -> str:
        return f"{self._preview_base_url}/preview/{subject_id}" if self._preview_base_url else ""

    def requester_message(self, trigger: NotificationTrigger, subject_id: str) -> str:
        url = self.preview_url(subject_id)
        return REQUESTER_MESSAGES[trigger].format(preview=f" ({url})" if url else "")

    async def _send(self, request: NotificationRequest) -> NotificationRequest:
        await self._publisher.publish(NOTIFICATION_EVENT, request.model_dump(mode="json"))
        logger.info(
            "Notification sent — trigger=%s subject=%s audience=%s",
            request.trigger,
            request.subject_id,
            request.audience,
        )
        return request

    async def notify_requester(
        self,
        trigger: NotificationTrigger,
        subject_id: str,
        *,
        edit_request_id: str | None = None,
    ) -> NotificationRequest:
        """Send the canned requester message for ``trigger``."""
        return await self._send(
            NotificationRequest(
                trigger=trigger,
                subject_id=subject_id,
                audience=Audience.REQUESTER,
                message=self.requester_message(trigger, subject_id),
                edit_request_id=edit_request_id,
            )
        )

    async def notify_operator(
        self,
        subject_id: str,
        message: str,
        *,
        trigger: str = NotificationTrigger.OPERATOR_ALERT,
        edit_request_id: str | None = None,
    ) -> NotificationRequest:
        """Send a free-form alert to the operator channel."""
        return await self._send(
            NotificationRequest(
                trigger=trigger,
                subject_id=subject_id,
                audience=Audience.OPERATOR,
                message=message,
                edit_request_id=edit_request_id,
            )
        )

    async def promote(self, edit_request: EditRequest) -> None:
        """Signal downstream release that a confirmed edit is ready to ship."""
        await self._publisher.publish(
            PROMOTION_EVENT,
            {
                "edit_request_id": edit_request.id,
                "subject_id": edit_request.subject_id,
                "version": edit_request.saved_version,
                "approved_by": edit_request.approved_by,
            },
        )
        logger.info(
            "Edit promoted — request=%s subject=%s",
            edit_request.id,
            edit_request.subject_id,
        )
