"""Tests for requester and operator notifications."""

from unittest.mock import AsyncMock

import pytest

from site_editor.models.edit_request import EditRequest
from site_editor.services.notifications import REQUESTER_MESSAGES, NotificationTrigger, Notifier


@pytest.mark.unit
def test_only_live_triggers_claim_the_edit_is_live() -> None:
    live = {
        NotificationTrigger.EDIT_LIVE,
        NotificationTrigger.EDIT_CONFIRMED,
        NotificationTrigger.EDIT_APPROVED,
    }
    for trigger, template in REQUESTER_MESSAGES.items():
        if trigger not in live:
            assert "live" not in template.lower().replace("goes live", ""), trigger


@pytest.mark.unit
def test_failure_copy_promises_a_person() -> None:
    for trigger in (
        NotificationTrigger.EDIT_FAILED,
        NotificationTrigger.EDIT_ESCALATED,
        NotificationTrigger.UNDO_ESCALATED,
    ):
        assert "person" in REQUESTER_MESSAGES[trigger]


async def test_notify_requester_publishes_notification(publisher: AsyncMock) -> None:
    notifier = Notifier(publisher, preview_base_url="https://preview.example.com/")

    sent = await notifier.notify_requester(
        NotificationTrigger.EDIT_IN_REVIEW, "s-1", edit_request_id="er-1"
    )

    assert "https://preview.example.com/preview/s-1" in sent.message
    event_type, data = publisher.publish.call_args.args
    assert event_type == "notification"
    assert data["trigger"] == "edit_in_review"
    assert data["subject_id"] == "s-1"
    assert data["audience"] == "requester"
    assert data["edit_request_id"] == "er-1"


async def test_notify_operator_uses_free_text(publisher: AsyncMock) -> None:
    await Notifier(publisher).notify_operator("s-1", "proposal service timed out")

    data = publisher.publish.call_args.args[1]
    assert data["audience"] == "operator"
    assert data["trigger"] == "operator_alert"
    assert data["message"] == "proposal service timed out"


async def test_promote_publishes_release_event(publisher: AsyncMock) -> None:
    edit_request = EditRequest(subject_id="s-1", request_text="x", saved_version=4)

    await Notifier(publisher).promote(edit_request)

    event_type, data = publisher.publish.call_args.args
    assert event_type == "edit-promoted"
    assert data == {
        "edit_request_id": edit_request.id,
        "subject_id": "s-1",
        "version": 4,
        "approved_by": None,
    }
