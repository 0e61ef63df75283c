"""Inbound route — messages from a requester about their site."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from site_editor.database.repositories.edit_requests import EditRequestRepository
from site_editor.models.edit_request import ComplexityTier
from site_editor.pipeline.confirmation import ConfirmationHandler
from site_editor.pipeline.router import EditRouter
from site_editor.routes.deps import get_confirmation, get_edit_requests, get_router
from site_editor.routes.edit_requests import serialize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subjects", tags=["inbound"])


class InboundMessage(BaseModel):
    message: str = Field(min_length=1)
    complexity: ComplexityTier = ComplexityTier.MEDIUM


@router.post("/{subject_id}/messages")
async def receive_message(
    edit_requests: Annotated[EditRequestRepository, Depends(get_edit_requests)],
    confirmation: Annotated[ConfirmationHandler, Depends(get_confirmation)],
    edit_router: Annotated[EditRouter, Depends(get_router)],
    subject_id: str,
    body: InboundMessage,
) -> dict[str, Any]:
    """Answer a shown edit, or start a new edit request.

    A reply classified as unrelated comes back with ``handled=False`` so the
    caller's general conversation handling can pick it up.
    """
    shown = await edit_requests.latest_awaiting_reply(subject_id)
    if shown is not None:
        outcome = await confirmation.handle_reply(
            shown.id, body.message, complexity=body.complexity
        )
        return {
            "handled": outcome.handled,
            "intent": outcome.intent.value,
            "reply_text": outcome.reply_text,
            "edit_request": serialize(outcome.follow_up_request)
            if outcome.follow_up_request
            else None,
        }

    edit_request = await edit_router.submit(subject_id, body.message, body.complexity)
    logger.info("Inbound edit submitted — subject=%s id=%s", subject_id, edit_request.id)
    return {
        "handled": True,
        "intent": None,
        "reply_text": None,
        "edit_request": serialize(edit_request),
    }
