"""Edit request routes — list, view, approve, reject and re-process."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from site_editor.auth.middleware import operator_name, require_authenticated_user
from site_editor.models.edit_request import EditFlowState, EditRequest
from site_editor.routes.deps import get_approvals
from site_editor.services.approvals import ApprovalService

router = APIRouter(
    prefix="/edit-requests",
    tags=["edit-requests"],
    dependencies=[Depends(require_authenticated_user)],
)

Approvals = Annotated[ApprovalService, Depends(get_approvals)]
User = Annotated[dict[str, Any], Depends(require_authenticated_user)]


class RejectBody(BaseModel):
    reason: str = ""


def serialize(edit_request: EditRequest) -> dict[str, Any]:
    """Dump an edit request with its derived display label."""
    return {**edit_request.model_dump(mode="json"), "status_label": edit_request.status_label}


async def _load(approvals: ApprovalService, edit_request_id: str) -> EditRequest:
    edit_request = await approvals.get(edit_request_id)
    if edit_request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Edit request not found")
    return edit_request


@router.get("")
async def list_edit_requests(
    approvals: Approvals,
    state: EditFlowState | None = None,
    subject_id: str | None = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> list[dict[str, Any]]:
    """List edit requests newest first."""
    requests = await approvals.list_requests(state=state, subject_id=subject_id, limit=limit)
    return [serialize(item) for item in requests]


@router.get("/{edit_request_id}")
async def get_edit_request(approvals: Approvals, edit_request_id: str) -> dict[str, Any]:
    return serialize(await _load(approvals, edit_request_id))


@router.post("/{edit_request_id}/approve")
async def approve_edit_request(
    approvals: Approvals, user: User, edit_request_id: str
) -> dict[str, Any]:
    edit_request = await _load(approvals, edit_request_id)
    return serialize(await approvals.approve(edit_request, operator_name(user)))


@router.post("/{edit_request_id}/reject")
async def reject_edit_request(
    approvals: Approvals,
    user: User,
    edit_request_id: str,
    body: RejectBody | None = None,
) -> dict[str, Any]:
    """Reject and, when the edit was already saved, restore the pre-edit content."""
    edit_request = await _load(approvals, edit_request_id)
    reason = body.reason if body else ""
    return serialize(await approvals.reject(edit_request, reason, operator_name(user)))


@router.post("/{edit_request_id}/process")
async def process_edit_request(approvals: Approvals, edit_request_id: str) -> dict[str, Any]:
    edit_request = await _load(approvals, edit_request_id)
    return serialize(await approvals.process(edit_request))
