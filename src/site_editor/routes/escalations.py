"""Escalation routes — the operator's open work queue."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from site_editor.auth.middleware import require_authenticated_user
from site_editor.routes.deps import get_escalations
from site_editor.services.escalations import EscalationService

router = APIRouter(
    prefix="/escalations",
    tags=["escalations"],
    dependencies=[Depends(require_authenticated_user)],
)


@router.get("")
async def list_escalations(
    escalations: Annotated[EscalationService, Depends(get_escalations)],
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> list[dict[str, Any]]:
    """Unresolved escalations, newest first."""
    return [item.model_dump(mode="json") for item in await escalations.list_open(limit)]
