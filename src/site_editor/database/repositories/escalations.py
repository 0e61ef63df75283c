"""Repository for the escalations container (partitioned by /id)."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, cast

from site_editor.database.repositories.base import BaseRepository, to_cosmos_timestamp
from site_editor.models.escalation import Escalation


class EscalationRepository(BaseRepository[Escalation]):
    container_name = "escalations"
    model_class = Escalation

    async def list_open(self, limit: int = 100) -> list[Escalation]:
        """Fetch unresolved escalations, newest first."""
        return await self.query(
            "SELECT TOP @limit * FROM c WHERE IS_NULL(c.resolved_at)"
            " ORDER BY c.created_at DESC",
            [{"name": "@limit", "value": limit}],
        )

    async def get_for_request(self, edit_request_id: str) -> list[Escalation]:
        """Fetch escalations raised for one edit request."""
        return await self.query(
            "SELECT * FROM c WHERE c.edit_request_id = @edit_request_id",
            [{"name": "@edit_request_id", "value": edit_request_id}],
        )

    async def resolve(self, escalation: Escalation) -> Escalation:
        """Stamp ``resolved_at`` without rewriting the rest of the item."""
        now = datetime.now(UTC)
        await self._patch(
            escalation.id,
            [
                {"op": "set", "path": "/resolved_at", "value": to_cosmos_timestamp(now)},
                {"op": "set", "path": "/updated_at", "value": to_cosmos_timestamp(now)},
            ],
        )
        escalation.resolved_at = now
        escalation.updated_at = now
        return escalation

    async def set_draft(self, escalation_id: str, content: str, summary: str) -> Escalation:
        """Patch only the draft fields, leaving resolution state as stored."""
        now = to_cosmos_timestamp(datetime.now(UTC))
        return await self._patch(
            escalation_id,
            [
                {"op": "set", "path": "/draft_content", "value": content},
                {"op": "set", "path": "/draft_summary", "value": summary},
                {"op": "set", "path": "/updated_at", "value": now},
            ],
        )

    async def _patch(self, escalation_id: str, operations: list[dict[str, Any]]) -> Escalation:
        data = cast(
            "dict[str, Any]",
            await self._container.patch_item(
                item=escalation_id,
                partition_key=escalation_id,
                patch_operations=operations,
            ),
        )
        return self.model_class.model_validate(data)
