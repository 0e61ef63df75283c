"""Repository for the edit_requests container (partitioned by /id)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from site_editor.database.repositories.base import BaseRepository, to_cosmos_timestamp
from site_editor.models.edit_request import EditFlowState, EditRequest


class EditRequestRepository(BaseRepository[EditRequest]):
    """Provide data access for edit requests."""

    container_name = "edit_requests"
    model_class = EditRequest

    async def get_by_id(self, edit_request_id: str) -> EditRequest | None:
        return await self.get(edit_request_id, edit_request_id)

    async def save(self, edit_request: EditRequest) -> EditRequest:
        """Persist the in-memory request (partition key is its own id)."""
        return await self.update(edit_request, edit_request.id)

    async def list_recent(
        self,
        *,
        state: EditFlowState | None = None,
        subject_id: str | None = None,
        limit: int = 100,
    ) -> list[EditRequest]:
        """Fetch requests newest first, optionally filtered."""
        clauses: list[str] = []
        parameters: list[dict[str, Any]] = [{"name": "@limit", "value": limit}]
        if state is not None:
            clauses.append("c.state = @state")
            parameters.append({"name": "@state", "value": state.value})
        if subject_id is not None:
            clauses.append("c.subject_id = @subject_id")
            parameters.append({"name": "@subject_id", "value": subject_id})
        where = f"WHERE {' AND '.join(clauses)} " if clauses else ""
        return await self.query(
            f"SELECT TOP @limit * FROM c {where}ORDER BY c.created_at DESC",  # noqa: S608
            parameters,
        )

    async def timestamps_since(self, subject_id: str, since: datetime) -> list[datetime]:
        """Return creation times of a subject's requests at or after ``since``."""
        timestamps: list[datetime] = []
        async for raw in self._container.query_items(
            query=(
                "SELECT VALUE c.created_at FROM c WHERE c.subject_id = @subject_id"
                " AND c.created_at >= @since"
            ),
            parameters=[
                {"name": "@subject_id", "value": subject_id},
                {"name": "@since", "value": to_cosmos_timestamp(since)},
            ],
        ):
            if isinstance(raw, str):
                timestamps.append(datetime.fromisoformat(raw))
        return timestamps

    async def latest_awaiting_reply(self, subject_id: str) -> EditRequest | None:
        """Fetch the most recent edit the requester has been shown and not answered."""
        rows = await self.query(
            "SELECT TOP 1 * FROM c WHERE c.subject_id = @subject_id"
            " AND c.awaiting_reply = true ORDER BY c.created_at DESC",
            [{"name": "@subject_id", "value": subject_id}],
        )
        return rows[0] if rows else None

    async def prior_summaries(self, subject_id: str, limit: int) -> list[tuple[str, str]]:
        """Return ``(instruction, summary)`` pairs of confirmed edits, oldest first."""
        rows = await self.query(
            "SELECT TOP @limit * FROM c WHERE c.subject_id = @subject_id"
            " AND c.state = @state AND IS_STRING(c.edit_summary)"
            " ORDER BY c.created_at DESC",
            [
                {"name": "@subject_id", "value": subject_id},
                {"name": "@state", "value": EditFlowState.CONFIRMED.value},
                {"name": "@limit", "value": limit},
            ],
        )
        return [
            (row.sanitized_instruction or row.request_text, row.edit_summary or "")
            for row in reversed(rows)
        ]
