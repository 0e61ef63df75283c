"""Tests for EditRequestRepository custom query methods."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from site_editor.database.repositories.edit_requests import EditRequestRepository
from site_editor.models.edit_request import EditFlowState, EditRequest


class _AsyncRows:
    def __init__(self, rows: list) -> None:
        self._rows = rows

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for row in self._rows:
            yield row


class TestEditRequestRepository:
    """Test the Edit Request Repository."""

    @pytest.fixture
    def repo(self) -> EditRequestRepository:
        mock_db = MagicMock()
        mock_db.get_container_client.return_value = AsyncMock()
        return EditRequestRepository(mock_db)

    async def test_list_recent_filters_state_and_subject(self, repo: EditRequestRepository) -> None:
        repo.query = AsyncMock(return_value=[])

        await repo.list_recent(state=EditFlowState.ESCALATED, subject_id="s-1", limit=10)

        sql, params = repo.query.call_args[0]
        assert "c.state = @state" in sql
        assert "c.subject_id = @subject_id" in sql
        values = {p["name"]: p["value"] for p in params}
        assert values == {"@limit": 10, "@state": "escalated", "@subject_id": "s-1"}

    async def test_list_recent_without_filters(self, repo: EditRequestRepository) -> None:
        repo.query = AsyncMock(return_value=[])

        await repo.list_recent()

        sql, params = repo.query.call_args[0]
        assert "@state" not in sql
        assert params == [{"name": "@limit", "value": 100}]

    async def test_timestamps_since_parses_values(self, repo: EditRequestRepository) -> None:
        repo._container.query_items = MagicMock(  # noqa: SLF001
            return_value=_AsyncRows(["2026-10-19T10:00:00Z", "2026-10-19T10:05:00+00:00"])
        )

        since = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)
        result = await repo.timestamps_since("s-1", since)

        assert result == [
            datetime(2026, 10, 19, 10, 0, tzinfo=UTC),
            datetime(2026, 10, 19, 10, 5, tzinfo=UTC),
        ]
        params = repo._container.query_items.call_args.kwargs["parameters"]  # noqa: SLF001
        assert {"name": "@since", "value": "2026-10-19T09:00:00Z"} in params

    async def test_prior_summaries_are_oldest_first(self, repo: EditRequestRepository) -> None:
        newest = EditRequest(
            subject_id="s-1",
            request_text="raw new",
            sanitized_instruction="new",
            edit_summary="did new",
        )
        oldest = EditRequest(
            subject_id="s-1",
            request_text="raw old",
            sanitized_instruction="old",
            edit_summary="did old",
        )
        repo.query = AsyncMock(return_value=[newest, oldest])

        result = await repo.prior_summaries("s-1", 10)

        assert result == [("old", "did old"), ("new", "did new")]
        params = repo.query.call_args[0][1]
        assert {"name": "@state", "value": "confirmed"} in params

    async def test_latest_awaiting_reply_none(self, repo: EditRequestRepository) -> None:
        repo.query = AsyncMock(return_value=[])
        assert await repo.latest_awaiting_reply("s-1") is None
