"""Shared fixtures: an in-memory Cosmos stand-in and a fully wired pipeline."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fakes import (
    FakeClassifier,
    FakeDatabase,
    FakeProposalService,
    InMemoryEditRequestRepository,
    InMemoryEscalationRepository,
    InMemorySnapshotRepository,
)

from site_editor.config import EditConfig
from site_editor.database.repositories import DocumentRepository
from site_editor.models.document import SiteDocument
from site_editor.pipeline.confirmation import ConfirmationHandler
from site_editor.pipeline.rate_limit import RateLimiter
from site_editor.pipeline.router import EditRouter
from site_editor.services.approvals import ApprovalService
from site_editor.services.archive import VersionArchive
from site_editor.services.escalations import EscalationService
from site_editor.services.notifications import Notifier
from site_editor.services.version_store import VersionStore


@pytest.fixture
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def edit_config() -> EditConfig:
    return EditConfig(
        proposal_timeout_seconds=5,
        burst_limit=3,
        burst_window_minutes=10,
        hourly_limit=5,
        hourly_window_minutes=60,
        weekly_alert_limit=3,
        weekly_window_days=7,
        max_snapshots=20,
        max_prior_summaries=10,
        draft_complex_edits=False,
        preview_base_url="",
    )


@pytest.fixture
def publisher() -> AsyncMock:
    mock = AsyncMock()
    mock.publish = AsyncMock()
    return mock


@pytest.fixture
async def seed_document(database: FakeDatabase):
    """Create a subject's document at version 1."""
    documents = DocumentRepository(database)

    async def _seed(subject_id: str, content: str) -> SiteDocument:
        return await documents.create_for_subject(subject_id, content)

    return _seed


@pytest.fixture
async def pipeline(database: FakeDatabase, edit_config: EditConfig, publisher: AsyncMock):
    """Router, confirmation handler and approvals wired over the fake database."""
    documents = DocumentRepository(database)
    edit_requests = InMemoryEditRequestRepository(database)
    escalation_repo = InMemoryEscalationRepository(database)
    archive = VersionArchive(
        InMemorySnapshotRepository(database), max_snapshots=edit_config.max_snapshots
    )
    version_store = VersionStore(documents, archive)
    notifier = Notifier(publisher)
    escalations = EscalationService(escalation_repo, notifier)
    proposals = FakeProposalService()
    classifier = FakeClassifier()

    router = EditRouter(
        edit_requests=edit_requests,
        version_store=version_store,
        proposals=proposals,
        notifier=notifier,
        escalations=escalations,
        rate_limiter=RateLimiter(edit_requests, edit_config),
        config=edit_config,
    )
    confirmation = ConfirmationHandler(
        edit_requests=edit_requests,
        classifier=classifier,
        version_store=version_store,
        router=router,
        notifier=notifier,
        escalations=escalations,
    )
    approvals = ApprovalService(
        edit_requests=edit_requests,
        escalations=escalation_repo,
        version_store=version_store,
        router=router,
        notifier=notifier,
    )
    yield SimpleNamespace(
        documents=documents,
        edit_requests=edit_requests,
        escalation_repo=escalation_repo,
        archive=archive,
        version_store=version_store,
        notifier=notifier,
        escalations=escalations,
        proposals=proposals,
        classifier=classifier,
        router=router,
        confirmation=confirmation,
        approvals=approvals,
    )
    await router.close()
