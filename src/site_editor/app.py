"""Web entry point — FastAPI app factory and lifespan wiring."""

from __future__ import annotations

import logging
import secrets
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from azure.monitor.opentelemetry import configure_azure_monitor
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from site_editor.agents.classifier import ChatReplyClassifier
from site_editor.agents.llm import create_chat_client
from site_editor.agents.proposals import ChatProposalService
from site_editor.config import load_settings
from site_editor.database.client import CosmosClient
from site_editor.database.repositories import (
    DocumentRepository,
    EditRequestRepository,
    EscalationRepository,
    SnapshotRepository,
)
from site_editor.events import ServiceBusPublisher
from site_editor.exceptions import (
    DocumentNotFound,
    InvalidTransition,
    SiteEditorError,
    VersionConflict,
)
from site_editor.logging import configure_logging
from site_editor.pipeline.confirmation import ConfirmationHandler
from site_editor.pipeline.rate_limit import RateLimiter
from site_editor.pipeline.router import EditRouter
from site_editor.routes import documents, edit_requests, escalations, inbound
from site_editor.services.approvals import ApprovalService
from site_editor.services.archive import VersionArchive
from site_editor.services.escalations import EscalationService
from site_editor.services.health import check_emulators
from site_editor.services.notifications import Notifier
from site_editor.services.version_store import VersionStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from site_editor.config import Settings

logger = logging.getLogger(__name__)


async def init_database(settings: Settings) -> CosmosClient:
    """Connect to Cosmos DB, creating containers against the local emulator."""
    cosmos = CosmosClient(settings.cosmos)
    await cosmos.initialize(create_containers=settings.app.is_development)
    return cosmos


def wire_services(app: FastAPI, settings: Settings, cosmos: CosmosClient) -> None:
    """Build repositories, adapters and pipeline services onto ``app.state``."""
    database = cosmos.database
    edit_config = settings.edits

    documents_repo = DocumentRepository(database)
    edit_requests_repo = EditRequestRepository(database)
    escalations_repo = EscalationRepository(database)
    archive = VersionArchive(SnapshotRepository(database), max_snapshots=edit_config.max_snapshots)
    version_store = VersionStore(documents_repo, archive)

    publisher = ServiceBusPublisher(settings.servicebus)
    notifier = Notifier(publisher, preview_base_url=edit_config.preview_base_url)
    escalation_service = EscalationService(escalations_repo, notifier)

    proposals = ChatProposalService(
        create_chat_client(settings.openai),
        max_prior_summaries=edit_config.max_prior_summaries,
    )
    classifier = ChatReplyClassifier(
        create_chat_client(settings.openai, deployment=settings.openai.reply_deployment)
    )

    router = EditRouter(
        edit_requests=edit_requests_repo,
        version_store=version_store,
        proposals=proposals,
        notifier=notifier,
        escalations=escalation_service,
        rate_limiter=RateLimiter(edit_requests_repo, edit_config),
        config=edit_config,
    )

    app.state.documents = documents_repo
    app.state.edit_requests = edit_requests_repo
    app.state.archive = archive
    app.state.version_store = version_store
    app.state.publisher = publisher
    app.state.notifier = notifier
    app.state.escalations = escalation_service
    app.state.router = router
    app.state.confirmation = ConfirmationHandler(
        edit_requests=edit_requests_repo,
        classifier=classifier,
        version_store=version_store,
        router=router,
        notifier=notifier,
        escalations=escalation_service,
    )
    app.state.approvals = ApprovalService(
        edit_requests=edit_requests_repo,
        escalations=escalations_repo,
        version_store=version_store,
        router=router,
        notifier=notifier,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = app.state.settings
    configure_logging(settings.app.log_level, log_file=settings.app.log_file or None)

    if settings.monitor.connection_string:
        configure_azure_monitor(connection_string=settings.monitor.connection_string)
        logger.info("Azure Monitor OpenTelemetry configured")

    if settings.app.is_development and not await check_emulators(settings):
        msg = "Local dependencies are not reachable"
        raise RuntimeError(msg)

    cosmos = await init_database(settings)
    app.state.cosmos = cosmos
    wire_services(app, settings, cosmos)
    logger.info("Site editor started — env=%s", settings.app.env)

    try:
        yield
    finally:
        logger.info("Site editor shutting down")
        await app.state.router.close()
        await app.state.publisher.close()
        await cosmos.close()
        logger.info("Site editor shutdown complete")


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DocumentNotFound)
    async def _not_found(_: Request, exc: DocumentNotFound) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(VersionConflict)
    async def _conflict(_: Request, exc: VersionConflict) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "expected_version": exc.expected_version},
        )

    @app.exception_handler(InvalidTransition)
    async def _invalid_transition(_: Request, exc: InvalidTransition) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(SiteEditorError)
    async def _pipeline_error(_: Request, exc: SiteEditorError) -> JSONResponse:
        logger.warning("Request failed — %s", exc)
        return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or load_settings()
    app = FastAPI(title="Site Editor", lifespan=lifespan)
    app.state.settings = settings

    secret_key = settings.app.secret_key
    if not secret_key:
        if not settings.app.is_development:
            msg = "SECRET_KEY must be set outside development"
            raise RuntimeError(msg)
        secret_key = secrets.token_urlsafe(32)
    app.add_middleware(
        SessionMiddleware,
        secret_key=secret_key,
        https_only=not settings.app.is_development,
    )

    _register_error_handlers(app)
    app.include_router(edit_requests.router)
    app.include_router(documents.router)
    app.include_router(escalations.router)
    app.include_router(inbound.router)

    @app.get("/healthz", include_in_schema=False)
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


def main() -> None:
    """Run the web app with uvicorn."""
    uvicorn.run("site_editor.app:create_app", factory=True, host="0.0.0.0", port=8000)  # noqa: S104


if __name__ == "__main__":
    main()
