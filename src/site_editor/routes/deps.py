"""FastAPI dependencies that hand routes the services built in the lifespan."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from site_editor.database.repositories.documents import DocumentRepository
    from site_editor.database.repositories.edit_requests import EditRequestRepository
    from site_editor.pipeline.confirmation import ConfirmationHandler
    from site_editor.pipeline.router import EditRouter
    from site_editor.services.approvals import ApprovalService
    from site_editor.services.archive import VersionArchive
    from site_editor.services.escalations import EscalationService
    from site_editor.services.version_store import VersionStore


def get_approvals(request: Request) -> ApprovalService:
    return request.app.state.approvals


def get_router(request: Request) -> EditRouter:
    return request.app.state.router


def get_confirmation(request: Request) -> ConfirmationHandler:
    return request.app.state.confirmation


def get_version_store(request: Request) -> VersionStore:
    return request.app.state.version_store


def get_archive(request: Request) -> VersionArchive:
    return request.app.state.archive


def get_documents(request: Request) -> DocumentRepository:
    return request.app.state.documents


def get_edit_requests(request: Request) -> EditRequestRepository:
    return request.app.state.edit_requests


def get_escalations(request: Request) -> EscalationService:
    return request.app.state.escalations
