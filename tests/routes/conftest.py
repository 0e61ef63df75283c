"""An app bound to the in-memory pipeline, served over httpx's ASGI transport."""

from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest
from fastapi import FastAPI

from site_editor.app import create_app
from site_editor.auth.middleware import require_authenticated_user

OPERATOR = {"preferred_username": "ops@example.com", "name": "Ops"}


def _settings() -> SimpleNamespace:
    return SimpleNamespace(app=SimpleNamespace(secret_key="test-secret", is_development=True))


@pytest.fixture
def app(pipeline) -> FastAPI:
    app = create_app(_settings())
    app.state.documents = pipeline.documents
    app.state.edit_requests = pipeline.edit_requests
    app.state.archive = pipeline.archive
    app.state.version_store = pipeline.version_store
    app.state.escalations = pipeline.escalations
    app.state.router = pipeline.router
    app.state.confirmation = pipeline.confirmation
    app.state.approvals = pipeline.approvals
    return app


@pytest.fixture
async def anonymous_client(app: FastAPI):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def client(app: FastAPI, anonymous_client: httpx.AsyncClient):
    app.dependency_overrides[require_authenticated_user] = lambda: OPERATOR
    yield anonymous_client
    app.dependency_overrides.clear()
