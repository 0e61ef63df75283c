"""Tests for app factory and lifespan wiring."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from site_editor.app import create_app
from site_editor.auth.middleware import require_authenticated_user
from site_editor.config import AppConfig, EditConfig, Settings
from site_editor.exceptions import DocumentNotFound, ProposalServiceError, VersionConflict
from site_editor.pipeline.router import EditRouter


def _settings(*, env: str = "test", secret_key: str = "test-secret") -> Settings:
    return Settings(
        app=AppConfig(env=env, log_level="INFO", log_file="", secret_key=secret_key),
        edits=EditConfig(preview_base_url="https://preview.example.com"),
    )


@pytest.mark.unit
def test_lifespan_wires_services_and_closes_clients() -> None:
    settings = _settings()
    cosmos = MagicMock()
    cosmos.database = MagicMock()
    cosmos.close = AsyncMock()
    publisher = MagicMock()
    publisher.close = AsyncMock()

    with (
        patch("site_editor.app.configure_logging") as configure_logging,
        patch("site_editor.app.init_database", new=AsyncMock(return_value=cosmos)),
        patch("site_editor.app.ServiceBusPublisher", return_value=publisher) as publisher_cls,
        patch("site_editor.app.create_chat_client") as create_chat_client,
    ):
        app = create_app(settings)
        with TestClient(app) as client:
            assert client.get("/healthz").json() == {"status": "ok"}
            assert isinstance(app.state.router, EditRouter)
            assert app.state.publisher is publisher
            assert app.state.notifier.preview_url("s-1") == "https://preview.example.com/preview/s-1"

    configure_logging.assert_called_once_with("INFO", log_file=None)
    publisher_cls.assert_called_once_with(settings.servicebus)
    assert create_chat_client.call_count == 2
    publisher.close.assert_awaited_once()
    cosmos.close.assert_awaited_once()


@pytest.mark.unit
def test_development_startup_fails_when_emulators_down() -> None:
    settings = _settings(env="development")

    with (
        patch("site_editor.app.configure_logging"),
        patch("site_editor.app.check_emulators", new=AsyncMock(return_value=False)),
        patch("site_editor.app.init_database", new=AsyncMock()) as init_database,
    ):
        app = create_app(settings)
        with pytest.raises(RuntimeError, match="not reachable"), TestClient(app):
            pass

    init_database.assert_not_awaited()


@pytest.mark.unit
def test_missing_secret_outside_development_raises() -> None:
    with pytest.raises(RuntimeError, match="SECRET_KEY"):
        create_app(_settings(env="production", secret_key=""))


@pytest.mark.unit
def test_missing_secret_in_development_is_generated() -> None:
    app = create_app(_settings(env="development", secret_key=""))
    assert app.state.settings.app.env == "development"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (DocumentNotFound("s-1"), 404),
        (VersionConflict("s-1", 3), 409),
        (ProposalServiceError("model refused"), 422),
    ],
)
def test_pipeline_errors_map_to_status_codes(error: Exception, status_code: int) -> None:
    app = create_app(_settings())
    app.dependency_overrides[require_authenticated_user] = lambda: {"name": "Ops"}
    app.state.version_store = MagicMock()
    app.state.version_store.read = AsyncMock(side_effect=error)

    response = TestClient(app).get("/documents/s-1")

    assert response.status_code == status_code
