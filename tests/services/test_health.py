"""Tests for the emulator startup checks."""

from __future__ import annotations

import httpx
import pytest

from site_editor.config import CosmosConfig, ServiceBusConfig, Settings
from site_editor.services.health import check_emulators

EMULATOR_SB = "Endpoint=sb://localhost;SharedAccessKeyName=k;SharedAccessKey=v;UseDevelopmentEmulator=true;"


def _settings(cosmos_endpoint: str, servicebus: str = "") -> Settings:
    return Settings(
        cosmos=CosmosConfig(endpoint=cosmos_endpoint, key="k", database="d"),
        servicebus=ServiceBusConfig(connection_string=servicebus, topic_name="t"),
    )


def _transport(down: set[str]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host in down:
            msg = "connection refused"
            raise httpx.ConnectError(msg, request=request)
        return httpx.Response(200)

    return httpx.MockTransport(handler)


@pytest.mark.unit
async def test_reachable_emulators_pass() -> None:
    settings = _settings("http://cosmos:8081", EMULATOR_SB)
    assert await check_emulators(settings, transport=_transport(set())) is True


@pytest.mark.unit
async def test_cosmos_down_fails() -> None:
    settings = _settings("http://cosmos:8081")
    assert await check_emulators(settings, transport=_transport({"cosmos"})) is False


@pytest.mark.unit
async def test_servicebus_emulator_down_fails() -> None:
    settings = _settings("http://cosmos:8081", EMULATOR_SB)
    assert await check_emulators(settings, transport=_transport({"localhost"})) is False


@pytest.mark.unit
async def test_missing_cosmos_endpoint_fails() -> None:
    assert await check_emulators(_settings(""), transport=_transport(set())) is False


@pytest.mark.unit
async def test_azure_endpoints_are_not_probed() -> None:
    settings = _settings("https://acct.documents.azure.com:443/")
    assert await check_emulators(settings, transport=_transport({"acct.documents.azure.com"}))
