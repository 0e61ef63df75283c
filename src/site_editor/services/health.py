"""Startup checks for the local Cosmos DB and Service Bus emulators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx

if TYPE_CHECKING:
    from site_editor.config import Settings

logger = logging.getLogger(__name__)

SERVICEBUS_EMULATOR_HEALTH = "http://localhost:5300/health"


def _emulator_targets(settings: Settings) -> tuple[dict[str, str], list[str]]:
    targets: dict[str, str] = {}
    failures: list[str] = []

    cosmos_url = settings.cosmos.endpoint
    if not cosmos_url:
        failures.append("COSMOS_ENDPOINT is not set — add it to .env (see .env.example)")
    elif not cosmos_url.startswith("https://"):
        targets["Cosmos DB emulator"] = f"{cosmos_url.rstrip('/')}/"

    if "UseDevelopmentEmulator=true" in settings.servicebus.connection_string:
        targets["Service Bus emulator"] = SERVICEBUS_EMULATOR_HEALTH
    return targets, failures


async def check_emulators(
    settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
) -> bool:
    """Return False, logging each problem, if a configured emulator is down.

    Endpoints on https are real Azure resources and are not probed.
    """
    targets, failures = _emulator_targets(settings)
    async with httpx.AsyncClient(timeout=3, transport=transport) as client:
        for name, url in targets.items():
            try:
                await client.get(url)
            except httpx.TransportError:
                failures.append(f"{name} is not running at {urlparse(url).netloc}")

    for failure in failures:
        logger.error(failure)
    if failures:
        logger.error("Start the emulators with: docker compose up -d")
    return not failures
