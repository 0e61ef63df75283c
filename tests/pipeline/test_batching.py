"""Tests for the batching registry."""

import asyncio
from unittest.mock import AsyncMock

from site_editor.pipeline.batching import BatchingRegistry


async def test_open_reports_only_the_first_hold() -> None:
    registry = BatchingRegistry(60, AsyncMock())

    assert registry.open("s-1", "er-1") is True
    assert registry.open("s-1", "er-2") is False
    assert registry.open("s-2", "er-3") is True
    assert registry.pending("s-1") == ["er-1", "er-2"]

    await registry.close()


async def test_window_fires_after_timeout() -> None:
    on_release = AsyncMock()
    registry = BatchingRegistry(0.01, on_release)

    registry.open("s-1", "er-1")
    await asyncio.sleep(0.1)

    on_release.assert_awaited_once_with("s-1", ["er-1"])
    assert registry.is_open("s-1") is False


async def test_fire_releases_immediately() -> None:
    on_release = AsyncMock()
    registry = BatchingRegistry(60, on_release)
    registry.open("s-1", "er-1")

    released = await registry.fire("s-1")

    assert released == ["er-1"]
    on_release.assert_awaited_once_with("s-1", ["er-1"])
    assert await registry.fire("s-1") == []


async def test_cancel_drops_without_release() -> None:
    on_release = AsyncMock()
    registry = BatchingRegistry(60, on_release)
    registry.open("s-1", "er-1")

    await registry.cancel("s-1")

    on_release.assert_not_awaited()
    assert registry.is_open("s-1") is False


async def test_release_failure_is_logged_not_raised() -> None:
    registry = BatchingRegistry(60, AsyncMock(side_effect=RuntimeError("channel down")))
    registry.open("s-1", "er-1")

    assert await registry.fire("s-1") == ["er-1"]


async def test_close_cancels_every_window() -> None:
    on_release = AsyncMock()
    registry = BatchingRegistry(60, on_release)
    registry.open("s-1", "er-1")
    registry.open("s-2", "er-2")

    await registry.close()

    assert registry.is_open("s-1") is False
    assert registry.is_open("s-2") is False
    on_release.assert_not_awaited()
