"""Batching registry — one cancellable release timer per held subject."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    task: asyncio.Task[None]
    edit_request_ids: list[str] = field(default_factory=list)


class BatchingRegistry:
    """Track burst-hold windows per subject.

    ``open`` starts a window the first time a subject is held and reports
    whether it did, so the caller sends exactly one batching notice per
    window. When the window elapses (or ``fire`` is called) the collected
    request ids are handed to ``on_release``.
    """

    def __init__(
        self,
        window_seconds: float,
        on_release: Callable[[str, list[str]], Awaitable[None]],
    ) -> None:
        self._window_seconds = window_seconds
        self._on_release = on_release
        self._windows: dict[str, _Window] = {}

    def is_open(self, subject_id: str) -> bool:
        return subject_id in self._windows

    def pending(self, subject_id: str) -> list[str]:
        window = self._windows.get(subject_id)
        return list(window.edit_request_ids) if window else []

    def open(self, subject_id: str, edit_request_id: str) -> bool:
        """Add a held request; return True only when this opened a new window."""
        window = self._windows.get(subject_id)
        if window is not None:
            window.edit_request_ids.append(edit_request_id)
            return False
        task = asyncio.create_task(self._expire(subject_id), name=f"batch-{subject_id}")
        self._windows[subject_id] = _Window(task=task, edit_request_ids=[edit_request_id])
        logger.info("Batching window opened — subject=%s", subject_id)
        return True

    async def _expire(self, subject_id: str) -> None:
        await asyncio.sleep(self._window_seconds)
        await self.fire(subject_id)

    async def fire(self, subject_id: str) -> list[str]:
        """Close the subject's window now and release its held requests."""
        window = self._windows.pop(subject_id, None)
        if window is None:
            return []
        if window.task is not asyncio.current_task():
            window.task.cancel()
        logger.info(
            "Batching window released — subject=%s requests=%d",
            subject_id,
            len(window.edit_request_ids),
        )
        try:
            await self._on_release(subject_id, window.edit_request_ids)
        except Exception:
            logger.exception("Batch release failed — subject=%s", subject_id)
        return window.edit_request_ids

    async def cancel(self, subject_id: str) -> None:
        """Drop the subject's window without releasing it."""
        window = self._windows.pop(subject_id, None)
        if window is None:
            return
        window.task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await window.task
        logger.info("Batching window cancelled — subject=%s", subject_id)

    async def close(self) -> None:
        """Cancel every open window (used at shutdown)."""
        for subject_id in list(self._windows):
            await self.cancel(subject_id)
