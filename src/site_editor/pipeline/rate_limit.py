"""Per-subject sliding-window rate limits over edit request timestamps."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from site_editor.models.edit_request import HoldReason

if TYPE_CHECKING:
    from site_editor.config import EditConfig
    from site_editor.database.repositories.edit_requests import EditRequestRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of checking one new request against the subject's recent history.

    ``hold`` stops tier routing; ``high_maintenance`` is informational only.
    """

    hold: HoldReason | None = None
    high_maintenance: bool = False
    burst_count: int = 0
    hourly_count: int = 0
    weekly_count: int = 0

    @property
    def held(self) -> bool:
        return self.hold is not None


class RateLimiter:
    def __init__(self, edit_requests: EditRequestRepository, config: EditConfig) -> None:
        self._edit_requests = edit_requests
        self._config = config

    async def check(self, subject_id: str, *, now: datetime | None = None) -> RateLimitDecision:
        """Count the subject's requests (the current one included) in each window.

        The hourly cap wins over the burst hold when both apply.
        """
        now = now or datetime.now(UTC)
        burst_since = now - timedelta(minutes=self._config.burst_window_minutes)
        hourly_since = now - timedelta(minutes=self._config.hourly_window_minutes)
        weekly_since = now - timedelta(days=self._config.weekly_window_days)

        earliest = min(burst_since, hourly_since, weekly_since)
        timestamps = await self._edit_requests.timestamps_since(subject_id, earliest)

        burst = sum(1 for ts in timestamps if ts >= burst_since)
        hourly = sum(1 for ts in timestamps if ts >= hourly_since)
        weekly = sum(1 for ts in timestamps if ts >= weekly_since)

        hold: HoldReason | None = None
        if hourly >= self._config.hourly_limit:
            hold = HoldReason.HOURLY_CAP
        elif burst >= self._config.burst_limit:
            hold = HoldReason.BURST

        decision = RateLimitDecision(
            hold=hold,
            high_maintenance=weekly >= self._config.weekly_alert_limit,
            burst_count=burst,
            hourly_count=hourly,
            weekly_count=weekly,
        )
        if decision.held or decision.high_maintenance:
            logger.info(
                "Rate limit hit — subject=%s hold=%s burst=%d hourly=%d weekly=%d",
                subject_id,
                hold,
                burst,
                hourly,
                weekly,
            )
        return decision
