"""Edit pipeline — rate limiting, tier routing and reply handling."""

from site_editor.pipeline.batching import BatchingRegistry
from site_editor.pipeline.confirmation import ConfirmationHandler, ConfirmationOutcome
from site_editor.pipeline.rate_limit import RateLimitDecision, RateLimiter
from site_editor.pipeline.router import EditRouter

__all__ = [
    "BatchingRegistry",
    "ConfirmationHandler",
    "ConfirmationOutcome",
    "EditRouter",
    "RateLimitDecision",
    "RateLimiter",
]
