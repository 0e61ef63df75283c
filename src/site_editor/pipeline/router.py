"""Tiered edit router — decides how much human review each edit request gets."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from site_editor.editing.applier import PatchResult, apply_proposal
from site_editor.editing.sanitizer import sanitize_instruction
from site_editor.exceptions import (
    DocumentNotFound,
    InvalidTransition,
    PatchApplicationFailure,
    ProposalServiceError,
    VersionConflict,
)
from site_editor.models.edit_request import (
    ComplexityTier,
    EditFlowState,
    EditRequest,
    HoldReason,
)
from site_editor.models.escalation import EscalationKind
from site_editor.models.snapshot import SnapshotSource
from site_editor.pipeline.batching import BatchingRegistry
from site_editor.services.notifications import NotificationTrigger

if TYPE_CHECKING:
    from site_editor.agents.proposals import ProposalService
    from site_editor.config import EditConfig
    from site_editor.database.repositories.edit_requests import EditRequestRepository
    from site_editor.models.document import SiteDocument
    from site_editor.models.escalation import Escalation
    from site_editor.pipeline.rate_limit import RateLimitDecision, RateLimiter
    from site_editor.services.escalations import EscalationService
    from site_editor.services.notifications import Notifier
    from site_editor.services.version_store import VersionStore

logger = logging.getLogger(__name__)


class EditRouter:
    """Sanitize, rate-limit and route edit requests through the tier policy.

    simple
        Propose, apply and save at once; the requester is told it is live.
    medium
        Same pipeline, but the saved edit waits in ``awaiting_approval``
        until a human confirms it; the requester is told it is in review.
    complex
        Never saved. An escalation is raised and, optionally, a draft is
        generated in the background for the operator.

    Sanitizer-flagged instructions always take the complex route.
    """

    def __init__(
        self,
        *,
        edit_requests: EditRequestRepository,
        version_store: VersionStore,
        proposals: ProposalService,
        notifier: Notifier,
        escalations: EscalationService,
        rate_limiter: RateLimiter,
        config: EditConfig,
        batching: BatchingRegistry | None = None,
    ) -> None:
        self._edit_requests = edit_requests
        self._version_store = version_store
        self._proposals = proposals
        self._notifier = notifier
        self._escalations = escalations
        self._rate_limiter = rate_limiter
        self._config = config
        self._batching = batching or BatchingRegistry(
            config.burst_window_minutes * 60, self._release_batch
        )
        self._drafts: set[asyncio.Task[None]] = set()

    @property
    def batching(self) -> BatchingRegistry:
        return self._batching

    async def submit(
        self,
        subject_id: str,
        request_text: str,
        complexity: ComplexityTier = ComplexityTier.MEDIUM,
    ) -> EditRequest:
        """Record a new request, apply rate limits, then route it."""
        sanitized = sanitize_instruction(request_text)
        edit_request = EditRequest(
            subject_id=subject_id,
            request_text=request_text,
            sanitized_instruction=sanitized.cleaned,
            complexity_tier=ComplexityTier.COMPLEX if sanitized.flagged else complexity,
            flagged=sanitized.flagged,
            flag_reason=sanitized.reason,
        )
        await self._edit_requests.create(edit_request)
        logger.info(
            "Edit request received — id=%s subject=%s tier=%s flagged=%s",
            edit_request.id,
            subject_id,
            edit_request.complexity_tier,
            edit_request.flagged,
        )

        decision = await self._rate_limiter.check(subject_id)
        if decision.high_maintenance and decision.weekly_count == self._config.weekly_alert_limit:
            await self._escalations.escalate(
                subject_id,
                EscalationKind.HIGH_MAINTENANCE,
                f"{decision.weekly_count} edit requests in the last "
                f"{self._config.weekly_window_days} days",
                edit_request_id=edit_request.id,
            )
        if decision.held:
            return await self._hold(edit_request, decision)
        return await self.process(edit_request)

    async def process(self, edit_request: EditRequest) -> EditRequest:
        """Route a pending request by tier."""
        if edit_request.state != EditFlowState.PENDING:
            raise InvalidTransition(edit_request.state.value, EditFlowState.AI_EDITING.value)
        if edit_request.flagged or edit_request.complexity_tier == ComplexityTier.COMPLEX:
            return await self._route_complex(edit_request)
        return await self._route_automatic(edit_request)

    async def _hold(self, edit_request: EditRequest, decision: RateLimitDecision) -> EditRequest:
        edit_request.hold_reason = decision.hold
        edit_request.transition(EditFlowState.ESCALATED)
        await self._edit_requests.save(edit_request)
        subject_id = edit_request.subject_id

        if self._batching.is_open(subject_id):
            self._batching.open(subject_id, edit_request.id)
            if decision.hold == HoldReason.HOURLY_CAP:
                await self._escalations.escalate(
                    subject_id,
                    EscalationKind.HOURLY_CAP,
                    f"{decision.hourly_count} edit requests in the last hour",
                    edit_request_id=edit_request.id,
                )
            return edit_request

        if decision.hold == HoldReason.HOURLY_CAP:
            await self._escalations.escalate(
                subject_id,
                EscalationKind.HOURLY_CAP,
                f"{decision.hourly_count} edit requests in the last hour",
                edit_request_id=edit_request.id,
            )
            await self._notifier.notify_requester(
                NotificationTrigger.EDIT_ESCALATED,
                subject_id,
                edit_request_id=edit_request.id,
            )
            return edit_request

        self._batching.open(subject_id, edit_request.id)
        await self._escalations.escalate(
            subject_id,
            EscalationKind.BURST_HOLD,
            f"{decision.burst_count} edit requests in "
            f"{self._config.burst_window_minutes} minutes, batching further requests",
            edit_request_id=edit_request.id,
        )
        await self._notifier.notify_requester(
            NotificationTrigger.EDIT_BATCHING,
            subject_id,
            edit_request_id=edit_request.id,
        )
        return edit_request

    async def _release_batch(self, subject_id: str, edit_request_ids: list[str]) -> None:
        await self._notifier.notify_operator(
            subject_id,
            f"{len(edit_request_ids)} batched edit request(s) ready for review: "
            + ", ".join(edit_request_ids),
            trigger="batch_released",
        )

    async def _route_complex(self, edit_request: EditRequest) -> EditRequest:
        edit_request.transition(EditFlowState.ESCALATED)
        await self._edit_requests.save(edit_request)

        if edit_request.flagged:
            reason = (
                f"instruction flagged ({edit_request.flag_reason}): {edit_request.request_text}"
            )
        else:
            reason = f"complex edit requested: {edit_request.sanitized_instruction}"
        escalation = await self._escalations.escalate(
            edit_request.subject_id,
            EscalationKind.COMPLEX_EDIT,
            reason,
            edit_request_id=edit_request.id,
        )
        await self._notifier.notify_requester(
            NotificationTrigger.EDIT_ESCALATED,
            edit_request.subject_id,
            edit_request_id=edit_request.id,
        )

        if self._config.draft_complex_edits and not edit_request.flagged:
            task = asyncio.create_task(
                self._draft(edit_request, escalation), name=f"draft-{edit_request.id}"
            )
            self._drafts.add(task)
            task.add_done_callback(self._drafts.discard)
        return edit_request

    async def _draft(self, edit_request: EditRequest, escalation: Escalation) -> None:
        """Attach a proposal to the escalation without touching the document."""
        try:
            document = await self._version_store.read(edit_request.subject_id)
            result, summary = await self._generate(edit_request, document)
            await self._escalations.attach_draft(escalation, result.content, summary)
            logger.info("Draft attached — request=%s", edit_request.id)
        except (DocumentNotFound, ProposalServiceError, PatchApplicationFailure) as exc:
            logger.warning("Draft skipped — request=%s reason=%s", edit_request.id, exc)
        except Exception:
            logger.exception("Draft failed — request=%s", edit_request.id)

    async def _generate(
        self, edit_request: EditRequest, document: SiteDocument
    ) -> tuple[PatchResult, str]:
        """Ask for a proposal and apply it to ``document`` in memory."""
        prior = await self._edit_requests.prior_summaries(
            edit_request.subject_id, self._config.max_prior_summaries
        )
        try:
            async with asyncio.timeout(self._config.proposal_timeout_seconds):
                proposal = await self._proposals.propose(
                    document.content,
                    edit_request.sanitized_instruction,
                    prior,
                    subject_name=document.subject_name,
                )
        except TimeoutError as exc:
            msg = f"proposal service timed out after {self._config.proposal_timeout_seconds}s"
            raise ProposalServiceError(msg) from exc

        result = apply_proposal(document.content, proposal)
        if not result.ok:
            raise PatchApplicationFailure(result.failed_searches)
        return result, result.summarize(proposal.summary)

    async def _route_automatic(self, edit_request: EditRequest) -> EditRequest:
        try:
            document = await self._version_store.read(edit_request.subject_id)
        except DocumentNotFound as exc:
            return await self._fail(edit_request, str(exc))

        # The version is captured here, before the slow proposal call, and is
        # the only one the save below may use.
        expected_version = document.version
        edit_request.capture_snapshot(document.content)
        edit_request.base_version = expected_version
        edit_request.transition(EditFlowState.AI_EDITING)
        await self._edit_requests.save(edit_request)

        try:
            result, summary = await self._generate(edit_request, document)
        except PatchApplicationFailure as exc:
            edit_request.failed_searches = exc.failed_searches
            return await self._fail(edit_request, str(exc))
        except ProposalServiceError as exc:
            return await self._fail(edit_request, str(exc))
        except Exception as exc:
            logger.exception("Proposal service error — request=%s", edit_request.id)
            return await self._fail(edit_request, f"proposal service error: {exc!r}")

        try:
            saved = await self._version_store.save(
                edit_request.subject_id,
                result.content,
                expected_version,
                source=SnapshotSource.AI_EDIT,
            )
        except (VersionConflict, DocumentNotFound) as exc:
            return await self._fail(edit_request, str(exc), kind=EscalationKind.VERSION_CONFLICT)

        edit_request.post_edit_content = result.content
        edit_request.edit_summary = summary
        edit_request.failed_searches = result.failed_searches
        edit_request.saved_version = saved.version
        edit_request.awaiting_reply = True

        if edit_request.complexity_tier == ComplexityTier.SIMPLE:
            edit_request.transition(EditFlowState.CONFIRMED)
            await self._edit_requests.save(edit_request)
            await self._notifier.notify_requester(
                NotificationTrigger.EDIT_LIVE,
                edit_request.subject_id,
                edit_request_id=edit_request.id,
            )
            await self._notifier.promote(edit_request)
        else:
            edit_request.transition(EditFlowState.AWAITING_APPROVAL)
            await self._edit_requests.save(edit_request)
            await self._notifier.notify_requester(
                NotificationTrigger.EDIT_IN_REVIEW,
                edit_request.subject_id,
                edit_request_id=edit_request.id,
            )
            await self._notifier.notify_operator(
                edit_request.subject_id,
                f"Edit ready for review: {summary}",
                trigger=NotificationTrigger.EDIT_IN_REVIEW,
                edit_request_id=edit_request.id,
            )

        logger.info(
            "Edit saved — id=%s subject=%s version=%s state=%s",
            edit_request.id,
            edit_request.subject_id,
            saved.version,
            edit_request.state,
        )
        return edit_request

    async def _fail(
        self,
        edit_request: EditRequest,
        reason: str,
        *,
        kind: EscalationKind = EscalationKind.EDIT_FAILED,
    ) -> EditRequest:
        """Mark the request failed; the operator gets the detail, the requester does not."""
        edit_request.transition(EditFlowState.FAILED)
        edit_request.awaiting_reply = False
        await self._edit_requests.save(edit_request)
        logger.warning(
            "Edit failed — id=%s subject=%s reason=%s",
            edit_request.id,
            edit_request.subject_id,
            reason,
        )
        await self._escalations.escalate(
            edit_request.subject_id,
            kind,
            reason,
            edit_request_id=edit_request.id,
        )
        await self._notifier.notify_requester(
            NotificationTrigger.EDIT_FAILED,
            edit_request.subject_id,
            edit_request_id=edit_request.id,
        )
        return edit_request

    async def close(self) -> None:
        """Cancel background drafts and open batching windows."""
        for task in list(self._drafts):
            task.cancel()
        if self._drafts:
            await asyncio.gather(*self._drafts, return_exceptions=True)
        await self._batching.close()
