"""
Proposal review view model.

Loads one proposal together with its influencers, lets the operator tick
influencers on and off, and keeps campaign KPIs for the current selection
up to date without going back to the server.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from proposal_desk.backend.core.kpi import KPIAggregator, toggle_selection
from proposal_desk.backend.core.utils.notifications import Toaster
from proposal_desk.backend.core.utils.session import ViewScope
from proposal_desk.backend.schemas import BrandResponse, CampaignKPI, Influencer, Proposal
from proposal_desk.backend.services import ApiResult, BrandProposalsApi

logger = logging.getLogger(__name__)

RESPONSES: tuple[str, ...] = ("approved", "rejected", "request_changes", "needs_discussion")


class ProposalReview:
    def __init__(
        self,
        proposal_id: str,
        service: BrandProposalsApi,
        toaster: Toaster | None = None,
        *,
        scope: ViewScope | None = None,
    ):
        self.proposal_id = proposal_id
        self.service = service
        self.toaster = toaster or Toaster()
        self.scope = scope or ViewScope(f"proposal-review:{proposal_id}")

        self.proposal: Proposal | None = None
        self.influencers: list[Influencer] = []
        self.selected: frozenset[str] = frozenset()
        self.loading = False
        self.error: str | None = None
        self._aggregate = KPIAggregator()

    # ── Loading ─────────────────────────────────────────────────────────────

    def _apply(self, proposal: Proposal, influencers: list[Influencer]) -> None:
        self.proposal = proposal
        self.influencers = influencers

    async def load(self) -> bool:
        """Fetch the proposal and its influencers concurrently.

        Returns:
            True when the proposal itself loaded. A failed influencer fetch
            only logs a warning and leaves the list empty.
        """
        self.loading = True
        self.error = None
        try:
            proposal_result, influencers_result = await asyncio.gather(
                self.service.get_proposal(self.proposal_id),
                self.service.get_proposal_influencers(self.proposal_id),
            )
            if not (proposal_result.success and proposal_result.data):
                self.error = proposal_result.error_or("Failed to load proposal")
                return False
            proposal = Proposal.model_validate(proposal_result.data)
            influencers = self._parse_influencers(influencers_result)
            return self.scope.apply(self._apply, proposal, influencers)
        except Exception as exc:
            logger.exception("Proposal load error")
            self.error = str(exc) or "Failed to load proposal data"
            return False
        finally:
            self.loading = False

    @staticmethod
    def _parse_influencers(result: ApiResult[Any]) -> list[Influencer]:
        if not (result.success and result.data):
            logger.warning("Failed to load influencers: %s", result.error)
            return []
        return [Influencer.model_validate(raw) for raw in result.data.get("influencers") or []]

    # ── Selection ───────────────────────────────────────────────────────────

    def toggle(self, influencer_id: str) -> frozenset[str]:
        self.selected = toggle_selection(self.selected, influencer_id)
        return self.selected

    def select_all(self) -> frozenset[str]:
        self.selected = frozenset(inf.id for inf in self.influencers)
        return self.selected

    def clear_selection(self) -> None:
        self.selected = frozenset()

    @property
    def selected_influencers(self) -> list[Influencer]:
        return [inf for inf in self.influencers if inf.id in self.selected]

    @property
    def kpis(self) -> CampaignKPI:
        return self._aggregate(self.influencers, self.selected)

    # ── Brand response ──────────────────────────────────────────────────────

    async def respond(self, response: BrandResponse, feedback: str | None = None) -> bool:
        if response not in RESPONSES:
            self.toaster.error(f"Unknown response '{response}'")
            return False

        self.loading = True
        try:
            result = await self.service.submit_response(
                self.proposal_id, {"response": response, "feedback": feedback}
            )
        except Exception:
            logger.exception("Failed to submit response")
            self.toaster.error("Failed to submit response")
            return False
        finally:
            self.loading = False

        if not result.success:
            self.toaster.error(result.error_or("Failed to submit response"))
            return False
        self.toaster.success("Response submitted")
        return True

    async def close(self) -> None:
        await self.scope.close()
