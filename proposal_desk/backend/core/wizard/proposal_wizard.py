"""
Three-step brand proposal wizard.

Steps:
1. DETAILS      – pick the brand client, title, description, dates
2. INFLUENCERS  – add influencers and their deliverables
3. REVIEW       – save as draft or submit

Moving forward is gated: DETAILS needs a brand and a title; INFLUENCERS
needs at least one influencer and a deliverable on every influencer.
Going back is always allowed. The running budget is the sum of
``price_usd_cents * quantity`` over every line item and is recomputed on
each edit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from proposal_desk.backend.core.errors import WizardTransitionError
from proposal_desk.backend.core.kpi import sum_by
from proposal_desk.backend.core.utils.notifications import Toaster
from proposal_desk.backend.core.utils.session import ViewScope
from proposal_desk.backend.core.validation import Debouncer
from proposal_desk.backend.core.wizard.transforms import brands_from_response, candidate_from_api
from proposal_desk.backend.schemas import (
    Brand,
    DeliverableItem,
    InfluencerCandidate,
    InfluencerProposal,
    ProposalDraft,
)
from proposal_desk.backend.services import SuperadminApiService

logger = logging.getLogger(__name__)

NO_BRAND = "Please select a brand"
NO_TITLE = "Please enter a proposal title"
NO_DESCRIPTION = "Please enter a proposal description"
NO_INFLUENCERS = "Please add at least one influencer"
MISSING_DELIVERABLES = "Please add deliverables for all influencers"
DRAFT_NO_BRAND = "Please select a brand before saving draft"
DRAFT_NO_TITLE = "Please enter a proposal title before saving draft"
ALREADY_ADDED = "Influencer already added to this proposal"

PROPOSALS_PATH = "/admin/proposals"


class WizardStep(IntEnum):
    DETAILS = 1
    INFLUENCERS = 2
    REVIEW = 3


@dataclass(frozen=True)
class WizardOutcome:
    success: bool
    message: str
    data: Any = None
    redirect: str | None = None


# ── Budget ──────────────────────────────────────────────────────────────────


def line_item_total(item: DeliverableItem) -> int:
    return item.price_usd_cents * item.quantity


def influencer_cost(proposal: InfluencerProposal) -> int:
    return sum_by(proposal.deliverables, line_item_total)


def total_budget(proposals: Iterable[InfluencerProposal]) -> int:
    return sum_by(proposals, influencer_cost)


# ── Gating ──────────────────────────────────────────────────────────────────


def details_problems(draft: ProposalDraft) -> list[str]:
    problems = []
    if draft.brand is None:
        problems.append(NO_BRAND)
    if not draft.proposal_title.strip():
        problems.append(NO_TITLE)
    return problems


def missing_deliverables(draft: ProposalDraft) -> list[str]:
    """Usernames of influencers that have no deliverable yet."""
    return [ip.influencer.username for ip in draft.influencer_proposals if not ip.deliverables]


def influencer_problems(draft: ProposalDraft) -> list[str]:
    if not draft.influencer_proposals:
        return [NO_INFLUENCERS]
    if missing_deliverables(draft):
        return [MISSING_DELIVERABLES]
    return []


def transition_problems(draft: ProposalDraft, target: WizardStep) -> list[str]:
    """Unmet preconditions for reaching ``target`` from the step before it."""
    problems: list[str] = []
    if target >= WizardStep.INFLUENCERS:
        problems += details_problems(draft)
    if target >= WizardStep.REVIEW:
        problems += influencer_problems(draft)
    return problems


def submit_problems(draft: ProposalDraft) -> list[str]:
    problems = details_problems(draft)
    if not draft.proposal_description.strip():
        problems.append(NO_DESCRIPTION)
    return problems + influencer_problems(draft)


def draft_problems(draft: ProposalDraft) -> list[str]:
    problems = []
    if draft.brand is None:
        problems.append(DRAFT_NO_BRAND)
    if not draft.proposal_title.strip():
        problems.append(DRAFT_NO_TITLE)
    return problems


# ── Payloads ────────────────────────────────────────────────────────────────


def submit_payload(draft: ProposalDraft) -> dict[str, Any]:
    """Body for ``POST .../brand-proposals``."""
    brand = draft.brand
    return {
        "assigned_brand_users": [brand.id] if brand else [],
        "brand_company_name": (brand.company_name if brand else "") or "Unknown Company",
        "proposal_title": draft.proposal_title.strip(),
        "proposal_description": draft.proposal_description.strip(),
        "deliverables": [d.type for ip in draft.influencer_proposals for d in ip.deliverables],
        "total_campaign_budget_usd_cents": total_budget(draft.influencer_proposals),
    }


def draft_payload(draft: ProposalDraft) -> dict[str, Any]:
    """Body for ``POST .../brand-proposals/draft``."""
    return {
        "brand_user_id": draft.brand.id if draft.brand else None,
        "proposal_title": draft.proposal_title,
        "proposal_description": draft.proposal_description,
        "campaign_brief": draft.campaign_brief,
        "proposed_start_date": draft.proposed_start_date,
        "proposed_end_date": draft.proposed_end_date,
        "priority_level": draft.priority_level,
        "total_budget_usd_cents": total_budget(draft.influencer_proposals),
        "influencer_selections": [
            {
                "influencer_id": ip.influencer.id,
                "deliverables": [
                    {
                        "deliverable_type": d.type,
                        "quantity": d.quantity,
                        "cost_per_deliverable_usd_cents": d.price_usd_cents,
                        "total_cost_usd_cents": line_item_total(d),
                        "description": d.description or "",
                    }
                    for d in ip.deliverables
                ],
                "notes": ip.notes or "",
            }
            for ip in draft.influencer_proposals
        ],
    }


# ── View model ──────────────────────────────────────────────────────────────


class ProposalWizard:
    """
    Local state of the create-proposal wizard.

    Nothing here is persisted until :meth:`save_draft` or :meth:`submit`.
    A failed save or submit leaves the draft exactly as it was.
    """

    _DETAIL_FIELDS = frozenset(
        {
            "proposal_title",
            "proposal_description",
            "campaign_brief",
            "proposed_start_date",
            "proposed_end_date",
            "priority_level",
        }
    )

    def __init__(
        self,
        service: SuperadminApiService,
        toaster: Toaster | None = None,
        *,
        search_debounce: float = 0.3,
        search_limit: int = 50,
        brands_limit: int = 100,
        scope: ViewScope | None = None,
    ):
        self.service = service
        self.toaster = toaster or Toaster()
        self.scope = scope or ViewScope("proposal-wizard")
        self.search_limit = search_limit
        self.brands_limit = brands_limit

        self.step = WizardStep.DETAILS
        self.draft = ProposalDraft()
        self.brands: list[Brand] = []
        self.candidates: list[InfluencerCandidate] = []
        self.search_query = ""

        self.loading = False
        self.loading_brands = False
        self.loading_influencers = False
        self._search = Debouncer(search_debounce, self.scope)

    @classmethod
    def from_config(
        cls,
        service: SuperadminApiService,
        config: dict[str, Any],
        toaster: Toaster | None = None,
    ) -> ProposalWizard:
        wizard_cfg = config.get("wizard", {})
        return cls(
            service,
            toaster,
            search_debounce=float(wizard_cfg.get("search_debounce", 0.3)),
            search_limit=int(wizard_cfg.get("search_limit", 50)),
            brands_limit=int(wizard_cfg.get("brands_limit", 100)),
        )

    # ── Step 1: details ─────────────────────────────────────────────────────

    def select_brand(self, brand: Brand | None) -> None:
        self.draft.brand = brand

    def set_details(self, **fields: Any) -> None:
        unknown = set(fields) - self._DETAIL_FIELDS
        if unknown:
            raise ValueError(f"Unknown proposal fields: {sorted(unknown)}")
        for name, value in fields.items():
            setattr(self.draft, name, value)

    # ── Navigation ──────────────────────────────────────────────────────────

    def next(self) -> WizardStep:
        """Advance one step.

        Raises:
            WizardTransitionError: naming the first unmet precondition
        """
        if self.step is WizardStep.REVIEW:
            return self.step

        target = WizardStep(self.step + 1)
        problems = transition_problems(self.draft, target)
        if problems:
            self.toaster.error(problems[0])
            raise WizardTransitionError(self.step, problems)

        self.step = target
        logger.debug("Wizard advanced to %s", target.name)
        return self.step

    def back(self) -> WizardStep:
        if self.step > WizardStep.DETAILS:
            self.step = WizardStep(self.step - 1)
        return self.step

    # ── Step 2: influencers and deliverables ────────────────────────────────

    def _find(self, influencer_id: str) -> InfluencerProposal | None:
        for ip in self.draft.influencer_proposals:
            if ip.influencer.id == influencer_id:
                return ip
        return None

    def add_influencer(self, candidate: InfluencerCandidate) -> bool:
        if self._find(candidate.id) is not None:
            self.toaster.error(ALREADY_ADDED)
            return False
        self.draft.influencer_proposals.append(InfluencerProposal(influencer=candidate))
        self._recompute_budget()
        self.toaster.success(f"@{candidate.username} added to proposal")
        return True

    def remove_influencer(self, influencer_id: str) -> bool:
        before = len(self.draft.influencer_proposals)
        self.draft.influencer_proposals = [
            ip for ip in self.draft.influencer_proposals if ip.influencer.id != influencer_id
        ]
        if len(self.draft.influencer_proposals) == before:
            return False
        self._recompute_budget()
        self.toaster.success("Influencer removed from proposal")
        return True

    def update_deliverables(
        self, influencer_id: str, deliverables: Iterable[DeliverableItem | dict[str, Any]]
    ) -> int:
        """Replace an influencer's deliverables; returns the new total budget."""
        proposal = self._find(influencer_id)
        if proposal is None:
            raise KeyError(f"Influencer {influencer_id!r} is not part of this proposal")
        proposal.deliverables = [
            d if isinstance(d, DeliverableItem) else DeliverableItem.model_validate(d)
            for d in deliverables
        ]
        return self._recompute_budget()

    def _recompute_budget(self) -> int:
        for ip in self.draft.influencer_proposals:
            ip.total_cost_usd_cents = influencer_cost(ip)
        self.draft.total_budget_usd_cents = total_budget(self.draft.influencer_proposals)
        return self.draft.total_budget_usd_cents

    @property
    def total_budget_usd_cents(self) -> int:
        return self.draft.total_budget_usd_cents

    # ── Upstream data ───────────────────────────────────────────────────────

    async def load_brands(self) -> list[Brand]:
        self.loading_brands = True
        try:
            result = await self.service.get_available_brands({"limit": self.brands_limit})
            if not result.success:
                self.toaster.error("Failed to load brands")
                return self.brands
            self.scope.apply(setattr, self, "brands", brands_from_response(result.data))
        except Exception:
            logger.exception("Failed to load brands")
            self.toaster.error("Failed to load brands")
        finally:
            self.loading_brands = False
        return self.brands

    async def load_influencers(self, query: str = "") -> list[InfluencerCandidate]:
        self.search_query = query
        self.loading_influencers = True
        try:
            params = {"limit": self.search_limit, "offset": 0, "search": query.strip() or None}
            result = await self.service.get_influencers(params)
            if not result.success:
                self.toaster.error("Failed to load influencers")
                return self.candidates
            if query.strip() != self.search_query.strip():
                logger.debug("Dropping results for superseded search %r", query)
                return self.candidates
            raw = (result.data or {}).get("influencers") or []
            self.scope.apply(setattr, self, "candidates", [candidate_from_api(r) for r in raw])
        except Exception:
            logger.exception("Failed to load influencers")
            self.toaster.error("Failed to load influencers")
        finally:
            # a newer search may still be in flight
            if query == self.search_query:
                self.loading_influencers = False
        return self.candidates

    def search(self, query: str):
        """Debounced influencer search; only the latest query is applied."""
        return self._search.call(self.load_influencers, query)

    # ── Step 3: save / submit ───────────────────────────────────────────────

    def _reject(self, message: str) -> WizardOutcome:
        self.toaster.error(message)
        return WizardOutcome(False, message)

    async def save_draft(self) -> WizardOutcome:
        problems = draft_problems(self.draft)
        if problems:
            return self._reject(problems[0])

        self.loading = True
        try:
            result = await self.service.save_brand_proposal_draft(draft_payload(self.draft))
        except Exception:
            logger.exception("Failed to save draft")
            return self._reject("Network error while saving draft")
        finally:
            self.loading = False

        if not result.success:
            return self._reject(result.error_or("Failed to save draft"))
        self.toaster.success("Draft saved successfully!")
        return WizardOutcome(True, "Draft saved successfully!", data=result.data)

    async def submit(self) -> WizardOutcome:
        problems = submit_problems(self.draft)
        if problems:
            return self._reject(problems[0])

        self.loading = True
        try:
            result = await self.service.create_brand_proposal(submit_payload(self.draft))
        except Exception:
            logger.exception("Failed to create proposal")
            return self._reject("Failed to create proposal")
        finally:
            self.loading = False

        if not result.success:
            return self._reject(result.error_or("Failed to create proposal"))
        self.toaster.success("Proposal created successfully!")
        return WizardOutcome(
            True, "Proposal created successfully!", data=result.data, redirect=PROPOSALS_PATH
        )
