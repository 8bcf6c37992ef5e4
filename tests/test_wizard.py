"""
Unit tests for the create-proposal wizard.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
from pydantic import ValidationError

from proposal_desk.backend.core.errors import ProposalValidationError, WizardTransitionError
from proposal_desk.backend.core.utils.notifications import Toaster
from proposal_desk.backend.core.wizard import (
    ALREADY_ADDED,
    DRAFT_NO_BRAND,
    DRAFT_NO_TITLE,
    MISSING_DELIVERABLES,
    NO_BRAND,
    NO_DESCRIPTION,
    NO_INFLUENCERS,
    NO_TITLE,
    ProposalWizard,
    WizardStep,
    draft_payload,
    submit_problems,
    transition_problems,
)
from proposal_desk.backend.core.wizard.transforms import (
    NO_LOCATION,
    UNKNOWN_COMPANY,
    brand_from_api,
    brands_from_response,
    candidate_from_api,
)
from proposal_desk.backend.schemas import ProposalDraft
from proposal_desk.backend.services import SuperadminApiService

BRAND_PROPOSALS = "/api/v1/superadmin/proposals/brand-proposals"

POST_X2 = {"type": "post", "quantity": 2, "price_usd_cents": 50_000}
STORY_X3 = {"type": "story", "quantity": 3, "price_usd_cents": 10_000}


@pytest.fixture
def toaster() -> Toaster:
    return Toaster()


@pytest.fixture
def wizard(client, toaster) -> ProposalWizard:
    return ProposalWizard(SuperadminApiService(client), toaster, search_debounce=0.01)


@pytest.fixture
def ready_wizard(wizard, brand, candidate) -> ProposalWizard:
    """Wizard with every submit precondition met."""
    wizard.select_brand(brand)
    wizard.set_details(proposal_title="Summer launch", proposal_description="Reels and posts")
    wizard.add_influencer(candidate)
    wizard.update_deliverables(candidate.id, [POST_X2])
    return wizard


class TestNavigation:
    def test_details_needs_brand(self, wizard, toaster) -> None:
        wizard.set_details(proposal_title="Launch")

        with pytest.raises(WizardTransitionError) as info:
            wizard.next()

        assert info.value.problems == [NO_BRAND]
        assert wizard.step is WizardStep.DETAILS
        assert toaster.last.message == NO_BRAND

    def test_details_needs_title(self, wizard, brand) -> None:
        wizard.select_brand(brand)
        wizard.set_details(proposal_title="   ")

        with pytest.raises(ProposalValidationError) as info:
            wizard.next()
        assert str(info.value) == NO_TITLE

    def test_influencers_step_gating(self, wizard, brand, candidate) -> None:
        wizard.select_brand(brand)
        wizard.set_details(proposal_title="Launch")
        assert wizard.next() is WizardStep.INFLUENCERS

        with pytest.raises(WizardTransitionError) as info:
            wizard.next()
        assert info.value.problems == [NO_INFLUENCERS]

        wizard.add_influencer(candidate)
        with pytest.raises(WizardTransitionError) as info:
            wizard.next()
        assert info.value.problems == [MISSING_DELIVERABLES]

        wizard.update_deliverables(candidate.id, [STORY_X3])
        assert wizard.next() is WizardStep.REVIEW
        assert wizard.next() is WizardStep.REVIEW

    def test_back_is_always_allowed(self, ready_wizard) -> None:
        ready_wizard.next()
        ready_wizard.next()
        assert ready_wizard.back() is WizardStep.INFLUENCERS
        assert ready_wizard.back() is WizardStep.DETAILS
        assert ready_wizard.back() is WizardStep.DETAILS

    def test_transition_problems_are_cumulative(self) -> None:
        draft = ProposalDraft()
        assert transition_problems(draft, WizardStep.DETAILS) == []
        assert transition_problems(draft, WizardStep.REVIEW) == [NO_BRAND, NO_TITLE, NO_INFLUENCERS]

    def test_unknown_detail_field(self, wizard) -> None:
        with pytest.raises(ValueError):
            wizard.set_details(budget=10)

    def test_invalid_detail_value_rejected(self, wizard) -> None:
        with pytest.raises(ValidationError):
            wizard.set_details(priority_level="urgent")
        assert wizard.draft.priority_level == "medium"


class TestInfluencersAndBudget:
    def test_budget_is_sum_of_line_items(self, ready_wizard, other_candidate) -> None:
        assert ready_wizard.total_budget_usd_cents == 100_000

        ready_wizard.add_influencer(other_candidate)
        total = ready_wizard.update_deliverables(other_candidate.id, [STORY_X3, POST_X2])

        assert total == 100_000 + 30_000 + 100_000
        assert ready_wizard.draft.influencer_proposals[1].total_cost_usd_cents == 130_000

    def test_remove_recomputes_budget(self, ready_wizard, candidate) -> None:
        assert ready_wizard.remove_influencer(candidate.id)
        assert ready_wizard.total_budget_usd_cents == 0
        assert not ready_wizard.remove_influencer(candidate.id)

    def test_duplicate_influencer_rejected(self, ready_wizard, candidate, toaster) -> None:
        assert not ready_wizard.add_influencer(candidate)
        assert len(ready_wizard.draft.influencer_proposals) == 1
        assert toaster.last.message == ALREADY_ADDED

    def test_update_unknown_influencer(self, wizard) -> None:
        with pytest.raises(KeyError):
            wizard.update_deliverables("nobody", [POST_X2])


class TestSubmit:
    def test_submit_posts_payload_and_redirects(self, ready_wizard, upstream, toaster) -> None:
        upstream.add("POST", BRAND_PROPOSALS, {"id": "p-1"})

        outcome = asyncio.run(ready_wizard.submit())

        assert outcome.success
        assert outcome.redirect == "/admin/proposals"
        assert outcome.data == {"id": "p-1"}
        body = upstream.last_json()
        assert body["assigned_brand_users"] == ["brand-1"]
        assert body["brand_company_name"] == "Acme"
        assert body["deliverables"] == ["post"]
        assert body["total_campaign_budget_usd_cents"] == 100_000
        assert toaster.last.level == "success"
        assert not ready_wizard.loading

    def test_submit_requires_description(self, ready_wizard, upstream) -> None:
        ready_wizard.set_details(proposal_description="")

        outcome = asyncio.run(ready_wizard.submit())

        assert not outcome.success
        assert outcome.message == NO_DESCRIPTION
        assert upstream.requests == []

    def test_server_error_is_toasted_and_state_kept(self, ready_wizard, upstream, toaster) -> None:
        upstream.add(
            "POST", BRAND_PROPOSALS, httpx.Response(409, json={"detail": "Duplicate proposal title"})
        )
        before = ready_wizard.draft.model_copy(deep=True)

        outcome = asyncio.run(ready_wizard.submit())

        assert not outcome.success
        assert toaster.last.message == "Duplicate proposal title"
        assert ready_wizard.draft == before
        assert outcome.redirect is None

    def test_submit_problems_lists_everything(self) -> None:
        assert submit_problems(ProposalDraft()) == [NO_BRAND, NO_TITLE, NO_DESCRIPTION, NO_INFLUENCERS]


class TestSaveDraft:
    def test_draft_needs_brand_and_title_only(self, wizard, brand, upstream) -> None:
        outcome = asyncio.run(wizard.save_draft())
        assert outcome.message == DRAFT_NO_BRAND

        wizard.select_brand(brand)
        outcome = asyncio.run(wizard.save_draft())
        assert outcome.message == DRAFT_NO_TITLE
        assert upstream.requests == []

    def test_draft_saved_without_influencers(self, wizard, brand, upstream) -> None:
        upstream.add("POST", f"{BRAND_PROPOSALS}/draft", {"id": "d-1"})
        wizard.select_brand(brand)
        wizard.set_details(proposal_title="Later")

        outcome = asyncio.run(wizard.save_draft())

        assert outcome.success
        assert outcome.redirect is None
        assert upstream.last_json()["influencer_selections"] == []

    def test_draft_failure_uses_fallback(self, wizard, brand, upstream, toaster) -> None:
        upstream.add("POST", f"{BRAND_PROPOSALS}/draft", httpx.Response(500))
        wizard.select_brand(brand)
        wizard.set_details(proposal_title="Later")

        outcome = asyncio.run(wizard.save_draft())

        assert not outcome.success
        assert toaster.last.message == "Internal server error. Please try again later."

    def test_draft_payload_line_items(self, ready_wizard) -> None:
        payload = draft_payload(ready_wizard.draft)
        selection = payload["influencer_selections"][0]

        assert payload["brand_user_id"] == "brand-1"
        assert payload["priority_level"] == "medium"
        assert selection["influencer_id"] == "inf-1"
        assert selection["deliverables"] == [
            {
                "deliverable_type": "post",
                "quantity": 2,
                "cost_per_deliverable_usd_cents": 50_000,
                "total_cost_usd_cents": 100_000,
                "description": "",
            }
        ]


class TestUpstreamData:
    def test_load_brands(self, wizard, upstream) -> None:
        upstream.add(
            "GET",
            "/api/v1/superadmin/proposals/brands/available",
            {"data": {"brands": [{"id": 7, "email": "team@glow.test", "subscription_tier": "premium"}]}},
        )

        brands = asyncio.run(wizard.load_brands())

        assert [b.company_name for b in brands] == ["glow.test"]
        assert brands[0].budget_range == "$5,000-$10,000"
        assert upstream.requests[-1].url.params["limit"] == "100"

    def test_load_brands_failure(self, wizard, toaster) -> None:
        assert asyncio.run(wizard.load_brands()) == []
        assert toaster.last.message == "Failed to load brands"

    def test_debounced_search_sends_latest_query_only(self, wizard, upstream) -> None:
        upstream.add(
            "GET",
            "/api/v1/superadmin/influencers",
            lambda request: httpx.Response(
                200, json={"influencers": [{"id": 1, "username": request.url.params.get("search", "")}]}
            ),
        )

        async def run() -> None:
            for query in ("a", "al", "alp"):
                wizard.search(query)
            await wizard.scope.settle()

        asyncio.run(run())

        assert len(upstream.requests) == 1
        assert upstream.requests[0].url.params["search"] == "alp"
        assert [c.username for c in wizard.candidates] == ["alp"]

    def test_superseded_search_result_is_dropped(self, wizard, upstream) -> None:
        upstream.add(
            "GET",
            "/api/v1/superadmin/influencers",
            lambda request: httpx.Response(
                200, json={"influencers": [{"id": 1, "username": request.url.params.get("search", "")}]}
            ),
        )

        async def run() -> None:
            await asyncio.gather(wizard.load_influencers("old"), wizard.load_influencers("new"))

        asyncio.run(run())

        assert [c.username for c in wizard.candidates] == ["new"]

    def test_superseded_search_keeps_loading_flag(self, wizard, upstream) -> None:
        async def run() -> bool:
            gates = {"old": asyncio.Event(), "new": asyncio.Event()}

            async def respond(request: httpx.Request) -> httpx.Response:
                query = request.url.params.get("search", "")
                await gates[query].wait()
                return httpx.Response(200, json={"influencers": [{"id": 1, "username": query}]})

            upstream.add("GET", "/api/v1/superadmin/influencers", respond)
            old = asyncio.create_task(wizard.load_influencers("old"))
            new = asyncio.create_task(wizard.load_influencers("new"))
            await asyncio.sleep(0.01)
            gates["old"].set()
            await old
            still_loading = wizard.loading_influencers
            gates["new"].set()
            await new
            return still_loading

        assert asyncio.run(run()) is True
        assert wizard.loading_influencers is False
        assert [c.username for c in wizard.candidates] == ["new"]


class TestTransforms:
    def test_brand_company_fallbacks(self) -> None:
        assert brand_from_api({"id": 1, "company": "Glow"}).company_name == "Glow"
        assert brand_from_api({"id": 1, "email": "x@glow.test"}).company_name == "glow.test"
        assert brand_from_api({"id": 1}).company_name == UNKNOWN_COMPANY

    def test_brands_from_flat_response(self) -> None:
        assert [b.id for b in brands_from_response({"brands": [{"id": 3}]})] == ["3"]
        assert brands_from_response(None) == []

    def test_candidate_defaults(self) -> None:
        candidate = candidate_from_api(
            {"id": 9, "username": "zed", "analytics": {"engagement_rate": 3.5}}
        )
        assert candidate.id == "9"
        assert candidate.full_name == "zed"
        assert candidate.engagement_rate == 3.5
        assert candidate.location == NO_LOCATION
        assert "name=zed" in candidate.profile_picture_url
