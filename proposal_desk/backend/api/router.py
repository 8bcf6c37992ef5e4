"""API route handlers.

Pure computations (KPIs, budget, wizard checks) need no upstream call.
Review, selection and HRM routes go through the upstream API client with
the caller's bearer token.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from proposal_desk.backend.core.hrm import next_employee_code
from proposal_desk.backend.core.kpi import aggregate_kpis
from proposal_desk.backend.core.review import ProposalReview
from proposal_desk.backend.core.utils.session import SessionContext
from proposal_desk.backend.core.wizard import (
    WizardStep,
    draft_problems,
    influencer_cost,
    submit_problems,
    total_budget,
    transition_problems,
)
from proposal_desk.backend.schemas import (
    BudgetIn,
    BudgetOut,
    CampaignKPI,
    DeskConfigIn,
    HealthOut,
    KPIRequestIn,
    NextCodeOut,
    ReviewOut,
    ToggleIn,
    WizardCheckIn,
    WizardCheckOut,
)
from proposal_desk.backend.services import ApiClient, BrandProposalsApi, HRMApiService

logger = logging.getLogger(__name__)

router = APIRouter()

_TARGET_STEPS = {"influencers": WizardStep.INFLUENCERS, "review": WizardStep.REVIEW}


def operator_session(request: Request) -> SessionContext:
    """The calling operator, from their bearer token."""
    return SessionContext.from_authorization(request.headers.get("authorization"))


def upstream(request: Request, session: SessionContext = Depends(operator_session)) -> ApiClient:
    """Upstream client bound to the caller's credentials."""
    return request.app.state.api_client.for_session(session)


def _camel(kpis: CampaignKPI) -> dict:
    return kpis.model_dump(by_alias=True)


async def _load_review(proposal_id: str, client: ApiClient) -> ProposalReview:
    review = ProposalReview(proposal_id, BrandProposalsApi(client))
    if not await review.load():
        raise HTTPException(status_code=502, detail=review.error or "Failed to load proposal")
    return review


def _review_out(review: ProposalReview) -> JSONResponse:
    payload = ReviewOut(
        proposal=review.proposal,
        influencers=review.influencers,
        selected=sorted(review.selected),
        kpis=review.kpis,
    )
    return JSONResponse(content=payload.model_dump(mode="json", by_alias=True))


# ── Routes ─────────────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthOut, include_in_schema=False)
async def health_check() -> HealthOut:
    """Liveness probe (suppressed from access log via log filter)."""
    return HealthOut()


@router.get("/config", response_model=DeskConfigIn)
async def get_config(request: Request) -> DeskConfigIn:
    """Return the current desk configuration."""
    return request.app.state.desk_config


@router.post("/config", response_model=DeskConfigIn)
async def set_config(request: Request, cfg: DeskConfigIn) -> DeskConfigIn:
    """Replace the desk configuration; reconnects upstream if the API settings changed."""
    previous: DeskConfigIn = request.app.state.desk_config
    request.app.state.desk_config = cfg
    if cfg.api != previous.api:
        from proposal_desk.backend.api.app import build_client

        old_client = request.app.state.api_client
        request.app.state.api_client = build_client(request.app)
        await old_client.aclose()
        logger.info("Upstream switched to %s", cfg.api.base_url)
    return cfg


@router.post("/kpis")
async def compute_kpis(body: KPIRequestIn) -> JSONResponse:
    """Aggregate KPIs for an explicit influencer list and selection."""
    kpis = aggregate_kpis(body.influencers, frozenset(body.selected))
    return JSONResponse(content=_camel(kpis))


@router.post("/proposals/budget", response_model=BudgetOut)
async def compute_budget(body: BudgetIn) -> BudgetOut:
    return BudgetOut(
        total_budget_usd_cents=total_budget(body.influencer_proposals),
        per_influencer={ip.influencer.id: influencer_cost(ip) for ip in body.influencer_proposals},
    )


@router.post("/proposals/wizard/check", response_model=WizardCheckOut)
async def check_wizard(body: WizardCheckIn) -> WizardCheckOut:
    """Report whether a wizard snapshot may move to ``target``."""
    if body.target == "submit":
        problems = submit_problems(body.draft)
    elif body.target == "draft":
        problems = draft_problems(body.draft)
    else:
        problems = transition_problems(body.draft, _TARGET_STEPS[body.target])
    return WizardCheckOut(
        allowed=not problems,
        target=body.target,
        message=problems[0] if problems else None,
        problems=problems,
    )


@router.get("/proposals/{proposal_id}/review")
async def get_review(
    proposal_id: str,
    request: Request,
    session: SessionContext = Depends(operator_session),
    client: ApiClient = Depends(upstream),
) -> JSONResponse:
    review = await _load_review(proposal_id, client)
    review.selected = request.app.state.selections.get(session, proposal_id)
    return _review_out(review)


@router.post("/proposals/{proposal_id}/selection/toggle")
async def toggle_influencer(
    proposal_id: str,
    body: ToggleIn,
    request: Request,
    session: SessionContext = Depends(operator_session),
    client: ApiClient = Depends(upstream),
) -> JSONResponse:
    review = await _load_review(proposal_id, client)
    # toggle the stored value only once the upstream load is done
    review.selected = request.app.state.selections.toggle(session, proposal_id, body.influencer_id)
    return _review_out(review)


@router.get("/hrm/next-code", response_model=NextCodeOut)
async def get_next_employee_code(client: ApiClient = Depends(upstream)) -> NextCodeOut:
    result = await HRMApiService(client).get_employees()
    if not result.success:
        raise HTTPException(status_code=502, detail=result.error_or("Failed to load employees"))
    employees = (result.data or {}).get("employees", [])
    codes = [e.get("employee_id") or e.get("employee_code") for e in employees]
    return NextCodeOut(employee_code=next_employee_code(codes))
