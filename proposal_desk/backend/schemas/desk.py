"""Pydantic schemas for the desk's own HTTP API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from proposal_desk.backend.schemas.proposals import (
    CampaignKPI,
    Influencer,
    InfluencerProposal,
    Proposal,
    ProposalDraft,
)

# ── Runtime configuration ───────────────────────────────────────────────────


class ApiSettingsIn(BaseModel):
    base_url: str = "http://localhost:8000"
    timeout: float = 30.0


class WizardSettingsIn(BaseModel):
    search_debounce: float = 0.3
    search_limit: int = 50
    brands_limit: int = 100


class ValidationSettingsIn(BaseModel):
    debounce: float = 0.5


class DeskConfigIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    api: ApiSettingsIn = ApiSettingsIn()
    wizard: WizardSettingsIn = WizardSettingsIn()
    validation: ValidationSettingsIn = ValidationSettingsIn()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> DeskConfigIn:
        """Build from the dict returned by ``load_config``."""
        return cls.model_validate({k: v for k, v in config.items() if v})


# ── Request models ──────────────────────────────────────────────────────────


class KPIRequestIn(BaseModel):
    influencers: list[Influencer] = Field(default_factory=list)
    selected: list[str] = Field(default_factory=list)


class BudgetIn(BaseModel):
    influencer_proposals: list[InfluencerProposal] = Field(default_factory=list)


class WizardCheckIn(BaseModel):
    draft: ProposalDraft
    target: Literal["influencers", "review", "draft", "submit"] = "review"


class ToggleIn(BaseModel):
    influencer_id: str


# ── Response models ─────────────────────────────────────────────────────────


class HealthOut(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"


class BudgetOut(BaseModel):
    total_budget_usd_cents: int
    per_influencer: dict[str, int] = Field(default_factory=dict)


class WizardCheckOut(BaseModel):
    allowed: bool
    target: str
    message: str | None = None
    problems: list[str] = Field(default_factory=list)


class ReviewOut(BaseModel):
    proposal: Proposal
    influencers: list[Influencer]
    selected: list[str]
    kpis: CampaignKPI
