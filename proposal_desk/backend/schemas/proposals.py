"""Pydantic schemas for proposals, influencers and derived KPIs."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DeliverableType = Literal["story", "post", "reel", "ugc_video"]
PriorityLevel = Literal["low", "medium", "high"]
BrandResponse = Literal["approved", "rejected", "request_changes", "needs_discussion"]

# ── Upstream entities (consumed, not owned) ─────────────────────────────────


class GenderSplit(BaseModel):
    male: float = 50.0
    female: float = 50.0


class Deliverable(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    quantity: int = 1
    description: str | None = None


class CampaignTimeline(BaseModel):
    model_config = ConfigDict(extra="ignore")

    start_date: str | None = None
    end_date: str | None = None


class Proposal(BaseModel):
    """A brand proposal as returned by the brand-facing endpoints."""

    model_config = ConfigDict(extra="ignore")

    id: str
    proposal_title: str = ""
    proposal_description: str = ""
    status: str = "draft"
    total_campaign_budget_usd_cents: int = 0
    campaign_timeline: CampaignTimeline | None = None


class Influencer(BaseModel):
    """An influencer attached to a proposal, with its audience metrics."""

    model_config = ConfigDict(extra="ignore")

    id: str
    instagram_username: str = ""
    followers_count: int = Field(default=0, ge=0)
    engagement_rate: float = 0.0
    avg_likes: int | None = None
    avg_comments: int | None = None
    profile_picture_url: str | None = None
    location: str | None = None
    gender_split: GenderSplit | None = None
    estimated_reach: float | None = None
    cost_per_post: int | None = None
    assigned_deliverables: list[Deliverable] = Field(default_factory=list)


class Brand(BaseModel):
    id: str
    company_name: str
    primary_contact_email: str = ""
    industry: str | None = None
    budget_range: str | None = None


class InfluencerCandidate(BaseModel):
    """An influencer as listed in the wizard's search results."""

    model_config = ConfigDict(extra="ignore")

    id: str
    username: str
    full_name: str = ""
    followers_count: int = Field(default=0, ge=0)
    engagement_rate: float = 0.0
    category: str = "general"
    verified: bool = False
    profile_picture_url: str | None = None
    location: str | None = None


# ── Wizard draft ────────────────────────────────────────────────────────────


class DeliverableItem(BaseModel):
    type: DeliverableType
    quantity: int = Field(default=1, ge=1)
    price_usd_cents: int = Field(default=0, ge=0)
    description: str | None = None


class InfluencerProposal(BaseModel):
    influencer: InfluencerCandidate
    deliverables: list[DeliverableItem] = Field(default_factory=list)
    total_cost_usd_cents: int = 0
    notes: str = ""


class ProposalDraft(BaseModel):
    """Local form state threaded through the three wizard steps."""

    model_config = ConfigDict(validate_assignment=True)

    brand: Brand | None = None
    proposal_title: str = ""
    proposal_description: str = ""
    campaign_brief: str = ""
    proposed_start_date: str = ""
    proposed_end_date: str = ""
    priority_level: PriorityLevel = "medium"
    influencer_proposals: list[InfluencerProposal] = Field(default_factory=list)
    total_budget_usd_cents: int = 0


# ── Derived values ──────────────────────────────────────────────────────────


class CampaignKPI(BaseModel):
    """Campaign-level metrics over the currently selected influencers."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    total_followers: int = Field(default=0, serialization_alias="totalFollowers")
    avg_engagement_rate: float = Field(default=0.0, serialization_alias="avgEngagementRate")
    estimated_reach: float = Field(default=0.0, serialization_alias="estimatedReach")
    total_cost: int = Field(default=0, serialization_alias="totalCost")
    gender_split: GenderSplit = Field(default_factory=GenderSplit, serialization_alias="genderSplit")
    avg_location: str = Field(default="", serialization_alias="avgLocation")
