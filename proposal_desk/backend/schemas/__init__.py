"""Schema package – re-exports all public symbols for convenient imports."""

from __future__ import annotations

from proposal_desk.backend.schemas.desk import (
    ApiSettingsIn,
    BudgetIn,
    BudgetOut,
    DeskConfigIn,
    HealthOut,
    KPIRequestIn,
    ReviewOut,
    ToggleIn,
    ValidationSettingsIn,
    WizardCheckIn,
    WizardCheckOut,
    WizardSettingsIn,
)
from proposal_desk.backend.schemas.hrm import EmergencyContact, EmployeeIn, NextCodeOut
from proposal_desk.backend.schemas.proposals import (
    Brand,
    BrandResponse,
    CampaignKPI,
    CampaignTimeline,
    Deliverable,
    DeliverableItem,
    GenderSplit,
    Influencer,
    InfluencerCandidate,
    InfluencerProposal,
    Proposal,
    ProposalDraft,
)

__all__ = [
    "ApiSettingsIn",
    "Brand",
    "BrandResponse",
    "BudgetIn",
    "BudgetOut",
    "CampaignKPI",
    "CampaignTimeline",
    "Deliverable",
    "DeliverableItem",
    "DeskConfigIn",
    "EmergencyContact",
    "EmployeeIn",
    "GenderSplit",
    "HealthOut",
    "Influencer",
    "InfluencerCandidate",
    "InfluencerProposal",
    "KPIRequestIn",
    "NextCodeOut",
    "Proposal",
    "ProposalDraft",
    "ReviewOut",
    "ToggleIn",
    "ValidationSettingsIn",
    "WizardCheckIn",
    "WizardCheckOut",
    "WizardSettingsIn",
]
