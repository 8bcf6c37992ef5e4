"""Create-proposal wizard: gating, budget and payloads."""

from __future__ import annotations

from proposal_desk.backend.core.wizard.proposal_wizard import (
    ALREADY_ADDED,
    DRAFT_NO_BRAND,
    DRAFT_NO_TITLE,
    MISSING_DELIVERABLES,
    NO_BRAND,
    NO_DESCRIPTION,
    NO_INFLUENCERS,
    NO_TITLE,
    ProposalWizard,
    WizardOutcome,
    WizardStep,
    draft_payload,
    draft_problems,
    influencer_cost,
    missing_deliverables,
    submit_payload,
    submit_problems,
    total_budget,
    transition_problems,
)

__all__ = [
    "ALREADY_ADDED",
    "DRAFT_NO_BRAND",
    "DRAFT_NO_TITLE",
    "MISSING_DELIVERABLES",
    "NO_BRAND",
    "NO_DESCRIPTION",
    "NO_INFLUENCERS",
    "NO_TITLE",
    "ProposalWizard",
    "WizardOutcome",
    "WizardStep",
    "draft_payload",
    "draft_problems",
    "influencer_cost",
    "missing_deliverables",
    "submit_payload",
    "submit_problems",
    "total_budget",
    "transition_problems",
]
