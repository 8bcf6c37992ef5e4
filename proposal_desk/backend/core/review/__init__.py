"""Proposal review with selection-driven KPIs."""

from __future__ import annotations

from proposal_desk.backend.core.review.proposal_review import RESPONSES, ProposalReview
from proposal_desk.backend.core.review.selections import SelectionStore

__all__ = ["RESPONSES", "ProposalReview", "SelectionStore"]
