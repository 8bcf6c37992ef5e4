"""
Selection-driven KPI Aggregation.

Given every influencer loaded for a proposal and the set of ids the
operator has ticked, derive campaign-level metrics:

- total followers and total cost (sums)
- average engagement rate (mean, 0 for an empty selection)
- estimated reach, falling back to 10% of followers when an influencer
  carries no reach estimate
- gender split as a mean of the per-influencer splits (not weighted by
  audience size), over influencers that report one
- most common location

The aggregate is a pure function of ``(influencers, selected)``. Ids in the
selection that match no loaded influencer are ignored.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence, Set

from proposal_desk.backend.core.kpi.reducers import mean_by, sum_by
from proposal_desk.backend.schemas import CampaignKPI, GenderSplit, Influencer

logger = logging.getLogger(__name__)

# Share of followers assumed reached when no estimate is provided
REACH_FALLBACK_RATIO = 0.1

# Location shown when nothing is selected
NO_SELECTION_LOCATION = "No location data"
# Location shown when the selection has no location data at all
NO_LOCATION_DATA = "Various locations"


def _reach(influencer: Influencer) -> float:
    if influencer.estimated_reach:
        return influencer.estimated_reach
    return influencer.followers_count * REACH_FALLBACK_RATIO


def _gender_split(selected: list[Influencer]) -> GenderSplit:
    with_data = [inf for inf in selected if inf.gender_split is not None]
    if not with_data:
        return GenderSplit(male=50.0, female=50.0)
    return GenderSplit(
        # a zero share counts as unknown and defaults to 50, like a missing one
        male=mean_by(with_data, lambda inf: inf.gender_split.male or 50.0),
        female=mean_by(with_data, lambda inf: inf.gender_split.female or 50.0),
    )


def _most_common_location(selected: list[Influencer]) -> str:
    # Counter keeps insertion order, so ties resolve to the first seen
    counts = Counter(inf.location for inf in selected if inf.location)
    if not counts:
        return NO_LOCATION_DATA
    return counts.most_common(1)[0][0]


def select(influencers: Iterable[Influencer], selected: Set[str]) -> list[Influencer]:
    """Loaded influencers whose id is in ``selected``, in load order."""
    return [inf for inf in influencers if inf.id in selected]


def aggregate_kpis(influencers: Sequence[Influencer], selected: Set[str]) -> CampaignKPI:
    """
    Compute campaign KPIs for the selected influencers.

    Args:
        influencers: Every influencer loaded for the proposal
        selected: Ids ticked by the operator

    Returns:
        CampaignKPI; an empty selection yields zeros, a 50/50 gender split
        and the no-selection location sentinel.
    """
    chosen = select(influencers, selected)

    if not chosen:
        return CampaignKPI(
            total_followers=0,
            avg_engagement_rate=0.0,
            estimated_reach=0.0,
            total_cost=0,
            gender_split=GenderSplit(male=50.0, female=50.0),
            avg_location=NO_SELECTION_LOCATION,
        )

    return CampaignKPI(
        total_followers=sum_by(chosen, lambda inf: inf.followers_count),
        avg_engagement_rate=mean_by(chosen, lambda inf: inf.engagement_rate),
        estimated_reach=sum_by(chosen, _reach, 0.0),
        total_cost=sum_by(chosen, lambda inf: inf.cost_per_post or 0),
        gender_split=_gender_split(chosen),
        avg_location=_most_common_location(chosen),
    )


def toggle_selection(selected: Set[str], influencer_id: str) -> frozenset[str]:
    """Add ``influencer_id`` if absent, remove it if present."""
    return frozenset(selected) ^ {influencer_id}


class KPIAggregator:
    """Memoised :func:`aggregate_kpis`.

    Recomputes only when the influencer list object or the selection
    changes, the same contract as a memo keyed on both inputs.
    """

    def __init__(self) -> None:
        self._influencers: Sequence[Influencer] | None = None
        self._selected: frozenset[str] | None = None
        self._result: CampaignKPI | None = None
        self.recomputations = 0

    def __call__(self, influencers: Sequence[Influencer], selected: Set[str]) -> CampaignKPI:
        key = frozenset(selected)
        if self._result is not None and influencers is self._influencers and key == self._selected:
            return self._result

        self._result = aggregate_kpis(influencers, key)
        self._influencers = influencers
        self._selected = key
        self.recomputations += 1
        logger.debug(
            "Recomputed KPIs for %d selected of %d influencers", len(key), len(influencers)
        )
        return self._result
