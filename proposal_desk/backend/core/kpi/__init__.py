"""KPI aggregation over a selection of influencers."""

from __future__ import annotations

from proposal_desk.backend.core.kpi.aggregator import (
    NO_LOCATION_DATA,
    NO_SELECTION_LOCATION,
    REACH_FALLBACK_RATIO,
    KPIAggregator,
    aggregate_kpis,
    select,
    toggle_selection,
)
from proposal_desk.backend.core.kpi.reducers import mean_by, sum_by

__all__ = [
    "NO_LOCATION_DATA",
    "NO_SELECTION_LOCATION",
    "REACH_FALLBACK_RATIO",
    "KPIAggregator",
    "aggregate_kpis",
    "mean_by",
    "select",
    "sum_by",
    "toggle_selection",
]
