#!/usr/bin/env python3
"""
Quick Demo: Campaign KPIs for a Changing Selection

Ticks influencers on and off the way an operator does on the proposal
review page and prints the KPIs after every change. No server needed.
"""

from proposal_desk.backend.core.kpi import KPIAggregator
from proposal_desk.backend.core.utils.formatting import format_currency, format_followers
from proposal_desk.backend.schemas import GenderSplit, Influencer


def main():
    """Walk through a few selections and print the aggregate each time."""
    print("=" * 72)
    print("Selection-driven campaign KPIs")
    print("=" * 72)

    influencers = [
        Influencer(
            id="inf-1",
            instagram_username="dubai.eats",
            followers_count=120_000,
            engagement_rate=4.2,
            location="Dubai",
            gender_split=GenderSplit(male=40, female=60),
            estimated_reach=30_000,
            cost_per_post=150_000,
        ),
        Influencer(
            id="inf-2",
            instagram_username="gulf.style",
            followers_count=48_000,
            engagement_rate=6.1,
            location="Abu Dhabi",
            gender_split=GenderSplit(male=20, female=80),
            cost_per_post=60_000,
        ),
        Influencer(
            id="inf-3",
            instagram_username="desert.runner",
            followers_count=9_500,
            engagement_rate=8.4,
            location="Dubai",
            cost_per_post=15_000,
        ),
    ]

    aggregate = KPIAggregator()
    steps = [
        ("nothing selected", frozenset()),
        ("+ dubai.eats", frozenset({"inf-1"})),
        ("+ gulf.style", frozenset({"inf-1", "inf-2"})),
        ("+ desert.runner", frozenset({"inf-1", "inf-2", "inf-3"})),
        ("- dubai.eats", frozenset({"inf-2", "inf-3"})),
    ]

    print(f"\n{'Selection':<20}{'Followers':<12}{'Eng %':<8}{'Reach':<10}{'Cost':<12}{'M/F':<10}Location")
    print("-" * 72)

    for label, selected in steps:
        kpis = aggregate(influencers, selected)
        split = f"{kpis.gender_split.male:.0f}/{kpis.gender_split.female:.0f}"
        print(
            f"{label:<20}{format_followers(kpis.total_followers):<12}"
            f"{kpis.avg_engagement_rate:<8.2f}{format_followers(int(kpis.estimated_reach)):<10}"
            f"{format_currency(kpis.total_cost):<12}{split:<10}{kpis.avg_location}"
        )

    # Asking again with an unchanged selection reuses the cached result
    aggregate(influencers, steps[-1][1])
    print(f"\nRecomputations: {aggregate.recomputations} for {len(steps) + 1} lookups")


if __name__ == "__main__":
    main()
