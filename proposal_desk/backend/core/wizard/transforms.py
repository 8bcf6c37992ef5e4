"""Normalise upstream brand / influencer payloads for the wizard."""

from __future__ import annotations

from typing import Any

from proposal_desk.backend.schemas import Brand, InfluencerCandidate

_BUDGET_BY_TIER = {
    "enterprise": "$10,000+",
    "premium": "$5,000-$10,000",
}
DEFAULT_BUDGET_RANGE = "$1,000-$5,000"
UNKNOWN_COMPANY = "Unknown Company"
NO_LOCATION = "Location not available"


def _avatar_url(username: str) -> str:
    return f"https://ui-avatars.com/api/?name={username}&size=150&background=6366f1&color=fff"


def brand_from_api(raw: dict[str, Any]) -> Brand:
    email = raw.get("email") or ""
    domain = email.split("@", 1)[1] if "@" in email else ""
    return Brand(
        id=str(raw["id"]),
        company_name=raw.get("company") or domain or UNKNOWN_COMPANY,
        primary_contact_email=email,
        industry="Brand Marketing" if raw.get("role") == "brand_user" else "Business",
        budget_range=_BUDGET_BY_TIER.get(raw.get("subscription_tier") or "", DEFAULT_BUDGET_RANGE),
    )


def brands_from_response(data: Any) -> list[Brand]:
    """Brands may arrive as ``{"data": {"brands": []}}`` or ``{"brands": []}``."""
    if not isinstance(data, dict):
        return []
    nested = data.get("data")
    raw = (nested.get("brands") if isinstance(nested, dict) else None) or data.get("brands") or []
    return [brand_from_api(item) for item in raw]


def candidate_from_api(raw: dict[str, Any]) -> InfluencerCandidate:
    analytics = raw.get("analytics") or {}
    ai_analysis = analytics.get("ai_analysis") or {}
    username = raw.get("username") or ""
    return InfluencerCandidate(
        id=str(raw["id"]),
        username=username,
        full_name=raw.get("full_name") or username,
        followers_count=raw.get("followers_count") or 0,
        engagement_rate=analytics.get("engagement_rate") or 0,
        category=ai_analysis.get("primary_content_type") or "general",
        verified=bool(raw.get("is_verified")),
        profile_picture_url=raw.get("profile_image_url") or _avatar_url(username),
        location=raw.get("location") or NO_LOCATION,
    )
