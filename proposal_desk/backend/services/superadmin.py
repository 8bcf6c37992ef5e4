"""Superadmin service: brands, influencer search, proposal creation, users."""

from __future__ import annotations

from typing import Any, Literal
from urllib.parse import quote

from proposal_desk.backend.services.api_client import ApiClient, ApiResult

UserStatus = Literal["active", "suspended", "deactivated"]

PROPOSALS_PREFIX = "/api/v1/superadmin/proposals"


class SuperadminApiService:
    def __init__(self, client: ApiClient):
        self.client = client

    # ── Proposal wizard ─────────────────────────────────────────────────────

    async def get_available_brands(self, params: dict[str, Any] | None = None) -> ApiResult[Any]:
        return await self.client.get(f"{PROPOSALS_PREFIX}/brands/available", params=params)

    async def get_influencers(self, params: dict[str, Any] | None = None) -> ApiResult[Any]:
        return await self.client.get("/api/v1/superadmin/influencers", params=params)

    async def create_brand_proposal(self, data: dict[str, Any]) -> ApiResult[Any]:
        return await self.client.post(f"{PROPOSALS_PREFIX}/brand-proposals", data)

    async def save_brand_proposal_draft(self, data: dict[str, Any]) -> ApiResult[Any]:
        return await self.client.post(f"{PROPOSALS_PREFIX}/brand-proposals/draft", data)

    # ── User management ─────────────────────────────────────────────────────

    async def get_users(self, filters: dict[str, Any] | None = None) -> ApiResult[Any]:
        return await self.client.get("/api/superadmin/users", params=filters)

    async def update_user_status(
        self, user_id: str, status: UserStatus, reason: str | None = None
    ) -> ApiResult[Any]:
        return await self.client.put(
            f"/api/superadmin/users/{quote(user_id, safe='')}/status",
            {"status": status, "reason": reason},
        )
