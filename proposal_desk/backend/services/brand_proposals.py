"""Brand-facing proposal service (no pricing data is exposed to brands)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from proposal_desk.backend.services.api_client import ApiClient, ApiResult

PREFIX = "/api/v1/brand/proposals"


class BrandProposalsApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def get_proposal(self, proposal_id: str) -> ApiResult[Any]:
        return await self.client.get(f"{PREFIX}/{quote(proposal_id, safe='')}")

    async def get_proposal_influencers(self, proposal_id: str) -> ApiResult[Any]:
        """``data`` is ``{"influencers": [...], "total_influencers": n}``."""
        return await self.client.get(f"{PREFIX}/{quote(proposal_id, safe='')}/influencers")

    async def submit_response(self, proposal_id: str, data: dict[str, Any]) -> ApiResult[Any]:
        return await self.client.post(f"{PREFIX}/{quote(proposal_id, safe='')}/respond", data)
