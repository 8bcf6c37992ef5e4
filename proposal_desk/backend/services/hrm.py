"""HRM employee service."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from proposal_desk.backend.services.api_client import ApiClient, ApiResult

PREFIX = "/api/v1/hrm/employees"


class HRMApiService:
    def __init__(self, client: ApiClient):
        self.client = client

    async def check_employee_code(self, code: str) -> ApiResult[Any]:
        """``data`` is ``{"exists": bool}``."""
        return await self.client.get(f"{PREFIX}/check-code/{quote(code, safe='')}")

    async def check_employee_email(self, email: str) -> ApiResult[Any]:
        return await self.client.get(f"{PREFIX}/check-email/{quote(email, safe='')}")

    async def get_employees(self) -> ApiResult[Any]:
        return await self.client.get(PREFIX)

    async def create_employee(self, data: dict[str, Any]) -> ApiResult[Any]:
        return await self.client.post(PREFIX, data)
