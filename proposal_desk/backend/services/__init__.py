"""Services package – re-exports the upstream API client and its services."""

from __future__ import annotations

from proposal_desk.backend.services.api_client import ApiClient, ApiResult, describe_status
from proposal_desk.backend.services.brand_proposals import BrandProposalsApi
from proposal_desk.backend.services.hrm import HRMApiService
from proposal_desk.backend.services.superadmin import SuperadminApiService

__all__ = [
    "ApiClient",
    "ApiResult",
    "BrandProposalsApi",
    "HRMApiService",
    "SuperadminApiService",
    "describe_status",
]
