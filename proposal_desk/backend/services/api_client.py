"""Async HTTP client for the upstream platform API.

Every call returns an :class:`ApiResult` envelope instead of raising, so
call sites always handle both branches::

    result = await client.get("/api/v1/brand/proposals/123")
    if result.success:
        use(result.data)
    else:
        toaster.error(result.error)
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

from proposal_desk.backend.core.errors import UpstreamError
from proposal_desk.backend.core.utils.session import SessionContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

NETWORK_ERROR = "Network error occurred"

_STATUS_MESSAGES = {
    401: "Authentication required. Please log in again.",
    403: "Access denied. Insufficient permissions.",
    404: "Resource not found. Please check the URL and try again.",
    422: "Validation error. Please check your input.",
    429: "Rate limit exceeded. Please wait before trying again.",
    500: "Internal server error. Please try again later.",
    503: "Service temporarily unavailable. Please try again in a few minutes.",
}


def describe_status(status: int) -> str:
    """Operator-facing message for an HTTP status with no usable body."""
    return _STATUS_MESSAGES.get(status, f"Request failed with status {status}")


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """``{success, data?, error?}`` envelope returned by every service call."""

    success: bool
    data: T | None = None
    error: str | None = None
    status: int | None = None

    @classmethod
    def ok(cls, data: T, status: int | None = 200) -> ApiResult[T]:
        return cls(success=True, data=data, status=status)

    @classmethod
    def fail(cls, error: str, status: int | None = None) -> ApiResult[T]:
        return cls(success=False, error=error, status=status)

    def error_or(self, fallback: str) -> str:
        return self.error or fallback

    def unwrap(self) -> T:
        """Return ``data`` or raise :class:`UpstreamError` on a failure envelope."""
        if not self.success:
            raise UpstreamError(self.error or NETWORK_ERROR, status=self.status)
        return self.data  # type: ignore[return-value]


def _error_text(response: httpx.Response) -> str:
    """Pull the server's message out of an error response."""
    text = response.text.strip()
    if not text:
        return describe_status(response.status_code)
    try:
        body = json.loads(text)
    except ValueError:
        return text
    if isinstance(body, dict):
        for key in ("detail", "error", "message"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return text


class ApiClient:
    """Thin wrapper around :class:`httpx.AsyncClient` producing ``ApiResult``."""

    def __init__(
        self,
        base_url: str,
        session: SessionContext | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionContext()
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        session: SessionContext | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ApiClient:
        api_cfg = config.get("api", {})
        return cls(
            api_cfg.get("base_url", "http://localhost:8000"),
            session,
            timeout=float(api_cfg.get("timeout", 30.0)),
            transport=transport,
        )

    def for_session(self, session: SessionContext) -> ApiClient:
        """Same connection pool, different operator."""
        clone = copy.copy(self)
        clone.session = session
        return clone

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> ApiResult[Any]:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self._http.request(
                method,
                endpoint,
                json=body,
                params=params or None,
                headers=self.session.auth_headers(),
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, endpoint, exc)
            return ApiResult.fail(str(exc) or NETWORK_ERROR)

        if not response.is_success:
            error = _error_text(response)
            logger.warning("%s %s -> %d: %s", method, endpoint, response.status_code, error)
            return ApiResult.fail(error, status=response.status_code)

        if not response.content:
            return ApiResult.ok(None, status=response.status_code)
        try:
            return ApiResult.ok(response.json(), status=response.status_code)
        except ValueError as exc:
            logger.warning("%s %s returned invalid JSON", method, endpoint)
            return ApiResult.fail(f"Invalid JSON response: {exc}", status=response.status_code)

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> ApiResult[Any]:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, body: Any = None) -> ApiResult[Any]:
        return await self.request("POST", endpoint, body=body)

    async def put(self, endpoint: str, body: Any = None) -> ApiResult[Any]:
        return await self.request("PUT", endpoint, body=body)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
