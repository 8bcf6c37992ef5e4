"""FastAPI application factory.

Instantiate with:
    uvicorn proposal_desk.backend.api.app:app --reload --port 8100
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from proposal_desk.backend.api.router import router
from proposal_desk.backend.core.review import SelectionStore
from proposal_desk.backend.core.utils.config import get_default_config
from proposal_desk.backend.schemas import DeskConfigIn
from proposal_desk.backend.services import ApiClient

logger = logging.getLogger(__name__)

# Configurable via environment, defaults allow local dev servers only.
# Override in production:  CORS_ORIGINS="https://your-domain.com"
_CORS_ORIGINS: list[str] = os.getenv(
    "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
).split(",")


def build_client(app: FastAPI) -> ApiClient:
    """Upstream client for the app's current configuration."""
    cfg: DeskConfigIn = app.state.desk_config
    return ApiClient(
        cfg.api.base_url,
        timeout=cfg.api.timeout,
        transport=app.state.upstream_transport,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the upstream connection pool and per-process selection state."""
    app.state.api_client = build_client(app)
    app.state.selections = SelectionStore()
    logger.info("Proposal desk ready – upstream %s", app.state.desk_config.api.base_url)
    try:
        yield
    finally:
        await app.state.api_client.aclose()


def create_app(
    config: dict[str, Any] | None = None,
    upstream_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Configuration dict as returned by ``load_config``
        upstream_transport: Optional httpx transport for the upstream API
            (tests pass an ``httpx.MockTransport``)
    """
    application = FastAPI(
        title="Proposal Desk API",
        version="0.1.0",
        description="Campaign KPIs, proposal wizard checks and HRM helpers",
        lifespan=lifespan,
    )
    application.state.desk_config = DeskConfigIn.from_config(config or get_default_config())
    application.state.upstream_transport = upstream_transport

    # ── CORS ───────────────────────────────────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Register all API routes under /api ─────────────────────────────────
    application.include_router(router, prefix="/api")

    # ── Suppress noisy access-log lines for health polls ───────────────────
    _install_access_log_filter()

    return application


class _QuietPollFilter(logging.Filter):
    """Drop uvicorn access-log records for /api/health."""

    _NOISY = ("/api/health",)

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return not any(path in msg for path in self._NOISY)


def _install_access_log_filter() -> None:
    """Attach the filter to uvicorn's access logger (if it exists)."""
    uvicorn_access = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, _QuietPollFilter) for f in uvicorn_access.filters):
        uvicorn_access.addFilter(_QuietPollFilter())


# Module-level instance used by uvicorn.
app = create_app()
