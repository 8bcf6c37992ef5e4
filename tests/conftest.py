"""Shared pytest fixtures for the test suite.

Import any of these in a test file by simply declaring the fixture name as a
parameter; pytest discovers them automatically from this conftest.py.

Fixture overview
----------------
influencers    : three loaded influencers with mixed reach / gender / location data
brand          : a brand client as the wizard lists it
candidate      : an influencer as the wizard's search returns it
upstream       : fake upstream API (routes → responses) on an httpx.MockTransport
client         : ApiClient wired to ``upstream`` with a bearer token
config_path    : the shipped default_config.yaml
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from proposal_desk.backend.core.utils.session import SessionContext
from proposal_desk.backend.schemas import Brand, GenderSplit, Influencer, InfluencerCandidate
from proposal_desk.backend.services import ApiClient

ROOT = Path(__file__).resolve().parents[1]

# ── Domain primitives ────────────────────────────────────────────────────────


@pytest.fixture
def influencers() -> list[Influencer]:
    """
    Three influencers:

    a: reach estimate, gender data, Dubai
    b: no reach estimate (falls back to 10% of followers), gender data, Dubai
    c: no gender data, Riyadh
    """
    return [
        Influencer(
            id="a",
            instagram_username="alpha",
            followers_count=100_000,
            engagement_rate=4.0,
            location="Dubai",
            gender_split=GenderSplit(male=40, female=60),
            estimated_reach=25_000,
            cost_per_post=50_000,
        ),
        Influencer(
            id="b",
            instagram_username="bravo",
            followers_count=20_000,
            engagement_rate=6.0,
            location="Dubai",
            gender_split=GenderSplit(male=20, female=80),
            cost_per_post=10_000,
        ),
        Influencer(
            id="c",
            instagram_username="charlie",
            followers_count=5_000,
            engagement_rate=8.0,
            location="Riyadh",
            estimated_reach=1_000,
        ),
    ]


@pytest.fixture
def brand() -> Brand:
    return Brand(id="brand-1", company_name="Acme", primary_contact_email="ops@acme.test")


@pytest.fixture
def candidate() -> InfluencerCandidate:
    return InfluencerCandidate(id="inf-1", username="alpha", followers_count=100_000)


@pytest.fixture
def other_candidate() -> InfluencerCandidate:
    return InfluencerCandidate(id="inf-2", username="bravo", followers_count=20_000)


# ── Fake upstream API ────────────────────────────────────────────────────────


class FakeUpstream:
    """
    Route table for ``httpx.MockTransport``.

    ``routes`` maps ``"METHOD /path"`` to a JSON-able body, an
    ``httpx.Response``, or a callable ``request -> httpx.Response``.
    Unrouted requests answer 404 with an empty body.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response: Any) -> None:
        self.routes[f"{method.upper()} {path}"] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(f"{request.method} {request.url.path}")
        if route is None:
            return httpx.Response(404)
        if isinstance(route, httpx.Response):
            # fresh copy so the same canned response can be served twice
            return httpx.Response(route.status_code, headers=route.headers, content=route.content)
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def make_client(upstream: FakeUpstream) -> Callable[..., ApiClient]:
    def factory(session: SessionContext | None = None) -> ApiClient:
        return ApiClient(
            "http://upstream.test",
            session or SessionContext(access_token="tok-123"),
            transport=upstream.transport,
        )

    return factory


@pytest.fixture
def client(make_client: Callable[..., ApiClient]) -> ApiClient:
    return make_client()


@pytest.fixture
def config_path() -> Path:
    return ROOT / "configs" / "default_config.yaml"
