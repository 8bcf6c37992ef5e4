"""Top-level proposal_desk package.

Sub-packages
------------
proposal_desk.backend
    FastAPI server (api/), view models and pure logic (core/),
    schemas/, upstream API-client services (services/), click CLI (cli/)
"""

from __future__ import annotations

__version__ = "0.1.0"
