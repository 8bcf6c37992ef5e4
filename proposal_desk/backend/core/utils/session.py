"""
Session context and view-lifetime scoping.

``SessionContext`` carries what a browser client reads from its ambient
auth / currency / team providers; it is passed explicitly to the API client
and to view models instead.

``ViewScope`` ties asynchronous work to the lifetime of one view model.
Once closed, in-flight tasks are cancelled and late results are discarded
rather than written into a view nobody is looking at.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SessionContext:
    """Per-operator request context."""

    access_token: str | None = None
    user_role: str | None = None
    currency: str = "USD"
    team_id: str | None = None

    @property
    def identity(self) -> str:
        """Key that separates one operator's server-side state from another's."""
        return f"{self.team_id or ''}:{self.access_token or 'anonymous'}"

    def auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.team_id:
            headers["X-Team-Id"] = self.team_id
        return headers

    @classmethod
    def from_authorization(cls, header: str | None, **kwargs: Any) -> SessionContext:
        """Build a context from an incoming ``Authorization`` header."""
        token = None
        if header:
            scheme, _, value = header.partition(" ")
            token = value.strip() if scheme.lower() == "bearer" and value.strip() else None
        return cls(access_token=token, **kwargs)


class ViewClosedError(RuntimeError):
    """Raised when work is scheduled on a scope that has already been closed."""


class ViewScope:
    """Own the asyncio tasks started on behalf of one view."""

    def __init__(self, name: str = "view"):
        self.name = name
        self.closed = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        """Schedule ``coro`` on the running loop and track it."""
        if self.closed:
            coro.close()
            raise ViewClosedError(f"Scope '{self.name}' is closed")
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def apply(self, callback: Callable[..., Any], *args: Any) -> bool:
        """Run ``callback(*args)`` unless the scope is closed.

        Returns:
            True if the callback ran.
        """
        if self.closed:
            logger.debug("Discarding result for closed scope '%s'", self.name)
            return False
        callback(*args)
        return True

    async def settle(self) -> None:
        """Wait until every tracked task (including ones spawned meanwhile) is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel outstanding work and refuse any further results."""
        self.closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("Cancelled %d task(s) for scope '%s'", len(tasks), self.name)
