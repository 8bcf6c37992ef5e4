"""
Debounced asynchronous checks.

``Debouncer`` runs only the latest of a burst of calls, after a quiet
period. ``DebouncedValidator`` builds a remote uniqueness check on top of
it. Each check is tagged with a sequence number and the value it was
issued for, and its outcome is applied only if nothing newer has been
typed since, so a slow response for an old value can never overwrite the
state of a newer one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from proposal_desk.backend.core.utils.session import ViewScope

logger = logging.getLogger(__name__)


class Debouncer:
    """Delay a coroutine until calls stop arriving for ``delay`` seconds.

    A new call cancels the previous one, whether it is still waiting out
    the delay or already awaiting the network.
    """

    def __init__(self, delay: float, scope: ViewScope | None = None):
        self.delay = delay
        self.scope = scope or ViewScope("debouncer")
        self._task: asyncio.Task | None = None

    async def _delayed(self, func: Callable[..., Awaitable[Any]], args: tuple) -> Any:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return await func(*args)

    def call(self, func: Callable[..., Awaitable[Any]], *args: Any) -> asyncio.Task:
        """Schedule ``func(*args)``, superseding any earlier call."""
        self.cancel()
        self._task = self.scope.spawn(self._delayed(func, args))
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()


@dataclass(frozen=True)
class FieldValidation:
    """Validation state of one form field."""

    valid: bool | None = None
    error: str | None = None
    checking: bool = False


class DebouncedValidator:
    """
    Validate a field against the server, latest input only.

    Args:
        exists: Coroutine function returning True when the value is taken;
            any exception counts as a failed check
        local_check: Returns an error message for values that must not be
            sent to the server at all, or None
        taken_message: Error shown when ``exists`` returns True
        failure_message: Error shown when the check itself failed
        delay: Debounce window in seconds
        scope: View lifetime the checks belong to
    """

    def __init__(
        self,
        exists: Callable[[str], Awaitable[bool]],
        *,
        local_check: Callable[[str], str | None],
        taken_message: str,
        failure_message: str,
        delay: float = 0.5,
        scope: ViewScope | None = None,
    ):
        self._exists = exists
        self._local_check = local_check
        self.taken_message = taken_message
        self.failure_message = failure_message
        self._debouncer = Debouncer(delay, scope)
        self._seq = 0
        self.value: str | None = None
        self.state = FieldValidation()

    def update(self, value: str) -> asyncio.Task | None:
        """Record a new field value and schedule its check.

        Returns:
            The scheduled check, or None if the value failed locally.
        """
        self._seq += 1
        self.value = value

        error = self._local_check(value)
        if error:
            self._debouncer.cancel()
            self.state = FieldValidation(error=error)
            return None

        # Marked as checking straight away so the form cannot be submitted
        # while the debounce window is still open
        self.state = FieldValidation(checking=True)
        return self._debouncer.call(self._check, self._seq, value)

    async def _check(self, seq: int, value: str) -> None:
        try:
            taken = await self._exists(value)
        except Exception:
            logger.warning("Uniqueness check failed for %r", value, exc_info=True)
            outcome = FieldValidation(error=self.failure_message)
        else:
            if taken:
                outcome = FieldValidation(valid=False, error=self.taken_message)
            else:
                outcome = FieldValidation(valid=True)

        if seq != self._seq or value != self.value:
            logger.debug("Discarding stale check for %r (seq %d, latest %d)", value, seq, self._seq)
            return
        self.state = outcome

    def reset(self) -> None:
        self._debouncer.cancel()
        self._seq += 1
        self.value = None
        self.state = FieldValidation()
