"""
Per-operator selection state for the HTTP service.

Each operator (identified by their session) keeps an independent set of
ticked influencer ids per proposal. Toggles are applied to the stored value
in a single step with no await in between, so concurrent requests on one
event loop cannot lose each other's updates.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Set

from proposal_desk.backend.core.kpi import toggle_selection
from proposal_desk.backend.core.utils.session import SessionContext

logger = logging.getLogger(__name__)


class SelectionStore:
    """Selections keyed by ``(operator, proposal_id)``.

    Empty selections are not stored. When more than ``max_entries`` keys are
    held, the least recently touched one is dropped.
    """

    def __init__(self, max_entries: int = 1024):
        self.max_entries = max_entries
        self._entries: OrderedDict[tuple[str, str], frozenset[str]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _key(session: SessionContext, proposal_id: str) -> tuple[str, str]:
        return (session.identity, proposal_id)

    def get(self, session: SessionContext, proposal_id: str) -> frozenset[str]:
        key = self._key(session, proposal_id)
        if key in self._entries:
            self._entries.move_to_end(key)
            return self._entries[key]
        return frozenset()

    def set(self, session: SessionContext, proposal_id: str, selected: Set[str]) -> frozenset[str]:
        key = self._key(session, proposal_id)
        value = frozenset(selected)
        if not value:
            self._entries.pop(key, None)
            return value
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted selection for proposal %s", evicted[1])
        return value

    def toggle(self, session: SessionContext, proposal_id: str, influencer_id: str) -> frozenset[str]:
        """Flip ``influencer_id`` in the operator's current selection."""
        current = self.get(session, proposal_id)
        return self.set(session, proposal_id, toggle_selection(current, influencer_id))
