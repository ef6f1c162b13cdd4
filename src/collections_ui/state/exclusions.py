"""
Reflex state holding the signed-in user's excluded customers.

One ``ExclusionState`` exists per browser session and every view that shows
customer money reads it through ``get_state``, so the customer table, its
analytics and the payments view always see the same set.
"""

import reflex as rx

from collections_ui import config
from collections_ui.lib import logs
from collections_ui.listing import ExclusionStore
from collections_ui.models.common import MutationResult
from collections_ui.models.records import ExclusionEntry
from collections_ui.services import get_collections_service
from collections_ui.utils import format_date

LOG = logs.logger(__file__)


class ExclusionState(rx.State):
    """Frontend copy of the exclusion set plus the store behind it."""

    entries: list[dict[str, str]] = []
    loaded: bool = False
    error: str = ""

    _store: ExclusionStore | None = None

    @rx.var
    def count(self) -> int:
        return len(self.entries)

    def _ensure_store(self) -> ExclusionStore:
        if self._store is None:
            self._store = ExclusionStore(config.USER_ID)
        return self._store

    def _sync(self, result: MutationResult) -> MutationResult:
        store = self._ensure_store()
        self.entries = [
            {
                "customer_id": entry.customer_id,
                "reason": entry.reason or "",
                "excluded_at": format_date(entry.excluded_at),
            }
            for entry in sorted(store.entries, key=lambda e: e.customer_id)
        ]
        self._store = store
        return result

    def _excluded_ids(self) -> frozenset[str]:
        return self._ensure_store().ids

    def _entries(self) -> list[ExclusionEntry]:
        return self._ensure_store().entries

    async def _exclude(self, customer_id: str, reason: str | None) -> MutationResult:
        store = self._ensure_store()
        return self._sync(
            await store.exclude(get_collections_service(), customer_id, reason)
        )

    async def _include(self, customer_id: str) -> MutationResult:
        store = self._ensure_store()
        return self._sync(await store.include(get_collections_service(), customer_id))

    async def _include_all(self) -> MutationResult:
        store = self._ensure_store()
        return self._sync(await store.include_all(get_collections_service()))

    async def _restore(self, entries: list[ExclusionEntry]) -> MutationResult:
        store = self._ensure_store()
        return self._sync(await store.restore(get_collections_service(), entries))

    @rx.event
    async def load(self):
        """Event handler for page load: read the persisted set."""
        result = self._sync(await self._ensure_store().load(get_collections_service()))
        self.loaded = True
        self.error = "" if result.ok else result.reason
        if not result.ok:
            LOG.warning("Exclusions unavailable: %s", result.reason)
