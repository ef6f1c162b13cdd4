"""
Per-user customer exclusions.

Collectors hide customers they do not want counted (disputes, write-offs,
internal accounts). The set is persisted in ``excluded_customers`` and is
shared by every view that shows customer money: the customer table, its
export, the payments view and the analytics cards.

``exclude_rows`` is the pure filter applied to cached rows. ``ExclusionStore``
is the shared copy of the set: every change is written to the backend first
and only applied locally once the write succeeded.
"""

from operator import attrgetter
from typing import TYPE_CHECKING, Callable, Iterable, Sequence, TypeVar

from collections_ui.lib import logs
from collections_ui.models.common import MutationResult
from collections_ui.models.records import ExclusionEntry

if TYPE_CHECKING:
    from collections_ui.services.collections_service import CollectionsService

LOG = logs.logger(__file__)

R = TypeVar("R")

_CUSTOMER_ID = attrgetter("customer_id")


def exclude_rows(
    rows: Iterable[R],
    excluded_ids: Iterable[str],
    key: Callable[[R], str] = _CUSTOMER_ID,
) -> list[R]:
    """
    Return the rows whose customer is not excluded, in their original order.

    Args:
        rows: Cached rows.
        excluded_ids: Excluded customer identifiers.
        key: Maps a row to its customer identifier.
    """
    excluded = set(excluded_ids)
    if not excluded:
        return list(rows)
    return [row for row in rows if key(row) not in excluded]


class ExclusionStore:
    """
    The signed-in user's exclusion set.

    Attributes:
        user_id: Owner of the set; writes are refused without one.
    """

    def __init__(
        self, user_id: str | None, entries: Iterable[ExclusionEntry] = ()
    ) -> None:
        self.user_id = user_id
        self._entries: dict[str, ExclusionEntry] = {
            entry.customer_id: entry for entry in entries
        }

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._entries)

    @property
    def entries(self) -> list[ExclusionEntry]:
        return list(self._entries.values())

    def get(self, customer_id: str) -> ExclusionEntry | None:
        return self._entries.get(customer_id)

    def __contains__(self, customer_id: object) -> bool:
        return customer_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _replace(self, entries: Iterable[ExclusionEntry]) -> None:
        self._entries = {entry.customer_id: entry for entry in entries}

    def _check_user(self) -> MutationResult | None:
        if not self.user_id:
            return MutationResult.failed("You must be signed in to change exclusions")
        return None

    async def load(self, service: "CollectionsService") -> MutationResult:
        """Replace the local set with the persisted one."""
        invalid = self._check_user()
        if invalid:
            return invalid
        try:
            entries = await service.list_exclusions(self.user_id)
        except Exception as e:
            LOG.error("Failed to load exclusions: %s", e, exc_info=True)
            return MutationResult.failed(f"Failed to load excluded customers: {e}")
        self._replace(entries)
        return MutationResult.applied()

    async def exclude(
        self,
        service: "CollectionsService",
        customer_id: str,
        reason: str | None = None,
    ) -> MutationResult:
        """Persist an exclusion, then add it locally."""
        invalid = self._check_user()
        if invalid:
            return invalid
        if not customer_id:
            return MutationResult.failed("No customer selected")
        reason = (reason or "").strip() or None
        try:
            entry = await service.add_exclusion(self.user_id, customer_id, reason)
        except Exception as e:
            LOG.error("Failed to exclude %s: %s", customer_id, e, exc_info=True)
            return MutationResult.failed(f"Failed to exclude customer: {e}")
        entries = dict(self._entries)
        entries[customer_id] = entry
        self._replace(entries.values())
        return MutationResult.applied({"customer_id": customer_id})

    async def include(
        self, service: "CollectionsService", customer_id: str
    ) -> MutationResult:
        """Delete an exclusion remotely, then drop it with its reason locally."""
        invalid = self._check_user()
        if invalid:
            return invalid
        if not customer_id:
            return MutationResult.failed("No customer selected")
        try:
            await service.remove_exclusion(self.user_id, customer_id)
        except Exception as e:
            LOG.error("Failed to include %s: %s", customer_id, e, exc_info=True)
            return MutationResult.failed(f"Failed to include customer: {e}")
        self._replace(
            entry for cid, entry in self._entries.items() if cid != customer_id
        )
        return MutationResult.applied({"customer_id": customer_id})

    async def include_all(self, service: "CollectionsService") -> MutationResult:
        """Clear every exclusion for the user."""
        invalid = self._check_user()
        if invalid:
            return invalid
        try:
            await service.clear_exclusions(self.user_id)
        except Exception as e:
            LOG.error("Failed to clear exclusions: %s", e, exc_info=True)
            return MutationResult.failed(f"Failed to include all customers: {e}")
        self._replace(())
        return MutationResult.applied()

    async def restore(
        self, service: "CollectionsService", entries: Sequence[ExclusionEntry]
    ) -> MutationResult:
        """
        Replace the persisted set with ``entries`` exactly, reasons and
        timestamps included. Used when a saved filter is applied.
        """
        invalid = self._check_user()
        if invalid:
            return invalid
        try:
            stored = await service.replace_exclusions(self.user_id, entries)
        except Exception as e:
            LOG.error("Failed to restore exclusions: %s", e, exc_info=True)
            return MutationResult.failed(f"Failed to restore excluded customers: {e}")
        self._replace(stored)
        return MutationResult.applied()
