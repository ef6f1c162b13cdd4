"""
Named filter presets.

A saved filter stores the full criteria of a view together with the
exclusion set that was active, so loading it later puts the view back in
exactly the same state.
"""

from typing import TYPE_CHECKING, Generic, Sequence, TypeVar

from collections_ui.lib import logs
from collections_ui.models.common import MutationResult
from collections_ui.models.criteria import FilterCriteria
from collections_ui.models.records import ExclusionEntry, SavedFilter

if TYPE_CHECKING:
    from collections_ui.services.collections_service import CollectionsService

LOG = logs.logger(__file__)

C = TypeVar("C", bound=FilterCriteria)


def filter_config(
    criteria: FilterCriteria, exclusions: Sequence[ExclusionEntry]
) -> dict:
    """Build the stored ``filter_config`` payload."""
    return {
        "criteria": criteria.to_config(),
        "exclusions": [entry.to_dict() for entry in exclusions],
    }


class SavedFilterStore(Generic[C]):
    """
    Saved filters of one view for the signed-in user.

    Attributes:
        user_id: Owner of the filters.
        criteria_type: Criteria class of the view.
        filters: Filters loaded by the last ``load``, newest first.
    """

    def __init__(self, user_id: str | None, criteria_type: type[C]) -> None:
        self.user_id = user_id
        self.criteria_type = criteria_type
        self.filters: list[SavedFilter] = []

    @property
    def view(self) -> str:
        return self.criteria_type.VIEW

    def find(self, filter_id: str) -> SavedFilter | None:
        return next((f for f in self.filters if f.id == filter_id), None)

    async def load(self, service: "CollectionsService") -> MutationResult:
        if not self.user_id:
            return MutationResult.failed("You must be signed in to use saved filters")
        try:
            self.filters = await service.list_saved_filters(self.user_id, self.view)
        except Exception as e:
            LOG.error("Failed to load saved filters: %s", e, exc_info=True)
            return MutationResult.failed(f"Failed to load saved filters: {e}")
        return MutationResult.applied()

    async def save(
        self,
        service: "CollectionsService",
        name: str,
        criteria: C,
        exclusions: Sequence[ExclusionEntry] = (),
    ) -> MutationResult:
        """
        Save or overwrite the filter called ``name``.

        Returns a failed result, without calling the backend, when no user
        is signed in or the name is blank.
        """
        name = (name or "").strip()
        if not self.user_id:
            return MutationResult.failed("You must be signed in to save filters")
        if not name:
            return MutationResult.failed("Please enter a filter name")
        try:
            saved = await service.save_filter(
                self.user_id, self.view, name, filter_config(criteria, exclusions)
            )
        except Exception as e:
            LOG.error("Failed to save filter %s: %s", name, e, exc_info=True)
            return MutationResult.failed(f"Failed to save filter: {e}")
        self.filters = [saved] + [f for f in self.filters if f.name != name]
        return MutationResult.applied({"id": saved.id, "name": name})

    async def delete(
        self, service: "CollectionsService", filter_id: str
    ) -> MutationResult:
        if not self.user_id:
            return MutationResult.failed("You must be signed in to delete filters")
        try:
            await service.delete_saved_filter(self.user_id, filter_id)
        except Exception as e:
            LOG.error("Failed to delete filter %s: %s", filter_id, e, exc_info=True)
            return MutationResult.failed(f"Failed to delete filter: {e}")
        self.filters = [f for f in self.filters if f.id != filter_id]
        return MutationResult.applied({"id": filter_id})

    async def apply(
        self, service: "CollectionsService", filter_id: str
    ) -> tuple[C, list[ExclusionEntry]] | None:
        """
        Resolve a saved filter into its criteria and exclusion entries.

        The filter is marked as used; a failure to mark it is only logged.

        Returns:
            ``(criteria, exclusions)``, or None if the filter is unknown.
        """
        saved = self.find(filter_id)
        if saved is None:
            return None
        try:
            await service.mark_filter_used(filter_id)
        except Exception as e:
            LOG.warning("Failed to mark filter %s as used: %s", filter_id, e)
        return self.decode(saved)

    def decode(self, saved: SavedFilter) -> tuple[C, list[ExclusionEntry]]:
        config = saved.config or {}
        criteria = self.criteria_type.from_config(config.get("criteria"))
        exclusions = [
            ExclusionEntry.from_row(row) for row in config.get("exclusions") or []
        ]
        return criteria, exclusions
