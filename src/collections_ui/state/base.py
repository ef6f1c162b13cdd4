"""
Shared Reflex state for the paginated list views.

``ListState`` is a state mixin: every view state inherits it together with
``rx.State`` and gets its own copy of the vars below. The actual paging
logic lives in ``collections_ui.listing``; this module only wires it to
Reflex events:

- filter edits and refreshes start a new generation and schedule
  ``fetch_pending``
- ``fetch_pending`` is a background event: queries run outside the state
  lock and results are merged under it, so a stale page never overwrites a
  newer one
- scroll reports go through ``ScrollTrigger`` before loading the next page
- deep links are followed page by page until the row is found
"""

from typing import Any, ClassVar

import reflex as rx

from collections_ui import config
from collections_ui.export import build_workbook, export_filename
from collections_ui.lib import logs
from collections_ui.listing import (
    DeepLink,
    FetchTicket,
    PagedList,
    SavedFilterStore,
    ScrollTrigger,
    advance,
    exclude_rows,
    fetch_page,
    row_element_id,
    summarize,
)
from collections_ui.models.common import MutationResult
from collections_ui.models.criteria import FilterCriteria
from collections_ui.services import get_collections_service
from collections_ui.state.exclusions import ExclusionState
from collections_ui.utils import format_currency, format_date

LOG = logs.logger(__file__)


def _service():
    """Get the configured collections service (lazy loaded)."""
    return get_collections_service()


class ListState(rx.State, mixin=True):
    """
    Reflex state mixin for one paginated, filterable table.

    Class attributes:
        CRITERIA: Criteria class of the view.
        EXPORT_COLUMNS: Column set written by ``export``.
        USES_EXCLUSIONS: Hide excluded customers from rows and summaries.
        LINK_PARAM: URL query parameter naming a row to focus.
        SUMMARY_FIELD: Row attribute summed into ``summary_total``.
        TITLE: Title used for exports.
    """

    CRITERIA: ClassVar[type[FilterCriteria]] = FilterCriteria
    EXPORT_COLUMNS: ClassVar[tuple] = ()
    USES_EXCLUSIONS: ClassVar[bool] = False
    LINK_PARAM: ClassVar[str] = ""
    SUMMARY_FIELD: ClassVar[str] = ""
    TITLE: ClassVar[str] = ""

    # Rows rendered by the table, already exclusion-filtered
    rows: list[dict[str, str]] = []
    criteria: dict[str, str] = {}
    total: int = 0
    has_more: bool = False
    is_loading: bool = True
    loaded: bool = False
    error: str = ""
    last_key: str = ""
    selected_key: str = ""
    hidden_count: int = 0
    active_filter_count: int = 0

    summary_count: int = 0
    summary_total: str = format_currency(0.0)

    saved_filters: list[dict[str, str]] = []
    filter_name: str = ""

    _listing: PagedList | None = None
    _trigger: ScrollTrigger | None = None
    _link: DeepLink | None = None
    _saved: SavedFilterStore | None = None
    _pending: FetchTicket | None = None

    @rx.var
    def result_summary(self) -> str:
        """Generate summary text for the loaded rows."""
        shown = len(self.rows)
        noun = "row" if self.total == 1 else "rows"
        base = f"Showing {shown} of {self.total} {noun}"
        if self.hidden_count:
            return f"{base} ({self.hidden_count} excluded)"
        return base

    @rx.var
    def is_empty(self) -> bool:
        """Check if the empty state should be shown."""
        if self.error or self.is_loading:
            return False
        return self.loaded and len(self.rows) == 0

    # Setup

    def _ensure_listing(self) -> PagedList:
        if self._listing is None:
            self._listing = PagedList(self.CRITERIA(), page_size=config.PAGE_SIZE)
        return self._listing

    def _ensure_trigger(self) -> ScrollTrigger:
        if self._trigger is None:
            self._trigger = ScrollTrigger()
        return self._trigger

    def _ensure_saved(self) -> SavedFilterStore:
        if self._saved is None:
            self._saved = SavedFilterStore(config.USER_ID, self.CRITERIA)
        return self._saved

    def _fetcher(self):
        """Return ``fetch(criteria, offset, limit)`` for this view."""
        raise NotImplementedError

    def _display(self, row: Any) -> dict[str, str]:
        """Convert a result record into the strings the table renders."""
        raise NotImplementedError

    def _criteria_from_params(
        self, criteria: FilterCriteria, params: dict[str, str]
    ) -> FilterCriteria:
        """Adjust the initial criteria from URL query parameters."""
        return criteria

    def _on_reset(self) -> list:
        """Extra events to run whenever a new generation starts."""
        return []

    def _on_load(self) -> list:
        """Extra events to run when the page loads."""
        return []

    # Mirroring

    def _render(self, row: Any) -> dict[str, str]:
        key = self._ensure_listing().key_of(row)
        return {**self._display(row), "key": key, "element_id": row_element_id(key)}

    async def _excluded_ids(self) -> frozenset[str]:
        if not self.USES_EXCLUSIONS:
            return frozenset()
        exclusions = await self.get_state(ExclusionState)
        return exclusions._excluded_ids()

    async def _visible_rows(self) -> list:
        listing = self._ensure_listing()
        return exclude_rows(listing.rows, await self._excluded_ids())

    async def _mirror(self) -> None:
        """Copy the listing into the frontend vars and re-point the watch."""
        listing = self._ensure_listing()
        visible = await self._visible_rows()
        self.rows = [self._render(row) for row in visible]
        self.hidden_count = len(listing.rows) - len(visible)
        self.total = listing.total
        self.has_more = listing.has_more
        self.is_loading = listing.loading
        self.loaded = listing.loaded
        self.error = listing.error or ""
        self.criteria = listing.criteria.to_config()
        self.active_filter_count = listing.criteria.active_count()
        if self.SUMMARY_FIELD:
            summary = summarize(visible, self.SUMMARY_FIELD)
            self.summary_count = summary.count
            self.summary_total = format_currency(summary.total)
        trigger = self._ensure_trigger()
        trigger.sync(listing, visible)
        self.last_key = trigger.target or ""
        # Reassign so the backend vars are marked dirty
        self._listing = listing
        self._trigger = trigger

    async def _start(self, ticket: FetchTicket | None) -> list:
        """Schedule the first page of a new generation."""
        if ticket is None:
            return []
        self._ensure_trigger().reset()
        self._pending = ticket
        self.selected_key = ""
        await self._mirror()
        return [type(self).fetch_pending, *self._on_reset()]

    # Loading

    @rx.event
    async def on_load(self):
        """Event handler for page load: read URL parameters and load page one."""
        params = dict(self.router.page.params or {})
        listing = self._ensure_listing()
        target = params.get(self.LINK_PARAM) if self.LINK_PARAM else None
        self._link = DeepLink(str(target)) if target else None
        criteria = self._criteria_from_params(listing.criteria, params)
        listing.criteria = criteria
        self._ensure_saved()
        events = await self._start(listing.refresh())
        return [*events, type(self).load_saved_filters, *self._on_load()]

    @rx.event(background=True)
    async def fetch_pending(self):
        """
        Run the scheduled page request and merge its result.

        Keeps loading while a deep-linked row has not been found yet or
        while every cached row belongs to an excluded customer.
        """
        async with self:
            ticket, self._pending = self._pending, None
            fetch = self._fetcher()

        while ticket is not None:
            page, error = await fetch_page(ticket, fetch)
            async with self:
                listing = self._ensure_listing()
                listing.complete(ticket, page, error)
                progress = advance(listing, self._link, await self._excluded_ids())
                self._link = progress.link
                if progress.selected:
                    self.selected_key = progress.selected
                ticket = progress.ticket
                await self._mirror()
            if progress.element_id:
                yield rx.scroll_to(progress.element_id)

    @rx.event
    async def load_more(self, key: str):
        """
        Event handler for infinite scroll.

        Args:
            key: Identifier of the last rendered row when it became visible.
        """
        listing = self._ensure_listing()
        trigger = self._ensure_trigger()
        ticket = trigger.on_visible(key, listing)
        if ticket is None:
            return
        LOG.info("Load more - offset:%s rows:%s", ticket.offset, len(listing.rows))
        self._pending = ticket
        self._trigger = trigger
        await self._mirror()
        return type(self).fetch_pending

    @rx.event
    async def refresh(self):
        """Reload the current criteria from the first page."""
        return await self._start(self._ensure_listing().refresh())

    # Filters

    @rx.event
    async def set_filter(self, name: str, value: str):
        """
        Change one criteria field.

        Args:
            name: Criteria field name.
            value: New value; an empty string resets text fields.
        """
        listing = self._ensure_listing()
        try:
            criteria = listing.criteria.with_changes(**{name: value})
        except TypeError:
            LOG.warning("Unknown filter field for %s: %s", self.CRITERIA.VIEW, name)
            return
        return await self._start(listing.set_criteria(criteria))

    @rx.event
    async def toggle_sort(self, column: str):
        listing = self._ensure_listing()
        return await self._start(
            listing.set_criteria(listing.criteria.toggle_sort(column))
        )

    @rx.event
    async def clear_filters(self):
        listing = self._ensure_listing()
        return await self._start(listing.set_criteria(listing.criteria.clear()))

    def select_row(self, key: str):
        """Select a row, or clear the selection when it is selected already."""
        self.selected_key = "" if key == self.selected_key else key

    # Mutations

    def _check_user(self):
        if not config.USER_ID:
            return rx.window_alert("You must be signed in to make changes")
        return None

    async def _settle(self, result: MutationResult):
        """Finish a write: alert on failure, reload or re-render on success."""
        if not result.ok:
            return rx.window_alert(result.reason)
        if result.reload:
            return await self._start(self._ensure_listing().refresh())
        await self._mirror()
        return None

    # Export

    @rx.event
    async def export(self):
        """Download the rows currently shown as an Excel workbook."""
        rows = await self._visible_rows()
        if not rows:
            return rx.window_alert("There are no rows to export")
        listing = self._ensure_listing()
        subtitle = f"{len(rows)} of {listing.total} rows"
        if listing.criteria.active_count():
            subtitle = f"{subtitle}, filtered"
        data = build_workbook(
            rows,
            self.EXPORT_COLUMNS,
            title=self.TITLE,
            subtitle=subtitle,
            sheet_name=self.TITLE or "Export",
        )
        filename = export_filename(self.CRITERIA.VIEW)
        LOG.info("Export - view:%s rows:%s", self.CRITERIA.VIEW, len(rows))
        return rx.download(data=data, filename=filename)

    # Saved filters

    def _mirror_saved(self) -> None:
        store = self._ensure_saved()
        self.saved_filters = [
            {
                "id": saved.id,
                "name": saved.name,
                "last_used": format_date(saved.last_used_at or saved.created_at),
            }
            for saved in store.filters
        ]
        self._saved = store

    @rx.event
    async def load_saved_filters(self):
        store = self._ensure_saved()
        result = await store.load(_service())
        if not result.ok:
            LOG.warning("Saved filters unavailable: %s", result.reason)
        self._mirror_saved()

    def set_filter_name(self, name: str):
        self.filter_name = name

    @rx.event
    async def save_filter(self):
        """Save the current criteria, and the exclusions where they apply."""
        store = self._ensure_saved()
        exclusions = []
        if self.USES_EXCLUSIONS:
            exclusion_state = await self.get_state(ExclusionState)
            exclusions = exclusion_state._entries()
        result = await store.save(
            _service(), self.filter_name, self._ensure_listing().criteria, exclusions
        )
        if not result.ok:
            return rx.window_alert(result.reason)
        self.filter_name = ""
        self._mirror_saved()

    @rx.event
    async def delete_saved_filter(self, filter_id: str):
        result = await self._ensure_saved().delete(_service(), filter_id)
        if not result.ok:
            return rx.window_alert(result.reason)
        self._mirror_saved()

    @rx.event
    async def apply_saved_filter(self, filter_id: str):
        """Restore the criteria and exclusions stored in a saved filter."""
        store = self._ensure_saved()
        decoded = await store.apply(_service(), filter_id)
        if decoded is None:
            return rx.window_alert("Saved filter not found")
        criteria, exclusions = decoded
        if self.USES_EXCLUSIONS:
            exclusion_state = await self.get_state(ExclusionState)
            result = await exclusion_state._restore(exclusions)
            if not result.ok:
                return rx.window_alert(result.reason)
        listing = self._ensure_listing()
        ticket = listing.set_criteria(criteria)
        if ticket is None:
            # Same criteria; the exclusion set may still have changed
            ticket = listing.refresh()
        return await self._start(ticket)
