"""
Incremental loading of a filtered, sorted row list.

``PagedList`` holds the state every table view shares: the current
criteria, the page window, the cached rows and a generation counter. It
performs no I/O itself. Callers ask it for a ``FetchTicket`` (first page on
a criteria change, next page on scroll), run the queries, and hand the
result back with ``apply`` or ``fail``. The ticket carries the generation it
was issued under, so a response that arrives after the criteria changed
again is recognised as stale and dropped without touching newer state.

``load_page`` is the async driver that runs one ticket against a service
fetch function with the error handling the views expect.
"""

from dataclasses import dataclass, replace
from operator import attrgetter
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

from collections_ui.lib import logs
from collections_ui.models.common import ListPage, PageWindow
from collections_ui.models.criteria import FilterCriteria

LOG = logs.logger(__file__)

C = TypeVar("C", bound=FilterCriteria)
R = TypeVar("R")

PageFetch = Callable[[C, int, int], Awaitable[ListPage[R]]]


@dataclass(frozen=True)
class FetchTicket(Generic[C]):
    """
    One outstanding page request.

    Attributes:
        generation: Criteria generation the request belongs to.
        criteria: Criteria snapshot to query with.
        offset: Server offset of the page.
        limit: Page size.
        append: True for scroll pages, False for a first page.
    """

    generation: int
    criteria: C
    offset: int
    limit: int
    append: bool


class PagedList(Generic[C, R]):
    """
    Row cache and paging state for one list view.

    Attributes:
        criteria: Current filter criteria.
        window: Current PageWindow.
        rows: Rows accumulated for the current generation.
        total: Server count for the current criteria.
        generation: Bumped on every reset; tags outgoing requests.
        error: Message from the last failed fetch, if any.
        loaded: True once a fetch for this generation has completed.
    """

    def __init__(
        self,
        criteria: C,
        page_size: int = 100,
        key: Callable[[R], str] = attrgetter("key"),
    ) -> None:
        self.criteria = criteria
        self.window = PageWindow(page_size=page_size)
        self.rows: list[R] = []
        self.total = 0
        self.generation = 0
        self.error: str | None = None
        self.loaded = False
        self._in_flight: int | None = None
        self._key = key

    @property
    def loading(self) -> bool:
        """True while a request for the current generation is outstanding."""
        return self._in_flight is not None

    @property
    def has_more(self) -> bool:
        return self.window.has_more

    @property
    def page_size(self) -> int:
        return self.window.page_size

    @property
    def last_key(self) -> str | None:
        """Identifier of the last cached row, the scroll watch target."""
        return self._key(self.rows[-1]) if self.rows else None

    def key_of(self, row: R) -> str:
        return self._key(row)

    def set_criteria(self, criteria: C) -> FetchTicket[C] | None:
        """
        Replace the criteria.

        Returns a first-page ticket when anything changed; the window and
        the rows are reset before this returns. Identical criteria schedule
        nothing.
        """
        if criteria == self.criteria:
            return None
        self.criteria = criteria
        return self.refresh()

    def refresh(self) -> FetchTicket[C]:
        """Start a new generation and return its first-page ticket."""
        self.generation += 1
        self.window = self.window.reset()
        self.rows = []
        self.total = 0
        self.error = None
        self.loaded = False
        self._in_flight = self.generation
        return FetchTicket(
            generation=self.generation,
            criteria=self.criteria,
            offset=0,
            limit=self.window.page_size,
            append=False,
        )

    def next_page(self) -> FetchTicket[C] | None:
        """
        Advance the offset and return an append ticket.

        Returns None while a fetch is outstanding, before the first page
        has loaded, or once the list is exhausted.
        """
        if self.loading or not self.loaded or not self.window.has_more:
            return None
        self.window = self.window.advance()
        self._in_flight = self.generation
        return FetchTicket(
            generation=self.generation,
            criteria=self.criteria,
            offset=self.window.offset,
            limit=self.window.page_size,
            append=True,
        )

    def is_current(self, ticket: FetchTicket[C]) -> bool:
        return ticket.generation == self.generation

    def apply(self, ticket: FetchTicket[C], page: ListPage[R]) -> bool:
        """
        Merge a fetched page.

        Returns False, changing nothing, when the ticket is stale.
        """
        if not self.is_current(ticket):
            LOG.debug(
                "Discarding stale page - generation:%s current:%s",
                ticket.generation,
                self.generation,
            )
            return False
        items = list(page.items)
        self.rows = self.rows + items if ticket.append else items
        self.total = page.total
        self.window = self.window.settle(len(items))
        self.error = None
        self.loaded = True
        return True

    def fail(self, ticket: FetchTicket[C], reason: str) -> bool:
        """
        Record a failed fetch, leaving the cached rows untouched.

        Returns False when the ticket is stale.
        """
        if not self.is_current(ticket):
            return False
        if ticket.append:
            self.window = self.window.retreat()
        self.error = reason
        self.loaded = True
        return True

    def settle(self, ticket: FetchTicket[C]) -> None:
        """Clear the in-flight flag if this ticket still owns it."""
        if self.is_current(ticket) and self._in_flight == ticket.generation:
            self._in_flight = None

    def complete(
        self,
        ticket: FetchTicket[C],
        page: ListPage[R] | None,
        error: str | None = None,
    ) -> bool:
        """Apply ``page`` or record ``error``, then release the ticket."""
        try:
            if page is not None:
                return self.apply(ticket, page)
            self.fail(ticket, error or "Unknown error")
            return False
        finally:
            self.settle(ticket)

    def find(self, key: str) -> int | None:
        """Return the index of the row with this identifier, if cached."""
        for index, row in enumerate(self.rows):
            if self._key(row) == key:
                return index
        return None

    def patch_row(self, key: str, patch: Mapping[str, Any]) -> R | None:
        """
        Replace one cached row with a patched copy.

        Returns the new row, or None if the row is not cached.
        """
        index = self.find(key)
        if index is None:
            return None
        patched = replace(self.rows[index], **patch)
        self.rows = self.rows[:index] + [patched] + self.rows[index + 1 :]
        return patched


async def fetch_page(
    ticket: FetchTicket[C], fetch: PageFetch
) -> tuple[ListPage | None, str | None]:
    """
    Run the queries for one ticket without touching any list.

    Returns:
        ``(page, None)`` on success, ``(None, message)`` after logging the
        failure.
    """
    try:
        return await fetch(ticket.criteria, ticket.offset, ticket.limit), None
    except Exception as e:
        LOG.error(
            "Page fetch failed - generation:%s offset:%s error:%s",
            ticket.generation,
            ticket.offset,
            e,
            exc_info=True,
        )
        return None, str(e) or type(e).__name__


async def load_page(
    listing: PagedList[C, R],
    ticket: FetchTicket[C] | None,
    fetch: PageFetch,
) -> bool:
    """
    Run one page request and merge the result.

    Errors are logged and recorded on the list; the in-flight flag is
    always released for the ticket that owns it.

    Args:
        listing: List to update.
        ticket: Ticket from ``set_criteria``/``refresh``/``next_page``;
                None is a no-op.
        fetch: ``fetch(criteria, offset, limit)`` returning a ListPage.

    Returns:
        True if the page was applied.
    """
    if ticket is None:
        return False
    page, error = None, "Cancelled"
    try:
        page, error = await fetch_page(ticket, fetch)
    finally:
        applied = listing.complete(ticket, page, error)
    return applied
