"""
Infinite scroll trigger.

The browser side observes the last rendered row and reports its identifier
when it scrolls into view. ``ScrollTrigger`` decides whether that report
should load another page: only the row currently being watched counts, and
nothing fires while a fetch is outstanding or after the list is exhausted.
"""

from enum import Enum
from typing import Sequence

from collections_ui.listing.paged_list import FetchTicket, PagedList


class ScrollState(str, Enum):
    IDLE = "idle"
    WATCHING = "watching"
    TRIGGERED = "triggered"
    EXHAUSTED = "exhausted"


class ScrollTrigger:
    """
    Watch-target bookkeeping for one list view.

    Attributes:
        state: Current ScrollState.
        target: Identifier of the row being watched, if any.
    """

    def __init__(self) -> None:
        self.state = ScrollState.IDLE
        self.target: str | None = None

    def reset(self) -> None:
        """Forget the watch target; called on every criteria change."""
        self.state = ScrollState.IDLE
        self.target = None

    def attach(self, last_key: str | None, has_more: bool) -> ScrollState:
        """
        Re-point the watch at the new last row after the rows changed.

        The previous target is always discarded first. Once exhausted the
        trigger stays exhausted until ``reset``.
        """
        if self.state is ScrollState.EXHAUSTED:
            return self.state
        self.target = None
        if not has_more:
            self.state = ScrollState.EXHAUSTED
        elif last_key is None:
            self.state = ScrollState.IDLE
        else:
            self.target = last_key
            self.state = ScrollState.WATCHING
        return self.state

    def on_visible(self, key: str, listing: PagedList) -> FetchTicket | None:
        """
        Handle a visibility report for the row ``key``.

        Returns the append ticket to run, or None when the report is stale
        or no page should load.
        """
        if self.state is not ScrollState.WATCHING or key != self.target:
            return None
        if not listing.has_more or listing.loading:
            return None
        ticket = listing.next_page()
        if ticket is not None:
            self.state = ScrollState.TRIGGERED
        return ticket

    def sync(self, listing: PagedList, rows: Sequence | None = None) -> ScrollState:
        """
        Attach to the last row the user can see.

        Args:
            listing: List whose window decides whether more pages exist.
            rows: Rendered rows; defaults to every cached row.
        """
        rows = listing.rows if rows is None else rows
        last_key = listing.key_of(rows[-1]) if rows else None
        return self.attach(last_key, listing.has_more)
