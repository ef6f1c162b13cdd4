"""
Follow-up work after a page was merged.

A merged page can call for more than a re-render: a pending deep link may
now resolve or need another page, and a page made only of excluded
customers leaves nothing on screen to scroll, so the next page has to be
requested without waiting for a scroll report. ``advance`` makes those
decisions without touching the UI.
"""

from dataclasses import dataclass, field
from typing import Iterable

from collections_ui.lib import logs
from collections_ui.listing.deeplink import DeepLink, LinkAction
from collections_ui.listing.exclusions import exclude_rows
from collections_ui.listing.paged_list import FetchTicket, PagedList

LOG = logs.logger(__file__)


@dataclass
class Progress:
    """
    What the view should do after a merge.

    Attributes:
        visible: Cached rows left once exclusions are applied.
        ticket: Page to request immediately, if any.
        link: The deep link still pending; None once it resolved or dropped.
        selected: Key of the row the link resolved to.
        element_id: DOM id to scroll to.
    """

    visible: list = field(default_factory=list)
    ticket: FetchTicket | None = None
    link: DeepLink | None = None
    selected: str | None = None
    element_id: str | None = None


def advance(
    listing: PagedList,
    link: DeepLink | None = None,
    excluded_ids: Iterable[str] = (),
) -> Progress:
    """
    Decide the next step for ``listing`` after ``complete``.

    Args:
        listing: List that just merged a page or recorded a failure.
        link: Pending deep link, if the page was opened with one.
        excluded_ids: Customers hidden from the view.
    """
    visible = exclude_rows(listing.rows, excluded_ids)
    progress = Progress(visible=visible, link=link)
    if link is not None:
        action = link.step(listing, visible)
        if action is LinkAction.SELECT:
            LOG.info("Deep link resolved - target:%s", link.target)
            progress.selected = link.target
            progress.element_id = link.element_id
            progress.link = None
        elif action is LinkAction.LOAD_MORE:
            progress.ticket = listing.next_page()
        elif action is LinkAction.DROP:
            LOG.info("Deep link target not shown - target:%s", link.target)
            progress.link = None
    if progress.ticket is None and listing.rows and not visible:
        progress.ticket = listing.next_page()
    return progress
