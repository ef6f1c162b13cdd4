"""
Deep-link resolution.

A link such as ``/tickets?ticket=TKT-0042`` names a row that may not be on
the first page. After every page is applied the view asks the link what to
do next: select the row, load another page, or give up.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from collections_ui.listing.paged_list import PagedList


class LinkAction(str, Enum):
    SELECT = "select"
    LOAD_MORE = "load_more"
    WAIT = "wait"
    DROP = "drop"


@dataclass
class DeepLink:
    """
    A pending request to focus one row.

    Attributes:
        target: Identifier of the requested row.
        resolved: Set once the row was found or the link was dropped.
    """

    target: str
    resolved: bool = False

    def step(self, listing: PagedList, visible: Sequence | None = None) -> LinkAction:
        """
        Decide the next action against the current rows.

        Args:
            listing: List the link points into.
            visible: Rows actually rendered, when exclusions hide some of
                     the cached ones. A target that is cached but hidden
                     can never be shown and is dropped.

        Returns:
            SELECT when the row is cached, LOAD_MORE when it may be on a
            later page, WAIT while a fetch is outstanding and DROP once the
            list is exhausted without it.
        """
        if self.resolved:
            return LinkAction.DROP
        if listing.find(self.target) is not None:
            self.resolved = True
            if visible is not None and self.target not in {
                listing.key_of(row) for row in visible
            }:
                return LinkAction.DROP
            return LinkAction.SELECT
        if listing.loading or not listing.loaded:
            return LinkAction.WAIT
        if listing.has_more and not listing.error:
            return LinkAction.LOAD_MORE
        self.resolved = True
        return LinkAction.DROP

    @property
    def element_id(self) -> str:
        """DOM id of the row element to scroll to."""
        return row_element_id(self.target)


def row_element_id(key: str) -> str:
    return f"row-{key}"
