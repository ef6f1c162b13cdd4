"""
The Paginated Filtered List pattern shared by every table view.

This package is independent of Reflex and of the backend:
- paged_list: criteria generations, page window and row cache
- scroll: infinite scroll trigger
- exclusions: per-user excluded customers
- mutations: confirmed writes merged into the row cache
- saved_filters: named criteria + exclusion presets
- deeplink: URL-selected rows resolved across pages
- summary: local count/sum statistics
- progress: follow-up fetches and deep-link steps after a merge
"""

from collections_ui.listing.deeplink import DeepLink, LinkAction, row_element_id
from collections_ui.listing.exclusions import ExclusionStore, exclude_rows
from collections_ui.listing.mutations import (
    needs_reload,
    run_batch_mutation,
    run_mutation,
)
from collections_ui.listing.paged_list import (
    FetchTicket,
    PagedList,
    fetch_page,
    load_page,
)
from collections_ui.listing.progress import Progress, advance
from collections_ui.listing.saved_filters import SavedFilterStore, filter_config
from collections_ui.listing.scroll import ScrollState, ScrollTrigger
from collections_ui.listing.summary import RowSummary, summarize

__all__ = [
    "DeepLink",
    "ExclusionStore",
    "FetchTicket",
    "LinkAction",
    "PagedList",
    "Progress",
    "RowSummary",
    "SavedFilterStore",
    "ScrollState",
    "ScrollTrigger",
    "advance",
    "exclude_rows",
    "fetch_page",
    "filter_config",
    "load_page",
    "needs_reload",
    "row_element_id",
    "run_batch_mutation",
    "run_mutation",
    "summarize",
]
