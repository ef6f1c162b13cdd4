"""
Abstract base class defining the collections data access contract.

Every list view reads through a pair of methods: ``count_*`` returns the
number of rows matching the criteria, ``list_*`` returns one window of
them. Implementations must build both from the same predicates so the
reported total always agrees with the rows that can be scrolled to. The
``page_*`` helpers run the pair concurrently and wrap the result in a
ListPage.

Implementations:
- DemoCollectionsService: In-memory fixtures for development and tests
- SupabaseCollectionsService: RPC and table queries against Supabase
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Iterable, Sequence, TypeVar

from collections_ui import config
from collections_ui.lib import logs, objects, paths
from collections_ui.lib.caches import DiskCache
from collections_ui.models.common import ListPage
from collections_ui.models.criteria import (
    CustomerCriteria,
    InvoiceCriteria,
    PaymentCriteria,
    TicketCriteria,
)
from collections_ui.models.records import (
    CollectorActivity,
    CustomerAnalytics,
    CustomerRow,
    ExclusionEntry,
    InvoiceRow,
    NoteRow,
    PaymentRow,
    SavedFilter,
    TicketRow,
)

LOG = logs.logger(__file__)

R = TypeVar("R")


class ServiceError(Exception):
    """
    A backend call was rejected or could not be made.

    Attributes:
        message: Human-readable description.
        code: Backend error code, when one was returned.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return f"{self.message} ({self.code})" if self.code else self.message


class CollectionsService(ABC):
    """
    Abstract base class for collections data access.

    Attributes:
        analytics_ttl: Seconds analytics results stay cached; 0 disables
            the cache.
    """

    def __init__(self, analytics_ttl: int | None = None) -> None:
        self.analytics_ttl = (
            config.ANALYTICS_TTL if analytics_ttl is None else analytics_ttl
        )
        self._analytics_cache: DiskCache | None = None

    # Customers

    @abstractmethod
    async def count_customers(self, criteria: CustomerCriteria) -> int:
        """Return the number of customers matching the criteria."""

    @abstractmethod
    async def list_customers(
        self, criteria: CustomerCriteria, offset: int, limit: int
    ) -> list[CustomerRow]:
        """Return one window of customers in criteria order."""

    @abstractmethod
    async def fetch_customer_analytics(
        self, criteria: CustomerCriteria, excluded_ids: Sequence[str]
    ) -> CustomerAnalytics:
        """Aggregate the matching customers, leaving out ``excluded_ids``."""

    @abstractmethod
    async def update_customer_threshold(self, customer_id: str, days: int) -> None:
        """Set the days-past-due threshold of one customer."""

    # Invoices

    @abstractmethod
    async def count_invoices(self, criteria: InvoiceCriteria) -> int:
        """Return the number of invoices matching the criteria."""

    @abstractmethod
    async def list_invoices(
        self, criteria: InvoiceCriteria, offset: int, limit: int
    ) -> list[InvoiceRow]:
        """Return one window of invoices in criteria order."""

    @abstractmethod
    async def update_invoice_color_status(
        self, invoice_id: str, color_status: str | None, user_id: str
    ) -> None:
        """Set or clear (None) the color status of one invoice."""

    @abstractmethod
    async def batch_update_invoice_color_status(
        self, reference_numbers: Sequence[str], color_status: str | None, user_id: str
    ) -> int:
        """Set the color status of several invoices; returns rows updated."""

    # Tickets

    @abstractmethod
    async def count_tickets(self, criteria: TicketCriteria) -> int:
        """Return the number of tickets matching the criteria."""

    @abstractmethod
    async def list_tickets(
        self, criteria: TicketCriteria, offset: int, limit: int
    ) -> list[TicketRow]:
        """Return one window of tickets in criteria order."""

    @abstractmethod
    async def update_ticket_priority(
        self, ticket_id: str, priority: str, user_id: str
    ) -> None:
        """Change a ticket's priority."""

    @abstractmethod
    async def update_ticket_status(
        self, ticket_id: str, status: str, user_id: str, note: str | None = None
    ) -> None:
        """Change a ticket's status, recording an optional history note."""

    @abstractmethod
    async def assign_ticket(self, ticket_id: str, collector_id: str | None) -> None:
        """Assign a ticket to a collector, or unassign it with None."""

    @abstractmethod
    async def collector_activity_summary(
        self, user_id: str | None = None, days_back: int = 30
    ) -> list[CollectorActivity]:
        """Return per-collector activity counts for the look-back window."""

    # Payments

    @abstractmethod
    async def count_payments(self, criteria: PaymentCriteria) -> int:
        """Return the number of payments matching the criteria."""

    @abstractmethod
    async def list_payments(
        self, criteria: PaymentCriteria, offset: int, limit: int
    ) -> list[PaymentRow]:
        """Return one window of payments in criteria order."""

    # Notes

    @abstractmethod
    async def list_notes(self, entity_type: str, entity_id: str) -> list[NoteRow]:
        """Return the notes on one entity, newest first."""

    @abstractmethod
    async def add_note(
        self, entity_type: str, entity_id: str, body: str, user_id: str
    ) -> NoteRow:
        """Attach a note to an invoice, ticket or customer."""

    # Exclusions

    @abstractmethod
    async def list_exclusions(self, user_id: str) -> list[ExclusionEntry]:
        """Return the user's excluded customers."""

    @abstractmethod
    async def add_exclusion(
        self, user_id: str, customer_id: str, reason: str | None
    ) -> ExclusionEntry:
        """Exclude a customer; returns the stored entry."""

    @abstractmethod
    async def remove_exclusion(self, user_id: str, customer_id: str) -> None:
        """Delete one exclusion."""

    @abstractmethod
    async def clear_exclusions(self, user_id: str) -> None:
        """Delete every exclusion of the user."""

    @abstractmethod
    async def replace_exclusions(
        self, user_id: str, entries: Sequence[ExclusionEntry]
    ) -> list[ExclusionEntry]:
        """Replace the user's exclusions with ``entries`` as given."""

    # Saved filters

    @abstractmethod
    async def list_saved_filters(self, user_id: str, view: str) -> list[SavedFilter]:
        """Return the user's saved filters for a view, newest first."""

    @abstractmethod
    async def save_filter(
        self, user_id: str, view: str, name: str, filter_config: dict
    ) -> SavedFilter:
        """Insert or overwrite the filter with this name."""

    @abstractmethod
    async def delete_saved_filter(self, user_id: str, filter_id: str) -> None:
        """Delete one saved filter."""

    @abstractmethod
    async def mark_filter_used(self, filter_id: str) -> None:
        """Stamp the filter's last-used time."""

    # Pages

    async def page_customers(
        self, criteria: CustomerCriteria, offset: int, limit: int
    ) -> ListPage[CustomerRow]:
        return await _page(
            self.count_customers(criteria),
            self.list_customers(criteria, offset, limit),
            offset,
            limit,
        )

    async def page_invoices(
        self, criteria: InvoiceCriteria, offset: int, limit: int
    ) -> ListPage[InvoiceRow]:
        return await _page(
            self.count_invoices(criteria),
            self.list_invoices(criteria, offset, limit),
            offset,
            limit,
        )

    async def page_tickets(
        self, criteria: TicketCriteria, offset: int, limit: int
    ) -> ListPage[TicketRow]:
        return await _page(
            self.count_tickets(criteria),
            self.list_tickets(criteria, offset, limit),
            offset,
            limit,
        )

    async def page_payments(
        self, criteria: PaymentCriteria, offset: int, limit: int
    ) -> ListPage[PaymentRow]:
        return await _page(
            self.count_payments(criteria),
            self.list_payments(criteria, offset, limit),
            offset,
            limit,
        )

    async def customer_analytics(
        self, criteria: CustomerCriteria, excluded_ids: Iterable[str] = ()
    ) -> CustomerAnalytics:
        """
        Return server-computed analytics, cached for ``analytics_ttl``.

        The cache key covers the criteria and the excluded ids, so changing
        either reads fresh figures.
        """
        excluded = sorted(set(excluded_ids))
        key = "analytics:" + objects.digest(
            {
                "service": type(self).__name__,
                "criteria": criteria.to_config(),
                "excluded": excluded,
            }
        )
        if self.analytics_ttl <= 0:
            return await self.fetch_customer_analytics(criteria, excluded)
        entry = await self._cache().get_or_load(
            key,
            lambda: self.fetch_customer_analytics(criteria, excluded),
            expire=self.analytics_ttl,
        )
        LOG.debug("customer_analytics - hit:%s key:%s", entry.hit, key)
        return entry.value

    def _cache(self) -> DiskCache:
        if self._analytics_cache is None:
            self._analytics_cache = DiskCache(paths.cache_dir("analytics"))
        return self._analytics_cache


async def _page(
    count: Awaitable[int], rows: Awaitable[list[R]], offset: int, limit: int
) -> ListPage[R]:
    total, items = await asyncio.gather(count, rows)
    return ListPage(items=items, total=total, offset=offset, limit=limit)


def error_message(exc: Any) -> str:
    """Return the most useful text of a backend exception."""
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__
