"""
Data models for the Collections UI.

This package provides:
- Filter criteria per view (customers, invoices, tickets, payments)
- Paging and mutation state (PageWindow, ListPage, MutationResult)
- Result records parsed from backend rows

All models are dataclasses; criteria and windows are immutable.
"""

from collections_ui.models.common import ListPage, MutationResult, PageWindow
from collections_ui.models.criteria import (
    ALL,
    ASC,
    CRITERIA_BY_VIEW,
    DESC,
    CustomerCriteria,
    FilterCriteria,
    InvoiceCriteria,
    PaymentCriteria,
    TicketCriteria,
)
from collections_ui.models.records import (
    COLOR_LABELS,
    COLOR_STATUSES,
    TICKET_PRIORITIES,
    TICKET_STATUSES,
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

__all__ = [
    "ALL",
    "ASC",
    "COLOR_LABELS",
    "COLOR_STATUSES",
    "CRITERIA_BY_VIEW",
    "CollectorActivity",
    "CustomerAnalytics",
    "CustomerCriteria",
    "CustomerRow",
    "DESC",
    "ExclusionEntry",
    "FilterCriteria",
    "InvoiceCriteria",
    "InvoiceRow",
    "ListPage",
    "MutationResult",
    "NoteRow",
    "PageWindow",
    "PaymentCriteria",
    "PaymentRow",
    "SavedFilter",
    "TICKET_PRIORITIES",
    "TICKET_STATUSES",
    "TicketCriteria",
    "TicketRow",
]
