"""
Result records for backend rows.

RPC and table responses arrive as loosely shaped dictionaries: numeric
columns may be strings or null, joined tables come back nested, and older
functions use different column names. Each record type parses its row once
at the service boundary with ``from_row`` so the rest of the application
only ever sees fully populated dataclasses.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from benedict import benedict

COLOR_STATUSES = ("red", "yellow", "green")
COLOR_LABELS = {
    "red": "Will not pay",
    "yellow": "Will take care",
    "green": "Will pay",
}
TICKET_STATUSES = ("open", "in_progress", "pending", "promised", "closed")
TICKET_PRIORITIES = ("low", "medium", "high", "urgent")
TICKET_TYPES = ("overdue_payment", "partial_payment", "settlement", "dispute")


def _wrap(row: Mapping[str, Any]) -> benedict:
    return benedict(dict(row), keyattr_dynamic=True)


def _text(b: benedict, *keys: str, default: str = "") -> str:
    for key in keys:
        value = b.get(key)
        if value not in (None, ""):
            return str(value)
    return default


def _optional(b: benedict, *keys: str) -> str | None:
    return _text(b, *keys) or None


def _float(b: benedict, *keys: str) -> float:
    for key in keys:
        value = b.get(key)
        if value in (None, ""):
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    return 0.0


def _int(b: benedict, *keys: str, default: int = 0) -> int:
    for key in keys:
        value = b.get(key)
        if value in (None, ""):
            continue
        try:
            return int(float(value))
        except (TypeError, ValueError):
            continue
    return default


@dataclass(slots=True)
class CustomerRow:
    """A customer with its server-computed balance and color counts."""

    customer_id: str
    customer_name: str = ""
    status: str = ""
    country: str = ""
    email: str = ""
    balance: float = 0.0
    open_invoice_count: int = 0
    red_count: int = 0
    yellow_count: int = 0
    green_count: int = 0
    max_days_overdue: int = 0
    days_past_due_threshold: int = 30
    last_modified: str | None = None

    @property
    def key(self) -> str:
        return self.customer_id

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CustomerRow":
        b = _wrap(row)
        return cls(
            customer_id=_text(b, "customer_id", "id"),
            customer_name=_text(b, "customer_name", "name"),
            status=_text(b, "customer_status", "status"),
            country=_text(b, "country"),
            email=_text(b, "email_address", "email"),
            balance=_float(b, "calculated_balance", "balance"),
            open_invoice_count=_int(b, "open_invoice_count"),
            red_count=_int(b, "red_count", "color_status_counts.red"),
            yellow_count=_int(b, "yellow_count", "color_status_counts.yellow"),
            green_count=_int(b, "green_count", "color_status_counts.green"),
            max_days_overdue=_int(b, "max_days_overdue"),
            days_past_due_threshold=_int(b, "days_past_due_threshold", default=30),
            last_modified=_optional(b, "last_modified_datetime", "updated_at"),
        )


@dataclass(slots=True)
class InvoiceRow:
    """An invoice with its collector triage color."""

    id: str
    reference_number: str = ""
    customer_id: str = ""
    customer_name: str = ""
    status: str = ""
    date: str | None = None
    due_date: str | None = None
    amount: float = 0.0
    balance: float = 0.0
    color_status: str | None = None
    description: str = ""
    promise_date: str | None = None

    @property
    def key(self) -> str:
        return self.id

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "InvoiceRow":
        b = _wrap(row)
        color = _optional(b, "color_status")
        return cls(
            id=_text(b, "id", "reference_number"),
            reference_number=_text(b, "reference_number", "reference_nbr"),
            customer_id=_text(b, "customer_id", "customer"),
            customer_name=_text(b, "customer_name", "customer"),
            status=_text(b, "status"),
            date=_optional(b, "date", "invoice_date"),
            due_date=_optional(b, "due_date"),
            amount=_float(b, "amount", "dac_total"),
            balance=_float(b, "balance"),
            color_status=color if color in COLOR_STATUSES else None,
            description=_text(b, "description"),
            promise_date=_optional(b, "promise_date"),
        )


@dataclass(slots=True)
class TicketRow:
    """A collection ticket grouping invoices for one customer."""

    id: str
    ticket_number: str = ""
    customer_id: str = ""
    customer_name: str = ""
    status: str = "open"
    priority: str = "medium"
    ticket_type: str = ""
    due_date: str | None = None
    assigned_collector_id: str | None = None
    assigned_collector_name: str = ""
    invoice_count: int = 0
    created_at: str | None = None

    @property
    def key(self) -> str:
        return self.id

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TicketRow":
        b = _wrap(row)
        return cls(
            id=_text(b, "id", "ticket_id"),
            ticket_number=_text(b, "ticket_number"),
            customer_id=_text(b, "customer_id"),
            customer_name=_text(b, "customer_name", "customer.customer_name"),
            status=_text(b, "status", "ticket_status", default="open"),
            priority=_text(b, "priority", "ticket_priority", default="medium"),
            ticket_type=_text(b, "ticket_type"),
            due_date=_optional(b, "due_date", "ticket_due_date"),
            assigned_collector_id=_optional(b, "assigned_collector_id"),
            assigned_collector_name=_text(
                b, "assigned_collector_name", "collector.full_name", "collector.email"
            ),
            invoice_count=_int(b, "invoice_count"),
            created_at=_optional(b, "created_at"),
        )


@dataclass(slots=True)
class PaymentRow:
    """A customer payment."""

    id: str
    reference_number: str = ""
    customer_id: str = ""
    customer_name: str = ""
    payment_date: str | None = None
    payment_method: str = ""
    status: str = ""
    amount: float = 0.0
    unapplied_balance: float = 0.0

    @property
    def key(self) -> str:
        return self.id

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PaymentRow":
        b = _wrap(row)
        return cls(
            id=_text(b, "id", "reference_number"),
            reference_number=_text(b, "reference_number"),
            customer_id=_text(b, "customer_id"),
            customer_name=_text(b, "customer_name"),
            payment_date=_optional(b, "payment_date", "application_date"),
            payment_method=_text(b, "payment_method"),
            status=_text(b, "status"),
            amount=_float(b, "payment_amount", "amount"),
            unapplied_balance=_float(b, "unapplied_balance"),
        )


@dataclass(slots=True)
class NoteRow:
    """A free-text note attached to an invoice, ticket or customer."""

    id: str
    entity_type: str
    entity_id: str
    body: str = ""
    created_by: str | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NoteRow":
        b = _wrap(row)
        return cls(
            id=_text(b, "id"),
            entity_type=_text(b, "entity_type"),
            entity_id=_text(b, "entity_id"),
            body=_text(b, "body", "note_text"),
            created_by=_optional(b, "created_by", "user_id"),
            created_at=_optional(b, "created_at"),
        )


@dataclass(frozen=True, slots=True)
class ExclusionEntry:
    """A customer hidden from views and totals by the signed-in user."""

    customer_id: str
    reason: str | None = None
    excluded_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "reason": self.reason,
            "excluded_at": self.excluded_at,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ExclusionEntry":
        b = _wrap(row)
        return cls(
            customer_id=_text(b, "customer_id"),
            reason=_optional(b, "reason", "notes"),
            excluded_at=_optional(b, "excluded_at"),
        )


@dataclass(slots=True)
class SavedFilter:
    """A named snapshot of a view's criteria and exclusions."""

    id: str
    view: str
    name: str
    config: dict = field(default_factory=dict)
    created_at: str | None = None
    last_used_at: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SavedFilter":
        config = row.get("filter_config") or {}
        if isinstance(config, str):
            config = json.loads(config)
        return cls(
            id=str(row.get("id") or ""),
            view=str(row.get("view") or ""),
            name=str(row.get("filter_name") or row.get("name") or ""),
            config=dict(config),
            created_at=row.get("created_at"),
            last_used_at=row.get("last_used_at"),
        )


@dataclass(slots=True)
class CustomerAnalytics:
    """Aggregates computed by ``get_customer_analytics``."""

    total_customers: int = 0
    active_customers: int = 0
    total_balance: float = 0.0
    avg_balance: float = 0.0
    customers_with_debt: int = 0
    total_open_invoices: int = 0
    customers_with_overdue: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Mapping[str, Any] | list | None) -> "CustomerAnalytics":
        if isinstance(row, list):
            row = row[0] if row else None
        if not row:
            return cls()
        b = _wrap(row)
        return cls(
            total_customers=_int(b, "total_customers"),
            active_customers=_int(b, "active_customers"),
            total_balance=_float(b, "total_balance"),
            avg_balance=_float(b, "avg_balance"),
            customers_with_debt=_int(b, "customers_with_debt"),
            total_open_invoices=_int(b, "total_open_invoices"),
            customers_with_overdue=_int(b, "customers_with_overdue"),
        )


@dataclass(slots=True)
class CollectorActivity:
    """One collector's activity counts over a look-back window."""

    user_id: str
    full_name: str = ""
    email: str = ""
    role: str = ""
    total_actions: int = 0
    tickets_created: int = 0
    tickets_closed: int = 0
    notes_added: int = 0
    status_changes: int = 0
    invoice_color_changes: int = 0
    last_activity: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or self.user_id

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CollectorActivity":
        b = _wrap(row)
        return cls(
            user_id=_text(b, "user_id", "id"),
            full_name=_text(b, "full_name"),
            email=_text(b, "email"),
            role=_text(b, "role"),
            total_actions=_int(b, "total_actions"),
            tickets_created=_int(b, "tickets_created"),
            tickets_closed=_int(b, "tickets_closed"),
            notes_added=_int(b, "notes_added"),
            status_changes=_int(b, "status_changes"),
            invoice_color_changes=_int(b, "invoice_color_changes"),
            last_activity=_optional(b, "last_activity"),
        )
