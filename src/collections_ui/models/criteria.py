"""
Filter criteria for the paginated list views.

Each view keeps its filters in a frozen dataclass of plain strings. Every
field always has a value: "all" and "" are the "no constraint" sentinels,
and None or missing keys fall back to the field default. Criteria objects
are never edited in place; ``with_changes`` returns a new one so the list
controller can compare old and new criteria to decide whether to reset.
"""

from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, ClassVar, Mapping, TypeVar

from collections_ui.utils import parse_day, parse_int, parse_number

ALL = "all"
ASC = "asc"
DESC = "desc"

_SENTINELS = {ALL, ""}
_SORT_FIELDS = {"sort_by", "sort_order"}

C = TypeVar("C", bound="FilterCriteria")


@dataclass(frozen=True)
class FilterCriteria:
    """
    Base class for view filter state.

    Attributes:
        search: Free-text search, matched server-side.
        sort_by: Row field to sort on.
        sort_order: "asc" or "desc".

    Class attributes:
        VIEW: Saved-filter namespace for the view.
        ROW_FIELDS: Criteria field -> row attributes it constrains. Used to
            decide whether an edit to a row can change list membership.
        SEARCH_FIELDS: Row attributes the free-text search looks at.
    """

    VIEW: ClassVar[str] = ""
    ROW_FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {}
    SEARCH_FIELDS: ClassVar[tuple[str, ...]] = ()

    search: str = ""
    sort_by: str = ""
    sort_order: str = ASC

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                value = f.default
            elif isinstance(value, bool):
                value = "true" if value else ""
            elif not isinstance(value, str):
                value = str(value)
            object.__setattr__(self, f.name, value.strip())

    @classmethod
    def from_config(cls: type[C], config: Mapping[str, Any] | None) -> C:
        """
        Build criteria from a stored mapping.

        Unknown keys are ignored and missing keys take their defaults.
        """
        config = config or {}
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config.items() if k in names})

    def to_config(self) -> dict[str, str]:
        """Return every field as a string mapping, defaults included."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def with_changes(self: C, **changes: Any) -> C:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def clear(self: C) -> C:
        """Return the view defaults."""
        return type(self)()

    def value(self, name: str) -> str | None:
        """Return a field value, or None when it holds a sentinel."""
        value = getattr(self, name)
        return None if value in _SENTINELS else value

    def number(self, name: str) -> float | None:
        """Return a numeric field, or None when empty or unparsable."""
        return parse_number(getattr(self, name))

    def integer(self, name: str) -> int | None:
        """Return an integer field, or None when empty or unparsable."""
        return parse_int(getattr(self, name))

    def day(self, name: str) -> date | None:
        """Return a date field, or None when empty or unparsable."""
        return parse_day(getattr(self, name))

    @property
    def descending(self) -> bool:
        return self.sort_order == DESC

    def toggle_sort(self: C, column: str) -> C:
        """Flip the direction for the current column, else sort ascending."""
        if column == self.sort_by:
            return replace(self, sort_order=ASC if self.descending else DESC)
        return replace(self, sort_by=column, sort_order=ASC)

    def active_count(self) -> int:
        """Count the filter fields changed from the view defaults."""
        return sum(
            1
            for f in fields(self)
            if f.name not in _SORT_FIELDS and getattr(self, f.name) != f.default
        )

    def filtered_fields(self) -> frozenset[str]:
        """Return the row attributes constrained by the active filters."""
        constrained: set[str] = set()
        for name, row_fields in self.ROW_FIELDS.items():
            if self.value(name) is not None:
                constrained.update(row_fields)
        if self.value("search") is not None:
            constrained.update(self.SEARCH_FIELDS)
        return frozenset(constrained)


@dataclass(frozen=True)
class CustomerCriteria(FilterCriteria):
    """Filters for the customer list (``get_customers_with_balance``)."""

    VIEW: ClassVar[str] = "customers"
    ROW_FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {
        "status": ("status",),
        "country": ("country",),
        "balance": ("balance",),
        "min_balance": ("balance",),
        "max_balance": ("balance",),
        "min_open_invoices": ("open_invoice_count",),
        "max_open_invoices": ("open_invoice_count",),
    }
    SEARCH_FIELDS: ClassVar[tuple[str, ...]] = ("customer_id", "customer_name", "email")

    sort_by: str = "customer_name"
    status: str = ALL
    country: str = ""
    # "all" | "positive" | "negative" | "zero"
    balance: str = "positive"
    date_from: str = ""
    date_to: str = ""
    min_open_invoices: str = ""
    max_open_invoices: str = ""
    min_balance: str = ""
    max_balance: str = ""


@dataclass(frozen=True)
class InvoiceCriteria(FilterCriteria):
    """Filters for invoices (``get_customer_invoices_advanced``)."""

    VIEW: ClassVar[str] = "invoices"
    ROW_FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {
        "customer_id": ("customer_id",),
        "filter": ("balance", "status", "due_date"),
        "color_status": ("color_status",),
        "invoice_status": ("status",),
        "amount_min": ("amount",),
        "amount_max": ("amount",),
        "date_from": ("date",),
        "date_to": ("date",),
    }
    SEARCH_FIELDS: ClassVar[tuple[str, ...]] = (
        "reference_number",
        "customer_name",
        "description",
    )

    sort_by: str = "date"
    sort_order: str = DESC
    customer_id: str = ""
    # "all" | "open" | "paid" | "overdue"
    filter: str = ALL
    color_status: str = ALL
    invoice_status: str = ALL
    date_from: str = ""
    date_to: str = ""
    amount_min: str = ""
    amount_max: str = ""


@dataclass(frozen=True)
class TicketCriteria(FilterCriteria):
    """Filters for collection tickets."""

    VIEW: ClassVar[str] = "tickets"
    ROW_FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {
        "status": ("status",),
        "priority": ("priority",),
        "ticket_type": ("ticket_type",),
        "assigned_to": ("assigned_collector_id",),
        "date_from": ("due_date",),
        "date_to": ("due_date",),
    }
    SEARCH_FIELDS: ClassVar[tuple[str, ...]] = (
        "ticket_number",
        "customer_id",
        "customer_name",
    )

    sort_by: str = "due_date"
    status: str = ALL
    priority: str = ALL
    ticket_type: str = ALL
    assigned_to: str = ALL
    date_from: str = ""
    date_to: str = ""


@dataclass(frozen=True)
class PaymentCriteria(FilterCriteria):
    """Filters for payments."""

    VIEW: ClassVar[str] = "payments"
    ROW_FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {
        "status": ("status",),
        "payment_method": ("payment_method",),
        "min_amount": ("amount",),
        "max_amount": ("amount",),
        "date_from": ("payment_date",),
        "date_to": ("payment_date",),
    }
    SEARCH_FIELDS: ClassVar[tuple[str, ...]] = (
        "reference_number",
        "customer_id",
        "customer_name",
    )

    sort_by: str = "payment_date"
    sort_order: str = DESC
    status: str = ALL
    payment_method: str = ALL
    date_from: str = ""
    date_to: str = ""
    min_amount: str = ""
    max_amount: str = ""


CRITERIA_BY_VIEW: dict[str, type[FilterCriteria]] = {
    cls.VIEW: cls
    for cls in (CustomerCriteria, InvoiceCriteria, TicketCriteria, PaymentCriteria)
}
