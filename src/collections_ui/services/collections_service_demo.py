"""
Demo implementation of CollectionsService using in-memory data.

This service is useful for:
- Local development without a Supabase project
- Testing the list pattern against a realistic, mutable backend
- Demonstrating the application without cloud dependencies

Every view filters through one predicate that both ``count_*`` and
``list_*`` use, mirroring the paired RPCs of the live backend. Customer
balances and color counts are derived from the open invoices on each call,
so invoice writes show up in the customer list immediately.
"""

import asyncio
import itertools
import json
from collections import Counter
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Sequence, TypeVar

from collections_ui import config
from collections_ui.data.demo_records import AS_OF, DEMO_COLLECTORS, fresh_records
from collections_ui.lib import logs, objects
from collections_ui.models.criteria import (
    CustomerCriteria,
    FilterCriteria,
    InvoiceCriteria,
    PaymentCriteria,
    TicketCriteria,
)
from collections_ui.models.records import (
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
from collections_ui.services.collections_service import CollectionsService, ServiceError
from collections_ui.utils import matches_text, parse_day

LOG = logs.logger(__file__)

R = TypeVar("R")

_PRIORITY_RANK = {p: i for i, p in enumerate(TICKET_PRIORITIES)}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _in_range(value: float, low: float | None, high: float | None) -> bool:
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _in_days(day: str | None, start: date | None, end: date | None) -> bool:
    if start is None and end is None:
        return True
    parsed = parse_day(day)
    if parsed is None:
        return False
    return _in_range(parsed.toordinal(), _ord(start), _ord(end))


def _ord(day: date | None) -> int | None:
    return day.toordinal() if day else None


def _sorted(rows: list[R], criteria: FilterCriteria, default: str) -> list[R]:
    """Sort rows by the criteria column; missing values always sort last."""
    column = default
    if rows and criteria.sort_by and hasattr(rows[0], criteria.sort_by):
        column = criteria.sort_by

    def key(row: R) -> Any:
        value = getattr(row, column, None)
        if column == "priority":
            value = _PRIORITY_RANK.get(value)
        elif isinstance(value, str):
            value = value.lower()
        return value

    present = [row for row in rows if key(row) not in (None, "")]
    missing = [row for row in rows if key(row) in (None, "")]
    present.sort(key=key, reverse=criteria.descending)
    return present + missing


def _window(rows: list[R], offset: int, limit: int) -> list[R]:
    return rows[max(offset, 0) : max(offset, 0) + max(limit, 0)]


class DemoCollectionsService(CollectionsService):
    """
    In-memory collections backend seeded from ``demo_records``.

    Attributes:
        latency: Seconds each call sleeps, to make loading states visible.
    """

    def __init__(
        self, latency: float | None = None, analytics_ttl: int | None = None
    ) -> None:
        super().__init__(analytics_ttl)
        self.latency = config.DEMO_LATENCY if latency is None else latency
        customers, invoices, payments, tickets = fresh_records()
        self._customers: dict[str, CustomerRow] = {c.customer_id: c for c in customers}
        self._invoices: dict[str, InvoiceRow] = {i.id: i for i in invoices}
        self._payments: list[PaymentRow] = payments
        self._tickets: dict[str, TicketRow] = {t.id: t for t in tickets}
        self._collectors = {c["user_id"]: dict(c) for c in DEMO_COLLECTORS}
        self._notes: list[NoteRow] = []
        self._exclusions: dict[str, dict[str, ExclusionEntry]] = {}
        self._filters: list[tuple[str, SavedFilter]] = []
        self._activity: Counter = Counter()
        self._ids = itertools.count(1)
        LOG.info(
            "Demo service ready - customers:%s invoices:%s tickets:%s",
            len(self._customers),
            len(self._invoices),
            len(self._tickets),
        )

    async def _pause(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    # Customers

    def _customer_view(self, customer: CustomerRow) -> CustomerRow:
        balance = 0.0
        open_count = 0
        colors: Counter = Counter()
        overdue = 0
        for invoice in self._invoices.values():
            if invoice.customer_id != customer.customer_id or invoice.balance == 0:
                continue
            balance += invoice.balance
            if invoice.balance > 0:
                open_count += 1
                if invoice.color_status:
                    colors[invoice.color_status] += 1
                due = parse_day(invoice.due_date)
                if due and due < AS_OF:
                    overdue = max(overdue, (AS_OF - due).days)
        return replace(
            customer,
            balance=round(balance, 2),
            open_invoice_count=open_count,
            red_count=colors["red"],
            yellow_count=colors["yellow"],
            green_count=colors["green"],
            max_days_overdue=overdue,
        )

    def _customer_base_match(self, c: CustomerRow, criteria: CustomerCriteria) -> bool:
        if not matches_text(criteria.search, (c.customer_id, c.customer_name, c.email)):
            return False
        if criteria.value("status") and c.status.lower() != criteria.status.lower():
            return False
        if criteria.value("country") and c.country.lower() != criteria.country.lower():
            return False
        return _in_days(
            c.last_modified, criteria.day("date_from"), criteria.day("date_to")
        )

    def _customer_match(self, c: CustomerRow, criteria: CustomerCriteria) -> bool:
        if not self._customer_base_match(c, criteria):
            return False
        balance_filter = criteria.value("balance")
        if balance_filter == "positive" and c.balance <= 0:
            return False
        if balance_filter == "negative" and c.balance >= 0:
            return False
        if balance_filter == "zero" and c.balance != 0:
            return False
        if not _in_range(
            c.balance, criteria.number("min_balance"), criteria.number("max_balance")
        ):
            return False
        return _in_range(
            c.open_invoice_count,
            criteria.integer("min_open_invoices"),
            criteria.integer("max_open_invoices"),
        )

    def _select_customers(self, criteria: CustomerCriteria) -> list[CustomerRow]:
        rows = [self._customer_view(c) for c in self._customers.values()]
        rows = [c for c in rows if self._customer_match(c, criteria)]
        return _sorted(rows, criteria, "customer_name")

    async def count_customers(self, criteria: CustomerCriteria) -> int:
        await self._pause()
        return len(self._select_customers(criteria))

    async def list_customers(
        self, criteria: CustomerCriteria, offset: int, limit: int
    ) -> list[CustomerRow]:
        await self._pause()
        return _window(self._select_customers(criteria), offset, limit)

    async def fetch_customer_analytics(
        self, criteria: CustomerCriteria, excluded_ids: Sequence[str]
    ) -> CustomerAnalytics:
        await self._pause()
        excluded = set(excluded_ids)
        rows = [
            self._customer_view(c)
            for c in self._customers.values()
            if c.customer_id not in excluded and self._customer_base_match(c, criteria)
        ]
        total_balance = round(sum(c.balance for c in rows), 2)
        return CustomerAnalytics(
            total_customers=len(rows),
            active_customers=sum(1 for c in rows if c.status == "Active"),
            total_balance=total_balance,
            avg_balance=round(total_balance / len(rows), 2) if rows else 0.0,
            customers_with_debt=sum(1 for c in rows if c.balance > 0),
            total_open_invoices=sum(c.open_invoice_count for c in rows),
            customers_with_overdue=sum(
                1 for c in rows if c.max_days_overdue > c.days_past_due_threshold
            ),
        )

    async def update_customer_threshold(self, customer_id: str, days: int) -> None:
        await self._pause()
        customer = self._require(self._customers, customer_id, "customer")
        if days < 0:
            raise ServiceError("Threshold must be zero or more days", code="22023")
        self._customers[customer_id] = replace(customer, days_past_due_threshold=days)

    # Invoices

    def _invoice_match(self, i: InvoiceRow, criteria: InvoiceCriteria) -> bool:
        if not matches_text(
            criteria.search, (i.reference_number, i.customer_name, i.description)
        ):
            return False
        if criteria.value("customer_id") and i.customer_id != criteria.customer_id:
            return False
        kind = criteria.value("filter")
        if kind == "open" and i.balance <= 0:
            return False
        if kind == "paid" and i.balance != 0:
            return False
        if kind == "overdue":
            due = parse_day(i.due_date)
            if i.balance <= 0 or due is None or due >= AS_OF:
                return False
        color = criteria.value("color_status")
        if color == "none" and i.color_status is not None:
            return False
        if color in COLOR_STATUSES and i.color_status != color:
            return False
        status = criteria.value("invoice_status")
        if status and i.status.lower() != status.lower():
            return False
        if not _in_range(
            i.amount, criteria.number("amount_min"), criteria.number("amount_max")
        ):
            return False
        return _in_days(i.date, criteria.day("date_from"), criteria.day("date_to"))

    def _select_invoices(self, criteria: InvoiceCriteria) -> list[InvoiceRow]:
        rows = [i for i in self._invoices.values() if self._invoice_match(i, criteria)]
        return _sorted(rows, criteria, "date")

    async def count_invoices(self, criteria: InvoiceCriteria) -> int:
        await self._pause()
        return len(self._select_invoices(criteria))

    async def list_invoices(
        self, criteria: InvoiceCriteria, offset: int, limit: int
    ) -> list[InvoiceRow]:
        await self._pause()
        return _window(self._select_invoices(criteria), offset, limit)

    async def update_invoice_color_status(
        self, invoice_id: str, color_status: str | None, user_id: str
    ) -> None:
        await self._pause()
        invoice = self._require(self._invoices, invoice_id, "invoice")
        self._check_color(color_status)
        self._invoices[invoice_id] = replace(invoice, color_status=color_status)
        self._activity[(user_id, "invoice_color_changes")] += 1

    async def batch_update_invoice_color_status(
        self, reference_numbers: Sequence[str], color_status: str | None, user_id: str
    ) -> int:
        await self._pause()
        self._check_color(color_status)
        wanted = set(reference_numbers)
        updated = 0
        for invoice_id, invoice in list(self._invoices.items()):
            if invoice.reference_number in wanted:
                self._invoices[invoice_id] = replace(invoice, color_status=color_status)
                updated += 1
        self._activity[(user_id, "invoice_color_changes")] += updated
        return updated

    @staticmethod
    def _check_color(color_status: str | None) -> None:
        if color_status is not None and color_status not in COLOR_STATUSES:
            raise ServiceError(f"Invalid color status: {color_status}", code="22023")

    # Tickets

    def _ticket_match(self, t: TicketRow, criteria: TicketCriteria) -> bool:
        if not matches_text(
            criteria.search, (t.ticket_number, t.customer_id, t.customer_name)
        ):
            return False
        for name in ("status", "priority", "ticket_type"):
            wanted = criteria.value(name)
            if wanted and getattr(t, name) != wanted:
                return False
        assigned = criteria.value("assigned_to")
        if assigned == "unassigned" and t.assigned_collector_id is not None:
            return False
        if assigned not in (None, "unassigned") and t.assigned_collector_id != assigned:
            return False
        return _in_days(t.due_date, criteria.day("date_from"), criteria.day("date_to"))

    def _select_tickets(self, criteria: TicketCriteria) -> list[TicketRow]:
        rows = [t for t in self._tickets.values() if self._ticket_match(t, criteria)]
        return _sorted(rows, criteria, "due_date")

    async def count_tickets(self, criteria: TicketCriteria) -> int:
        await self._pause()
        return len(self._select_tickets(criteria))

    async def list_tickets(
        self, criteria: TicketCriteria, offset: int, limit: int
    ) -> list[TicketRow]:
        await self._pause()
        return _window(self._select_tickets(criteria), offset, limit)

    async def update_ticket_priority(
        self, ticket_id: str, priority: str, user_id: str
    ) -> None:
        await self._pause()
        ticket = self._require(self._tickets, ticket_id, "ticket")
        if priority not in TICKET_PRIORITIES:
            raise ServiceError(f"Invalid priority: {priority}", code="22023")
        self._tickets[ticket_id] = replace(ticket, priority=priority)
        self._activity[(user_id, "status_changes")] += 1

    async def update_ticket_status(
        self, ticket_id: str, status: str, user_id: str, note: str | None = None
    ) -> None:
        await self._pause()
        ticket = self._require(self._tickets, ticket_id, "ticket")
        if status not in TICKET_STATUSES:
            raise ServiceError(f"Invalid status: {status}", code="22023")
        self._tickets[ticket_id] = replace(ticket, status=status)
        self._activity[(user_id, "status_changes")] += 1
        if status == "closed":
            self._activity[(user_id, "tickets_closed")] += 1
        body = f"Status changed from {ticket.status} to {status}"
        if note and note.strip():
            body = f"{body}: {note.strip()}"
        self._notes.insert(0, self._note("ticket", ticket_id, body, user_id))

    async def assign_ticket(self, ticket_id: str, collector_id: str | None) -> None:
        await self._pause()
        ticket = self._require(self._tickets, ticket_id, "ticket")
        name = ""
        if collector_id is not None:
            collector = self._require(self._collectors, collector_id, "collector")
            name = collector["full_name"]
        self._tickets[ticket_id] = replace(
            ticket, assigned_collector_id=collector_id, assigned_collector_name=name
        )

    async def collector_activity_summary(
        self, user_id: str | None = None, days_back: int = 30
    ) -> list[CollectorActivity]:
        await self._pause()
        summaries = []
        for collector in self._collectors.values():
            uid = collector["user_id"]
            if user_id and uid != user_id:
                continue
            counts = {
                kind: self._activity[(uid, kind)]
                for kind in (
                    "tickets_closed",
                    "notes_added",
                    "status_changes",
                    "invoice_color_changes",
                )
            }
            counts["tickets_created"] = sum(
                1 for t in self._tickets.values() if t.assigned_collector_id == uid
            )
            summaries.append(
                CollectorActivity.from_row(
                    {**collector, **counts, "total_actions": sum(counts.values())}
                )
            )
        return sorted(summaries, key=lambda s: s.total_actions, reverse=True)

    # Payments

    def _payment_match(self, p: PaymentRow, criteria: PaymentCriteria) -> bool:
        if not matches_text(
            criteria.search, (p.reference_number, p.customer_id, p.customer_name)
        ):
            return False
        for name in ("status", "payment_method"):
            wanted = criteria.value(name)
            if wanted and getattr(p, name) != wanted:
                return False
        if not _in_range(
            p.amount, criteria.number("min_amount"), criteria.number("max_amount")
        ):
            return False
        return _in_days(
            p.payment_date, criteria.day("date_from"), criteria.day("date_to")
        )

    def _select_payments(self, criteria: PaymentCriteria) -> list[PaymentRow]:
        rows = [p for p in self._payments if self._payment_match(p, criteria)]
        return _sorted(rows, criteria, "payment_date")

    async def count_payments(self, criteria: PaymentCriteria) -> int:
        await self._pause()
        return len(self._select_payments(criteria))

    async def list_payments(
        self, criteria: PaymentCriteria, offset: int, limit: int
    ) -> list[PaymentRow]:
        await self._pause()
        return _window(self._select_payments(criteria), offset, limit)

    # Notes

    def _note(
        self, entity_type: str, entity_id: str, body: str, user_id: str
    ) -> NoteRow:
        return NoteRow(
            id=f"N-{next(self._ids)}",
            entity_type=entity_type,
            entity_id=entity_id,
            body=body,
            created_by=user_id,
            created_at=_now(),
        )

    async def list_notes(self, entity_type: str, entity_id: str) -> list[NoteRow]:
        await self._pause()
        return [
            n
            for n in self._notes
            if n.entity_type == entity_type and n.entity_id == entity_id
        ]

    async def add_note(
        self, entity_type: str, entity_id: str, body: str, user_id: str
    ) -> NoteRow:
        await self._pause()
        tables = {
            "invoice": self._invoices,
            "ticket": self._tickets,
            "customer": self._customers,
        }
        if entity_type not in tables:
            raise ServiceError(f"Unknown entity type: {entity_type}", code="22023")
        self._require(tables[entity_type], entity_id, entity_type)
        if not body.strip():
            raise ServiceError("Note text is required", code="23502")
        note = self._note(entity_type, entity_id, body.strip(), user_id)
        self._notes.insert(0, note)
        self._activity[(user_id, "notes_added")] += 1
        return note

    # Exclusions

    async def list_exclusions(self, user_id: str) -> list[ExclusionEntry]:
        await self._pause()
        return list(self._exclusions.get(user_id, {}).values())

    async def add_exclusion(
        self, user_id: str, customer_id: str, reason: str | None
    ) -> ExclusionEntry:
        await self._pause()
        self._require(self._customers, customer_id, "customer")
        entry = ExclusionEntry(
            customer_id=customer_id, reason=reason, excluded_at=_now()
        )
        self._exclusions.setdefault(user_id, {})[customer_id] = entry
        return entry

    async def remove_exclusion(self, user_id: str, customer_id: str) -> None:
        await self._pause()
        self._exclusions.get(user_id, {}).pop(customer_id, None)

    async def clear_exclusions(self, user_id: str) -> None:
        await self._pause()
        self._exclusions.pop(user_id, None)

    async def replace_exclusions(
        self, user_id: str, entries: Sequence[ExclusionEntry]
    ) -> list[ExclusionEntry]:
        await self._pause()
        self._exclusions[user_id] = {e.customer_id: e for e in entries}
        return list(self._exclusions[user_id].values())

    # Saved filters

    async def list_saved_filters(self, user_id: str, view: str) -> list[SavedFilter]:
        await self._pause()
        return [
            replace(f, config=_stored(f.config))
            for owner, f in self._filters
            if owner == user_id and f.view == view
        ]

    async def save_filter(
        self, user_id: str, view: str, name: str, filter_config: dict
    ) -> SavedFilter:
        await self._pause()
        stored = _stored(filter_config)
        for index, (owner, existing) in enumerate(self._filters):
            if owner == user_id and existing.view == view and existing.name == name:
                saved = replace(existing, config=stored)
                self._filters[index] = (owner, saved)
                return replace(saved, config=_stored(stored))
        saved = SavedFilter(
            id=f"F-{next(self._ids)}",
            view=view,
            name=name,
            config=stored,
            created_at=_now(),
        )
        self._filters.insert(0, (user_id, saved))
        return replace(saved, config=_stored(stored))

    async def delete_saved_filter(self, user_id: str, filter_id: str) -> None:
        await self._pause()
        self._filters = [
            (owner, f)
            for owner, f in self._filters
            if not (owner == user_id and f.id == filter_id)
        ]

    async def mark_filter_used(self, filter_id: str) -> None:
        await self._pause()
        for index, (owner, f) in enumerate(self._filters):
            if f.id == filter_id:
                self._filters[index] = (owner, replace(f, last_used_at=_now()))
                return
        raise ServiceError(f"Saved filter not found: {filter_id}", code="PGRST116")

    @staticmethod
    def _require(table: dict[str, R], key: str, kind: str) -> R:
        try:
            return table[key]
        except KeyError:
            raise ServiceError(f"Unknown {kind}: {key}", code="PGRST116") from None


def _stored(value: Any) -> Any:
    """Copy a payload the way a JSON column would store it."""
    return json.loads(objects.to_json(value))
