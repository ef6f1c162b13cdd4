"""
Supabase-backed implementation of CollectionsService.

This module provides the production service that:
- Reads customers and invoices through the paired list/count RPCs
  (``get_customers_with_balance``, ``get_customer_invoices_advanced``)
- Reads tickets and payments with PostgREST table queries
- Writes color flags, thresholds, ticket changes, notes, exclusions and
  saved filters

For table queries one predicate builder is applied to both the count query
and the window query. For RPCs the count function receives exactly the same
filter parameters as the list function; only sort and range differ.

Every PostgREST or transport failure is raised as a ServiceError.
"""

from datetime import date
from typing import Any, Sequence

from postgrest.exceptions import APIError

from collections_ui.lib import clients, logs
from collections_ui.models.criteria import (
    CustomerCriteria,
    FilterCriteria,
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
from collections_ui.services.collections_service import (
    CollectionsService,
    ServiceError,
    error_message,
)

LOG = logs.logger(__file__)

CUSTOMERS_RPC = "get_customers_with_balance"
INVOICES_RPC = "get_customer_invoices_advanced"

# Row attribute -> table column, where they differ
_PAYMENT_COLUMNS = {"amount": "payment_amount"}
_PAYMENT_SORTS = {
    "payment_date",
    "amount",
    "customer_name",
    "reference_number",
    "status",
}
_TICKET_SORTS = {"due_date", "priority", "status", "customer_name", "created_at"}


def _date_start(day: date | None) -> str | None:
    return f"{day.isoformat()}T00:00:00" if day else None


def _date_end(day: date | None) -> str | None:
    return f"{day.isoformat()}T23:59:59" if day else None


def _scalar(data: Any) -> int:
    """Extract the integer returned by a count RPC."""
    if isinstance(data, list):
        data = data[0] if data else 0
    if isinstance(data, dict):
        data = next(iter(data.values()), 0)
    return int(data or 0)


def _search_clause(search: str, columns: Sequence[str]) -> str:
    """Build a PostgREST ``or`` filter matching ``search`` in any column."""
    # commas and parentheses delimit the or() expression
    term = "".join(" " if ch in ",()" else ch for ch in search).strip()
    return ",".join(f"{column}.ilike.%{term}%" for column in columns)


def customer_params(criteria: CustomerCriteria) -> dict[str, Any]:
    """Filter parameters shared by the customer list and count RPCs."""
    return {
        "p_search": criteria.value("search"),
        "p_status_filter": criteria.status or "all",
        "p_country_filter": criteria.country or "all",
        "p_balance_filter": criteria.balance or "all",
        "p_min_balance": criteria.number("min_balance"),
        "p_max_balance": criteria.number("max_balance"),
        "p_min_open_invoices": criteria.integer("min_open_invoices"),
        "p_max_open_invoices": criteria.integer("max_open_invoices"),
        "p_date_from": _date_start(criteria.day("date_from")),
        "p_date_to": _date_end(criteria.day("date_to")),
    }


def invoice_params(criteria: InvoiceCriteria) -> dict[str, Any]:
    """Filter parameters shared by the invoice list and count RPCs."""
    date_from = criteria.day("date_from")
    date_to = criteria.day("date_to")
    return {
        "p_customer_id": criteria.value("customer_id"),
        "p_search": criteria.value("search"),
        "p_filter": criteria.filter or "all",
        "p_date_from": date_from.isoformat() if date_from else None,
        "p_date_to": date_to.isoformat() if date_to else None,
        "p_amount_min": criteria.number("amount_min"),
        "p_amount_max": criteria.number("amount_max"),
        "p_color_status": criteria.value("color_status"),
        "p_invoice_status": criteria.value("invoice_status"),
    }


def _window_params(criteria: FilterCriteria, offset: int, limit: int) -> dict[str, Any]:
    return {
        "p_sort_by": criteria.sort_by,
        "p_sort_order": criteria.sort_order,
        "p_limit": limit,
        "p_offset": offset,
    }


def filter_tickets(query: Any, criteria: TicketCriteria) -> Any:
    """Apply the ticket predicates to a PostgREST query builder."""
    if criteria.value("search"):
        query = query.or_(
            _search_clause(
                criteria.search, ("ticket_number", "customer_id", "customer_name")
            )
        )
    for name in ("status", "priority", "ticket_type"):
        if criteria.value(name):
            query = query.eq(name, criteria.value(name))
    assigned = criteria.value("assigned_to")
    if assigned == "unassigned":
        query = query.is_("assigned_collector_id", "null")
    elif assigned:
        query = query.eq("assigned_collector_id", assigned)
    if criteria.day("date_from"):
        query = query.gte("due_date", criteria.day("date_from").isoformat())
    if criteria.day("date_to"):
        query = query.lte("due_date", criteria.day("date_to").isoformat())
    return query


def filter_payments(query: Any, criteria: PaymentCriteria) -> Any:
    """Apply the payment predicates to a PostgREST query builder."""
    if criteria.value("search"):
        query = query.or_(
            _search_clause(
                criteria.search, ("reference_number", "customer_id", "customer_name")
            )
        )
    for name in ("status", "payment_method"):
        if criteria.value(name):
            query = query.eq(name, criteria.value(name))
    if criteria.number("min_amount") is not None:
        query = query.gte("payment_amount", criteria.number("min_amount"))
    if criteria.number("max_amount") is not None:
        query = query.lte("payment_amount", criteria.number("max_amount"))
    if criteria.day("date_from"):
        query = query.gte("payment_date", _date_start(criteria.day("date_from")))
    if criteria.day("date_to"):
        query = query.lte("payment_date", _date_end(criteria.day("date_to")))
    return query


class SupabaseCollectionsService(CollectionsService):
    """
    Production collections service backed by Supabase.

    The async client is created on first use from SUPABASE_URL and
    SUPABASE_KEY (see ``lib.clients``).
    """

    async def _execute(self, action: str, request: Any) -> Any:
        """Run a request builder and return its response."""
        try:
            return await request.execute()
        except APIError as e:
            LOG.error("%s failed - code:%s message:%s", action, e.code, e.message)
            raise ServiceError(error_message(e), code=e.code) from e
        except Exception as e:
            LOG.error("%s failed: %s", action, e, exc_info=True)
            raise ServiceError(error_message(e)) from e

    async def _rpc(self, name: str, params: dict[str, Any]) -> Any:
        client = await clients.supabase()
        response = await self._execute(name, client.rpc(name, params))
        return response.data

    async def _table(self, name: str) -> Any:
        client = await clients.supabase()
        return client.table(name)

    # Customers

    async def count_customers(self, criteria: CustomerCriteria) -> int:
        data = await self._rpc(f"{CUSTOMERS_RPC}_count", customer_params(criteria))
        return _scalar(data)

    async def list_customers(
        self, criteria: CustomerCriteria, offset: int, limit: int
    ) -> list[CustomerRow]:
        params = customer_params(criteria) | _window_params(criteria, offset, limit)
        rows = await self._rpc(CUSTOMERS_RPC, params)
        return [CustomerRow.from_row(row) for row in rows or []]

    async def fetch_customer_analytics(
        self, criteria: CustomerCriteria, excluded_ids: Sequence[str]
    ) -> CustomerAnalytics:
        data = await self._rpc(
            "get_customer_analytics",
            {
                "p_search": criteria.value("search"),
                "p_status_filter": criteria.status or "all",
                "p_country_filter": criteria.country or "all",
                "p_date_from": _date_start(criteria.day("date_from")),
                "p_date_to": _date_end(criteria.day("date_to")),
                "p_excluded_customer_ids": list(excluded_ids),
            },
        )
        return CustomerAnalytics.from_row(data)

    async def update_customer_threshold(self, customer_id: str, days: int) -> None:
        table = await self._table("customers")
        await self._execute(
            "update_customer_threshold",
            table.update({"days_past_due_threshold": days}).eq(
                "customer_id", customer_id
            ),
        )

    # Invoices

    async def count_invoices(self, criteria: InvoiceCriteria) -> int:
        data = await self._rpc(f"{INVOICES_RPC}_count", invoice_params(criteria))
        return _scalar(data)

    async def list_invoices(
        self, criteria: InvoiceCriteria, offset: int, limit: int
    ) -> list[InvoiceRow]:
        params = invoice_params(criteria) | _window_params(criteria, offset, limit)
        rows = await self._rpc(INVOICES_RPC, params)
        return [InvoiceRow.from_row(row) for row in rows or []]

    async def update_invoice_color_status(
        self, invoice_id: str, color_status: str | None, user_id: str
    ) -> None:
        await self._rpc(
            "update_invoice_color_status",
            {
                "p_invoice_id": invoice_id,
                "p_color_status": color_status,
                "p_user_id": user_id,
            },
        )

    async def batch_update_invoice_color_status(
        self, reference_numbers: Sequence[str], color_status: str | None, user_id: str
    ) -> int:
        data = await self._rpc(
            "batch_update_invoice_color_status",
            {
                "p_reference_numbers": list(reference_numbers),
                "p_color_status": color_status,
                "p_user_id": user_id,
            },
        )
        return _scalar(data) if data is not None else len(reference_numbers)

    # Tickets

    async def count_tickets(self, criteria: TicketCriteria) -> int:
        table = await self._table("tickets")
        query = filter_tickets(table.select("id", count="exact", head=True), criteria)
        response = await self._execute("count_tickets", query)
        return response.count or 0

    async def list_tickets(
        self, criteria: TicketCriteria, offset: int, limit: int
    ) -> list[TicketRow]:
        table = await self._table("tickets")
        column = criteria.sort_by if criteria.sort_by in _TICKET_SORTS else "due_date"
        query = (
            filter_tickets(table.select("*"), criteria)
            .order(column, desc=criteria.descending)
            .range(offset, offset + limit - 1)
        )
        response = await self._execute("list_tickets", query)
        return [TicketRow.from_row(row) for row in response.data or []]

    async def update_ticket_priority(
        self, ticket_id: str, priority: str, user_id: str
    ) -> None:
        await self._rpc(
            "update_ticket_priority",
            {
                "p_ticket_id": ticket_id,
                "p_new_priority": priority,
                "p_user_id": user_id,
            },
        )

    async def update_ticket_status(
        self, ticket_id: str, status: str, user_id: str, note: str | None = None
    ) -> None:
        table = await self._table("tickets")
        await self._execute(
            "update_ticket_status",
            table.update({"status": status}).eq("id", ticket_id),
        )
        body = f"Status changed to {status}"
        if note and note.strip():
            body = f"{body}: {note.strip()}"
        await self.add_note("ticket", ticket_id, body, user_id)

    async def assign_ticket(self, ticket_id: str, collector_id: str | None) -> None:
        table = await self._table("tickets")
        await self._execute(
            "assign_ticket",
            table.update({"assigned_collector_id": collector_id}).eq("id", ticket_id),
        )

    async def collector_activity_summary(
        self, user_id: str | None = None, days_back: int = 30
    ) -> list[CollectorActivity]:
        rows = await self._rpc(
            "get_collector_activity_summary",
            {"p_user_id": user_id, "p_days_back": days_back},
        )
        return [CollectorActivity.from_row(row) for row in rows or []]

    # Payments

    async def count_payments(self, criteria: PaymentCriteria) -> int:
        table = await self._table("payments")
        query = filter_payments(table.select("id", count="exact", head=True), criteria)
        response = await self._execute("count_payments", query)
        return response.count or 0

    async def list_payments(
        self, criteria: PaymentCriteria, offset: int, limit: int
    ) -> list[PaymentRow]:
        table = await self._table("payments")
        column = (
            criteria.sort_by if criteria.sort_by in _PAYMENT_SORTS else "payment_date"
        )
        query = (
            filter_payments(table.select("*"), criteria)
            .order(_PAYMENT_COLUMNS.get(column, column), desc=criteria.descending)
            .range(offset, offset + limit - 1)
        )
        response = await self._execute("list_payments", query)
        return [PaymentRow.from_row(row) for row in response.data or []]

    # Notes

    async def list_notes(self, entity_type: str, entity_id: str) -> list[NoteRow]:
        table = await self._table("notes")
        response = await self._execute(
            "list_notes",
            table.select("*")
            .eq("entity_type", entity_type)
            .eq("entity_id", entity_id)
            .order("created_at", desc=True),
        )
        return [NoteRow.from_row(row) for row in response.data or []]

    async def add_note(
        self, entity_type: str, entity_id: str, body: str, user_id: str
    ) -> NoteRow:
        table = await self._table("notes")
        row = {
            "entity_type": entity_type,
            "entity_id": entity_id,
            "body": body,
            "created_by": user_id,
        }
        response = await self._execute("add_note", table.insert(row))
        return NoteRow.from_row(response.data[0] if response.data else row)

    # Exclusions

    async def list_exclusions(self, user_id: str) -> list[ExclusionEntry]:
        table = await self._table("excluded_customers")
        response = await self._execute(
            "list_exclusions",
            table.select("customer_id, notes, excluded_at").eq("user_id", user_id),
        )
        return [ExclusionEntry.from_row(row) for row in response.data or []]

    async def add_exclusion(
        self, user_id: str, customer_id: str, reason: str | None
    ) -> ExclusionEntry:
        table = await self._table("excluded_customers")
        row = {"user_id": user_id, "customer_id": customer_id, "notes": reason}
        response = await self._execute(
            "add_exclusion", table.upsert(row, on_conflict="user_id,customer_id")
        )
        return ExclusionEntry.from_row(response.data[0] if response.data else row)

    async def remove_exclusion(self, user_id: str, customer_id: str) -> None:
        table = await self._table("excluded_customers")
        await self._execute(
            "remove_exclusion",
            table.delete().eq("user_id", user_id).eq("customer_id", customer_id),
        )

    async def clear_exclusions(self, user_id: str) -> None:
        table = await self._table("excluded_customers")
        await self._execute(
            "clear_exclusions", table.delete().eq("user_id", user_id)
        )

    async def replace_exclusions(
        self, user_id: str, entries: Sequence[ExclusionEntry]
    ) -> list[ExclusionEntry]:
        """
        Make the stored set equal ``entries``.

        The new entries are upserted before anything is deleted, so a failed
        write leaves the previously stored set in place.
        """
        if not entries:
            await self.clear_exclusions(user_id)
            return []
        rows = []
        for entry in entries:
            row = {
                "user_id": user_id,
                "customer_id": entry.customer_id,
                "notes": entry.reason,
            }
            if entry.excluded_at:
                row["excluded_at"] = entry.excluded_at
            rows.append(row)
        table = await self._table("excluded_customers")
        response = await self._execute(
            "replace_exclusions",
            table.upsert(rows, on_conflict="user_id,customer_id"),
        )
        ids = [row["customer_id"] for row in rows]
        table = await self._table("excluded_customers")
        await self._execute(
            "replace_exclusions",
            table.delete().eq("user_id", user_id).not_.in_("customer_id", ids),
        )
        return [ExclusionEntry.from_row(row) for row in response.data or rows]

    # Saved filters

    async def list_saved_filters(self, user_id: str, view: str) -> list[SavedFilter]:
        table = await self._table("saved_filters")
        response = await self._execute(
            "list_saved_filters",
            table.select("*")
            .eq("user_id", user_id)
            .eq("view", view)
            .order("created_at", desc=True),
        )
        return [SavedFilter.from_row(row) for row in response.data or []]

    async def save_filter(
        self, user_id: str, view: str, name: str, filter_config: dict
    ) -> SavedFilter:
        table = await self._table("saved_filters")
        row = {
            "user_id": user_id,
            "view": view,
            "filter_name": name,
            "filter_config": filter_config,
        }
        response = await self._execute(
            "save_filter", table.upsert(row, on_conflict="user_id,view,filter_name")
        )
        return SavedFilter.from_row(response.data[0] if response.data else row)

    async def delete_saved_filter(self, user_id: str, filter_id: str) -> None:
        table = await self._table("saved_filters")
        await self._execute(
            "delete_saved_filter",
            table.delete().eq("id", filter_id).eq("user_id", user_id),
        )

    async def mark_filter_used(self, filter_id: str) -> None:
        await self._rpc("update_filter_last_used", {"p_filter_id": filter_id})
