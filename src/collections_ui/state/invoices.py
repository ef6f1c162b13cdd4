"""Reflex state for the invoice list and its color-status triage."""

from typing import ClassVar

import reflex as rx

from collections_ui import config
from collections_ui.export import INVOICE_COLUMNS
from collections_ui.listing import run_batch_mutation, run_mutation
from collections_ui.models.criteria import FilterCriteria, InvoiceCriteria
from collections_ui.models.records import COLOR_LABELS, COLOR_STATUSES, InvoiceRow
from collections_ui.state.base import ListState, _service
from collections_ui.utils import format_currency, format_date


def _color(value: str) -> str | None:
    """Map a select value to a stored color; "none" clears the flag."""
    return value if value in COLOR_STATUSES else None


class InvoiceState(ListState, rx.State):
    """
    Invoice table.

    ``/invoices?customer=<id>`` opens the list filtered to one customer.
    Selected rows can be flagged in one batch by reference number.
    """

    CRITERIA: ClassVar[type[InvoiceCriteria]] = InvoiceCriteria
    EXPORT_COLUMNS: ClassVar[tuple] = INVOICE_COLUMNS
    SUMMARY_FIELD: ClassVar[str] = "balance"
    TITLE: ClassVar[str] = "Invoices"

    selected_ids: list[str] = []

    def _fetcher(self):
        return _service().page_invoices

    def _display(self, row: InvoiceRow) -> dict[str, str]:
        return {
            "id": row.id,
            "reference_number": row.reference_number,
            "customer_id": row.customer_id,
            "customer_name": row.customer_name,
            "status": row.status,
            "date": format_date(row.date),
            "due_date": format_date(row.due_date),
            "amount": format_currency(row.amount),
            "balance": format_currency(row.balance),
            "color_status": row.color_status or "none",
            "color_label": COLOR_LABELS.get(row.color_status or "", ""),
            "description": row.description,
        }

    def _criteria_from_params(
        self, criteria: FilterCriteria, params: dict[str, str]
    ) -> FilterCriteria:
        customer_id = params.get("customer")
        if customer_id is None:
            return criteria
        return criteria.with_changes(customer_id=str(customer_id))

    def _on_reset(self) -> list:
        self.selected_ids = []
        return []

    def toggle_selected(self, invoice_id: str):
        if invoice_id in self.selected_ids:
            self.selected_ids = [i for i in self.selected_ids if i != invoice_id]
        else:
            self.selected_ids = self.selected_ids + [invoice_id]

    def clear_selected(self):
        self.selected_ids = []

    @rx.event
    async def set_color(self, invoice_id: str, color: str):
        """
        Flag one invoice.

        Args:
            invoice_id: Invoice to update.
            color: "red", "yellow", "green", or "none" to clear.
        """
        invalid = self._check_user()
        if invalid:
            return invalid
        service = _service()
        value = _color(color)
        result = await run_mutation(
            self._ensure_listing(),
            invoice_id,
            {"color_status": value},
            lambda: service.update_invoice_color_status(
                invoice_id, value, config.USER_ID
            ),
            "update color status",
        )
        return await self._settle(result)

    @rx.event
    async def set_selected_color(self, color: str):
        """Flag every selected invoice, addressed by reference number."""
        invalid = self._check_user()
        if invalid:
            return invalid
        listing = self._ensure_listing()
        rows = [
            listing.rows[index]
            for index in (listing.find(key) for key in self.selected_ids)
            if index is not None
        ]
        references = [row.reference_number for row in rows]
        service = _service()
        value = _color(color)
        result = await run_batch_mutation(
            listing,
            [row.id for row in rows],
            {"color_status": value},
            lambda: service.batch_update_invoice_color_status(
                references, value, config.USER_ID
            ),
            "update color status",
        )
        if result.ok:
            self.selected_ids = []
        return await self._settle(result)
