"""
Reflex state for the payments view.

Payments of excluded customers are hidden, and the footer totals are
computed from the rows that remain.
"""

from typing import ClassVar

import reflex as rx

from collections_ui.export import PAYMENT_COLUMNS
from collections_ui.models.criteria import FilterCriteria, PaymentCriteria
from collections_ui.models.records import PaymentRow
from collections_ui.state.base import ListState, _service
from collections_ui.utils import format_currency, format_date


class PaymentState(ListState, rx.State):
    CRITERIA: ClassVar[type[PaymentCriteria]] = PaymentCriteria
    EXPORT_COLUMNS: ClassVar[tuple] = PAYMENT_COLUMNS
    USES_EXCLUSIONS: ClassVar[bool] = True
    SUMMARY_FIELD: ClassVar[str] = "amount"
    TITLE: ClassVar[str] = "Payments"

    def _fetcher(self):
        return _service().page_payments

    def _display(self, row: PaymentRow) -> dict[str, str]:
        return {
            "id": row.id,
            "reference_number": row.reference_number,
            "customer_id": row.customer_id,
            "customer_name": row.customer_name,
            "payment_date": format_date(row.payment_date),
            "payment_method": row.payment_method,
            "status": row.status,
            "amount": format_currency(row.amount),
            "unapplied_balance": format_currency(row.unapplied_balance),
        }

    def _criteria_from_params(
        self, criteria: FilterCriteria, params: dict[str, str]
    ) -> FilterCriteria:
        customer_id = params.get("customer")
        if customer_id is None:
            return criteria
        return criteria.with_changes(search=str(customer_id))
