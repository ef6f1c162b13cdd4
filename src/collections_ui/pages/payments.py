"""Payments page; payments of excluded customers are hidden."""

import reflex as rx

from collections_ui.components.data_table import TableColumn
from collections_ui.components.filter_panel import (
    filter_panel,
    range_filter,
    select_filter,
)
from collections_ui.components.results import list_results
from collections_ui.components.saved_filters_panel import saved_filters_panel
from collections_ui.layout import page_shell
from collections_ui.state import ExclusionState, PaymentState

STATUS_OPTIONS = [
    ("all", "All statuses"),
    ("Open", "Open"),
    ("Closed", "Closed"),
    ("Voided", "Voided"),
]
METHOD_OPTIONS = [
    ("all", "All methods"),
    ("Check", "Check"),
    ("ACH", "ACH"),
    ("Wire", "Wire"),
    ("Credit Card", "Credit card"),
]

COLUMNS = [
    TableColumn("reference_number", "Reference"),
    TableColumn("customer_name", "Customer"),
    TableColumn("payment_date", "Date"),
    TableColumn("payment_method", "Method"),
    TableColumn("status", "Status"),
    TableColumn("amount", "Amount", align="right"),
    TableColumn("unapplied_balance", "Unapplied", align="right"),
]


def _summary() -> rx.Component:
    return rx.hstack(
        rx.text(PaymentState.summary_count, " payments shown", class_name="muted"),
        rx.cond(
            ExclusionState.count > 0,
            rx.badge(ExclusionState.count, " customers excluded", color_scheme="gray"),
        ),
        rx.spacer(),
        rx.text("Total: ", rx.text.strong(PaymentState.summary_total)),
        class_name="card summary-bar",
    )


def payments_page() -> rx.Component:
    """Build the payments page."""
    return page_shell(
        "Payments",
        "Customer payments, without excluded customers.",
        filter_panel(
            PaymentState,
            "Search by reference or customer...",
            select_filter(PaymentState, "status", "Status", STATUS_OPTIONS),
            select_filter(PaymentState, "payment_method", "Method", METHOD_OPTIONS),
            range_filter(PaymentState, "min_amount", "max_amount", "Amount"),
            range_filter(
                PaymentState, "date_from", "date_to", "Payment date", type_="date"
            ),
        ),
        saved_filters_panel(PaymentState),
        _summary(),
        list_results(PaymentState, COLUMNS, "payments"),
    )
