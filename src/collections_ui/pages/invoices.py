"""Invoice list page with color-status triage."""

import reflex as rx

from collections_ui.components.data_table import TableColumn, action_cell
from collections_ui.components.filter_panel import (
    filter_panel,
    range_filter,
    select_filter,
    text_filter,
)
from collections_ui.components.notes_dialog import notes_button
from collections_ui.components.results import list_results
from collections_ui.components.saved_filters_panel import saved_filters_panel
from collections_ui.layout import page_shell
from collections_ui.models.records import COLOR_LABELS
from collections_ui.state import InvoiceState

FILTER_OPTIONS = [
    ("all", "All invoices"),
    ("open", "Open"),
    ("paid", "Paid"),
    ("overdue", "Overdue"),
]
COLOR_OPTIONS = [
    ("all", "Any flag"),
    ("none", "Not flagged"),
    *COLOR_LABELS.items(),
]
STATUS_OPTIONS = [
    ("all", "All statuses"),
    ("Open", "Open"),
    ("Closed", "Closed"),
]
# Values a collector can set on an invoice
SET_COLOR_OPTIONS = [("none", "No flag"), *COLOR_LABELS.items()]


def _color_select(value: rx.Var, on_change) -> rx.Component:
    return rx.select.root(
        rx.select.trigger(class_name="color-select"),
        rx.select.content(
            *[rx.select.item(text, value=key) for key, text in SET_COLOR_OPTIONS]
        ),
        value=value,
        on_change=on_change,
        size="1",
    )


def _select(row: rx.Var) -> rx.Component:
    return action_cell(
        rx.checkbox(
            checked=InvoiceState.selected_ids.contains(row["id"]),
            on_change=lambda _: InvoiceState.toggle_selected(row["id"]),
        )
    )


def _color(row: rx.Var) -> rx.Component:
    return action_cell(
        rx.box(class_name=f"color-dot {row['color_status']}"),
        _color_select(
            row["color_status"],
            lambda value: InvoiceState.set_color(row["id"], value),
        ),
    )


def _actions(row: rx.Var) -> rx.Component:
    return action_cell(notes_button("invoice", row["id"], row["reference_number"]))


COLUMNS = [
    TableColumn("selected", "", sortable=False, cell=_select),
    TableColumn("reference_number", "Reference"),
    TableColumn("customer_name", "Customer"),
    TableColumn("date", "Date"),
    TableColumn("due_date", "Due"),
    TableColumn("status", "Status"),
    TableColumn("amount", "Amount", align="right"),
    TableColumn("balance", "Balance", align="right"),
    TableColumn("color_status", "Flag", cell=_color),
    TableColumn("description", "Description", sortable=False),
    TableColumn("actions", "", sortable=False, cell=_actions),
]


def _batch_bar() -> rx.Component:
    return rx.cond(
        InvoiceState.selected_ids.length() > 0,
        rx.hstack(
            rx.text(InvoiceState.selected_ids.length(), " selected"),
            _color_select("", InvoiceState.set_selected_color),
            rx.button(
                "Clear selection",
                on_click=InvoiceState.clear_selected,
                variant="soft",
                color_scheme="gray",
            ),
            spacing="2",
            align="center",
            class_name="card batch-bar",
        ),
    )


def _customer_filter() -> rx.Component:
    return rx.cond(
        InvoiceState.criteria["customer_id"] != "",
        rx.hstack(
            rx.badge("Customer ", InvoiceState.criteria["customer_id"]),
            rx.icon_button(
                rx.icon("x", size=12),
                on_click=InvoiceState.set_filter("customer_id", ""),
                variant="ghost",
                title="Show all customers",
            ),
            spacing="1",
            align="center",
        ),
    )


def invoices_page() -> rx.Component:
    """Build the invoice list page."""
    return page_shell(
        "Invoices",
        "Flag invoices red, yellow or green to triage collections.",
        filter_panel(
            InvoiceState,
            "Search by reference, customer or description...",
            _customer_filter(),
            select_filter(InvoiceState, "filter", "Show", FILTER_OPTIONS),
            select_filter(InvoiceState, "color_status", "Flag", COLOR_OPTIONS),
            select_filter(InvoiceState, "invoice_status", "Status", STATUS_OPTIONS),
            range_filter(InvoiceState, "amount_min", "amount_max", "Amount"),
            range_filter(
                InvoiceState, "date_from", "date_to", "Invoice date", type_="date"
            ),
        ),
        saved_filters_panel(InvoiceState),
        _batch_bar(),
        rx.hstack(
            rx.text("Balance shown: ", rx.text.strong(InvoiceState.summary_total)),
            class_name="card summary-bar",
        ),
        list_results(InvoiceState, COLUMNS, "invoices"),
    )
