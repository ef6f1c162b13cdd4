"""Customer list page: analytics cards, filters, exclusions and the table."""

import reflex as rx

from collections_ui.components.data_table import TableColumn, action_cell
from collections_ui.components.exclusion_panel import exclude_dialog, exclusion_panel
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
from collections_ui.state import CustomerState

STATUS_OPTIONS = [
    ("all", "All statuses"),
    ("Active", "Active"),
    ("Inactive", "Inactive"),
    ("On Hold", "On hold"),
]
BALANCE_OPTIONS = [
    ("all", "Any balance"),
    ("positive", "Positive"),
    ("negative", "Negative (credit)"),
    ("zero", "Zero"),
]

ANALYTICS_CARDS = (
    ("Customers", "total_customers", "users"),
    ("Active", "active_customers", "user-check"),
    ("Total balance", "total_balance", "dollar-sign"),
    ("Average balance", "avg_balance", "scale"),
    ("With debt", "customers_with_debt", "wallet"),
    ("Open invoices", "total_open_invoices", "file-text"),
    ("Past threshold", "customers_with_overdue", "clock-alert"),
)


def _analytics() -> rx.Component:
    return rx.cond(
        CustomerState.show_analytics,
        rx.box(
            rx.cond(
                CustomerState.analytics_error != "",
                rx.text(CustomerState.analytics_error, class_name="muted error-text"),
            ),
            rx.box(
                *[
                    _stat_card(label, CustomerState.analytics[key], icon)
                    for label, key, icon in ANALYTICS_CARDS
                ],
                class_name=rx.cond(
                    CustomerState.analytics_loading, "stat-grid stale", "stat-grid"
                ),
            ),
        ),
    )


def _stat_card(label: str, value: rx.Var, icon: str) -> rx.Component:
    return rx.box(
        rx.hstack(rx.icon(icon, size=16), rx.text(label, class_name="label")),
        rx.text(value, class_name="stat-value"),
        class_name="card stat-card",
    )


def _balance(row: rx.Var) -> rx.Component:
    return rx.text(row["balance"], class_name=f"amount {row['balance_sign']}")


def _colors(row: rx.Var) -> rx.Component:
    return rx.hstack(
        rx.badge(row["red_count"], color_scheme="red", variant="soft"),
        rx.badge(row["yellow_count"], color_scheme="yellow", variant="soft"),
        rx.badge(row["green_count"], color_scheme="green", variant="soft"),
        spacing="1",
    )


def _overdue(row: rx.Var) -> rx.Component:
    return rx.text(
        row["max_days_overdue"],
        class_name=rx.cond(row["overdue"] == "true", "overdue", ""),
    )


def _threshold(row: rx.Var) -> rx.Component:
    return action_cell(
        rx.input(
            default_value=row["days_past_due_threshold"],
            on_blur=lambda value: CustomerState.set_threshold(
                row["customer_id"], value
            ),
            type="number",
            min=0,
            class_name="threshold-input",
            title="Days past due before a customer counts as overdue",
        )
    )


def _actions(row: rx.Var) -> rx.Component:
    return action_cell(
        rx.link(
            rx.icon_button(
                rx.icon("file-text", size=14), variant="ghost", title="Invoices"
            ),
            href=f"/invoices?customer={row['customer_id']}",
        ),
        notes_button("customer", row["customer_id"], row["customer_name"]),
        rx.icon_button(
            rx.icon("eye-off", size=14),
            on_click=CustomerState.start_exclude(
                row["customer_id"], row["customer_name"]
            ),
            variant="ghost",
            color_scheme="red",
            title="Exclude customer",
        ),
    )


COLUMNS = [
    TableColumn("customer_id", "ID"),
    TableColumn("customer_name", "Customer"),
    TableColumn("status", "Status"),
    TableColumn("country", "Country"),
    TableColumn("balance", "Balance", cell=_balance, align="right"),
    TableColumn("open_invoice_count", "Open", align="right"),
    TableColumn("colors", "Flags", sortable=False, cell=_colors),
    TableColumn("max_days_overdue", "Days overdue", cell=_overdue, align="right"),
    TableColumn("days_past_due_threshold", "Threshold", cell=_threshold),
    TableColumn("actions", "", sortable=False, cell=_actions),
]


def _footer() -> rx.Component:
    return rx.hstack(
        rx.text(CustomerState.summary_count, " customers shown", class_name="muted"),
        rx.spacer(),
        rx.text("Balance shown: ", rx.text.strong(CustomerState.summary_total)),
        class_name="card summary-bar",
    )


def customers_page() -> rx.Component:
    """Build the customer list page."""
    return page_shell(
        "Customers",
        "Customer balances with open invoice flags.",
        _analytics(),
        filter_panel(
            CustomerState,
            "Search by customer ID, name or email...",
            select_filter(CustomerState, "status", "Status", STATUS_OPTIONS),
            text_filter(CustomerState, "country", "Country", "e.g. US"),
            select_filter(CustomerState, "balance", "Balance", BALANCE_OPTIONS),
            range_filter(CustomerState, "min_balance", "max_balance", "Balance range"),
            range_filter(
                CustomerState,
                "min_open_invoices",
                "max_open_invoices",
                "Open invoices",
            ),
            range_filter(
                CustomerState, "date_from", "date_to", "Last modified", type_="date"
            ),
        ),
        saved_filters_panel(CustomerState),
        exclusion_panel(),
        _footer(),
        list_results(CustomerState, COLUMNS, "customers"),
        exclude_dialog(),
    )
