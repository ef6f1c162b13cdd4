"""Collection tickets page with collector activity."""

import reflex as rx

from collections_ui.components.data_table import TableColumn, action_cell
from collections_ui.components.filter_panel import (
    filter_panel,
    range_filter,
    select_filter,
)
from collections_ui.components.notes_dialog import notes_button
from collections_ui.components.results import list_results
from collections_ui.components.saved_filters_panel import saved_filters_panel
from collections_ui.layout import page_shell
from collections_ui.models.records import (
    TICKET_PRIORITIES,
    TICKET_STATUSES,
    TICKET_TYPES,
)
from collections_ui.state import TicketState
from collections_ui.state.tickets import UNASSIGNED


def _label(value: str) -> str:
    return value.replace("_", " ").capitalize()


STATUS_OPTIONS = [("all", "All statuses")] + [
    (s, _label(s)) for s in TICKET_STATUSES
]
PRIORITY_OPTIONS = [("all", "All priorities")] + [
    (p, _label(p)) for p in TICKET_PRIORITIES
]
TYPE_OPTIONS = [("all", "All types")] + [(t, _label(t)) for t in TICKET_TYPES]


def _inline_select(
    options: list[tuple[str, str]], value: rx.Var, on_change
) -> rx.Component:
    return rx.select.root(
        rx.select.trigger(class_name="inline-select"),
        rx.select.content(
            *[rx.select.item(text, value=key) for key, text in options]
        ),
        value=value,
        on_change=on_change,
        size="1",
    )


def _collector_select(value: rx.Var, on_change) -> rx.Component:
    return rx.select.root(
        rx.select.trigger(class_name="inline-select"),
        rx.select.content(
            rx.select.item("Unassigned", value=UNASSIGNED),
            rx.foreach(
                TicketState.collectors,
                lambda c: rx.select.item(c["name"], value=c["user_id"]),
            ),
        ),
        value=value,
        on_change=on_change,
        size="1",
    )


def _priority(row: rx.Var) -> rx.Component:
    return action_cell(
        _inline_select(
            [(p, _label(p)) for p in TICKET_PRIORITIES],
            row["priority"],
            lambda value: TicketState.set_priority(row["id"], value),
        )
    )


def _status(row: rx.Var) -> rx.Component:
    return action_cell(
        _inline_select(
            [(s, _label(s)) for s in TICKET_STATUSES],
            row["status"],
            lambda value: TicketState.set_status(row["id"], value),
        )
    )


def _assignee(row: rx.Var) -> rx.Component:
    return action_cell(
        _collector_select(
            row["assigned_to"],
            lambda value: TicketState.assign(row["id"], value),
        )
    )


def _actions(row: rx.Var) -> rx.Component:
    return action_cell(
        notes_button("ticket", row["id"], row["ticket_number"]),
        rx.link(
            rx.icon_button(
                rx.icon("user", size=14), variant="ghost", title="Customer"
            ),
            href=f"/customers?customer={row['customer_id']}",
        ),
    )


COLUMNS = [
    TableColumn("ticket_number", "Ticket"),
    TableColumn("customer_name", "Customer"),
    TableColumn("ticket_type", "Type"),
    TableColumn("priority", "Priority", cell=_priority),
    TableColumn("status", "Status", cell=_status),
    TableColumn("due_date", "Due"),
    TableColumn("assigned_to", "Collector", cell=_assignee),
    TableColumn("invoice_count", "Invoices", align="right"),
    TableColumn("actions", "", sortable=False, cell=_actions),
]


def _activity() -> rx.Component:
    return rx.el.details(
        rx.el.summary(
            rx.hstack(
                rx.icon("activity", size=16),
                rx.text("Collector activity (30 days)"),
                spacing="2",
                align="center",
            ),
            class_name="details-summary",
        ),
        rx.cond(
            TicketState.activity_error != "",
            rx.text(TicketState.activity_error, class_name="muted error-text"),
        ),
        rx.table.root(
            rx.table.header(
                rx.table.row(
                    *[
                        rx.table.column_header_cell(label)
                        for label in (
                            "Collector",
                            "Actions",
                            "Closed",
                            "Notes",
                            "Status changes",
                            "Last activity",
                        )
                    ]
                )
            ),
            rx.table.body(rx.foreach(TicketState.collectors, _activity_row)),
            size="1",
        ),
        class_name="card activity-card",
    )


def _activity_row(item: rx.Var) -> rx.Component:
    return rx.table.row(
        rx.table.cell(item["name"]),
        rx.table.cell(item["total_actions"]),
        rx.table.cell(item["tickets_closed"]),
        rx.table.cell(item["notes_added"]),
        rx.table.cell(item["status_changes"]),
        rx.table.cell(item["last_activity"]),
    )


def _collector_filter() -> rx.Component:
    return rx.box(
        rx.text("Collector", class_name="label"),
        rx.select.root(
            rx.select.trigger(class_name="filter-select"),
            rx.select.content(
                rx.select.item("Anyone", value="all"),
                rx.select.item("Unassigned", value=UNASSIGNED),
                rx.foreach(
                    TicketState.collectors,
                    lambda c: rx.select.item(c["name"], value=c["user_id"]),
                ),
            ),
            value=TicketState.criteria["assigned_to"],
            on_change=lambda value: TicketState.set_filter("assigned_to", value),
        ),
        class_name="filter-field",
    )


def tickets_page() -> rx.Component:
    """Build the tickets page."""
    return page_shell(
        "Tickets",
        "Collection work items grouped by customer.",
        _activity(),
        filter_panel(
            TicketState,
            "Search by ticket number or customer...",
            select_filter(TicketState, "status", "Status", STATUS_OPTIONS),
            select_filter(TicketState, "priority", "Priority", PRIORITY_OPTIONS),
            select_filter(TicketState, "ticket_type", "Type", TYPE_OPTIONS),
            _collector_filter(),
            range_filter(TicketState, "date_from", "date_to", "Due", type_="date"),
        ),
        saved_filters_panel(TicketState),
        rx.box(
            rx.text("Note for the next status change", class_name="label"),
            rx.input(
                placeholder="Optional, e.g. promised payment on Friday",
                value=TicketState.status_note,
                on_change=TicketState.set_status_note,
                class_name="filter-input",
            ),
            class_name="card status-note",
        ),
        list_results(TicketState, COLUMNS, "tickets"),
    )
