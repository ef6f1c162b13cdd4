"""
Results display component for the list views.

Handles the loading, error, empty and loaded states around the table and
wires the infinite scroll to ``State.load_more``.
"""

import reflex as rx

from collections_ui.components.data_table import TableColumn, data_table
from collections_ui.components.infinite_scroll import InfiniteScroll


def list_results(
    state: type[rx.State], columns: list[TableColumn], noun: str
) -> rx.Component:
    """
    Build the results container of a view.

    Args:
        state: A view state class using ``ListState``.
        columns: Table columns.
        noun: Plural name of the rows, used in messages.

    Returns:
        The results container component.
    """
    return rx.box(
        rx.cond(
            state.error != "",
            rx.cond(state.rows.length() == 0, _failed(state, noun), _warning(state)),
        ),
        rx.cond(
            state.is_empty,
            _empty(state, noun),
            rx.cond(
                state.rows.length() > 0,
                _results(state, columns, noun),
                rx.cond(state.error == "", _loader(noun)),
            ),
        ),
        class_name="results",
    )


def _results(
    state: type[rx.State], columns: list[TableColumn], noun: str
) -> rx.Component:
    return rx.box(
        rx.box(
            rx.text(state.result_summary, class_name="muted"),
            class_name="results-summary",
        ),
        InfiniteScroll.create(
            data_table(state, columns),
            data_length=state.rows.length(),
            next=state.load_more(state.last_key),
            has_more=state.has_more,
            loader=_loader(noun),
            end_message=_end_message(noun),
        ),
    )


def _empty(state: type[rx.State], noun: str) -> rx.Component:
    """Build the empty state when no rows match."""
    return rx.box(
        rx.icon("inbox", class_name="empty-icon", size=60),
        rx.heading(f"No {noun} found", size="3", as_="h3"),
        rx.cond(
            state.hidden_count > 0,
            rx.text(
                "All matching rows belong to excluded customers.", class_name="muted"
            ),
            rx.text("Try clearing some filters.", class_name="muted"),
        ),
        class_name="card empty-state",
    )


def _failed(state: type[rx.State], noun: str) -> rx.Component:
    """Build the error state of a failed first page."""
    return rx.box(
        rx.icon("triangle-alert", class_name="empty-icon", size=60),
        rx.heading(f"Could not load {noun}", size="3", as_="h3"),
        rx.text(state.error, class_name="muted"),
        rx.button("Try again", on_click=state.refresh),
        class_name="card empty-state error-state",
    )


def _warning(state: type[rx.State]) -> rx.Component:
    return rx.callout(
        state.error,
        icon="triangle-alert",
        color_scheme="red",
        class_name="results-warning",
    )


def _loader(noun: str) -> rx.Component:
    """Build the loading indicator."""
    return rx.box(
        rx.box(class_name="spinner"),
        rx.text(f"Loading {noun}...", class_name="muted"),
        class_name="card loading-state",
    )


def _end_message(noun: str) -> rx.Component:
    return rx.box(
        rx.text(f"All {noun} loaded", class_name="load-more-hint end"),
        class_name="load-more-container",
    )
