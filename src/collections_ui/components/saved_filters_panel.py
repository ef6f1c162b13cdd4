"""Saved filter controls: save the current filters under a name and reload them."""

import reflex as rx


def saved_filters_panel(state: type[rx.State]) -> rx.Component:
    """
    Build the saved filters card for a list state.

    Args:
        state: A view state class using ``ListState``.

    Returns:
        The saved filters component.
    """
    return rx.el.details(
        rx.el.summary(
            rx.hstack(
                rx.icon("bookmark", size=16),
                rx.text("Saved filters"),
                rx.badge(state.saved_filters.length(), color_scheme="gray"),
                spacing="2",
                align="center",
            ),
            class_name="details-summary",
        ),
        rx.hstack(
            rx.input(
                placeholder="Filter name",
                value=state.filter_name,
                on_change=state.set_filter_name,
                class_name="filter-input",
            ),
            rx.button(
                rx.icon("save", size=16),
                "Save current",
                on_click=state.save_filter,
                variant="soft",
            ),
            spacing="2",
            align="center",
        ),
        rx.foreach(state.saved_filters, lambda saved: _saved_row(state, saved)),
        class_name="card saved-filters-card",
    )


def _saved_row(state: type[rx.State], saved: rx.Var) -> rx.Component:
    return rx.hstack(
        rx.link(
            saved["name"],
            on_click=state.apply_saved_filter(saved["id"]),
            class_name="saved-filter-link",
        ),
        rx.spacer(),
        rx.text(saved["last_used"], class_name="muted small"),
        rx.icon_button(
            rx.icon("trash-2", size=14),
            on_click=state.delete_saved_filter(saved["id"]),
            variant="ghost",
            color_scheme="red",
            title="Delete filter",
        ),
        align="center",
        width="100%",
        class_name="saved-filter-row",
    )
