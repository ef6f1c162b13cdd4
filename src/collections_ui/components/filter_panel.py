"""
Filter controls bound to a list state's criteria.

Every control reads its value from ``State.criteria[name]`` and sends edits
through ``State.set_filter(name, value)``. Text inputs are debounced so a
search does not issue one request per keystroke.
"""

import reflex as rx

DEBOUNCE_MS = 300

Option = tuple[str, str]


def search_input(state: type[rx.State], placeholder: str) -> rx.Component:
    """Build the free-text search box."""
    return rx.box(
        rx.icon("search", class_name="input-icon"),
        rx.debounce_input(
            rx.input(
                placeholder=placeholder,
                value=state.criteria["search"],
                on_change=lambda value: state.set_filter("search", value),
                class_name="search-input",
            ),
            debounce_timeout=DEBOUNCE_MS,
        ),
        class_name="input-with-icon",
    )


def select_filter(
    state: type[rx.State], name: str, label: str, options: list[Option]
) -> rx.Component:
    """
    Build a labelled select.

    Args:
        state: View state class.
        name: Criteria field.
        label: Label shown above the control.
        options: ``(value, text)`` pairs; values must not be empty.
    """
    return _field(
        label,
        rx.select.root(
            rx.select.trigger(class_name="filter-select"),
            rx.select.content(
                *[rx.select.item(text, value=value) for value, text in options]
            ),
            value=state.criteria[name],
            on_change=lambda value: state.set_filter(name, value),
            size="2",
        ),
    )


def text_filter(
    state: type[rx.State],
    name: str,
    label: str,
    placeholder: str = "",
    type_: str = "text",
) -> rx.Component:
    """Build a labelled, debounced text, number or date input."""
    return _field(label, _bare_input(state, name, placeholder, type_))


def range_filter(
    state: type[rx.State], low: str, high: str, label: str, type_: str = "number"
) -> rx.Component:
    """Build a min/max pair sharing one label."""
    return _field(
        label,
        rx.hstack(
            _bare_input(state, low, "Min" if type_ == "number" else "From", type_),
            _bare_input(state, high, "Max" if type_ == "number" else "To", type_),
            spacing="1",
        ),
    )


def _bare_input(
    state: type[rx.State], name: str, placeholder: str, type_: str
) -> rx.Component:
    return rx.debounce_input(
        rx.input(
            placeholder=placeholder,
            value=state.criteria[name],
            on_change=lambda value: state.set_filter(name, value),
            type=type_,
            class_name="filter-input",
        ),
        debounce_timeout=DEBOUNCE_MS,
    )


def _field(label: str, control: rx.Component) -> rx.Component:
    return rx.box(
        rx.text(label, class_name="label"),
        control,
        class_name="filter-field",
    )


def filter_panel(
    state: type[rx.State], search_placeholder: str, *filters: rx.Component
) -> rx.Component:
    """
    Build the filter card of a view.

    Args:
        state: View state class.
        search_placeholder: Placeholder of the search box.
        *filters: Additional filter controls.

    Returns:
        The filter card with search, filters and list actions.
    """
    return rx.box(
        rx.hstack(
            search_input(state, search_placeholder),
            rx.spacer(),
            rx.cond(
                state.active_filter_count > 0,
                rx.badge(
                    state.active_filter_count,
                    " active",
                    color_scheme="blue",
                ),
            ),
            rx.button(
                rx.icon("filter-x", size=16),
                "Clear",
                on_click=state.clear_filters,
                variant="soft",
                disabled=state.active_filter_count == 0,
            ),
            rx.button(
                rx.icon("refresh-cw", size=16),
                "Refresh",
                on_click=state.refresh,
                variant="soft",
                loading=state.is_loading,
            ),
            rx.button(
                rx.icon("file-spreadsheet", size=16),
                "Export",
                on_click=state.export,
                variant="soft",
                disabled=state.rows.length() == 0,
            ),
            spacing="2",
            align="center",
            width="100%",
        ),
        rx.box(*filters, class_name="filter-grid"),
        class_name="card search-card",
    )
