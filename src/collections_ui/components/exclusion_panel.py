"""
Excluded customers panel and the exclude dialog of the customer view.

The panel lists the signed-in user's exclusions with their reasons; the
dialog asks for an optional reason before a customer is hidden.
"""

import reflex as rx

from collections_ui.state import CustomerState, ExclusionState


def exclusion_panel() -> rx.Component:
    """Build the collapsible list of excluded customers."""
    return rx.el.details(
        rx.el.summary(
            rx.hstack(
                rx.icon("eye-off", size=16),
                rx.text("Excluded customers"),
                rx.badge(ExclusionState.count, color_scheme="gray"),
                spacing="2",
                align="center",
            ),
            class_name="details-summary",
        ),
        rx.cond(
            ExclusionState.error != "",
            rx.text(ExclusionState.error, class_name="muted error-text"),
        ),
        rx.cond(
            ExclusionState.count > 0,
            rx.box(
                rx.foreach(ExclusionState.entries, _entry),
                rx.button(
                    rx.icon("eye", size=16),
                    "Include all",
                    on_click=CustomerState.include_all,
                    variant="soft",
                    color_scheme="red",
                ),
                class_name="exclusion-list",
            ),
            rx.text("No customers are excluded.", class_name="muted"),
        ),
        class_name="card exclusion-card",
    )


def _entry(entry: rx.Var) -> rx.Component:
    return rx.hstack(
        rx.text(entry["customer_id"], class_name="mono"),
        rx.text(
            rx.cond(entry["reason"] != "", entry["reason"], "No reason given"),
            class_name="muted",
        ),
        rx.spacer(),
        rx.text(entry["excluded_at"], class_name="muted small"),
        rx.icon_button(
            rx.icon("undo-2", size=14),
            on_click=CustomerState.include(entry["customer_id"]),
            variant="ghost",
            title="Include again",
        ),
        align="center",
        width="100%",
        class_name="exclusion-row",
    )


def exclude_dialog() -> rx.Component:
    """Build the dialog confirming an exclusion."""
    return rx.dialog.root(
        rx.dialog.content(
            rx.dialog.title("Exclude customer"),
            rx.dialog.description(
                rx.text(
                    "Hide ",
                    rx.text.strong(CustomerState.exclude_label),
                    " from the customer list, payments and totals.",
                )
            ),
            rx.text_area(
                placeholder="Reason (optional), e.g. disputed",
                value=CustomerState.exclude_reason,
                on_change=CustomerState.set_exclude_reason,
                class_name="dialog-input",
            ),
            rx.hstack(
                rx.dialog.close(
                    rx.button("Cancel", variant="soft", color_scheme="gray"),
                ),
                rx.button(
                    "Exclude",
                    on_click=CustomerState.confirm_exclude,
                    color_scheme="red",
                ),
                justify="end",
                spacing="2",
                class_name="dialog-actions",
            ),
        ),
        open=CustomerState.exclude_target != "",
        on_open_change=CustomerState.set_exclude_open,
    )
