"""
Layout helpers for the Collections application.

Every page renders inside the same shell: a navigation bar linking the
views, a page header and the shared notes dialog.
"""

import reflex as rx

from collections_ui import config
from collections_ui.components.notes_dialog import notes_dialog

NAV_ITEMS = (
    ("Customers", "/customers", "users"),
    ("Invoices", "/invoices", "file-text"),
    ("Payments", "/payments", "banknote"),
    ("Tickets", "/tickets", "ticket"),
)


def nav_bar() -> rx.Component:
    """Build the top navigation between the list views."""
    return rx.hstack(
        rx.heading(config.APP_TITLE, size="4", as_="h2", class_name="brand"),
        rx.spacer(),
        *[
            rx.link(
                rx.hstack(rx.icon(icon, size=16), rx.text(label), spacing="1"),
                href=href,
                class_name="nav-link",
            )
            for label, href, icon in NAV_ITEMS
        ],
        spacing="4",
        align="center",
        class_name="nav-bar",
    )


def page_header(title: str, subtitle: str) -> rx.Component:
    """Build the hero text area at the top of a page."""
    return rx.box(
        rx.heading(title, size="6", as_="h1"),
        rx.text(subtitle, class_name="muted"),
        class_name="page-header",
    )


def page_shell(title: str, subtitle: str, *children: rx.Component) -> rx.Component:
    """
    Build the complete page layout.

    Args:
        title: Page heading.
        subtitle: Muted line under the heading.
        *children: Page body components.

    Returns:
        The page component.
    """
    return rx.box(
        nav_bar(),
        rx.box(
            page_header(title, subtitle),
            *children,
            class_name="app-container",
        ),
        notes_dialog(),
        class_name="app-shell",
    )
