"""
Reflex application entry point for the Collections UI.

This module initializes the Reflex app and registers one page per list
view. Each page triggers its state's ``on_load`` so deep links and route
changes start from a fresh first page.
"""

import reflex as rx

from collections_ui import config
from collections_ui.lib import logs
from collections_ui.pages.customers import customers_page
from collections_ui.pages.invoices import invoices_page
from collections_ui.pages.payments import payments_page
from collections_ui.pages.tickets import tickets_page
from collections_ui.state import (
    CustomerState,
    ExclusionState,
    InvoiceState,
    PaymentState,
    TicketState,
)

LOG = logs.logger(__file__)

LOG.info("Service: %s, page size: %s", config.SERVICE_KIND, config.PAGE_SIZE)

_FONT_URL = (
    "https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500"
    "&family=Source+Sans+3:ital,wght@0,300;0,400;0,500;0,600;0,700;1,400"
    "&display=swap"
)


# Create the Reflex app
app = rx.App(
    theme=rx.theme(
        appearance="light",
        has_background=True,
        radius="large",
    ),
    stylesheets=[
        _FONT_URL,
        "/styles.css",
    ],
)

app.add_page(
    customers_page,
    route="/",
    title=config.APP_TITLE,
    on_load=[ExclusionState.load, CustomerState.on_load],
)
app.add_page(
    customers_page,
    route="/customers",
    title=f"Customers | {config.APP_TITLE}",
    on_load=[ExclusionState.load, CustomerState.on_load],
)
app.add_page(
    invoices_page,
    route="/invoices",
    title=f"Invoices | {config.APP_TITLE}",
    on_load=InvoiceState.on_load,
)
app.add_page(
    payments_page,
    route="/payments",
    title=f"Payments | {config.APP_TITLE}",
    on_load=[ExclusionState.load, PaymentState.on_load],
)
app.add_page(
    tickets_page,
    route="/tickets",
    title=f"Tickets | {config.APP_TITLE}",
    on_load=TicketState.on_load,
)


def main() -> None:
    """Entrypoint used via `uv run collections_ui`."""
    # In production, use `reflex run` instead
    import subprocess
    import sys

    subprocess.run(
        [sys.executable, "-m", "reflex", "run", "--port", str(config.APP_PORT)]
    )


if __name__ == "__main__":
    main()
