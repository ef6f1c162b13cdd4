"""
Deterministic demo fixtures.

The generator is seeded, so every process sees the same customers,
invoices, payments and tickets. Customer balances are not stored here: the
demo service derives them from the open invoices, as the backend does.

A few customers are shaped on purpose:
- every seventh customer (starting with the fourth) has only paid invoices
- every eleventh customer (starting with the sixth) carries a credit memo
  larger than its open invoices
"""

import random
from dataclasses import replace
from datetime import date, timedelta

from collections_ui.models.records import (
    COLOR_STATUSES,
    TICKET_PRIORITIES,
    TICKET_STATUSES,
    TICKET_TYPES,
    CustomerRow,
    InvoiceRow,
    PaymentRow,
    TicketRow,
)

# Reference "today" for overdue calculations
AS_OF = date(2025, 6, 30)

CUSTOMER_COUNT = 60

DEMO_COLLECTORS = [
    {
        "user_id": "demo-user",
        "full_name": "Dana Reyes",
        "email": "dana@example.com",
        "role": "collector",
    },
    {
        "user_id": "u-morgan",
        "full_name": "Morgan Blake",
        "email": "morgan@example.com",
        "role": "collector",
    },
    {
        "user_id": "u-sam",
        "full_name": "Sam Ortiz",
        "email": "sam@example.com",
        "role": "manager",
    },
]

_NAMES = (
    "Apex", "Birch", "Cobalt", "Delta", "Evergreen", "Falcon", "Granite",
    "Harbor", "Iris", "Juniper", "Keystone", "Lumen", "Meridian", "Northwind",
    "Orchid", "Pioneer", "Quarry", "Redwood", "Summit", "Tidewater",
)
_SUFFIXES = ("Supply", "Logistics", "Foods", "Medical", "Builders", "Retail")
_STATUSES = ("Active", "Active", "Active", "Inactive", "On Hold")
_COUNTRIES = ("US", "US", "US", "CA", "MX", "GB")
_METHODS = ("Check", "ACH", "Wire", "Credit Card")
_PAYMENT_STATUSES = ("Closed", "Closed", "Open", "Voided")
_DESCRIPTIONS = (
    "Monthly service",
    "Equipment order",
    "Freight charges",
    "Maintenance contract",
    "Replacement parts",
)


def _iso(day: date) -> str:
    return day.isoformat()


def _build() -> tuple[
    list[CustomerRow], list[InvoiceRow], list[PaymentRow], list[TicketRow]
]:
    rng = random.Random(20250630)
    customers: list[CustomerRow] = []
    invoices: list[InvoiceRow] = []
    payments: list[PaymentRow] = []
    tickets: list[TicketRow] = []

    for index in range(CUSTOMER_COUNT):
        customer_id = f"C{100 + index}"
        name = f"{_NAMES[index % len(_NAMES)]} {_SUFFIXES[index % len(_SUFFIXES)]}"
        if index >= len(_NAMES):
            name = f"{name} {index // len(_NAMES) + 1}"
        customers.append(
            CustomerRow(
                customer_id=customer_id,
                customer_name=name,
                status=_STATUSES[index % len(_STATUSES)],
                country=_COUNTRIES[index % len(_COUNTRIES)],
                email=f"ap@{name.split()[0].lower()}{index}.example.com",
                days_past_due_threshold=30 if index % 4 else 45,
                last_modified=_iso(AS_OF - timedelta(days=index * 3)),
            )
        )

        paid_only = index % 7 == 3
        open_balance = 0.0
        for n in range(rng.randint(2, 7)):
            number = len(invoices) + 1
            issued = AS_OF - timedelta(days=rng.randint(5, 240))
            amount = round(rng.uniform(250, 9500), 2)
            is_open = not paid_only and (n == 0 or rng.random() < 0.55)
            balance = 0.0
            if is_open:
                balance = amount if rng.random() < 0.7 else round(amount * 0.5, 2)
                open_balance += balance
            invoices.append(
                InvoiceRow(
                    id=f"INV-{number:05d}",
                    reference_number=f"{number:06d}",
                    customer_id=customer_id,
                    customer_name=name,
                    status="Open" if is_open else "Closed",
                    date=_iso(issued),
                    due_date=_iso(issued + timedelta(days=30)),
                    amount=amount,
                    balance=balance,
                    color_status=(
                        rng.choice((None,) + COLOR_STATUSES) if is_open else None
                    ),
                    description=rng.choice(_DESCRIPTIONS),
                )
            )

        if index % 11 == 5:
            number = len(invoices) + 1
            credit = -round(open_balance + rng.uniform(100, 900), 2)
            invoices.append(
                InvoiceRow(
                    id=f"INV-{number:05d}",
                    reference_number=f"{number:06d}",
                    customer_id=customer_id,
                    customer_name=name,
                    status="Open",
                    date=_iso(AS_OF - timedelta(days=10)),
                    due_date=_iso(AS_OF + timedelta(days=20)),
                    amount=credit,
                    balance=credit,
                    description="Credit memo",
                )
            )

        for _ in range(rng.randint(1, 4)):
            number = len(payments) + 1
            amount = round(rng.uniform(100, 6000), 2)
            payments.append(
                PaymentRow(
                    id=f"PMT-{number:05d}",
                    reference_number=f"P{number:06d}",
                    customer_id=customer_id,
                    customer_name=name,
                    payment_date=_iso(AS_OF - timedelta(days=rng.randint(0, 180))),
                    payment_method=rng.choice(_METHODS),
                    status=rng.choice(_PAYMENT_STATUSES),
                    amount=amount,
                    unapplied_balance=(
                        round(amount * 0.1, 2) if rng.random() < 0.2 else 0.0
                    ),
                )
            )

        if open_balance > 0 and index % 2 == 0:
            number = len(tickets) + 1
            collector = DEMO_COLLECTORS[index % len(DEMO_COLLECTORS)]
            assigned = index % 5 != 4
            tickets.append(
                TicketRow(
                    id=f"TKT-{number:04d}",
                    ticket_number=f"T-{1000 + number}",
                    customer_id=customer_id,
                    customer_name=name,
                    status=TICKET_STATUSES[number % len(TICKET_STATUSES)],
                    priority=TICKET_PRIORITIES[number % len(TICKET_PRIORITIES)],
                    ticket_type=TICKET_TYPES[number % len(TICKET_TYPES)],
                    due_date=_iso(AS_OF + timedelta(days=rng.randint(-20, 40))),
                    assigned_collector_id=collector["user_id"] if assigned else None,
                    assigned_collector_name=collector["full_name"] if assigned else "",
                    invoice_count=rng.randint(1, 4),
                    created_at=_iso(AS_OF - timedelta(days=rng.randint(1, 60))),
                )
            )

    return customers, invoices, payments, tickets


DEMO_CUSTOMERS, DEMO_INVOICES, DEMO_PAYMENTS, DEMO_TICKETS = _build()


def fresh_records() -> tuple[
    list[CustomerRow], list[InvoiceRow], list[PaymentRow], list[TicketRow]
]:
    """Return independent copies of the fixtures for a mutable backend."""
    return (
        [replace(c) for c in DEMO_CUSTOMERS],
        [replace(i) for i in DEMO_INVOICES],
        [replace(p) for p in DEMO_PAYMENTS],
        [replace(t) for t in DEMO_TICKETS],
    )
