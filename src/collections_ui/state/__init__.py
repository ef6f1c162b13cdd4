"""Reflex state classes, one per view plus the shared exclusion and notes state."""

from collections_ui.state.customers import CustomerState
from collections_ui.state.exclusions import ExclusionState
from collections_ui.state.invoices import InvoiceState
from collections_ui.state.notes import NotesState
from collections_ui.state.payments import PaymentState
from collections_ui.state.tickets import TicketState

__all__ = [
    "CustomerState",
    "ExclusionState",
    "InvoiceState",
    "NotesState",
    "PaymentState",
    "TicketState",
]
