"""
Reflex state for collection tickets.

Besides the ticket table this holds the collector activity summary, which
also provides the collectors a ticket can be assigned to.
"""

from typing import ClassVar

import reflex as rx

from collections_ui import config
from collections_ui.export import TICKET_COLUMNS
from collections_ui.lib import logs
from collections_ui.listing import run_mutation
from collections_ui.models.criteria import TicketCriteria
from collections_ui.models.records import TICKET_PRIORITIES, TICKET_STATUSES, TicketRow
from collections_ui.state.base import ListState, _service
from collections_ui.utils import format_date

LOG = logs.logger(__file__)

UNASSIGNED = "unassigned"
ACTIVITY_DAYS = 30


class TicketState(ListState, rx.State):
    """Ticket table with priority, status and assignment edits."""

    CRITERIA: ClassVar[type[TicketCriteria]] = TicketCriteria
    EXPORT_COLUMNS: ClassVar[tuple] = TICKET_COLUMNS
    LINK_PARAM: ClassVar[str] = "ticket"
    TITLE: ClassVar[str] = "Tickets"

    status_note: str = ""
    collectors: list[dict[str, str]] = []
    activity_loading: bool = False
    activity_error: str = ""

    def _fetcher(self):
        return _service().page_tickets

    def _display(self, row: TicketRow) -> dict[str, str]:
        return {
            "id": row.id,
            "ticket_number": row.ticket_number,
            "customer_id": row.customer_id,
            "customer_name": row.customer_name,
            "status": row.status,
            "priority": row.priority,
            "ticket_type": row.ticket_type.replace("_", " "),
            "due_date": format_date(row.due_date),
            "assigned_to": row.assigned_collector_id or UNASSIGNED,
            "assigned_collector_name": row.assigned_collector_name or "Unassigned",
            "invoice_count": str(row.invoice_count),
        }

    def _on_load(self) -> list:
        return [TicketState.load_activity]

    @rx.event(background=True)
    async def load_activity(self):
        """Fetch the collector activity summary for the look-back window."""
        async with self:
            self.activity_loading = True
            self.activity_error = ""
        try:
            activity = await _service().collector_activity_summary(
                days_back=ACTIVITY_DAYS
            )
        except Exception as e:
            LOG.error("Failed to load collector activity: %s", e, exc_info=True)
            async with self:
                self.activity_error = f"Failed to load collector activity: {e}"
                self.activity_loading = False
            return
        async with self:
            self.collectors = [
                {
                    "user_id": item.user_id,
                    "name": item.display_name,
                    "role": item.role,
                    "total_actions": str(item.total_actions),
                    "tickets_closed": str(item.tickets_closed),
                    "notes_added": str(item.notes_added),
                    "status_changes": str(item.status_changes),
                    "last_activity": format_date(item.last_activity),
                }
                for item in activity
            ]
            self.activity_loading = False

    def set_status_note(self, value: str):
        self.status_note = value

    @rx.event
    async def set_priority(self, ticket_id: str, priority: str):
        invalid = self._check_user()
        if invalid:
            return invalid
        if priority not in TICKET_PRIORITIES:
            return rx.window_alert(f"Invalid priority: {priority}")
        service = _service()
        result = await run_mutation(
            self._ensure_listing(),
            ticket_id,
            {"priority": priority},
            lambda: service.update_ticket_priority(ticket_id, priority, config.USER_ID),
            "update priority",
        )
        return await self._settle(result)

    @rx.event
    async def set_status(self, ticket_id: str, status: str):
        """
        Change a ticket's status.

        The pending ``status_note`` is recorded with the change and cleared
        once the write succeeded.
        """
        invalid = self._check_user()
        if invalid:
            return invalid
        if status not in TICKET_STATUSES:
            return rx.window_alert(f"Invalid status: {status}")
        service = _service()
        note = self.status_note.strip() or None
        result = await run_mutation(
            self._ensure_listing(),
            ticket_id,
            {"status": status},
            lambda: service.update_ticket_status(
                ticket_id, status, config.USER_ID, note
            ),
            "update status",
        )
        if result.ok:
            self.status_note = ""
        return await self._settle(result)

    @rx.event
    async def assign(self, ticket_id: str, collector_id: str):
        """
        Assign a ticket.

        Args:
            ticket_id: Ticket to update.
            collector_id: Collector user id, or "unassigned".
        """
        invalid = self._check_user()
        if invalid:
            return invalid
        assignee = None if collector_id in ("", UNASSIGNED) else collector_id
        name = ""
        if assignee is not None:
            name = next(
                (c["name"] for c in self.collectors if c["user_id"] == assignee), ""
            )
        service = _service()
        result = await run_mutation(
            self._ensure_listing(),
            ticket_id,
            {"assigned_collector_id": assignee, "assigned_collector_name": name},
            lambda: service.assign_ticket(ticket_id, assignee),
            "assign ticket",
        )
        events = await self._settle(result)
        if not result.ok:
            return events
        return [*(events or []), TicketState.load_activity]
