"""Reflex state for the notes dialog shared by invoices, tickets and customers."""

import reflex as rx

from collections_ui import config
from collections_ui.lib import logs
from collections_ui.services import get_collections_service
from collections_ui.utils import format_date

LOG = logs.logger(__file__)

NOTE_ENTITIES = ("invoice", "ticket", "customer")


class NotesState(rx.State):
    """Notes of the entity currently opened in the dialog."""

    is_open: bool = False
    is_loading: bool = False
    entity_type: str = ""
    entity_id: str = ""
    entity_label: str = ""
    notes: list[dict[str, str]] = []
    draft: str = ""
    error: str = ""

    @rx.event
    async def open_notes(self, entity_type: str, entity_id: str, label: str):
        """
        Open the dialog for one entity and load its notes.

        Args:
            entity_type: "invoice", "ticket" or "customer".
            entity_id: Identifier of the entity.
            label: Heading shown in the dialog.
        """
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.entity_label = label
        self.draft = ""
        self.is_open = True
        return NotesState.load_notes

    @rx.event(background=True)
    async def load_notes(self):
        async with self:
            entity_type, entity_id = self.entity_type, self.entity_id
            self.is_loading = True
            self.error = ""
        try:
            notes = await get_collections_service().list_notes(entity_type, entity_id)
        except Exception as e:
            LOG.error("Failed to load notes: %s", e, exc_info=True)
            async with self:
                self.notes = []
                self.error = f"Failed to load notes: {e}"
                self.is_loading = False
            return
        async with self:
            # The dialog may have moved on to another entity meanwhile
            if (self.entity_type, self.entity_id) != (entity_type, entity_id):
                return
            self.notes = [
                {
                    "id": note.id,
                    "body": note.body,
                    "created_by": note.created_by or "",
                    "created_at": format_date(note.created_at),
                }
                for note in notes
            ]
            self.is_loading = False

    def set_draft(self, value: str):
        self.draft = value

    def set_open(self, is_open: bool):
        self.is_open = is_open

    @rx.event
    async def add_note(self):
        """Persist the draft, then reload the list."""
        body = self.draft.strip()
        if not config.USER_ID:
            return rx.window_alert("You must be signed in to add notes")
        if self.entity_type not in NOTE_ENTITIES or not self.entity_id:
            return rx.window_alert("Nothing selected")
        if not body:
            return rx.window_alert("Please enter a note")
        try:
            await get_collections_service().add_note(
                self.entity_type, self.entity_id, body, config.USER_ID
            )
        except Exception as e:
            LOG.error("Failed to add note: %s", e, exc_info=True)
            return rx.window_alert(f"Failed to add note: {e}")
        self.draft = ""
        return NotesState.load_notes
