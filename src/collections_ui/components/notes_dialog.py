"""Notes dialog shared by the invoice, ticket and customer tables."""

import reflex as rx

from collections_ui.state import NotesState


def notes_button(entity_type: str, entity_id: rx.Var, label: rx.Var) -> rx.Component:
    """Build the icon button that opens the notes of one entity."""
    return rx.icon_button(
        rx.icon("message-square-text", size=14),
        on_click=NotesState.open_notes(entity_type, entity_id, label),
        variant="ghost",
        title="Notes",
    )


def notes_dialog() -> rx.Component:
    """Build the dialog listing and adding notes."""
    return rx.dialog.root(
        rx.dialog.content(
            rx.dialog.title(rx.text("Notes: ", NotesState.entity_label)),
            rx.cond(
                NotesState.is_loading,
                rx.box(rx.box(class_name="spinner"), class_name="loading-state"),
                rx.cond(
                    NotesState.error != "",
                    rx.text(NotesState.error, class_name="muted error-text"),
                    rx.cond(
                        NotesState.notes.length() > 0,
                        rx.box(
                            rx.foreach(NotesState.notes, _note),
                            class_name="notes-list",
                        ),
                        rx.text("No notes yet.", class_name="muted"),
                    ),
                ),
            ),
            rx.text_area(
                placeholder="Add a note",
                value=NotesState.draft,
                on_change=NotesState.set_draft,
                class_name="dialog-input",
            ),
            rx.hstack(
                rx.dialog.close(
                    rx.button("Close", variant="soft", color_scheme="gray"),
                ),
                rx.button("Add note", on_click=NotesState.add_note),
                justify="end",
                spacing="2",
                class_name="dialog-actions",
            ),
        ),
        open=NotesState.is_open,
        on_open_change=NotesState.set_open,
    )


def _note(note: rx.Var) -> rx.Component:
    return rx.box(
        rx.text(note["body"]),
        rx.text(
            note["created_by"], " - ", note["created_at"], class_name="muted small"
        ),
        class_name="note",
    )
