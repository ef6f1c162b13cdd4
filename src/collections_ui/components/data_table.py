"""
Sortable table used by every list view.

Rows are the display dicts produced by the view state. Each row carries
``key`` and ``element_id`` so deep links can scroll to it and clicks can
select it.
"""

from dataclasses import dataclass
from typing import Callable

import reflex as rx

CellRenderer = Callable[[rx.Var], rx.Component]


@dataclass(frozen=True)
class TableColumn:
    """
    One table column.

    Attributes:
        field: Display-dict key and sort column.
        label: Header text.
        sortable: Whether clicking the header toggles sorting.
        cell: Optional renderer receiving the row var; defaults to text.
        align: Text alignment of the cells.
    """

    field: str
    label: str
    sortable: bool = True
    cell: CellRenderer | None = None
    align: str = "left"


def data_table(state: type[rx.State], columns: list[TableColumn]) -> rx.Component:
    """
    Build the table for a list state.

    Args:
        state: A view state class using ``ListState``.
        columns: Columns in display order.

    Returns:
        The table component.
    """
    return rx.table.root(
        rx.table.header(
            rx.table.row(*[_header_cell(state, column) for column in columns])
        ),
        rx.table.body(
            rx.foreach(state.rows, lambda row: _body_row(state, columns, row))
        ),
        variant="surface",
        size="1",
        class_name="data-table",
    )


def _header_cell(state: type[rx.State], column: TableColumn) -> rx.Component:
    if not column.sortable:
        return rx.table.column_header_cell(column.label, text_align=column.align)
    return rx.table.column_header_cell(
        rx.hstack(
            rx.text(column.label),
            _sort_icon(state, column.field),
            spacing="1",
            align="center",
        ),
        on_click=state.toggle_sort(column.field),
        text_align=column.align,
        class_name="sortable",
    )


def _sort_icon(state: type[rx.State], field: str) -> rx.Component:
    return rx.cond(
        state.criteria["sort_by"] == field,
        rx.cond(
            state.criteria["sort_order"] == "desc",
            rx.icon("chevron-down", size=14),
            rx.icon("chevron-up", size=14),
        ),
        rx.icon("chevrons-up-down", size=14, class_name="sort-idle"),
    )


def _body_row(
    state: type[rx.State], columns: list[TableColumn], row: rx.Var
) -> rx.Component:
    return rx.table.row(
        *[_cell(column, row) for column in columns],
        id=row["element_id"],
        on_click=state.select_row(row["key"]),
        class_name=rx.cond(
            row["key"] == state.selected_key, "table-row selected", "table-row"
        ),
    )


def _cell(column: TableColumn, row: rx.Var) -> rx.Component:
    if column.cell is not None:
        return rx.table.cell(column.cell(row), text_align=column.align)
    return rx.table.cell(row[column.field], text_align=column.align)


def action_cell(*children: rx.Component) -> rx.Component:
    """Wrap interactive controls so clicking them does not select the row."""
    return rx.hstack(
        *children,
        spacing="1",
        align="center",
        on_click=rx.stop_propagation,
    )
