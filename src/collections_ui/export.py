"""
Excel export of the rows currently shown in a view.

Each view has a fixed column set. Callers always pass the rows after
exclusions were applied, so the file matches the table on screen. Amounts
are written as numbers with a currency format so they stay summable in
Excel; dates are written as real dates.
"""

from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from typing import Any, Iterable, Sequence

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from collections_ui.models.records import COLOR_LABELS
from collections_ui.utils import parse_date

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_CURRENCY_FORMAT = '"$"#,##0.00;-"$"#,##0.00'
_DATE_FORMAT = "mmm dd, yyyy"


@dataclass(frozen=True)
class ExportColumn:
    """
    One exported column.

    Attributes:
        field: Row attribute to read.
        header: Column header text.
        width: Column width in characters.
        kind: "text", "number", "currency", "date" or "color".
    """

    field: str
    header: str
    width: int = 16
    kind: str = "text"


CUSTOMER_COLUMNS = (
    ExportColumn("customer_id", "Customer ID", 14),
    ExportColumn("customer_name", "Customer Name", 32),
    ExportColumn("status", "Status", 12),
    ExportColumn("country", "Country", 10),
    ExportColumn("email", "Email", 30),
    ExportColumn("balance", "Balance", 16, "currency"),
    ExportColumn("open_invoice_count", "Open Invoices", 14, "number"),
    ExportColumn("red_count", "Red", 8, "number"),
    ExportColumn("yellow_count", "Yellow", 8, "number"),
    ExportColumn("green_count", "Green", 8, "number"),
    ExportColumn("max_days_overdue", "Max Days Overdue", 18, "number"),
    ExportColumn("days_past_due_threshold", "Threshold (days)", 16, "number"),
)

INVOICE_COLUMNS = (
    ExportColumn("reference_number", "Reference", 14),
    ExportColumn("customer_id", "Customer ID", 14),
    ExportColumn("customer_name", "Customer Name", 32),
    ExportColumn("date", "Invoice Date", 14, "date"),
    ExportColumn("due_date", "Due Date", 14, "date"),
    ExportColumn("status", "Status", 10),
    ExportColumn("amount", "Amount", 16, "currency"),
    ExportColumn("balance", "Balance", 16, "currency"),
    ExportColumn("color_status", "Color Status", 16, "color"),
    ExportColumn("description", "Description", 30),
)

TICKET_COLUMNS = (
    ExportColumn("ticket_number", "Ticket", 12),
    ExportColumn("customer_id", "Customer ID", 14),
    ExportColumn("customer_name", "Customer Name", 32),
    ExportColumn("status", "Status", 14),
    ExportColumn("priority", "Priority", 10),
    ExportColumn("ticket_type", "Type", 18),
    ExportColumn("due_date", "Due Date", 14, "date"),
    ExportColumn("assigned_collector_name", "Collector", 22),
    ExportColumn("invoice_count", "Invoices", 10, "number"),
)

PAYMENT_COLUMNS = (
    ExportColumn("reference_number", "Reference", 14),
    ExportColumn("customer_id", "Customer ID", 14),
    ExportColumn("customer_name", "Customer Name", 32),
    ExportColumn("payment_date", "Payment Date", 14, "date"),
    ExportColumn("payment_method", "Method", 14),
    ExportColumn("status", "Status", 10),
    ExportColumn("amount", "Amount", 16, "currency"),
    ExportColumn("unapplied_balance", "Unapplied", 16, "currency"),
)

COLUMNS_BY_VIEW = {
    "customers": CUSTOMER_COLUMNS,
    "invoices": INVOICE_COLUMNS,
    "tickets": TICKET_COLUMNS,
    "payments": PAYMENT_COLUMNS,
}


def _cell(row: Any, column: ExportColumn) -> Any:
    value = getattr(row, column.field, None)
    if column.kind == "currency" or column.kind == "number":
        return value if value is not None else 0
    if column.kind == "date":
        parsed = parse_date(value)
        return parsed.replace(tzinfo=None) if parsed else None
    if column.kind == "color":
        return COLOR_LABELS.get(value, "") if value else ""
    return "" if value is None else value


def to_frame(rows: Iterable[Any], columns: Sequence[ExportColumn]) -> pd.DataFrame:
    """Return the export table as a DataFrame with header-named columns."""
    records = [[_cell(row, column) for column in columns] for row in rows]
    return pd.DataFrame(records, columns=[column.header for column in columns])


def build_workbook(
    rows: Iterable[Any],
    columns: Sequence[ExportColumn],
    title: str | None = None,
    subtitle: str | None = None,
    sheet_name: str = "Export",
) -> bytes:
    """
    Render rows to an .xlsx file.

    Args:
        rows: Rows to export, already exclusion-filtered.
        columns: Column set of the view.
        title: Optional bold title in the first row.
        subtitle: Optional second line under the title.
        sheet_name: Worksheet name.

    Returns:
        The workbook bytes.
    """
    frame = to_frame(rows, columns)
    header_row = 0
    if title or subtitle:
        header_row = 3

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=sheet_name, index=False, startrow=header_row)
        sheet = writer.sheets[sheet_name]
        if title:
            sheet.cell(row=1, column=1, value=title).font = Font(bold=True, size=14)
        if subtitle:
            sheet.cell(row=2, column=1, value=subtitle).font = Font(italic=True)

        first_data_row = header_row + 2
        for index, column in enumerate(columns, start=1):
            letter = get_column_letter(index)
            sheet.column_dimensions[letter].width = column.width
            sheet.cell(row=header_row + 1, column=index).font = Font(bold=True)
            if column.kind not in ("currency", "date"):
                continue
            number_format = (
                _CURRENCY_FORMAT if column.kind == "currency" else _DATE_FORMAT
            )
            for row_index in range(first_data_row, first_data_row + len(frame)):
                sheet.cell(row=row_index, column=index).number_format = number_format
    return buffer.getvalue()


def export_filename(view: str, now: datetime | None = None) -> str:
    """Return a timestamped download name such as ``customers_20250630_1415.xlsx``."""
    now = now or datetime.now()
    return f"{view}_{now.strftime('%Y%m%d_%H%M')}.xlsx"
