"""Locally derived statistics over exclusion-applied rows."""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class RowSummary:
    count: int = 0
    total: float = 0.0

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


def summarize(rows: Iterable, amount_field: str) -> RowSummary:
    """
    Count rows and sum one numeric attribute.

    Callers pass rows that already went through ``exclude_rows`` so the
    figures match the rendered table.
    """
    count = 0
    total = 0.0
    for row in rows:
        count += 1
        total += float(getattr(row, amount_field, 0.0) or 0.0)
    return RowSummary(count=count, total=round(total, 2))
