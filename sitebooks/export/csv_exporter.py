"""Mini README: Export report rows to CSV.

Structure:
    * ExportColumn - header plus attribute name or callable accessor.
    * rows_to_csv - render rows as CSV text, header row first.
    * export_csv - write the CSV into the configured export directory.
    * PURCHASE_HISTORY_COLUMNS - column layout of the purchase history report.
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from ..configuration import get_settings
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Accessor = Union[str, Callable[[Any], Any]]


@dataclass(frozen=True, slots=True)
class ExportColumn:
    header: str
    accessor: Accessor

    def value_for(self, row: Any) -> Any:
        if callable(self.accessor):
            return self.accessor(row)
        if isinstance(row, dict):
            return row.get(self.accessor, "")
        return getattr(row, self.accessor)


def rows_to_csv(rows: Iterable[Any], columns: Sequence[ExportColumn]) -> str:
    """Serialise rows with one value per column."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([column.header for column in columns])
    for row in rows:
        writer.writerow(["" if value is None else value for value in (c.value_for(row) for c in columns)])
    return buffer.getvalue()


def _safe_filename(filename: str) -> str:
    stem = re.sub(r"\s+", "_", filename.strip())
    stem = re.sub(r"[^\w.\-]", "", stem) or "export"
    return stem if stem.endswith(".csv") else f"{stem}.csv"


def export_csv(
    filename: str,
    rows: Iterable[Any],
    columns: Sequence[ExportColumn],
    *,
    directory: Optional[Path] = None,
) -> Path:
    """Write the CSV file and return its path."""

    target_directory = directory or get_settings().export_directory
    target_directory.mkdir(parents=True, exist_ok=True)
    destination = target_directory / _safe_filename(filename)
    content = rows_to_csv(rows, columns)
    destination.write_text(content, encoding="utf-8")
    LOGGER.info("Exported %s lines to %s", content.count("\n") - 1, destination)
    return destination


def purchase_history_filename(product_name: str) -> str:
    slug = re.sub(r"\s+", "_", product_name.strip())
    return f"purchase_history_{slug}"


PURCHASE_HISTORY_COLUMNS = (
    ExportColumn("Invoice date", lambda row: row.expense_date.isoformat()),
    ExportColumn("Supplier", "supplier_name"),
    ExportColumn("Product", "product_name"),
    ExportColumn("Qty", "quantity"),
    ExportColumn("Unit", "unit"),
    ExportColumn("Unit price", lambda row: f"{row.unit_price:.2f}"),
    ExportColumn("Item total", lambda row: f"{row.total_amount:.2f}"),
)
