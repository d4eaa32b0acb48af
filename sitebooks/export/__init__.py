"""Mini README: Export helpers turning report rows into files.

Only CSV is supported today; the column definitions double as the table
layout used by the JSON service.
"""

from .csv_exporter import (
    PURCHASE_HISTORY_COLUMNS,
    ExportColumn,
    export_csv,
    purchase_history_filename,
    rows_to_csv,
)

__all__ = [
    "ExportColumn",
    "PURCHASE_HISTORY_COLUMNS",
    "export_csv",
    "purchase_history_filename",
    "rows_to_csv",
]
