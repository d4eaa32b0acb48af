"""Mini README: Expense and revenue ledger for construction projects.

The ``ledger`` module keeps entries composed of line items, derives their
totals, and applies append-only settlements that move each entry from
unsettled through partially settled to settled. Everything is held in memory
for the lifetime of the owning workspace.
"""

from .ledger import (
    Entry,
    EntryCategory,
    EntryStatus,
    EntryType,
    ExpenseEntry,
    FinanceLedger,
    LineItem,
    RevenueEntry,
    Settlement,
    TransactionType,
    compute_total,
    derive_status,
    resolve_line_item_amount,
)

__all__ = [
    "Entry",
    "EntryCategory",
    "EntryStatus",
    "EntryType",
    "ExpenseEntry",
    "FinanceLedger",
    "LineItem",
    "RevenueEntry",
    "Settlement",
    "TransactionType",
    "compute_total",
    "derive_status",
    "resolve_line_item_amount",
]
