"""Mini README: Master data registries (projects, parties, cash accounts).

Entries and reports refer to these records by identifier. The registries
are deliberately flat; hierarchical data lives in ``sitebooks.hierarchy``.
"""

from .records import (
    CashAccount,
    Customer,
    Project,
    RecordDirectory,
    RevenueCategory,
    Supplier,
    demo_cash_accounts,
    demo_customers,
    demo_projects,
    demo_revenue_categories,
    demo_suppliers,
)

__all__ = [
    "CashAccount",
    "Customer",
    "Project",
    "RecordDirectory",
    "RevenueCategory",
    "Supplier",
    "demo_cash_accounts",
    "demo_customers",
    "demo_projects",
    "demo_revenue_categories",
    "demo_suppliers",
]
