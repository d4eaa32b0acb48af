"""Mini README: Read-only report projections over the workspace data.

Reports never mutate the ledger or the trees; each call rebuilds its rows
from the current state so filters can change freely.
"""

from .cash_flow import CashFlowRow, build_cash_flow
from .cost_center_summary import CostCenterSummary, summarise_cost_centers
from .purchase_history import PurchaseHistoryRow, build_purchase_history

__all__ = [
    "CashFlowRow",
    "CostCenterSummary",
    "PurchaseHistoryRow",
    "build_cash_flow",
    "build_purchase_history",
    "summarise_cost_centers",
]
