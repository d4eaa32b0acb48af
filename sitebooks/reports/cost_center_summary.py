"""Mini README: Expense totals rolled up through the cost center hierarchy."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from ..finance import EntryCategory, FinanceLedger
from ..hierarchy import CostCenterDetails, CostCenterTree, TreeNode


@dataclass(slots=True)
class CostCenterSummary:
    node_id: str
    name: str
    is_launchable: bool
    direct_expenses: float
    total_expenses: float
    children: List["CostCenterSummary"] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.node_id,
            "name": self.name,
            "is_launchable": self.is_launchable,
            "direct_expenses": self.direct_expenses,
            "total_expenses": self.total_expenses,
            "children": [child.as_dict() for child in self.children],
        }


def summarise_cost_centers(cost_centers: CostCenterTree, ledger: FinanceLedger) -> List[CostCenterSummary]:
    """Mirror the forest with each node's own and rolled-up expense totals."""

    booked: Dict[str, float] = defaultdict(float)
    for entry in ledger.list_entries(EntryCategory.EXPENSE):
        for item in entry.line_items:
            booked[item.cost_center_id] += item.amount

    def summarise(node: TreeNode[CostCenterDetails]) -> CostCenterSummary:
        children = [summarise(child) for child in node.children]
        direct = booked.get(node.node_id, 0.0)
        return CostCenterSummary(
            node_id=node.node_id,
            name=node.name,
            is_launchable=node.payload.is_launchable,
            direct_expenses=direct,
            total_expenses=direct + sum(child.total_expenses for child in children),
            children=children,
        )

    return [summarise(root) for root in cost_centers.roots]
