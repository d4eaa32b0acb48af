"""Mini README: Cost center forest.

Structure:
    * CostCenterDetails - payload flagging whether a node accepts postings.
    * CostCenterTree - ``TreeStore`` variant where launchable nodes are selectable.

Only launchable cost centers should receive expense line items; grouping
nodes such as "Construction Costs" exist to roll totals up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .store import TreeNode, TreeStore


@dataclass(slots=True)
class CostCenterDetails:
    """Variant payload for cost centers."""

    is_launchable: bool = True


def _node(
    node_id: str,
    name: str,
    parent_id: Optional[str],
    is_launchable: bool,
    children: Optional[List[TreeNode[CostCenterDetails]]] = None,
) -> TreeNode[CostCenterDetails]:
    return TreeNode(
        node_id=node_id,
        name=name,
        parent_id=parent_id,
        payload=CostCenterDetails(is_launchable=is_launchable),
        children=children or [],
    )


class CostCenterTree(TreeStore[CostCenterDetails]):
    """Hierarchy of cost centers that expense line items are booked against."""

    id_prefix = "cc"

    def is_selectable(self, payload: CostCenterDetails) -> bool:
        return payload.is_launchable

    def describe(self, payload: CostCenterDetails) -> Dict[str, Any]:
        return {"is_launchable": payload.is_launchable}

    def _build_demo_forest(self) -> List[TreeNode[CostCenterDetails]]:
        """Deterministic demo hierarchy for previews."""

        return [
            _node(
                "cc-g-a",
                "General & Administrative",
                None,
                False,
                [
                    _node("cc-sal", "Salaries", "cc-g-a", True),
                    _node("cc-esc", "Office Rent", "cc-g-a", True),
                ],
            ),
            _node(
                "cc-const",
                "Construction Costs",
                None,
                False,
                [
                    _node(
                        "cc-mat",
                        "Materials",
                        "cc-const",
                        False,
                        [
                            _node("cc-cim", "Cement", "cc-mat", True),
                            _node("cc-aco", "Steel", "cc-mat", True),
                        ],
                    ),
                    _node("cc-mo", "Labour", "cc-const", True),
                    _node("cc-equip", "Equipment Rental", "cc-const", True),
                ],
            ),
        ]

    def add_cost_center(
        self, name: str, parent_id: Optional[str] = None, *, is_launchable: bool = True
    ) -> TreeNode[CostCenterDetails]:
        """Create a cost center; new nodes accept postings unless told otherwise."""

        return self.insert(name, CostCenterDetails(is_launchable=is_launchable), parent_id)

    def rename_cost_center(
        self, node_id: str, name: str, is_launchable: bool
    ) -> TreeNode[CostCenterDetails]:
        return self.update(node_id, name, CostCenterDetails(is_launchable=is_launchable))
