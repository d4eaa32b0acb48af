"""Mini README: Product catalogue forest.

Structure:
    * ProductDetails - payload carrying the unit of measure.
    * ProductTree - ``TreeStore`` variant where nodes with a unit are products.

A blank unit marks a category; any other value (``m³``, ``sc``, ``un``) marks
a purchasable product that line items may reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .store import TreeNode, TreeStore


@dataclass(slots=True)
class ProductDetails:
    """Variant payload for products and product categories."""

    unit: str = ""

    def __post_init__(self) -> None:
        self.unit = (self.unit or "").strip()

    @property
    def is_category(self) -> bool:
        return not self.unit


def _node(
    node_id: str,
    name: str,
    unit: str,
    parent_id: Optional[str],
    children: Optional[List[TreeNode[ProductDetails]]] = None,
) -> TreeNode[ProductDetails]:
    return TreeNode(
        node_id=node_id,
        name=name,
        parent_id=parent_id,
        payload=ProductDetails(unit=unit),
        children=children or [],
    )


class ProductTree(TreeStore[ProductDetails]):
    """Hierarchy of product categories and purchasable products."""

    id_prefix = "prod"

    def is_selectable(self, payload: ProductDetails) -> bool:
        return not payload.is_category

    def describe(self, payload: ProductDetails) -> Dict[str, Any]:
        return {"unit": payload.unit, "is_category": payload.is_category}

    def unit_for(self, payload: ProductDetails) -> str:
        return payload.unit

    def _build_demo_forest(self) -> List[TreeNode[ProductDetails]]:
        """Deterministic demo catalogue mixing categories and root-level products."""

        return [
            _node(
                "prodcat-agreg",
                "Aggregates",
                "",
                None,
                [
                    _node("prod-areia", "Washed Medium Sand", "m³", "prodcat-agreg"),
                    _node("prod-brita1", "Crushed Stone No. 1", "m³", "prodcat-agreg"),
                ],
            ),
            _node(
                "prodcat-cimento",
                "Cement and Mortar",
                "",
                None,
                [
                    _node("prod-cimento-cpii", "CPII Cement (50kg bag)", "sc", "prodcat-cimento"),
                    _node("prod-arg-aciii", "ACIII Mortar (20kg bag)", "sc", "prodcat-cimento"),
                ],
            ),
            _node("prod-vergalhao10", "CA50 Rebar 10mm (12m bar)", "br", None),
            _node("prod-tijolo", "Six-Hole Ceramic Brick", "thousand", None),
        ]

    def add_product(
        self, name: str, unit: str = "", parent_id: Optional[str] = None
    ) -> TreeNode[ProductDetails]:
        """Create a product (non-empty unit) or a category (empty unit)."""

        return self.insert(name, ProductDetails(unit=unit), parent_id)

    def update_product(self, node_id: str, name: str, unit: str) -> TreeNode[ProductDetails]:
        return self.update(node_id, name, ProductDetails(unit=unit))

    def unit_of(self, node_id: Optional[str]) -> str:
        """Unit of a product, ``""`` for categories or unknown identifiers."""

        node = self.find(node_id)
        return node.payload.unit if node else ""
