"""Mini README: Hierarchical trees for cost centers and products.

``store`` holds the generic forest and its operations, while
``cost_centers`` and ``products`` specialise it with their payloads,
selectability rules and demo seed data.
"""

from .cost_centers import CostCenterDetails, CostCenterTree
from .products import ProductDetails, ProductTree
from .store import DEFAULT_SEPARATOR, SelectableOption, TreeNode, TreeStore

__all__ = [
    "CostCenterDetails",
    "CostCenterTree",
    "DEFAULT_SEPARATOR",
    "ProductDetails",
    "ProductTree",
    "SelectableOption",
    "TreeNode",
    "TreeStore",
]
