"""Mini README: Purchase history of a single product.

Structure:
    * PurchaseHistoryRow - one purchased line, labelled for tables and CSV.
    * build_purchase_history - joins expense line items with the product tree.

The projection is pure and recomputed from scratch on every call; nothing is
cached between filter changes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Dict, List

from ..directory import RecordDirectory, Supplier
from ..finance import EntryCategory, FinanceLedger
from ..hierarchy import ProductTree
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PurchaseHistoryRow:
    row_id: str
    expense_id: str
    expense_date: date
    supplier_name: str
    product_name: str
    quantity: float
    unit: str
    unit_price: float
    total_amount: float

    def as_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["expense_date"] = self.expense_date.isoformat()
        return payload


def build_purchase_history(
    product_id: str,
    ledger: FinanceLedger,
    products: ProductTree,
    suppliers: RecordDirectory[Supplier],
) -> List[PurchaseHistoryRow]:
    """Rows for every priced purchase of ``product_id``, newest first.

    Categories and unknown products produce an empty history.
    """

    node = products.find(product_id)
    if node is None or node.payload.is_category:
        LOGGER.debug("No purchase history for non-product %s", product_id)
        return []

    product_name = products.path_to(product_id)
    rows: List[PurchaseHistoryRow] = []
    for entry in ledger.list_entries(EntryCategory.EXPENSE):
        for item in entry.line_items:
            if item.product_id != product_id or not (item.quantity and item.unit_price):
                continue
            rows.append(
                PurchaseHistoryRow(
                    row_id=f"{entry.entry_id}-{item.item_id}",
                    expense_id=entry.entry_id,
                    expense_date=entry.issue_date,
                    supplier_name=suppliers.name_of(entry.supplier_id),
                    product_name=product_name,
                    quantity=item.quantity,
                    unit=node.payload.unit,
                    unit_price=item.unit_price,
                    total_amount=item.quantity * item.unit_price,
                )
            )
    rows.sort(key=lambda row: row.expense_date, reverse=True)
    LOGGER.debug("Purchase history for %s has %s rows", product_id, len(rows))
    return rows
