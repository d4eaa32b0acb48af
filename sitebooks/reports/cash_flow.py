"""Mini README: Cash flow statement derived from the settlement log.

Structure:
    * CashFlowRow - one settlement expressed as inflow or outflow.
    * build_cash_flow - orders settlements by date and keeps a running balance.

Revenue receipts are inflows and expense payments are outflows. The opening
balance is the selected account's balance, or the sum over all accounts when
no account filter is given.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from ..directory import CashAccount, RecordDirectory
from ..finance import EntryCategory, FinanceLedger
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CashFlowRow:
    row_id: str
    settlement_date: date
    description: str
    inflow: float
    outflow: float
    running_balance: float
    related_entry_id: str

    def as_dict(self) -> Dict[str, object]:
        return {
            "row_id": self.row_id,
            "settlement_date": self.settlement_date.isoformat(),
            "description": self.description,
            "inflow": self.inflow,
            "outflow": self.outflow,
            "running_balance": self.running_balance,
            "related_entry_id": self.related_entry_id,
        }


def build_cash_flow(
    ledger: FinanceLedger,
    cash_accounts: RecordDirectory[CashAccount],
    cash_account_id: Optional[str] = None,
) -> List[CashFlowRow]:
    """Settlements in date order with inflow, outflow and running balance."""

    if cash_account_id is None:
        balance = sum(account.balance for account in cash_accounts.list_records())
    else:
        balance = cash_accounts.get(cash_account_id).balance

    settlements = [
        settlement
        for settlement in ledger.list_settlements()
        if cash_account_id is None or settlement.cash_account_id == cash_account_id
    ]
    # Stable sort keeps application order for settlements on the same day.
    settlements.sort(key=lambda settlement: settlement.settlement_date)

    rows: List[CashFlowRow] = []
    for settlement in settlements:
        entry = ledger.get_entry(settlement.entry_category, settlement.entry_id)
        is_inflow = settlement.entry_category is EntryCategory.REVENUE
        balance += settlement.amount if is_inflow else -settlement.amount
        rows.append(
            CashFlowRow(
                row_id=settlement.settlement_id,
                settlement_date=settlement.settlement_date,
                description=settlement.notes or entry.description,
                inflow=settlement.amount if is_inflow else 0.0,
                outflow=0.0 if is_inflow else settlement.amount,
                running_balance=balance,
                related_entry_id=entry.entry_id,
            )
        )
    LOGGER.debug("Cash flow for %s has %s rows", cash_account_id or "all accounts", len(rows))
    return rows
