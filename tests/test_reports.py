"""Mini README: Tests for the report projections and the workspace wiring.

Structure:
    * purchase history - filtering, labelling and newest-first ordering.
    * cost center summary - roll-up of expense totals through the tree.
    * cash flow - inflow/outflow split with running balances.
"""

from __future__ import annotations

import pytest

from sitebooks.configuration import SitebooksSettings
from sitebooks.workspace import FinanceWorkspace, create_workspace


@pytest.fixture()
def workspace() -> FinanceWorkspace:
    return create_workspace(SitebooksSettings(seed_demo_data=True))


def _expense(workspace: FinanceWorkspace, issue_date: str, supplier_id: str, items):
    return workspace.ledger.create_entry(
        "expense",
        {
            "project_id": "p1",
            "supplier_id": supplier_id,
            "issue_date": issue_date,
            "disbursement_date": issue_date,
            "description": f"Purchase {issue_date}",
            "cash_account_id": "ca1",
        },
        items,
    )


def test_purchase_history_lists_priced_lines_newest_first(workspace: FinanceWorkspace) -> None:
    """Only priced lines for the product appear, labelled with the full path."""

    older = _expense(
        workspace,
        "2024-02-01",
        "s1",
        [
            {"cost_center_id": "cc-mat", "product_id": "prod-areia", "quantity": 5, "unit_price": 80},
            {"cost_center_id": "cc-mat", "product_id": "prod-brita1", "quantity": 2, "unit_price": 90},
        ],
    )
    newer = _expense(
        workspace,
        "2024-04-01",
        "unknown-supplier",
        [
            {"cost_center_id": "cc-mat", "product_id": "prod-areia", "quantity": 3, "unit_price": 85},
            {"cost_center_id": "cc-mat", "product_id": "prod-areia", "amount": 40},
        ],
    )

    rows = workspace.purchase_history("prod-areia")

    assert [row.expense_id for row in rows] == [newer.entry_id, older.entry_id]
    assert rows[0].supplier_name == "N/A"
    assert rows[1].supplier_name == "Global Building Materials"
    assert rows[0].product_name == "Aggregates / Washed Medium Sand"
    assert rows[0].unit == "m³"
    assert rows[0].total_amount == pytest.approx(255.0)
    assert rows[1].row_id == f"{older.entry_id}-{older.line_items[0].item_id}"
    assert rows[0].as_dict()["expense_date"] == "2024-04-01"


def test_purchase_history_is_empty_for_categories_and_unknown_products(
    workspace: FinanceWorkspace,
) -> None:
    _expense(
        workspace,
        "2024-02-01",
        "s1",
        [{"cost_center_id": "cc-mat", "product_id": "prodcat-agreg", "quantity": 1, "unit_price": 1}],
    )
    assert workspace.purchase_history("prodcat-agreg") == []
    assert workspace.purchase_history("missing") == []


def test_cost_center_summary_rolls_expenses_up(workspace: FinanceWorkspace) -> None:
    _expense(
        workspace,
        "2024-02-01",
        "s1",
        [
            {"cost_center_id": "cc-cim", "amount": 300},
            {"cost_center_id": "cc-mo", "amount": 200},
            {"cost_center_id": "cc-sal", "amount": 50},
        ],
    )

    summary = {root.node_id: root for root in workspace.cost_center_summary()}
    construction = summary["cc-const"]
    materials = next(child for child in construction.children if child.node_id == "cc-mat")

    assert construction.total_expenses == pytest.approx(500)
    assert construction.direct_expenses == pytest.approx(0)
    assert materials.total_expenses == pytest.approx(300)
    assert summary["cc-g-a"].total_expenses == pytest.approx(50)
    assert construction.as_dict()["children"][0]["name"] == "Materials"


def test_cash_flow_orders_settlements_and_tracks_balance(workspace: FinanceWorkspace) -> None:
    """Expense payments reduce and revenue receipts increase the running balance."""

    ledger = workspace.ledger
    expense = _expense(workspace, "2024-02-01", "s1", [{"cost_center_id": "cc-mo", "amount": 400}])
    revenue = ledger.create_entry(
        "revenue",
        {
            "project_id": "p1",
            "customer_id": "c1",
            "issue_date": "2024-02-01",
            "receipt_date": "2024-03-01",
            "description": "Unit sale",
            "cash_account_id": "ca1",
        },
        [{"cost_center_id": "rc1", "amount": 1000}],
    )
    ledger.apply_settlement(
        {
            "entry_id": revenue.entry_id,
            "entry_category": "revenue",
            "settlement_date": "2024-03-05",
            "amount": 1000,
            "cash_account_id": "ca1",
        }
    )
    ledger.apply_settlement(
        {
            "entry_id": expense.entry_id,
            "entry_category": "expense",
            "settlement_date": "2024-02-10",
            "amount": 400,
            "cash_account_id": "ca2",
            "notes": "Paid in cash",
        }
    )

    rows = workspace.cash_flow()
    assert [row.related_entry_id for row in rows] == [expense.entry_id, revenue.entry_id]
    assert rows[0].outflow == pytest.approx(400)
    assert rows[0].description == "Paid in cash"
    assert rows[0].running_balance == pytest.approx(105000 - 400)
    assert rows[1].inflow == pytest.approx(1000)
    assert rows[1].running_balance == pytest.approx(105000 - 400 + 1000)

    petty_cash = workspace.cash_flow("ca2")
    assert len(petty_cash) == 1
    assert petty_cash[0].running_balance == pytest.approx(4600)


def test_workspace_without_demo_data_starts_empty() -> None:
    workspace = create_workspace(SitebooksSettings(seed_demo_data=False, path_separator=" > "))
    assert len(workspace.cost_centers) == 0
    assert len(workspace.suppliers) == 0
    root = workspace.cost_centers.add_cost_center("Site")
    child = workspace.cost_centers.add_cost_center("Fuel", root.node_id)
    assert workspace.cost_centers.path_to(child.node_id) == "Site > Fuel"
    snapshot = workspace.snapshot()
    assert snapshot["cost_centers"][0]["children"][0]["name"] == "Fuel"
    assert snapshot["expenses"] == []
