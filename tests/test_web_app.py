"""Mini README: Tests exercising the JSON service end to end.

Each test builds a fresh demo workspace and drives it through
``fastapi.testclient.TestClient`` so routing, validation and error
translation are covered together.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from sitebooks.configuration import SitebooksSettings
from sitebooks.interface import create_application
from sitebooks.workspace import create_workspace


@pytest.fixture()
def client() -> TestClient:
    workspace = create_workspace(SitebooksSettings(seed_demo_data=True))
    return TestClient(create_application(workspace))


def test_cost_center_crud_and_errors(client: TestClient) -> None:
    """Missing parents map to 404 and blank names to 400."""

    response = client.post("/cost-centers", data={"name": "Sand", "parent_id": "cc-mat"})
    assert response.status_code == 201
    node_id = response.json()["id"]
    assert client.get(f"/cost-centers/{node_id}/path").json()["path"] == (
        "Construction Costs / Materials / Sand"
    )

    assert client.post("/cost-centers", data={"name": "X", "parent_id": "nope"}).status_code == 404
    assert client.post("/cost-centers", data={"name": "   "}).status_code == 400

    response = client.put(f"/cost-centers/{node_id}", data={"name": "Fine Sand", "is_launchable": "false"})
    assert response.json()["is_launchable"] is False

    removed = client.delete("/cost-centers/cc-mat").json()["removed"]
    assert node_id in removed
    assert client.delete("/cost-centers/cc-mat").status_code == 404


def test_selectable_products_are_sorted(client: TestClient) -> None:
    client.post("/products", data={"name": "Gravel", "unit": "m³", "parent_id": "prodcat-agreg"})
    options = client.get("/products/selectable").json()["options"]
    labels = [option["label"] for option in options]
    assert labels == sorted(labels)
    assert "Aggregates / Gravel" in labels


def test_entry_settlement_and_report_flow(client: TestClient) -> None:
    """An expense is created, partially then fully paid, then reported."""

    response = client.post(
        "/entries/expense",
        json={
            "project_id": "p1",
            "supplier_id": "s1",
            "issue_date": "2024-05-01",
            "disbursement_date": "2024-05-30",
            "description": "Sand delivery",
            "cash_account_id": "ca1",
            "transaction_type": "product",
            "line_items": [
                {"cost_center_id": "cc-mat", "product_id": "prod-areia", "quantity": 10, "unit_price": 100}
            ],
        },
    )
    assert response.status_code == 201
    entry = response.json()
    assert entry["total_amount"] == pytest.approx(1000)
    assert entry["status"] == "unpaid"

    settlement = {
        "entry_id": entry["entry_id"],
        "entry_category": "expense",
        "settlement_date": "2024-06-01",
        "amount": 400,
        "cash_account_id": "ca1",
    }
    response = client.post("/settlements", json=settlement)
    assert response.json()["entry"]["status"] == "partially_paid"
    response = client.post("/settlements", json={**settlement, "amount": 600})
    assert response.json()["entry"]["status"] == "paid"
    assert client.post("/settlements", json={**settlement, "amount": 0}).status_code == 400
    assert client.post("/settlements", json={**settlement, "entry_id": "x"}).status_code == 404

    history = client.get("/reports/purchase-history", params={"product_id": "prod-areia"}).json()
    assert history["product_path"] == "Aggregates / Washed Medium Sand"
    assert history["rows"][0]["total_amount"] == pytest.approx(1000)

    csv_response = client.get("/reports/purchase-history.csv", params={"product_id": "prod-areia"})
    assert csv_response.status_code == 200
    assert csv_response.text.splitlines()[0].startswith("Invoice date")

    cash_flow = client.get("/reports/cash-flow", params={"cash_account_id": "ca1"}).json()["rows"]
    assert cash_flow[-1]["running_balance"] == pytest.approx(99000)


def test_update_entry_recomputes_total(client: TestClient) -> None:
    created = client.post(
        "/entries/revenue",
        json={
            "project_id": "p1",
            "customer_id": "c1",
            "issue_date": "2024-05-01",
            "receipt_date": "2024-05-30",
            "description": "Unit sale",
            "cash_account_id": "ca1",
            "line_items": [{"cost_center_id": "rc1", "amount": 250}],
        },
    ).json()
    response = client.put(
        f"/entries/revenue/{created['entry_id']}",
        json={"line_items": [{"cost_center_id": "rc1", "amount": 300}]},
    )
    assert response.status_code == 200
    assert response.json()["total_amount"] == pytest.approx(300)
    assert response.json()["status"] == "unreceived"

    cleared = client.put(f"/entries/revenue/{created['entry_id']}", json={"project_id": None})
    assert cleared.status_code == 400
    entries = client.get("/entries/revenue").json()["entries"]
    assert next(e for e in entries if e["entry_id"] == created["entry_id"])["project_id"] == "p1"


def test_directory_routes(client: TestClient) -> None:
    response = client.post("/directory/suppliers", json={"name": "Rebar Depot"})
    assert response.status_code == 201
    names = [record["name"] for record in client.get("/directory/suppliers").json()["records"]]
    assert "Rebar Depot" in names
    assert client.get("/directory/unknown").status_code == 400
    assert client.delete("/directory/projects/p404").status_code == 404
