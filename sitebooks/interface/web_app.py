"""Mini README: FastAPI-powered JSON service for sitebooks.

Structure:
    * create_application - application factory wiring routes to a workspace.
    * Request models - pydantic bodies for entries, line items and settlements.
    * _translate_errors - maps core errors onto HTTP status codes.

Tree routes accept form fields; ledger routes accept JSON bodies. Every
response is a JSON snapshot produced by the core, except the purchase
history CSV download.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterator, List, Optional

from fastapi import Body, FastAPI, Form, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from ..errors import NotFoundError, ValidationError
from ..export import PURCHASE_HISTORY_COLUMNS, purchase_history_filename, rows_to_csv
from ..finance import EntryCategory
from ..logging_utils import get_logger
from ..workspace import FinanceWorkspace, create_workspace

LOGGER = get_logger(__name__)


class LineItemPayload(BaseModel):
    item_id: Optional[str] = None
    description: str = ""
    cost_center_id: str
    amount: Optional[float] = None
    product_id: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None


class EntryPayload(BaseModel):
    """Fields shared by expense and revenue entries plus the variant ones."""

    entry_type: str = "financial"
    invoice_number: Optional[str] = None
    project_id: str
    issue_date: date
    description: str
    cash_account_id: str
    supplier_id: Optional[str] = None
    disbursement_date: Optional[date] = None
    transaction_type: Optional[str] = None
    customer_id: Optional[str] = None
    receipt_date: Optional[date] = None
    line_items: List[LineItemPayload]


class EntryUpdatePayload(BaseModel):
    entry_type: Optional[str] = None
    invoice_number: Optional[str] = None
    project_id: Optional[str] = None
    issue_date: Optional[date] = None
    description: Optional[str] = None
    cash_account_id: Optional[str] = None
    supplier_id: Optional[str] = None
    disbursement_date: Optional[date] = None
    transaction_type: Optional[str] = None
    customer_id: Optional[str] = None
    receipt_date: Optional[date] = None
    line_items: Optional[List[LineItemPayload]] = None


class SettlementPayload(BaseModel):
    entry_id: str
    entry_category: EntryCategory
    settlement_date: date
    amount: float
    cash_account_id: str
    notes: Optional[str] = None


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Surface missing identifiers as 404 and rejected input as 400."""

    try:
        yield
    except NotFoundError as error:
        raise HTTPException(status_code=404, detail=str(error)) from error
    except ValidationError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error


def create_application(workspace: Optional[FinanceWorkspace] = None) -> FastAPI:
    """Create the FastAPI application bound to a single workspace."""

    app = FastAPI(title="Sitebooks Finance Service", version="0.1.0")
    workspace = workspace or create_workspace()
    cost_centers = workspace.cost_centers
    products = workspace.products
    ledger = workspace.ledger

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "cost_centers": len(cost_centers),
                "products": len(products),
                "entries": len(ledger.list_entries()),
            }
        )

    # Cost centers -------------------------------------------------------

    @app.get("/cost-centers")
    async def list_cost_centers() -> JSONResponse:
        return JSONResponse({"revision": cost_centers.revision, "nodes": cost_centers.as_dict()})

    @app.get("/cost-centers/selectable")
    async def selectable_cost_centers() -> JSONResponse:
        options = cost_centers.list_selectable()
        return JSONResponse({"options": [{"id": o.node_id, "label": o.full_path} for o in options]})

    @app.get("/cost-centers/summary")
    async def cost_center_summary() -> JSONResponse:
        return JSONResponse({"summary": [node.as_dict() for node in workspace.cost_center_summary()]})

    @app.post("/cost-centers")
    async def add_cost_center(
        name: str = Form(...),
        parent_id: Optional[str] = Form(None),
        is_launchable: bool = Form(True),
    ) -> JSONResponse:
        """Create a root or child cost center."""

        with _translate_errors():
            node = cost_centers.add_cost_center(name, parent_id or None, is_launchable=is_launchable)
        return JSONResponse(node.as_dict(cost_centers.describe), status_code=201)

    @app.put("/cost-centers/{node_id}")
    async def update_cost_center(
        node_id: str,
        name: str = Form(...),
        is_launchable: bool = Form(...),
    ) -> JSONResponse:
        with _translate_errors():
            node = cost_centers.rename_cost_center(node_id, name, is_launchable)
        return JSONResponse(node.as_dict(cost_centers.describe))

    @app.delete("/cost-centers/{node_id}")
    async def delete_cost_center(node_id: str) -> JSONResponse:
        with _translate_errors():
            removed = cost_centers.delete(node_id)
        return JSONResponse({"removed": removed})

    @app.get("/cost-centers/{node_id}/path")
    async def cost_center_path(node_id: str) -> JSONResponse:
        return JSONResponse({"id": node_id, "path": cost_centers.path_to(node_id)})

    # Products -----------------------------------------------------------

    @app.get("/products")
    async def list_products() -> JSONResponse:
        return JSONResponse({"revision": products.revision, "nodes": products.as_dict()})

    @app.get("/products/selectable")
    async def selectable_products() -> JSONResponse:
        options = products.list_selectable()
        return JSONResponse(
            {"options": [{"id": o.node_id, "label": o.full_path, "unit": o.unit} for o in options]}
        )

    @app.post("/products")
    async def add_product(
        name: str = Form(...),
        unit: str = Form(""),
        parent_id: Optional[str] = Form(None),
    ) -> JSONResponse:
        """Create a product, or a category when the unit is blank."""

        with _translate_errors():
            node = products.add_product(name, unit, parent_id or None)
        return JSONResponse(node.as_dict(products.describe), status_code=201)

    @app.put("/products/{node_id}")
    async def update_product(
        node_id: str,
        name: str = Form(...),
        unit: str = Form(""),
    ) -> JSONResponse:
        with _translate_errors():
            node = products.update_product(node_id, name, unit)
        return JSONResponse(node.as_dict(products.describe))

    @app.delete("/products/{node_id}")
    async def delete_product(node_id: str) -> JSONResponse:
        with _translate_errors():
            removed = products.delete(node_id)
        return JSONResponse({"removed": removed})

    @app.get("/products/{node_id}/path")
    async def product_path(node_id: str) -> JSONResponse:
        return JSONResponse({"id": node_id, "path": products.path_to(node_id)})

    # Master data --------------------------------------------------------

    @app.get("/directory/{kind}")
    async def list_records(kind: str) -> JSONResponse:
        with _translate_errors():
            directory = workspace.directory(kind)
        return JSONResponse({"records": directory.export_snapshot()})

    @app.post("/directory/{kind}")
    async def add_record(kind: str, payload: Dict[str, Any] = Body(...)) -> JSONResponse:
        with _translate_errors():
            record = workspace.directory(kind).add(**payload)
        LOGGER.debug("Directory %s gained record %s", kind, record.record_id)
        return JSONResponse({"record_id": record.record_id, "name": record.name}, status_code=201)

    @app.delete("/directory/{kind}/{record_id}")
    async def delete_record(kind: str, record_id: str) -> JSONResponse:
        with _translate_errors():
            record = workspace.directory(kind).delete(record_id)
        return JSONResponse({"record_id": record.record_id})

    # Ledger -------------------------------------------------------------

    @app.get("/entries/{category}")
    async def list_entries(category: EntryCategory) -> JSONResponse:
        return JSONResponse({"entries": [entry.as_dict() for entry in ledger.list_entries(category)]})

    @app.post("/entries/{category}")
    async def create_entry(category: EntryCategory, payload: EntryPayload) -> JSONResponse:
        fields = payload.model_dump(exclude_none=True, exclude={"line_items"})
        items = [item.model_dump(exclude_none=True) for item in payload.line_items]
        with _translate_errors():
            entry = ledger.create_entry(category, fields, items)
        return JSONResponse(entry.as_dict(), status_code=201)

    @app.put("/entries/{category}/{entry_id}")
    async def update_entry(
        category: EntryCategory, entry_id: str, payload: EntryUpdatePayload
    ) -> JSONResponse:
        changes = payload.model_dump(exclude_unset=True, exclude={"line_items"})
        if payload.line_items is not None:
            changes["line_items"] = [item.model_dump(exclude_none=True) for item in payload.line_items]
        with _translate_errors():
            entry = ledger.update_entry(category, entry_id, changes)
        return JSONResponse(entry.as_dict())

    @app.get("/settlements")
    async def list_settlements(entry_id: Optional[str] = None) -> JSONResponse:
        settlements = ledger.list_settlements(entry_id)
        return JSONResponse({"settlements": [settlement.as_dict() for settlement in settlements]})

    @app.post("/settlements")
    async def apply_settlement(payload: SettlementPayload) -> JSONResponse:
        """Record a payment or receipt and return the refreshed entry."""

        with _translate_errors():
            settlement = ledger.apply_settlement(payload.model_dump())
            entry = ledger.get_entry(settlement.entry_category, settlement.entry_id)
        return JSONResponse(
            {"settlement": settlement.as_dict(), "entry": entry.as_dict()}, status_code=201
        )

    # Reports ------------------------------------------------------------

    @app.get("/reports/purchase-history")
    async def purchase_history(product_id: str) -> JSONResponse:
        rows = workspace.purchase_history(product_id)
        return JSONResponse(
            {
                "product_id": product_id,
                "product_path": products.path_to(product_id),
                "rows": [row.as_dict() for row in rows],
            }
        )

    @app.get("/reports/purchase-history.csv")
    async def purchase_history_csv(product_id: str) -> PlainTextResponse:
        node = products.find(product_id)
        if node is None:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
        content = rows_to_csv(workspace.purchase_history(product_id), PURCHASE_HISTORY_COLUMNS)
        # Header values must stay latin-1 encodable.
        filename = f"{purchase_history_filename(node.name)}.csv".encode("ascii", "ignore").decode()
        LOGGER.info("Serving purchase history CSV for %s", product_id)
        return PlainTextResponse(
            content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/reports/cash-flow")
    async def cash_flow(cash_account_id: Optional[str] = None) -> JSONResponse:
        with _translate_errors():
            rows = workspace.cash_flow(cash_account_id)
        return JSONResponse({"rows": [row.as_dict() for row in rows]})

    return app
