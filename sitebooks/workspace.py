"""Mini README: The explicitly owned store behind every sitebooks surface.

Structure:
    * FinanceWorkspace - bundles the cost center and product trees, the master
      data directories and the ledger, and exposes the report projections.
    * create_workspace - builds a demo-seeded or empty workspace from settings.

The web interface and CLI receive a workspace instead of reaching for global
state. Readers get snapshots or report rows; mutations go through the owned
trees, directories and ledger.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .configuration import SitebooksSettings, get_settings
from .directory import (
    CashAccount,
    Customer,
    Project,
    RecordDirectory,
    RevenueCategory,
    Supplier,
    demo_cash_accounts,
    demo_customers,
    demo_projects,
    demo_revenue_categories,
    demo_suppliers,
)
from .errors import ValidationError
from .finance import FinanceLedger
from .hierarchy import CostCenterTree, ProductTree
from .logging_utils import get_logger
from .reports import (
    CashFlowRow,
    CostCenterSummary,
    PurchaseHistoryRow,
    build_cash_flow,
    build_purchase_history,
    summarise_cost_centers,
)

LOGGER = get_logger(__name__)


class FinanceWorkspace:
    """Own all in-memory state for one session."""

    def __init__(
        self,
        *,
        cost_centers: CostCenterTree,
        products: ProductTree,
        projects: RecordDirectory[Project],
        suppliers: RecordDirectory[Supplier],
        customers: RecordDirectory[Customer],
        cash_accounts: RecordDirectory[CashAccount],
        revenue_categories: RecordDirectory[RevenueCategory],
        ledger: Optional[FinanceLedger] = None,
    ) -> None:
        self.cost_centers = cost_centers
        self.products = products
        self.projects = projects
        self.suppliers = suppliers
        self.customers = customers
        self.cash_accounts = cash_accounts
        self.revenue_categories = revenue_categories
        self.ledger = ledger or FinanceLedger()

    def directory(self, kind: str) -> RecordDirectory:
        """Look up a master data directory by its plural name."""

        directories = {
            "projects": self.projects,
            "suppliers": self.suppliers,
            "customers": self.customers,
            "cash-accounts": self.cash_accounts,
            "revenue-categories": self.revenue_categories,
        }
        try:
            return directories[kind.replace("_", "-")]
        except KeyError as error:
            raise ValidationError(f"Unknown directory '{kind}'") from error

    def purchase_history(self, product_id: str) -> List[PurchaseHistoryRow]:
        return build_purchase_history(product_id, self.ledger, self.products, self.suppliers)

    def cost_center_summary(self) -> List[CostCenterSummary]:
        return summarise_cost_centers(self.cost_centers, self.ledger)

    def cash_flow(self, cash_account_id: Optional[str] = None) -> List[CashFlowRow]:
        return build_cash_flow(self.ledger, self.cash_accounts, cash_account_id)

    def snapshot(self) -> Dict[str, object]:
        """Read-only export of the whole workspace."""

        return {
            "cost_centers": self.cost_centers.as_dict(),
            "products": self.products.as_dict(),
            "projects": self.projects.export_snapshot(),
            "suppliers": self.suppliers.export_snapshot(),
            "customers": self.customers.export_snapshot(),
            "cash_accounts": self.cash_accounts.export_snapshot(),
            "revenue_categories": self.revenue_categories.export_snapshot(),
            **self.ledger.export_snapshot(),
        }


def create_workspace(settings: Optional[SitebooksSettings] = None) -> FinanceWorkspace:
    """Build a workspace, seeded with demo data when the settings ask for it."""

    settings = settings or get_settings()
    seed = settings.seed_demo_data
    empty = None if seed else []
    workspace = FinanceWorkspace(
        cost_centers=CostCenterTree(empty, separator=settings.path_separator),
        products=ProductTree(empty, separator=settings.path_separator),
        projects=RecordDirectory(Project, "p", demo_projects() if seed else None),
        suppliers=RecordDirectory(Supplier, "s", demo_suppliers() if seed else None),
        customers=RecordDirectory(Customer, "c", demo_customers() if seed else None),
        cash_accounts=RecordDirectory(CashAccount, "ca", demo_cash_accounts() if seed else None),
        revenue_categories=RecordDirectory(
            RevenueCategory, "rc", demo_revenue_categories() if seed else None
        ),
    )
    LOGGER.info(
        "Workspace ready (demo data %s, %s cost centers, %s products)",
        "on" if seed else "off",
        len(workspace.cost_centers),
        len(workspace.products),
    )
    return workspace
