"""Mini README: Entry point CLI for the sitebooks finance service.

This script exposes a Typer CLI that starts the FastAPI service, prints the
demo hierarchies, and exports a product purchase history to CSV. Settings
come from ``SITEBOOKS_*`` environment variables when options are omitted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from sitebooks.configuration import get_settings
from sitebooks.export import PURCHASE_HISTORY_COLUMNS, export_csv, purchase_history_filename
from sitebooks.logging_utils import configure_root_logger
from sitebooks.workspace import create_workspace

cli = typer.Typer(help="Serve and inspect the sitebooks finance workspace.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 wildcard, so point at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting sitebooks on {effective_host}:{effective_port}.\n"
        f"API docs at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "sitebooks.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production and settings.environment == "development",
    )


@cli.command()
def tree(
    kind: str = typer.Argument("cost-centers", help="Either 'cost-centers' or 'products'."),
) -> None:
    """Print a hierarchy with selectable nodes marked by an asterisk."""

    workspace = create_workspace()
    if kind not in {"cost-centers", "products"}:
        raise typer.BadParameter("Choose 'cost-centers' or 'products'.")
    store = workspace.cost_centers if kind == "cost-centers" else workspace.products
    for node, depth in store.walk():
        marker = "*" if store.is_selectable(node.payload) else " "
        unit = store.unit_for(node.payload)
        suffix = f" [{unit}]" if unit else ""
        typer.echo(f"{'  ' * depth}{marker} {node.name}{suffix}  ({node.node_id})")


@cli.command("export-purchase-history")
def export_purchase_history(
    product_id: str = typer.Argument(..., help="Identifier of a product with a unit."),
    directory: Optional[Path] = typer.Option(None, help="Target directory for the CSV."),
) -> None:
    """Write the purchase history of a product to CSV."""

    configure_root_logger(get_settings().log_level)
    workspace = create_workspace()
    node = workspace.products.find(product_id)
    if node is None:
        typer.echo(f"Unknown product {product_id}", err=True)
        raise typer.Exit(code=1)
    rows = workspace.purchase_history(product_id)
    path = export_csv(
        purchase_history_filename(node.name),
        rows,
        PURCHASE_HISTORY_COLUMNS,
        directory=directory,
    )
    typer.echo(f"Wrote {len(rows)} rows to {path}")


if __name__ == "__main__":
    cli()
