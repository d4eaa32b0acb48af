"""Mini README: Interactive interfaces for sitebooks.

Exports the FastAPI application factory that serves the workspace as a JSON
service. The Typer CLI in ``main_finance_centre.py`` launches it.
"""

from .web_app import create_application

__all__ = ["create_application"]
