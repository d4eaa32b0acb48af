"""Mini README: Core package initializer for sitebooks.

sitebooks tracks construction project finances in memory: cost center and
product hierarchies, master data, expense and revenue entries, settlements
and the reports built on them. The package root re-exports the workspace
factory and logging helper so callers rarely need deeper imports.
"""

from .logging_utils import get_logger
from .workspace import FinanceWorkspace, create_workspace

__all__ = ["FinanceWorkspace", "create_workspace", "get_logger"]
