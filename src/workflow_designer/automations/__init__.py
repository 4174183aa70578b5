"""Automation actions directory and its cache."""
from .models import AutomationAction
from .client import AutomationsClient
from .catalog import AutomationCatalog, CatalogStatus

__all__ = [
    "AutomationAction",
    "AutomationCatalog",
    "AutomationsClient",
    "CatalogStatus",
]
