"""Core interfaces (ports) for dependency injection."""

from stocklens.core.interfaces.page_source import FetchPage, IPageSource, Page
from stocklens.core.interfaces.product_source import IProductSource, ProductSnapshot

__all__ = [
    # Page source interfaces
    "IPageSource",
    "FetchPage",
    "Page",
    # Product source interfaces
    "IProductSource",
    "ProductSnapshot",
]
