"""
Abstract interface for paged record sources.

The transport layer (GraphQL, REST, fixtures) implements IPageSource; the
paginated collector only sees a ``FetchPage`` callable.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from stocklens.core.normalization import to_int


class Page(BaseModel):
    """One page of records plus the pagination meta reported by the source."""

    items: list[Any] = Field(default_factory=list)
    current_page: int = Field(default=1, description="Page number as reported by the source")
    last_page: int = Field(default=1, description="Last page number as reported by the source")
    per_page: int | None = None
    total: int | None = None

    @property
    def has_more(self) -> bool:
        return self.current_page < self.last_page

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None, page: int = 1) -> "Page":
        """
        Build a Page from a ``{"data": [...], "meta": {...}}`` payload.

        Missing meta fields default to the requested page, which makes the
        collector stop after it.
        """
        payload = payload or {}
        meta = payload.get("meta") or {}
        items = payload.get("data") or []
        current = to_int(meta.get("current_page")) or page
        return cls(
            items=list(items),
            current_page=current,
            last_page=to_int(meta.get("last_page")) or current,
            per_page=to_int(meta["per_page"]) if meta.get("per_page") is not None else None,
            total=to_int(meta["total"]) if meta.get("total") is not None else None,
        )


# fetch_page(page, per_page, **params) -> Page
FetchPage = Callable[..., Awaitable[Page]]


class IPageSource(ABC):
    """Interface for fetching one page of per-product records."""

    @abstractmethod
    async def fetch_sale_items(
        self, product_id: int | str, page: int, per_page: int
    ) -> Page:
        """
        Fetch one page of sale item records for a product.

        Raises:
            StockLensError: If the backend request fails.
        """

    @abstractmethod
    async def fetch_purchase_items(
        self, product_id: int | str, page: int, per_page: int
    ) -> Page:
        """Fetch one page of purchase item records for a product."""

    @abstractmethod
    async def fetch_stock_movements(
        self, product_id: int | str, page: int, per_page: int
    ) -> Page:
        """Fetch one page of stock movement records for a product."""
