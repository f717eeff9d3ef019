"""
Domain exceptions for stocklens.

Malformed numeric input never raises; these cover collection, transport
and configuration failures.
"""

from typing import Any


class StockLensError(Exception):
    """Base exception for all stocklens errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Collection Exceptions
class CollectionError(StockLensError):
    """Base exception for paginated collection."""

    pass


class PageFetchError(CollectionError):
    """A single page fetch failed; the whole collection is aborted."""

    def __init__(self, page: int, reason: str, pages_fetched: int = 0):
        super().__init__(
            f"Failed to fetch page {page}: {reason}",
            code="PAGE_FETCH_FAILED",
            details={"page": page, "reason": reason, "pages_fetched": pages_fetched},
        )


class CollectionCancelledError(CollectionError):
    """Collection was cancelled by the caller between page fetches."""

    def __init__(self, pages_fetched: int):
        super().__init__(
            f"Collection cancelled after {pages_fetched} page(s)",
            code="COLLECTION_CANCELLED",
            details={"pages_fetched": pages_fetched},
        )


class PaginationError(CollectionError):
    """Page source never reported its last page within the page limit."""

    def __init__(self, max_pages: int):
        super().__init__(
            f"Page source did not terminate within {max_pages} pages",
            code="PAGINATION_RUNAWAY",
            details={"max_pages": max_pages},
        )


# Transport Exceptions
class TransportError(StockLensError):
    """Backend request failed or returned an error payload."""

    def __init__(self, operation: str, reason: str, status_code: int | None = None):
        super().__init__(
            f"Backend error during {operation}: {reason}",
            code="TRANSPORT_ERROR",
            details={
                "operation": operation,
                "reason": reason,
                "status_code": status_code,
            },
        )


class ProductNotFoundError(StockLensError):
    """Product not found on the backend."""

    def __init__(self, product_id: int | str):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class ConfigurationError(StockLensError):
    """Configuration error."""

    pass
