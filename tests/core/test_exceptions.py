"""Tests for domain exceptions."""

from stocklens.core.exceptions import (
    CollectionCancelledError,
    CollectionError,
    ConfigurationError,
    PageFetchError,
    PaginationError,
    ProductNotFoundError,
    StockLensError,
    TransportError,
)


class TestStockLensError:
    """Tests for the base exception."""

    def test_default_code_is_class_name(self):
        error = ConfigurationError("missing endpoint")
        assert error.code == "ConfigurationError"
        assert error.details == {}
        assert str(error) == "missing endpoint"

    def test_to_dict(self):
        error = ProductNotFoundError(7)
        assert error.to_dict() == {
            "error": "PRODUCT_NOT_FOUND",
            "message": "Product not found: 7",
            "details": {"product_id": 7},
        }


class TestCollectionErrors:
    """Tests for collection failures."""

    def test_page_fetch_error(self):
        error = PageFetchError(3, "timeout", pages_fetched=2)
        assert isinstance(error, CollectionError)
        assert error.code == "PAGE_FETCH_FAILED"
        assert error.details == {"page": 3, "reason": "timeout", "pages_fetched": 2}

    def test_cancelled(self):
        error = CollectionCancelledError(4)
        assert isinstance(error, StockLensError)
        assert error.details["pages_fetched"] == 4
        assert "4 page(s)" in error.message

    def test_runaway(self):
        assert PaginationError(50).details == {"max_pages": 50}


class TestTransportError:
    """Tests for TransportError."""

    def test_status_code_recorded(self):
        error = TransportError("productById", "HTTP 502", status_code=502)
        assert error.code == "TRANSPORT_ERROR"
        assert error.details["status_code"] == 502
        assert error.message == "Backend error during productById: HTTP 502"
