"""Pytest configuration and fixtures."""

from collections.abc import Generator

import pytest

from stocklens.config import reset_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Rebuild settings per test so env overrides do not leak."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def sale_record() -> dict:
    """Sale item record as returned by paginatedSaleItemsByProduct."""
    return {
        "id": 11,
        "quantity": 2,
        "price": "20.00",
        "created_at": "2025-01-10T08:00:00Z",
        "product": {"id": 7},
        "sale": {
            "id": 101,
            "customer_name": "Acme Retail",
            "tax": 10,
            "discount": 5,
            "total_amount": 90,
            "sale_date": "2025-01-15",
            "items": [
                {"id": 11, "quantity": 2, "price": 20},
                {"id": 12, "quantity": 3, "price": 20},
            ],
        },
    }


@pytest.fixture
def purchase_record() -> dict:
    """Purchase item record as returned by paginatedPurchaseItemsByProduct."""
    return {
        "id": 21,
        "quantity": 2,
        "price": 50,
        "created_at": "2025-01-02T09:30:00",
        "product": {"id": 7},
        "purchase": {
            "id": 201,
            "total_amount": None,
            "purchase_date": "2025-01-03",
            "tax": 10,
            "discount": 5,
            "supplier": {"name": "Northwind Supply"},
        },
    }


@pytest.fixture
def movement_record() -> dict:
    """Stock movement record as returned by paginatedStockMovementsByProduct."""
    return {
        "id": 31,
        "type": "sale",
        "quantity": 4,
        "movement_date": "2025-01-15T10:00:00",
        "reason": "Sale #101",
        "user_name": "jdoe",
        "product": {"id": 7},
    }
