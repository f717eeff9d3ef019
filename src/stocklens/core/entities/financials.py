"""Derived financial metrics for a product."""

from enum import Enum

from pydantic import BaseModel


class StockStatus(str, Enum):
    """Stock level buckets shown next to product metrics."""

    OUT = "out"
    LOW = "low"
    GOOD = "good"

    @property
    def label(self) -> str:
        return _STOCK_STATUS_LABELS[self]


_STOCK_STATUS_LABELS = {
    StockStatus.OUT: "Out of Stock",
    StockStatus.LOW: "Low Stock",
    StockStatus.GOOD: "In Stock",
}


class ProductFinancials(BaseModel):
    """
    Reconciled financial metrics for one product.

    A pure view recomputed from a snapshot of line items; never persisted.
    """

    product_id: int | str | None = None
    total_revenue: float = 0.0
    total_cost: float = 0.0
    profit: float = 0.0  # total_revenue - total_cost
    profit_margin_percent: float = 0.0  # 0 when revenue is 0
    units_sold: int = 0
    units_purchased: int = 0
    sales_velocity_per_month: int = 0
    turnover_rate: float = 0.0
    restock_needed: float = 0.0  # units to cover one month of sales
    average_unit_cost: float = 0.0
    current_stock: float = 0.0
    stock_status: StockStatus = StockStatus.OUT
    days_in_stock: int | None = None  # backend-supplied passthrough
