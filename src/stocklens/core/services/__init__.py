"""
Core business logic services.

Layer-pure services that depend only on:
- stocklens/core/entities/*
- stocklens/core/interfaces/*
- stocklens/core/exceptions.py

NO infrastructure imports. Page sources are injected by the caller.
"""

from stocklens.core.services.metrics_aggregator import (
    MetricsAggregator,
    compute_average_unit_cost,
    compute_cost,
    compute_financials_by_product,
    compute_product_financials,
    compute_restock_needed,
    compute_revenue,
    compute_velocity,
)
from stocklens.core.services.paginated_collector import (
    PaginatedCollector,
    collect_all_pages,
)
from stocklens.core.services.report_rows import (
    MovementRow,
    PurchaseRow,
    RowTotals,
    SaleRow,
    build_movement_rows,
    build_purchase_rows,
    build_sale_rows,
    summarize_rows,
)

__all__ = [
    # Metrics
    "MetricsAggregator",
    "compute_revenue",
    "compute_cost",
    "compute_velocity",
    "compute_restock_needed",
    "compute_average_unit_cost",
    "compute_product_financials",
    "compute_financials_by_product",
    # Pagination
    "PaginatedCollector",
    "collect_all_pages",
    # Report rows
    "SaleRow",
    "PurchaseRow",
    "MovementRow",
    "RowTotals",
    "build_sale_rows",
    "build_purchase_rows",
    "build_movement_rows",
    "summarize_rows",
]
