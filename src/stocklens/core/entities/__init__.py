"""Core domain entities."""

from stocklens.core.entities.financials import ProductFinancials, StockStatus
from stocklens.core.entities.line_item import LineItem, Order, OrderLine
from stocklens.core.entities.stock_movement import (
    INBOUND_MOVEMENT_TYPES,
    OUTBOUND_MOVEMENT_TYPES,
    StockMovement,
)

__all__ = [
    # Line item entities
    "LineItem",
    "Order",
    "OrderLine",
    # Stock movement entities
    "StockMovement",
    "INBOUND_MOVEMENT_TYPES",
    "OUTBOUND_MOVEMENT_TYPES",
    # Financials
    "ProductFinancials",
    "StockStatus",
]
