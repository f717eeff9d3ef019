"""
Row-level reporting structures for spreadsheet and CSV export.

Rows use the same allocation rules as the metrics aggregator, so summing
``line_total`` over sale rows gives total revenue and over purchase rows
gives total cost (except for zero-subtotal orders, whose rows fall back to
item subtotals).
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from pydantic import BaseModel

from stocklens.core.entities.line_item import LineItem
from stocklens.core.entities.stock_movement import StockMovement
from stocklens.core.services.metrics_aggregator import allocate_cost, item_revenue

WALK_IN_CUSTOMER = "Walk-in Customer"
UNKNOWN_SUPPLIER = "Unknown Supplier"
SYSTEM_USER = "System"
UNKNOWN_SALESPERSON = "N/A"
DEFAULT_WAREHOUSE = "Default"


class ReportRow(BaseModel):
    """Fields shared by sale and purchase rows."""

    item_id: int | str | None = None
    order_id: int | str | None = None
    product_id: int | str | None = None
    date: datetime | None = None
    counterparty: str
    quantity: int = 0
    unit_price: float = 0.0
    subtotal: float = 0.0
    tax_amount: float = 0.0
    discount_amount: float = 0.0
    line_total: float = 0.0


class SaleRow(ReportRow):
    """One sale line item, with revenue allocated from its order."""

    discount_percent: float = 0.0
    profit: float = 0.0  # (unit_price - average unit cost) * quantity
    salesperson: str = UNKNOWN_SALESPERSON


class PurchaseRow(ReportRow):
    """One purchase line item, with its share of the order cost."""

    warehouse_location: str = DEFAULT_WAREHOUSE


class MovementRow(BaseModel):
    """One stock movement; quantity is negative for outbound movements."""

    movement_id: int | str | None = None
    product_id: int | str | None = None
    movement_type: str
    quantity: float = 0.0
    date: datetime | None = None
    user: str = SYSTEM_USER
    notes: str = ""


class RowTotals(BaseModel):
    """Column sums for a set of rows."""

    quantity: int = 0
    subtotal: float = 0.0
    tax_amount: float = 0.0
    discount_amount: float = 0.0
    line_total: float = 0.0

    @property
    def average_unit_price(self) -> float:
        return self.subtotal / max(self.quantity, 1)


def _row_fields(item: LineItem, default_counterparty: str) -> dict:
    order = item.order
    subtotal = item.subtotal
    tax_percent = (order.tax_percent if order else None) or 0.0
    discount_percent = (order.discount_percent if order else None) or 0.0
    return {
        "item_id": item.id,
        "order_id": order.id if order else None,
        "product_id": item.product_id,
        "date": (order.date if order else None) or item.created_at,
        "counterparty": (order.counterparty_name if order else None) or default_counterparty,
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "subtotal": subtotal,
        "tax_amount": subtotal * (tax_percent / 100),
        "discount_amount": subtotal * (discount_percent / 100),
    }


def build_sale_rows(
    sale_items: Iterable[LineItem],
    average_unit_cost: float = 0.0,
    default_customer: str = WALK_IN_CUSTOMER,
    default_salesperson: str = UNKNOWN_SALESPERSON,
) -> list[SaleRow]:
    """
    Build one SaleRow per sale item, in input order.

    Revenue never applies tax or discount at line level. Without an order
    total the row's tax and discount amounts are therefore 0, so that
    ``line_total`` reads as ``subtotal``. With an order total they show the
    order's percentages for reference only; the total already includes them.
    """
    rows = []
    for item in sale_items:
        fields = _row_fields(item, default_customer)
        order = item.order
        if order is None or not order.has_total:
            fields["tax_amount"] = 0.0
            fields["discount_amount"] = 0.0
        rows.append(
            SaleRow(
                **fields,
                discount_percent=(order.discount_percent if order else None) or 0.0,
                line_total=item_revenue(item),
                profit=round((item.unit_price - average_unit_cost) * item.quantity, 2),
                salesperson=item.handled_by or default_salesperson,
            )
        )
    return rows


def build_purchase_rows(
    purchase_items: Sequence[LineItem],
    default_supplier: str = UNKNOWN_SUPPLIER,
    default_location: str = DEFAULT_WAREHOUSE,
) -> list[PurchaseRow]:
    """Build one PurchaseRow per purchase item, in input order."""
    shares = allocate_cost(purchase_items)
    return [
        PurchaseRow(
            **_row_fields(item, default_supplier),
            line_total=share,
            warehouse_location=item.warehouse_location or default_location,
        )
        for item, share in zip(purchase_items, shares)
    ]


def build_movement_rows(movements: Iterable[StockMovement]) -> list[MovementRow]:
    """Build one MovementRow per stock movement, in input order."""
    return [
        MovementRow(
            movement_id=movement.id,
            product_id=movement.product_id,
            movement_type=movement.movement_type,
            quantity=movement.signed_quantity,
            date=movement.date,
            user=movement.user_name or SYSTEM_USER,
            notes=movement.notes or "",
        )
        for movement in movements
    ]


def summarize_rows(rows: Iterable[ReportRow]) -> RowTotals:
    """Sum the quantity and money columns of sale or purchase rows."""
    totals = RowTotals()
    for row in rows:
        totals.quantity += row.quantity
        totals.subtotal += row.subtotal
        totals.tax_amount += row.tax_amount
        totals.discount_amount += row.discount_amount
        totals.line_total += row.line_total
    return totals
