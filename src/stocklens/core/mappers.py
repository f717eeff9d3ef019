"""
Record mappers: raw backend records -> strict domain entities.

Backend records name the same field several ways (``price`` or
``unit_price``, customer name on the item, on the sale, or on a nested
customer object). All of that tolerance lives here so the aggregator only
sees LineItem, Order and StockMovement.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from stocklens.core.entities.line_item import LineItem, Order, OrderLine
from stocklens.core.entities.stock_movement import StockMovement
from stocklens.core.normalization import resolve_first_present

CUSTOMER_NAME_PATHS = (
    "customer_name",
    "customerName",
    "customer.name",
    "sale.customer_name",
    "sale.customerName",
    "sale.customer.name",
    "customer",
)

SUPPLIER_NAME_PATHS = (
    "supplier_name",
    "supplierName",
    "supplier.name",
    "purchase.supplier_name",
    "purchase.supplierName",
    "purchase.supplier.name",
    "supplier",
)

SALE_DATE_PATHS = ("sale.sale_date", "sale_date", "created_at")
PURCHASE_DATE_PATHS = ("purchase.purchase_date", "purchase_date", "created_at")
MOVEMENT_DATE_PATHS = ("movement_date", "created_at", "date")

UNIT_PRICE_PATHS = ("unit_price", "unitPrice", "price")
PRODUCT_ID_PATHS = ("product_id", "productId", "product.id")

SALESPERSON_PATHS = (
    "sale.user_name",
    "sale.user.name",
    "sale.user",
    "user_name",
    "user.name",
    "user",
)
WAREHOUSE_LOCATION_PATHS = ("warehouse_location", "purchase.warehouse_location")


def _order_lines(raw_items: Any) -> list[OrderLine] | None:
    if not isinstance(raw_items, list):
        return None
    return [
        OrderLine(
            quantity=resolve_first_present(raw, ("quantity",), default=0),
            unit_price=resolve_first_present(raw, UNIT_PRICE_PATHS, default=0),
        )
        for raw in raw_items
    ]


def _line_item_from_record(
    record: Mapping[str, Any],
    order_key: str,
    date_paths: Iterable[str],
    name_paths: Iterable[str],
    handled_by_paths: Iterable[str] = (),
    location_paths: Iterable[str] = (),
) -> LineItem:
    order_record = record.get(order_key)
    if not isinstance(order_record, Mapping):
        order_record = {}

    order_id = resolve_first_present(
        record, (f"{order_key}.id", f"{order_key}_id", f"{order_key}Id")
    )
    name = resolve_first_present(record, name_paths, types=str)
    order_date = resolve_first_present(record, date_paths)

    order = None
    if order_record or order_id is not None or name is not None or order_date is not None:
        order = Order(
            id=order_id,
            total_amount=order_record.get("total_amount"),
            tax_percent=order_record.get("tax"),
            discount_percent=order_record.get("discount"),
            date=order_date,
            counterparty_name=name,
            items=_order_lines(order_record.get("items")),
        )

    return LineItem(
        id=record.get("id"),
        product_id=resolve_first_present(record, PRODUCT_ID_PATHS),
        quantity=record.get("quantity"),
        unit_price=resolve_first_present(record, UNIT_PRICE_PATHS, default=0),
        order=order,
        created_at=record.get("created_at"),
        handled_by=resolve_first_present(record, handled_by_paths, types=str),
        warehouse_location=resolve_first_present(record, location_paths, types=str),
    )


def sale_item_from_record(record: Mapping[str, Any]) -> LineItem:
    """Map a raw sale item record (with optional nested ``sale``) to a LineItem."""
    return _line_item_from_record(
        record,
        "sale",
        SALE_DATE_PATHS,
        CUSTOMER_NAME_PATHS,
        handled_by_paths=SALESPERSON_PATHS,
    )


def purchase_item_from_record(record: Mapping[str, Any]) -> LineItem:
    """Map a raw purchase item record (with optional nested ``purchase``) to a LineItem."""
    return _line_item_from_record(
        record,
        "purchase",
        PURCHASE_DATE_PATHS,
        SUPPLIER_NAME_PATHS,
        location_paths=WAREHOUSE_LOCATION_PATHS,
    )


def stock_movement_from_record(record: Mapping[str, Any]) -> StockMovement:
    """Map a raw stock movement record to a StockMovement."""
    return StockMovement(
        id=record.get("id"),
        product_id=resolve_first_present(record, PRODUCT_ID_PATHS),
        movement_type=resolve_first_present(
            record, ("type", "movement_type"), default="unknown", types=str
        ),
        quantity=record.get("quantity"),
        date=resolve_first_present(record, MOVEMENT_DATE_PATHS),
        user_name=resolve_first_present(
            record, ("user_name", "user.name", "user"), types=str
        ),
        notes=resolve_first_present(record, ("reason", "notes"), types=str),
    )
