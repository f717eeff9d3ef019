"""Sale and purchase line item entities."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from stocklens.core.normalization import (
    parse_datetime,
    to_int,
    to_number,
    to_optional_number,
)


class OrderLine(BaseModel):
    """One line of an order, for any product. Used for proportional allocation."""

    quantity: int = 0
    unit_price: float = 0.0

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        return max(0, to_int(v))

    @field_validator("unit_price", mode="before")
    @classmethod
    def coerce_unit_price(cls, v: Any) -> float:
        return max(0.0, to_number(v))

    @property
    def subtotal(self) -> float:
        return self.quantity * self.unit_price


class Order(BaseModel):
    """
    A sale or purchase order.

    ``total_amount`` already includes tax and discount and wins over the
    percentages when present. ``items`` lists every line of the order when
    the caller can see them all; None means only part of the order is known.
    """

    id: int | str | None = None
    total_amount: float | None = None
    tax_percent: float | None = None
    discount_percent: float | None = None
    date: datetime | None = None
    counterparty_name: str | None = None
    items: list[OrderLine] | None = None

    @field_validator("total_amount", "tax_percent", "discount_percent", mode="before")
    @classmethod
    def coerce_amounts(cls, v: Any) -> float | None:
        return to_optional_number(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> datetime | None:
        return parse_datetime(v)

    @property
    def has_total(self) -> bool:
        return self.total_amount is not None

    @property
    def items_subtotal(self) -> float | None:
        """Subtotal over every line of the order, None when not all lines are known."""
        if self.items is None:
            return None
        return sum(line.subtotal for line in self.items)


class LineItem(BaseModel):
    """A single product/quantity/price record belonging to a sale or purchase."""

    id: int | str | None = None
    product_id: int | str | None = None
    quantity: int = 0
    unit_price: float = 0.0
    order: Order | None = None
    created_at: datetime | None = None
    handled_by: str | None = None  # salesperson on sales
    warehouse_location: str | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        return max(0, to_int(v))

    @field_validator("unit_price", mode="before")
    @classmethod
    def coerce_unit_price(cls, v: Any) -> float:
        return max(0.0, to_number(v))

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: Any) -> datetime | None:
        return parse_datetime(v)

    @property
    def subtotal(self) -> float:
        """quantity * unit_price, before any order-level tax or discount."""
        return self.quantity * self.unit_price
