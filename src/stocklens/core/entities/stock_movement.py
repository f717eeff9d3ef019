"""Stock movement domain entity."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from stocklens.core.normalization import parse_datetime, to_number

INBOUND_MOVEMENT_TYPES = frozenset({"in", "purchase", "adjustment_in"})
OUTBOUND_MOVEMENT_TYPES = frozenset({"out", "sale", "adjustment_out"})


class StockMovement(BaseModel):
    """Records a single stock movement as reported by the backend."""

    id: int | str | None = None
    product_id: int | str | None = None
    movement_type: str = "unknown"
    quantity: float = 0.0  # magnitude, direction comes from movement_type
    date: datetime | None = None
    user_name: str | None = None
    notes: str | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> float:
        return abs(to_number(v))

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> datetime | None:
        return parse_datetime(v)

    @property
    def is_inbound(self) -> bool:
        return self.movement_type in INBOUND_MOVEMENT_TYPES

    @property
    def is_outbound(self) -> bool:
        return self.movement_type in OUTBOUND_MOVEMENT_TYPES

    @property
    def signed_quantity(self) -> float:
        """Negative for outbound movements, positive otherwise."""
        return -self.quantity if self.is_outbound else self.quantity
