"""Abstract interface for product snapshots."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field, field_validator

from stocklens.core.normalization import to_number


class ProductSnapshot(BaseModel):
    """Current stock level and backend-computed fields for a product."""

    id: int | str
    name: str = ""
    stock: float = 0.0
    days_in_stock: int | None = Field(
        default=None, description="Computed by the backend, carried through unchanged"
    )
    category: str | None = None

    @field_validator("stock", mode="before")
    @classmethod
    def coerce_stock(cls, v: Any) -> float:
        return to_number(v)


class IProductSource(ABC):
    """Interface for fetching a product's current state."""

    @abstractmethod
    async def get_product(self, product_id: int | str) -> ProductSnapshot:
        """
        Get a product snapshot by ID.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
