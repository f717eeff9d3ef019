"""stocklens - per-product financial analytics for inventory data."""

__version__ = "1.0.0"
