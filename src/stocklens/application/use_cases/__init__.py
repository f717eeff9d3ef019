"""Application use cases."""

from stocklens.application.use_cases.build_product_report import (
    BuildProductReportUseCase,
    ProductReport,
)

__all__ = [
    "BuildProductReportUseCase",
    "ProductReport",
]
