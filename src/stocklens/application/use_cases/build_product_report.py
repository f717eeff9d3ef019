"""Build Product Report Use Case - full-dataset financials and export rows."""

import asyncio
from dataclasses import dataclass
from functools import partial

import structlog

from stocklens.config import get_logger, get_settings
from stocklens.core.entities.financials import ProductFinancials
from stocklens.core.interfaces.page_source import IPageSource
from stocklens.core.interfaces.product_source import IProductSource, ProductSnapshot
from stocklens.core.mappers import (
    purchase_item_from_record,
    sale_item_from_record,
    stock_movement_from_record,
)
from stocklens.core.services.metrics_aggregator import (
    MetricsAggregator,
    net_adjusted_units,
)
from stocklens.core.services.paginated_collector import PaginatedCollector
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

logger = get_logger(__name__)


@dataclass
class ProductReport:
    """Everything the export layer needs for one product."""

    product: ProductSnapshot
    financials: ProductFinancials
    sale_rows: list[SaleRow]
    purchase_rows: list[PurchaseRow]
    movement_rows: list[MovementRow]
    sale_totals: RowTotals
    purchase_totals: RowTotals
    net_adjusted_units: float


class BuildProductReportUseCase:
    """Collect every page of a product's records and compute its report."""

    def __init__(
        self,
        page_source: IPageSource | None = None,
        product_source: IProductSource | None = None,
        collector: PaginatedCollector | None = None,
        aggregator: MetricsAggregator | None = None,
    ):
        self._page_source = page_source
        self._product_source = product_source
        self._collector = collector or PaginatedCollector()
        self._aggregator = aggregator or MetricsAggregator()

    def _get_page_source(self) -> IPageSource:
        if self._page_source is None:
            from stocklens.infrastructure.graphql import GraphQLPageSource

            self._page_source = GraphQLPageSource()
        return self._page_source

    def _get_product_source(self) -> IProductSource:
        if self._product_source is None:
            page_source = self._get_page_source()
            if isinstance(page_source, IProductSource):
                self._product_source = page_source
            else:
                from stocklens.infrastructure.graphql import GraphQLPageSource

                self._product_source = GraphQLPageSource()
        return self._product_source

    async def execute(
        self,
        product_id: int | str,
        cancel_event: asyncio.Event | None = None,
    ) -> ProductReport:
        """
        Execute the build product report use case.

        Collections are fetched one after another; a failure or cancellation
        in any of them aborts the whole report. Every log event emitted
        while building carries ``product_id``.
        """
        structlog.contextvars.bind_contextvars(product_id=product_id)
        try:
            return await self._build(product_id, cancel_event)
        finally:
            structlog.contextvars.unbind_contextvars("product_id")

    async def _build(
        self, product_id: int | str, cancel_event: asyncio.Event | None
    ) -> ProductReport:
        logger.info("product_report_started")

        page_source = self._get_page_source()
        product = await self._get_product_source().get_product(product_id)

        sale_records = await self._collector.collect(
            partial(page_source.fetch_sale_items, product_id), cancel_event=cancel_event
        )
        purchase_records = await self._collector.collect(
            partial(page_source.fetch_purchase_items, product_id), cancel_event=cancel_event
        )
        movement_records = await self._collector.collect(
            partial(page_source.fetch_stock_movements, product_id),
            cancel_event=cancel_event,
        )

        sale_items = [sale_item_from_record(r) for r in sale_records]
        purchase_items = [purchase_item_from_record(r) for r in purchase_records]
        movements = [stock_movement_from_record(r) for r in movement_records]

        financials = self._aggregator.compute(
            sale_items,
            purchase_items,
            current_stock=product.stock,
            days_in_stock=product.days_in_stock,
            product_id=product.id,
        )

        labels = get_settings().analytics
        sale_rows = build_sale_rows(
            sale_items,
            average_unit_cost=financials.average_unit_cost,
            default_customer=labels.walk_in_customer_label,
            default_salesperson=labels.unknown_salesperson_label,
        )
        purchase_rows = build_purchase_rows(
            purchase_items,
            default_supplier=labels.unknown_supplier_label,
            default_location=labels.default_warehouse_label,
        )

        report = ProductReport(
            product=product,
            financials=financials,
            sale_rows=sale_rows,
            purchase_rows=purchase_rows,
            movement_rows=build_movement_rows(movements),
            sale_totals=summarize_rows(sale_rows),
            purchase_totals=summarize_rows(purchase_rows),
            net_adjusted_units=net_adjusted_units(movements),
        )

        logger.info(
            "product_report_completed",
            sales=len(sale_rows),
            purchases=len(purchase_rows),
            movements=len(report.movement_rows),
            revenue=round(financials.total_revenue, 2),
            profit=round(financials.profit, 2),
        )
        return report
