"""Unit tests for BuildProductReportUseCase."""

import asyncio
import copy

import pytest
import structlog

from stocklens.core.entities.financials import StockStatus
from stocklens.core.exceptions import (
    CollectionCancelledError,
    PageFetchError,
    ProductNotFoundError,
)
from stocklens.core.interfaces.page_source import IPageSource, Page
from stocklens.core.interfaces.product_source import IProductSource, ProductSnapshot
from stocklens.core.services.paginated_collector import PaginatedCollector
from stocklens.application.use_cases.build_product_report import (
    BuildProductReportUseCase,
)
from stocklens.infrastructure.graphql import GraphQLPageSource


class FakeBackend(IPageSource, IProductSource):
    """In-memory page and product source that records every page request."""

    def __init__(self, products, sales=(), purchases=(), movements=()):
        self.products = products
        self.collections = {
            "sales": list(sales),
            "purchases": list(purchases),
            "movements": list(movements),
        }
        self.calls: list[tuple[str, int | str, int, int]] = []
        self.fail_on: tuple[str, int] | None = None
        self.bound_context: dict = {}

    def _page(self, name: str, product_id, page: int, per_page: int) -> Page:
        self.calls.append((name, product_id, page, per_page))
        if self.fail_on == (name, page):
            raise ConnectionError("backend went away")
        records = self.collections[name]
        start = (page - 1) * per_page
        return Page(
            items=records[start : start + per_page],
            current_page=page,
            last_page=max(1, -(-len(records) // per_page)),
            per_page=per_page,
            total=len(records),
        )

    async def fetch_sale_items(self, product_id, page, per_page):
        return self._page("sales", product_id, page, per_page)

    async def fetch_purchase_items(self, product_id, page, per_page):
        return self._page("purchases", product_id, page, per_page)

    async def fetch_stock_movements(self, product_id, page, per_page):
        return self._page("movements", product_id, page, per_page)

    async def get_product(self, product_id):
        self.bound_context = structlog.contextvars.get_contextvars()
        if product_id not in self.products:
            raise ProductNotFoundError(product_id)
        return self.products[product_id]


@pytest.fixture
def backend(sale_record, purchase_record, movement_record) -> FakeBackend:
    second_sale = copy.deepcopy(sale_record)
    second_sale.update(id=12, quantity=3)
    undated_total_sale = {
        "id": 13,
        "quantity": 1,
        "price": 25,
        "product": {"id": 7},
        "sale": {"id": 102, "sale_date": "2025-03-02"},
    }
    inbound = {"id": 32, "type": "purchase", "quantity": 10, "product": {"id": 7}}

    return FakeBackend(
        products={7: ProductSnapshot(id=7, name="Desk Lamp", stock=12, days_in_stock=45)},
        sales=[sale_record, second_sale, undated_total_sale],
        purchases=[purchase_record],
        movements=[movement_record, inbound],
    )


def _use_case(backend: FakeBackend) -> BuildProductReportUseCase:
    return BuildProductReportUseCase(
        page_source=backend, collector=PaginatedCollector(page_size=2)
    )


@pytest.mark.asyncio
class TestBuildProductReport:
    """Tests for the full report build."""

    async def test_financials(self, backend):
        report = await _use_case(backend).execute(7)
        fin = report.financials

        assert fin.product_id == 7
        assert fin.total_revenue == pytest.approx(115)
        assert fin.total_cost == pytest.approx(105)
        assert fin.profit == pytest.approx(10)
        assert fin.profit_margin_percent == pytest.approx(10 / 115 * 100)
        assert fin.units_sold == 6
        assert fin.units_purchased == 2
        assert fin.sales_velocity_per_month == 2
        assert fin.turnover_rate == pytest.approx(2 / 12)
        assert fin.average_unit_cost == pytest.approx(52.5)
        assert fin.stock_status == StockStatus.GOOD
        assert fin.days_in_stock == 45
        assert fin.restock_needed == 0

    async def test_rows_and_totals(self, backend):
        report = await _use_case(backend).execute(7)

        assert [r.item_id for r in report.sale_rows] == [11, 12, 13]
        assert [r.line_total for r in report.sale_rows] == [
            pytest.approx(36),
            pytest.approx(54),
            pytest.approx(25),
        ]
        assert report.sale_totals.line_total == pytest.approx(report.financials.total_revenue)
        assert report.purchase_totals.line_total == pytest.approx(report.financials.total_cost)
        assert report.purchase_rows[0].counterparty == "Northwind Supply"
        assert [r.quantity for r in report.movement_rows] == [-4, 10]
        assert report.net_adjusted_units == 6

    async def test_collects_every_page_sequentially(self, backend):
        await _use_case(backend).execute(7)

        assert [c[0] for c in backend.calls] == [
            "sales",
            "sales",
            "purchases",
            "movements",
        ]
        assert all(c[1] == 7 and c[3] == 2 for c in backend.calls)

    async def test_default_customer_label_from_settings(self, backend, monkeypatch):
        monkeypatch.setenv("ANALYTICS_WALK_IN_CUSTOMER_LABEL", "Counter Sale")
        report = await _use_case(backend).execute(7)
        assert report.sale_rows[2].counterparty == "Counter Sale"

    async def test_salesperson_and_warehouse_labels_from_settings(self, backend, monkeypatch):
        monkeypatch.setenv("ANALYTICS_UNKNOWN_SALESPERSON_LABEL", "Unassigned")
        monkeypatch.setenv("ANALYTICS_DEFAULT_WAREHOUSE_LABEL", "Main Store")
        backend.collections["sales"][0]["sale"]["user"] = {"name": "Maria"}

        report = await _use_case(backend).execute(7)

        assert report.sale_rows[0].salesperson == "Maria"
        assert report.sale_rows[2].salesperson == "Unassigned"
        assert report.purchase_rows[0].warehouse_location == "Main Store"

    async def test_product_id_bound_to_log_context(self, backend):
        await _use_case(backend).execute(7)

        assert backend.bound_context == {"product_id": 7}
        assert "product_id" not in structlog.contextvars.get_contextvars()

    async def test_empty_product(self):
        backend = FakeBackend(products={9: ProductSnapshot(id=9, stock=0)})
        report = await _use_case(backend).execute(9)

        assert report.sale_rows == []
        assert report.financials.total_revenue == 0
        assert report.financials.profit_margin_percent == 0
        assert report.financials.stock_status == StockStatus.OUT
        assert report.sale_totals.average_unit_price == 0


@pytest.mark.asyncio
class TestBuildProductReportFailures:
    """Tests for aborted reports."""

    async def test_unknown_product_fetches_no_pages(self, backend):
        with pytest.raises(ProductNotFoundError):
            await _use_case(backend).execute(404)
        assert backend.calls == []

    async def test_page_failure_aborts_report(self, backend):
        backend.fail_on = ("sales", 2)

        with pytest.raises(PageFetchError) as exc_info:
            await _use_case(backend).execute(7)

        assert exc_info.value.details["page"] == 2
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert all(c[0] == "sales" for c in backend.calls)
        assert "product_id" not in structlog.contextvars.get_contextvars()

    async def test_cancellation_stops_collection(self, backend):
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(CollectionCancelledError):
            await _use_case(backend).execute(7, cancel_event=cancel)
        assert backend.calls == []


class TestDefaultSources:
    """Tests for lazily built sources."""

    def test_graphql_source_serves_products_too(self):
        use_case = BuildProductReportUseCase()
        page_source = use_case._get_page_source()

        assert isinstance(page_source, GraphQLPageSource)
        assert use_case._get_product_source() is page_source
