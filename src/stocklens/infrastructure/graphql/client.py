"""
GraphQL page source.

Implements IPageSource and IProductSource against the inventory backend's
``paginated*ByProduct`` and ``productById`` queries. Each request opens a
short-lived httpx client; retries are left to the caller.
"""

from typing import Any

import httpx

from stocklens.config import get_logger, get_settings
from stocklens.core.exceptions import (
    ConfigurationError,
    ProductNotFoundError,
    TransportError,
)
from stocklens.core.interfaces.page_source import IPageSource, Page
from stocklens.core.interfaces.product_source import IProductSource, ProductSnapshot
from stocklens.core.normalization import resolve_first_present, to_int
from stocklens.infrastructure.graphql.queries import (
    PAGINATED_PURCHASE_ITEMS_BY_PRODUCT,
    PAGINATED_SALE_ITEMS_BY_PRODUCT,
    PAGINATED_STOCK_MOVEMENTS_BY_PRODUCT,
    PRODUCT_BY_ID,
)

logger = get_logger(__name__)


class GraphQLPageSource(IPageSource, IProductSource):
    """Fetches per-product pages and product snapshots over GraphQL."""

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
        api_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings().graphql
        self._endpoint = endpoint or settings.endpoint
        if not self._endpoint.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"GraphQL endpoint must be an http(s) URL, got {self._endpoint!r}",
                details={"endpoint": self._endpoint},
            )
        self._timeout = timeout if timeout is not None else settings.timeout
        self._api_token = api_token if api_token is not None else settings.api_token
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    async def _execute(
        self, operation: str, query: str, variables: dict[str, Any]
    ) -> dict[str, Any]:
        """POST a GraphQL document and return its ``data`` object."""
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers(),
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._endpoint, json={"query": query, "variables": variables}
                )
                response.raise_for_status()
                body = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("graphql_timeout", operation=operation, timeout=self._timeout)
            raise TransportError(operation, f"Timeout after {self._timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("graphql_http_error", operation=operation, status_code=status)
            raise TransportError(operation, f"HTTP {status}", status_code=status) from exc
        except httpx.RequestError as exc:
            logger.warning("graphql_network_error", operation=operation, error=str(exc))
            raise TransportError(operation, str(exc)) from exc
        except ValueError as exc:
            raise TransportError(operation, "Response is not valid JSON") from exc

        if not isinstance(body, dict):
            raise TransportError(operation, "Unexpected response shape")

        errors = body.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            message = resolve_first_present(first, ("message",), default=str(errors))
            logger.warning("graphql_errors", operation=operation, message=message)
            raise TransportError(operation, str(message))

        return body.get("data") or {}

    async def _fetch_page(
        self,
        root_field: str,
        query: str,
        product_id: int | str,
        page: int,
        per_page: int,
    ) -> Page:
        data = await self._execute(
            root_field,
            query,
            {"product_id": to_int(product_id), "page": page, "perPage": per_page},
        )
        return Page.from_payload(data.get(root_field), page=page)

    async def fetch_sale_items(
        self, product_id: int | str, page: int, per_page: int
    ) -> Page:
        return await self._fetch_page(
            "paginatedSaleItemsByProduct",
            PAGINATED_SALE_ITEMS_BY_PRODUCT,
            product_id,
            page,
            per_page,
        )

    async def fetch_purchase_items(
        self, product_id: int | str, page: int, per_page: int
    ) -> Page:
        return await self._fetch_page(
            "paginatedPurchaseItemsByProduct",
            PAGINATED_PURCHASE_ITEMS_BY_PRODUCT,
            product_id,
            page,
            per_page,
        )

    async def fetch_stock_movements(
        self, product_id: int | str, page: int, per_page: int
    ) -> Page:
        return await self._fetch_page(
            "paginatedStockMovementsByProduct",
            PAGINATED_STOCK_MOVEMENTS_BY_PRODUCT,
            product_id,
            page,
            per_page,
        )

    async def get_product(self, product_id: int | str) -> ProductSnapshot:
        data = await self._execute("productById", PRODUCT_BY_ID, {"id": to_int(product_id)})
        record = data.get("productById")
        if not record:
            raise ProductNotFoundError(product_id)

        days = record.get("days_in_stock")
        return ProductSnapshot(
            id=record.get("id", product_id),
            name=record.get("name") or "",
            stock=record.get("stock"),
            days_in_stock=to_int(days) if days is not None else None,
            category=resolve_first_present(record, ("category.name",), types=str),
        )
