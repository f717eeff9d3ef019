"""
Paginated collection service.

Drives a paged source to completion and returns every item in page order,
so exports are complete whatever page size limit the transport imposes.
Pages are fetched one at a time: whether another page exists is only known
from the page just received.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

from stocklens.config import get_logger, get_settings
from stocklens.core.exceptions import (
    CollectionCancelledError,
    PageFetchError,
    PaginationError,
)
from stocklens.core.interfaces.page_source import FetchPage

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 200


async def collect_all_pages(
    fetch_page: FetchPage,
    page_size: int = DEFAULT_PAGE_SIZE,
    params: Mapping[str, Any] | None = None,
    cancel_event: asyncio.Event | None = None,
    max_pages: int | None = None,
) -> list[Any]:
    """
    Fetch every page from ``fetch_page`` and concatenate the items.

    Starts at page 1 and keeps going while the page just fetched reports
    ``current_page < last_page``. An empty page also ends the collection,
    for servers that never report ``last_page`` correctly.

    Args:
        fetch_page: Async callable ``(page, per_page, **params) -> Page``.
        page_size: Items requested per page.
        params: Fixed keyword arguments passed unchanged on every call.
        cancel_event: Checked before and after every fetch; once set, no
            further page is requested.
        max_pages: Optional hard limit on pages fetched.

    Returns:
        All items, in page order.

    Raises:
        PageFetchError: A page fetch failed; nothing partial is returned.
        CollectionCancelledError: ``cancel_event`` was set.
        PaginationError: ``max_pages`` was reached with pages remaining.
    """
    fixed_params = dict(params or {})
    collected: list[Any] = []
    page_number = 1
    pages_fetched = 0

    while True:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("collection_cancelled", pages_fetched=pages_fetched)
            raise CollectionCancelledError(pages_fetched)
        if max_pages is not None and pages_fetched >= max_pages:
            logger.warning("collection_page_limit_reached", max_pages=max_pages)
            raise PaginationError(max_pages)

        try:
            page = await fetch_page(page_number, page_size, **fixed_params)
        except Exception as exc:
            logger.warning(
                "collection_page_failed",
                page=page_number,
                pages_fetched=pages_fetched,
                error=str(exc),
            )
            raise PageFetchError(page_number, str(exc), pages_fetched) from exc

        pages_fetched += 1
        collected.extend(page.items)
        logger.debug(
            "collection_page_fetched",
            page=page_number,
            reported_page=page.current_page,
            last_page=page.last_page,
            items=len(page.items),
        )

        if cancel_event is not None and cancel_event.is_set():
            logger.info("collection_cancelled", pages_fetched=pages_fetched)
            raise CollectionCancelledError(pages_fetched)

        if not page.items or not page.has_more:
            break
        page_number += 1

    logger.info("collection_completed", pages=pages_fetched, items=len(collected))
    return collected


class PaginatedCollector:
    """Collector with page size and page limit taken from settings."""

    def __init__(self, page_size: int | None = None, max_pages: int | None = None) -> None:
        settings = get_settings().collector
        self._page_size = page_size or settings.page_size
        self._max_pages = max_pages or settings.max_pages

    @property
    def page_size(self) -> int:
        return self._page_size

    async def collect(
        self,
        fetch_page: FetchPage,
        params: Mapping[str, Any] | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> list[Any]:
        """Collect all pages from ``fetch_page``. See collect_all_pages."""
        return await collect_all_pages(
            fetch_page,
            page_size=self._page_size,
            params=params,
            cancel_event=cancel_event,
            max_pages=self._max_pages,
        )
