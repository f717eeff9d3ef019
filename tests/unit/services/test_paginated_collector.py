"""Unit tests for the paginated collector."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from stocklens.core.exceptions import (
    CollectionCancelledError,
    PageFetchError,
    PaginationError,
)
from stocklens.core.interfaces.page_source import Page
from stocklens.core.services.paginated_collector import (
    PaginatedCollector,
    collect_all_pages,
)


def _make_source(items: list, page_size: int):
    """Build a fetch_page over ``items`` that records every call."""
    last_page = max(1, -(-len(items) // page_size))
    calls: list[tuple[int, int, dict]] = []

    async def fetch_page(page: int, per_page: int, **params) -> Page:
        calls.append((page, per_page, params))
        start = (page - 1) * per_page
        return Page(
            items=items[start : start + per_page],
            current_page=page,
            last_page=last_page,
            per_page=per_page,
            total=len(items),
        )

    return fetch_page, calls


@pytest.mark.asyncio
class TestCollectAllPages:
    """Tests for collect_all_pages."""

    @pytest.mark.parametrize("page_size", [1, 3, 7, 10, 200])
    async def test_returns_every_item_in_order(self, page_size):
        items = list(range(23))
        fetch_page, calls = _make_source(items, page_size)

        result = await collect_all_pages(fetch_page, page_size=page_size)

        assert result == items
        assert [c[0] for c in calls] == list(range(1, len(calls) + 1))
        assert all(c[1] == page_size for c in calls)

    async def test_single_page(self):
        fetch_page, calls = _make_source(["a", "b"], 200)
        assert await collect_all_pages(fetch_page) == ["a", "b"]
        assert len(calls) == 1

    async def test_empty_source(self):
        fetch_page, calls = _make_source([], 50)
        assert await collect_all_pages(fetch_page, page_size=50) == []
        assert len(calls) == 1

    async def test_params_passed_on_every_call(self):
        fetch_page, calls = _make_source(list(range(5)), 2)
        await collect_all_pages(fetch_page, page_size=2, params={"product_id": 7})
        assert len(calls) == 3
        assert all(c[2] == {"product_id": 7} for c in calls)

    async def test_stops_on_empty_page_when_last_page_is_wrong(self):
        pages = [
            Page(items=[1, 2], current_page=1, last_page=99),
            Page(items=[3], current_page=2, last_page=99),
            Page(items=[], current_page=3, last_page=99),
        ]
        fetch_page = AsyncMock(side_effect=pages)

        assert await collect_all_pages(fetch_page, page_size=2) == [1, 2, 3]
        assert fetch_page.await_count == 3

    async def test_page_number_advances_independently_of_reported_page(self):
        pages = [
            Page(items=[1], current_page=1, last_page=2),
            Page(items=[2], current_page=2, last_page=2),
        ]
        fetch_page = AsyncMock(side_effect=pages)

        await collect_all_pages(fetch_page, page_size=1)

        assert [call.args for call in fetch_page.await_args_list] == [(1, 1), (2, 1)]

    async def test_failure_aborts_without_partial_results(self):
        fetch_page = AsyncMock(
            side_effect=[
                Page(items=[1], current_page=1, last_page=3),
                RuntimeError("connection reset"),
            ]
        )

        with pytest.raises(PageFetchError) as exc_info:
            await collect_all_pages(fetch_page, page_size=1)

        assert exc_info.value.details["page"] == 2
        assert exc_info.value.details["pages_fetched"] == 1
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert fetch_page.await_count == 2

    async def test_no_retry_on_failure(self):
        fetch_page = AsyncMock(side_effect=RuntimeError("boom"))
        with pytest.raises(PageFetchError):
            await collect_all_pages(fetch_page)
        assert fetch_page.await_count == 1

    async def test_cancel_after_first_page_stops_fetching(self):
        cancel = asyncio.Event()
        calls: list[int] = []

        async def fetch_page(page: int, per_page: int) -> Page:
            calls.append(page)
            cancel.set()
            return Page(items=[page], current_page=page, last_page=5)

        with pytest.raises(CollectionCancelledError) as exc_info:
            await collect_all_pages(fetch_page, page_size=1, cancel_event=cancel)

        assert calls == [1]
        assert exc_info.value.details["pages_fetched"] == 1

    async def test_cancel_before_start_fetches_nothing(self):
        cancel = asyncio.Event()
        cancel.set()
        fetch_page = AsyncMock()

        with pytest.raises(CollectionCancelledError):
            await collect_all_pages(fetch_page, cancel_event=cancel)

        fetch_page.assert_not_awaited()

    async def test_task_cancellation_propagates(self):
        started = asyncio.Event()
        calls: list[int] = []

        async def fetch_page(page: int, per_page: int) -> Page:
            calls.append(page)
            started.set()
            await asyncio.sleep(10)
            return Page(items=[page], current_page=page, last_page=5)

        task = asyncio.create_task(collect_all_pages(fetch_page))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert calls == [1]

    async def test_max_pages_guard(self):
        async def fetch_page(page: int, per_page: int) -> Page:
            return Page(items=[page], current_page=1, last_page=2)

        with pytest.raises(PaginationError):
            await collect_all_pages(fetch_page, max_pages=3)


@pytest.mark.asyncio
class TestPaginatedCollector:
    """Tests for the settings-backed collector."""

    async def test_default_page_size_from_settings(self, monkeypatch):
        monkeypatch.setenv("COLLECTOR_PAGE_SIZE", "4")
        collector = PaginatedCollector()
        fetch_page, calls = _make_source(list(range(9)), 4)

        result = await collector.collect(fetch_page)

        assert collector.page_size == 4
        assert result == list(range(9))
        assert len(calls) == 3

    async def test_explicit_page_size(self):
        collector = PaginatedCollector(page_size=5)
        fetch_page, calls = _make_source(list(range(6)), 5)
        assert await collector.collect(fetch_page) == list(range(6))
        assert [c[1] for c in calls] == [5, 5]
