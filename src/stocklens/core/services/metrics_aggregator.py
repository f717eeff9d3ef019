"""
Per-product financial metrics.

Turns sale and purchase line items into reconciled revenue, cost, profit,
margin, velocity and turnover. Two sources of truth exist for money: the
line items (quantity * unit_price) and the order-level ``total_amount``
that already includes tax and discount. The rules:

- Revenue: an order's total is split across its items in proportion to
  item subtotal, but only when every line of that order is visible.
  Otherwise the item subtotal is the revenue.
- Cost: items are grouped per purchase order. The order total is the
  group's cost when present, else subtotal plus tax minus discount.

Everything here is pure: no I/O, inputs are never mutated, and malformed
numbers were already coerced to 0 by the entities.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from stocklens.config import get_logger, get_settings
from stocklens.core.entities.financials import ProductFinancials, StockStatus
from stocklens.core.entities.line_item import LineItem
from stocklens.core.entities.stock_movement import StockMovement
from stocklens.core.normalization import to_number

logger = get_logger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10


@dataclass
class OrderGroup:
    """Line items sharing one order, with the order-level amounts merged."""

    key: tuple
    items: list[LineItem] = field(default_factory=list)
    total_amount: float | None = None
    tax_percent: float | None = None
    discount_percent: float | None = None

    @property
    def subtotal(self) -> float:
        return sum(item.subtotal for item in self.items)

    @property
    def units(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def cost(self) -> float:
        """Order total when present, else subtotal + tax - discount (unclamped)."""
        if self.total_amount is not None:
            return self.total_amount
        subtotal = self.subtotal
        tax = subtotal * ((self.tax_percent or 0.0) / 100)
        discount = subtotal * ((self.discount_percent or 0.0) / 100)
        return subtotal + tax - discount

    def share_of_cost(self, item: LineItem) -> float:
        """Item's part of the group cost, proportional to its subtotal."""
        subtotal = self.subtotal
        if subtotal == 0:
            return item.subtotal
        return self.cost * (item.subtotal / subtotal)


def _group_key(item: LineItem, index: int) -> tuple:
    if item.order is not None and item.order.id is not None:
        return ("order", item.order.id)
    return ("item", index)


def group_by_order(items: Iterable[LineItem]) -> list[OrderGroup]:
    """
    Group items by order id, preserving first-seen order.

    Items without an order (or without an order id) form singleton groups.
    The first non-null total/tax/discount seen in a group wins.
    """
    groups: dict[tuple, OrderGroup] = {}
    for index, item in enumerate(items):
        order = item.order
        key = _group_key(item, index)

        group = groups.get(key)
        if group is None:
            group = OrderGroup(key=key)
            groups[key] = group
        group.items.append(item)

        if order is not None:
            if group.total_amount is None:
                group.total_amount = order.total_amount
            if group.tax_percent is None:
                group.tax_percent = order.tax_percent
            if group.discount_percent is None:
                group.discount_percent = order.discount_percent
    return list(groups.values())


def item_revenue(item: LineItem) -> float:
    """Revenue attributed to one sale item."""
    order = item.order
    if order is None or not order.has_total:
        return item.subtotal

    order_subtotal = order.items_subtotal
    if order_subtotal is None or order_subtotal == 0:
        # Partial visibility or a degenerate order: no proportional split
        return item.subtotal
    return (item.subtotal / order_subtotal) * order.total_amount


def compute_revenue(sale_items: Iterable[LineItem]) -> float:
    """Total revenue over sale items."""
    return sum(item_revenue(item) for item in sale_items)


def compute_cost(purchase_items: Iterable[LineItem]) -> float:
    """Total cost over purchase items, one cost per purchase order."""
    return sum(group.cost for group in group_by_order(purchase_items))


def allocate_cost(purchase_items: Sequence[LineItem]) -> list[float]:
    """Per-item cost shares, in input order. Shares sum to the group cost."""
    groups = {group.key: group for group in group_by_order(purchase_items)}
    return [
        groups[_group_key(item, index)].share_of_cost(item)
        for index, item in enumerate(purchase_items)
    ]


def compute_average_unit_cost(purchase_items: Iterable[LineItem]) -> float:
    """Total cost / units purchased; 0 when nothing was purchased."""
    groups = group_by_order(purchase_items)
    units = sum(group.units for group in groups)
    if units <= 0:
        return 0.0
    return sum(group.cost for group in groups) / units


def compute_profit_margin(revenue: float, cost: float) -> float:
    """Profit as a percent of revenue; 0 whenever revenue is not positive."""
    if revenue <= 0:
        return 0.0
    return (revenue - cost) / revenue * 100


def months_between(later: datetime, earlier: datetime) -> int:
    """Calendar month difference, ignoring the day of month."""
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_velocity(sale_items: Iterable[LineItem]) -> int:
    """
    Units sold per month over the observed span of sale dates.

    With fewer than two distinct dates the whole quantity counts as one
    period. Otherwise the span is inclusive in months, so two sales one
    calendar month apart divide by 2.
    """
    items = list(sale_items)
    units = sum(item.quantity for item in items)
    if units <= 0:
        return 0

    dates = {
        item.order.date
        for item in items
        if item.order is not None and item.order.date is not None
    }
    if len(dates) < 2:
        return units

    elapsed = max(1, months_between(max(dates), min(dates)) + 1)
    return _round_half_up(units / elapsed)


def compute_turnover(velocity: float, current_stock: float) -> float:
    """Monthly velocity relative to stock on hand; 0 without stock."""
    if current_stock <= 0:
        return 0.0
    return velocity / current_stock


def compute_restock_needed(velocity: float, current_stock: float) -> float:
    """
    Units to reorder so stock covers one month of sales.

    Only kicks in when stock on hand lasts less than a month at the current
    velocity; without sales nothing is needed.
    """
    if velocity <= 0:
        return 0.0
    months_of_stock = current_stock / velocity
    if months_of_stock >= 1:
        return 0.0
    return max(0.0, velocity - current_stock)


def stock_status(
    current_stock: float, low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
) -> StockStatus:
    """Bucket a stock level into out / low / good."""
    if current_stock <= 0:
        return StockStatus.OUT
    if current_stock < low_stock_threshold:
        return StockStatus.LOW
    return StockStatus.GOOD


def net_adjusted_units(movements: Iterable[StockMovement]) -> float:
    """Inbound minus outbound quantity; unknown movement types are ignored."""
    inbound = 0.0
    outbound = 0.0
    for movement in movements:
        if movement.is_inbound:
            inbound += movement.quantity
        elif movement.is_outbound:
            outbound += movement.quantity
    return inbound - outbound


def compute_product_financials(
    sale_items: Iterable[LineItem],
    purchase_items: Iterable[LineItem],
    current_stock: float | None = 0,
    days_in_stock: int | None = None,
    product_id: int | str | None = None,
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> ProductFinancials:
    """
    Compute ProductFinancials for one product.

    Args:
        sale_items: Sale line items of the product.
        purchase_items: Purchase line items of the product.
        current_stock: Units on hand; unparsable values count as 0.
        days_in_stock: Backend-computed value, carried through unchanged.
        product_id: Optional identifier copied onto the result.
        low_stock_threshold: Stock below this (and above 0) is "low".

    Returns:
        A fresh ProductFinancials snapshot.
    """
    sales = list(sale_items)
    purchases = list(purchase_items)
    stock = to_number(current_stock)

    revenue = compute_revenue(sales)
    cost = compute_cost(purchases)
    velocity = compute_velocity(sales)

    return ProductFinancials(
        product_id=product_id,
        total_revenue=revenue,
        total_cost=cost,
        profit=revenue - cost,
        profit_margin_percent=compute_profit_margin(revenue, cost),
        units_sold=sum(item.quantity for item in sales),
        units_purchased=sum(item.quantity for item in purchases),
        sales_velocity_per_month=velocity,
        turnover_rate=compute_turnover(velocity, stock),
        restock_needed=compute_restock_needed(velocity, stock),
        average_unit_cost=compute_average_unit_cost(purchases),
        current_stock=stock,
        stock_status=stock_status(stock, low_stock_threshold),
        days_in_stock=days_in_stock,
    )


def compute_financials_by_product(
    sale_items: Iterable[LineItem],
    purchase_items: Iterable[LineItem],
    stock_levels: Mapping[int | str, float] | None = None,
    days_in_stock: Mapping[int | str, int | None] | None = None,
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> dict[int | str | None, ProductFinancials]:
    """
    Compute ProductFinancials for every product seen in the inputs.

    Products come from sale items, then purchase items, then stock_levels,
    in first-seen order.
    """
    stock_levels = stock_levels or {}
    days_in_stock = days_in_stock or {}

    sales_by_product: dict[int | str | None, list[LineItem]] = {}
    purchases_by_product: dict[int | str | None, list[LineItem]] = {}
    product_ids: dict[int | str | None, None] = {}

    for item in sale_items:
        sales_by_product.setdefault(item.product_id, []).append(item)
        product_ids.setdefault(item.product_id)
    for item in purchase_items:
        purchases_by_product.setdefault(item.product_id, []).append(item)
        product_ids.setdefault(item.product_id)
    for product_id in stock_levels:
        product_ids.setdefault(product_id)

    return {
        product_id: compute_product_financials(
            sales_by_product.get(product_id, []),
            purchases_by_product.get(product_id, []),
            current_stock=stock_levels.get(product_id, 0),
            days_in_stock=days_in_stock.get(product_id),
            product_id=product_id,
            low_stock_threshold=low_stock_threshold,
        )
        for product_id in product_ids
    }


class MetricsAggregator:
    """
    Stateless service wrapper around the metric functions.

    Safe to share between concurrent callers: it only reads its inputs.
    """

    def __init__(self, low_stock_threshold: int | None = None) -> None:
        if low_stock_threshold is None:
            low_stock_threshold = get_settings().analytics.low_stock_threshold
        self._low_stock_threshold = low_stock_threshold

    def compute(
        self,
        sale_items: Iterable[LineItem],
        purchase_items: Iterable[LineItem],
        current_stock: float | None = 0,
        days_in_stock: int | None = None,
        product_id: int | str | None = None,
    ) -> ProductFinancials:
        """Compute ProductFinancials for one product."""
        financials = compute_product_financials(
            sale_items,
            purchase_items,
            current_stock=current_stock,
            days_in_stock=days_in_stock,
            product_id=product_id,
            low_stock_threshold=self._low_stock_threshold,
        )
        logger.debug(
            "product_financials_computed",
            product_id=product_id,
            revenue=round(financials.total_revenue, 2),
            cost=round(financials.total_cost, 2),
            units_sold=financials.units_sold,
            velocity=financials.sales_velocity_per_month,
        )
        return financials

    def compute_batch(
        self,
        sale_items: Iterable[LineItem],
        purchase_items: Iterable[LineItem],
        stock_levels: Mapping[int | str, float] | None = None,
        days_in_stock: Mapping[int | str, int | None] | None = None,
    ) -> dict[int | str | None, ProductFinancials]:
        """Compute ProductFinancials per product for mixed-product inputs."""
        results = compute_financials_by_product(
            sale_items,
            purchase_items,
            stock_levels=stock_levels,
            days_in_stock=days_in_stock,
            low_stock_threshold=self._low_stock_threshold,
        )
        logger.debug("product_financials_batch_computed", products=len(results))
        return results
