"""
inventory_engines.stock_status -- Stock status badges and dashboard summaries.

Classifies products as out of stock (no units), low stock (at or below
the reorder level but not empty) or in stock, and summarizes a catalog
into the counts and product lists shown on the dashboard and the
low-stock report.  ``summarize_revenue`` is the order half of the same
dashboard: revenue over completed orders and the count completed on a day.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Sequence

from inventory_kernel.domain.dtos import OrderRecord, ProductSnapshot
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.domain.values import round_places
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.stock_status")


class StockStatus(str, Enum):
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


def classify_stock_status(current_stock: int, reorder_level: int) -> StockStatus:
    """Out of stock at zero (or below), low at or below the reorder level."""
    if current_stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if current_stock <= reorder_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


@dataclass(frozen=True)
class StockStatusSummary:
    """Catalog-wide stock status."""

    total_products: int
    total_units: int
    out_of_stock: tuple[str, ...] = field(default_factory=tuple)
    low_stock: tuple[str, ...] = field(default_factory=tuple)

    @property
    def in_stock_count(self) -> int:
        return self.total_products - len(self.out_of_stock) - len(self.low_stock)

    @property
    def needs_attention(self) -> tuple[str, ...]:
        """Out-of-stock then low-stock product ids."""
        return self.out_of_stock + self.low_stock


@traced_engine("stock_status", "1.0", fingerprint_fields=("products",))
def summarize_stock_status(products: Sequence[ProductSnapshot]) -> StockStatusSummary:
    """Count units and collect out-of-stock and low-stock product ids, in input order."""
    out_of_stock: list[str] = []
    low_stock: list[str] = []
    for product in products:
        status = classify_stock_status(product.current_stock, product.reorder_level)
        if status is StockStatus.OUT_OF_STOCK:
            out_of_stock.append(product.product_id)
        elif status is StockStatus.LOW_STOCK:
            low_stock.append(product.product_id)

    summary = StockStatusSummary(
        total_products=len(products),
        total_units=sum(p.current_stock for p in products),
        out_of_stock=tuple(out_of_stock),
        low_stock=tuple(low_stock),
    )
    logger.info("stock_status_summarized", extra={
        "total_products": summary.total_products,
        "total_units": summary.total_units,
        "out_of_stock_count": len(summary.out_of_stock),
        "low_stock_count": len(summary.low_stock),
    })
    return summary


@dataclass(frozen=True)
class RevenueSummary:
    """Revenue over completed orders; ``orders_on_date`` is 0 without ``as_of``."""

    completed_orders: int
    revenue: Decimal
    orders_on_date: int = 0


@traced_engine("stock_status", "1.0", fingerprint_fields=("orders", "as_of"))
def summarize_revenue(
    orders: Sequence[OrderRecord],
    as_of: date | None = None,
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> RevenueSummary:
    """
    Sum ``total_amount`` over completed orders, rounded once.

    Orders in any other status (pending, cancelled) are ignored.  When
    ``as_of`` is given, completed orders dated that day are also counted.
    """
    completed = [order for order in orders if order.is_completed]
    revenue = round_places(
        sum((order.total_amount for order in completed), Decimal("0")),
        policy.decimal_places,
    )
    on_date = 0
    if as_of is not None:
        on_date = sum(1 for order in completed if order.order_date == as_of)

    summary = RevenueSummary(
        completed_orders=len(completed),
        revenue=revenue,
        orders_on_date=on_date,
    )
    logger.info("revenue_summarized", extra={
        "order_count": len(orders),
        "completed_orders": summary.completed_orders,
        "revenue": str(summary.revenue),
        "orders_on_date": summary.orders_on_date,
    })
    return summary
