"""
Pure domain layer.

This module contains immutable value objects, the inventory policy and the
boundary DTOs, with NO dependencies on:
- Database or data-store clients
- Wall-clock time (except SystemClock)
- Environment or file I/O

All domain objects are immutable and deterministic.
"""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from inventory_kernel.domain.dtos import (
    LineItem,
    OrderRecord,
    ProductSnapshot,
    SaleLineItem,
    SalesSample,
    StockHolding,
    TallyCount,
    TransactionDirection,
    parse_line_items,
    parse_order_records,
    parse_product_snapshots,
    parse_sale_items,
    parse_sales_samples,
    parse_stock_holdings,
    parse_tally_counts,
)
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.domain.values import (
    DaysOfCover,
    round_cents,
    round_places,
    to_decimal,
)

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # DTOs
    "LineItem",
    "OrderRecord",
    "ProductSnapshot",
    "SaleLineItem",
    "SalesSample",
    "StockHolding",
    "TallyCount",
    "TransactionDirection",
    "parse_line_items",
    "parse_order_records",
    "parse_product_snapshots",
    "parse_sale_items",
    "parse_sales_samples",
    "parse_stock_holdings",
    "parse_tally_counts",
    # Policy
    "DEFAULT_POLICY",
    "InventoryPolicy",
    # Values
    "DaysOfCover",
    "round_cents",
    "round_places",
    "to_decimal",
]
