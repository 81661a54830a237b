"""
Module: inventory_engines.optimization
Responsibility:
    Recommend a stock action for each product: reorder, reduce or
    maintain, with a human-readable reason.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Delegates reorder quantities to ``inventory_engines.replenishment``.

Invariants enforced:
    - Fixed precedence, evaluated per product independently:
        1. reorder  -- current_stock <= reorder_level
        2. reduce   -- velocity > 0 and cover > overstock_threshold_days
        3. maintain -- otherwise
    - A product at or below its reorder level is always ``reorder``.
    - Only ``reorder`` recommendations carry a suggested quantity.
    - Reasons render cover with one fraction digit (zero for ``reduce``);
      unbounded cover renders as "unbounded".

Failure modes:
    - None for well-typed input.

Usage:
    from inventory_engines.optimization import optimize_stock_levels

    for rec in optimize_stock_levels(products):
        print(rec.product_name, rec.action.value, rec.reason)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from inventory_kernel.domain.dtos import ProductSnapshot
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.domain.values import DaysOfCover
from inventory_kernel.logging_config import get_logger
from inventory_engines.replenishment import average_daily_sales, suggest_reorder_quantity
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.optimization")


class StockAction(str, Enum):
    """Recommended action for a product's stock level."""

    REORDER = "reorder"
    REDUCE = "reduce"
    MAINTAIN = "maintain"


@dataclass(frozen=True)
class StockRecommendation:
    """Recommendation for one product."""

    product_id: str
    product_name: str
    action: StockAction
    reason: str
    days_of_cover: DaysOfCover
    suggested_quantity: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "action": self.action.value,
            "reason": self.reason,
        }
        if self.suggested_quantity is not None:
            data["suggested_quantity"] = self.suggested_quantity
        return data


def recommend_stock_action(
    product: ProductSnapshot,
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> StockRecommendation:
    """Classify a single product."""
    velocity = average_daily_sales(product.sales)
    cover = DaysOfCover.from_velocity(product.current_stock, velocity)

    if product.current_stock <= product.reorder_level:
        suggestion = suggest_reorder_quantity(
            product.current_stock,
            product.reorder_level,
            velocity,
            product_id=product.product_id,
            policy=policy,
        )
        return StockRecommendation(
            product_id=product.product_id,
            product_name=product.name,
            action=StockAction.REORDER,
            reason=(
                f"Stock is at or below reorder level ({product.reorder_level} units). "
                f"Estimated {cover.format(1)} days of stock remaining."
            ),
            days_of_cover=cover,
            suggested_quantity=suggestion.suggested_order_quantity,
        )

    if velocity > 0 and cover.exceeds(policy.overstock_threshold_days):
        return StockRecommendation(
            product_id=product.product_id,
            product_name=product.name,
            action=StockAction.REDUCE,
            reason=(
                f"Overstocked. Current stock will last {cover.format(0)} days "
                f"at current sales rate."
            ),
            days_of_cover=cover,
        )

    return StockRecommendation(
        product_id=product.product_id,
        product_name=product.name,
        action=StockAction.MAINTAIN,
        reason=(
            f"Stock levels are optimal. Approximately {cover.format(1)} days "
            f"of inventory remaining."
        ),
        days_of_cover=cover,
    )


@traced_engine("optimization", "1.0", fingerprint_fields=("products", "policy"))
def optimize_stock_levels(
    products: Sequence[ProductSnapshot],
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> list[StockRecommendation]:
    """
    Recommend an action for every product, preserving input order.

    Args:
        products: Products with stock levels and sales history.
        policy: Overstock threshold, lead time and reorder rounding.

    Returns:
        One StockRecommendation per product.
    """
    t0 = time.monotonic()
    logger.info("stock_optimization_started", extra={
        "product_count": len(products),
        "overstock_threshold_days": policy.overstock_threshold_days,
    })

    recommendations = [recommend_stock_action(p, policy=policy) for p in products]

    counts = {action.value: 0 for action in StockAction}
    for rec in recommendations:
        counts[rec.action.value] += 1

    logger.info("stock_optimization_completed", extra={
        "product_count": len(products),
        "reorder_count": counts[StockAction.REORDER.value],
        "reduce_count": counts[StockAction.REDUCE.value],
        "maintain_count": counts[StockAction.MAINTAIN.value],
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return recommendations
