"""
inventory_engines.valuation -- Inventory valuation at cost and at retail.

Responsibility:
    Value stock on hand at cost (total value and weighted average unit
    cost) and at selling price (retail value shown on stock reports).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic, half-up rounding to ``policy.decimal_places``.
    - ``average_cost`` is computed from the unrounded total value and is
      0 when total quantity is 0 (never divides by zero).

Usage:
    from inventory_engines.valuation import calculate_inventory_value
    from inventory_kernel.domain.dtos import StockHolding

    valuation = calculate_inventory_value([
        StockHolding(quantity=10, cost_price=Decimal("2.50")),
        StockHolding(quantity=30, cost_price=Decimal("1.50")),
    ])
    print(valuation.total_value, valuation.average_cost)  # 70.00 1.75
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from inventory_kernel.domain.dtos import StockHolding
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.domain.values import round_places
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.valuation")


@dataclass(frozen=True)
class InventoryValuation:
    """Stock valued at cost."""

    total_value: Decimal
    average_cost: Decimal
    total_quantity: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total_quantity == 0


@traced_engine("valuation", "1.0", fingerprint_fields=("holdings",))
def calculate_inventory_value(
    holdings: Sequence[StockHolding],
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> InventoryValuation:
    """
    Value holdings at cost.

    total_value  = sum(quantity x cost_price)
    average_cost = total_value / sum(quantity), or 0 for no units.
    """
    t0 = time.monotonic()
    total_value = sum(
        (Decimal(h.quantity) * h.cost_price for h in holdings), Decimal("0")
    )
    total_quantity = sum(h.quantity for h in holdings)

    if total_quantity > 0:
        average_cost = total_value / Decimal(total_quantity)
    else:
        average_cost = Decimal("0")

    valuation = InventoryValuation(
        total_value=round_places(total_value, policy.decimal_places),
        average_cost=round_places(average_cost, policy.decimal_places),
        total_quantity=total_quantity,
    )

    logger.info("inventory_valuation_completed", extra={
        "holding_count": len(holdings),
        "total_quantity": total_quantity,
        "total_value": str(valuation.total_value),
        "average_cost": str(valuation.average_cost),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return valuation


@traced_engine("valuation", "1.0", fingerprint_fields=("holdings",))
def calculate_retail_value(
    holdings: Sequence[StockHolding],
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> Decimal:
    """
    Value holdings at selling price: sum(quantity x selling_price).

    Holdings without a selling price contribute nothing.
    """
    priced = [h for h in holdings if h.selling_price is not None]
    if len(priced) != len(holdings):
        logger.warning("retail_value_unpriced_holdings", extra={
            "unpriced_count": len(holdings) - len(priced),
        })

    value = round_places(
        sum((Decimal(h.quantity) * h.selling_price for h in priced), Decimal("0")),
        policy.decimal_places,
    )
    logger.info("retail_valuation_completed", extra={
        "holding_count": len(holdings),
        "retail_value": str(value),
    })
    return value
