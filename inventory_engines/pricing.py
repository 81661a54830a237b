"""
inventory_engines.pricing -- Profit margin on cost.

Pure function, no I/O.  Margin is expressed on cost (a markup):
``(selling_price - cost_price) / cost_price x 100``.  A zero cost price
saturates to a margin of 0 instead of dividing by zero.
"""

from __future__ import annotations

from decimal import Decimal

from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.domain.values import round_places, to_decimal
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.pricing")

_HUNDRED = Decimal("100")


@traced_engine("pricing", "1.0", fingerprint_fields=("cost_price", "selling_price"))
def calculate_profit_margin(
    cost_price: Decimal | int | str,
    selling_price: Decimal | int | str,
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> Decimal:
    """
    Profit margin as a percentage of cost, rounded half-up.

    Args:
        cost_price: Unit cost.
        selling_price: Unit selling price.
        policy: Rounding precision.

    Returns:
        Margin percentage, e.g. Decimal("25.00") for cost 8, price 10.
        Decimal("0") when ``cost_price`` is zero.
    """
    cost = to_decimal(cost_price)
    price = to_decimal(selling_price)

    if cost == 0:
        logger.debug("profit_margin_zero_cost", extra={
            "selling_price": str(price),
        })
        return Decimal("0")

    margin = round_places((price - cost) / cost * _HUNDRED, policy.decimal_places)

    logger.debug("profit_margin_calculated", extra={
        "cost_price": str(cost),
        "selling_price": str(price),
        "margin_percent": str(margin),
    })
    return margin
