"""
inventory_engines.totals -- Order, sale and refund totals.

Responsibility:
    Compute subtotal, discount, tax and total for purchase/sales orders
    (with optional per-line percentage discounts), for point-of-sale
    sales (no line discounts), and the refund due on a return.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain and the engine tracer.

Invariants enforced:
    - Decimal-only arithmetic; rounding is half-up to
      ``policy.decimal_places`` fraction digits.
    - Lines are never rounded individually.  The two aggregates (gross
      amount and discount) are rounded once, and everything else is
      derived from the rounded aggregates, so the published identities
      hold exactly:
          subtotal == gross_amount - discount
          tax      == round(subtotal * tax_rate)
          total    == subtotal + tax
    - Empty input yields all-zero totals.

Failure modes:
    - None.  Negative quantities or prices are not checked here; reject
      them at the boundary with ``parse_line_items`` / ``parse_sale_items``.

Usage:
    from inventory_engines.totals import calculate_order_total
    from inventory_kernel.domain.dtos import LineItem

    totals = calculate_order_total([
        LineItem(quantity=2, unit_price=Decimal("10.00")),
        LineItem(quantity=1, unit_price=Decimal("5.00"), discount_percent=Decimal("20")),
    ])
    print(totals.total)  # Decimal("26.40")
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from inventory_kernel.domain.dtos import LineItem, SaleLineItem
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.domain.values import round_places
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.totals")


@dataclass(frozen=True)
class OrderTotals:
    """
    Totals of an order or sale.

    All amounts are rounded to the policy's fraction digits.
    ``subtotal`` is after line discounts and before tax.
    """

    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal

    @property
    def gross_amount(self) -> Decimal:
        """Sum of quantity x price before discounts."""
        return self.subtotal + self.discount

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "discount": str(self.discount),
            "total": str(self.total),
        }


def _build_totals(
    gross: Decimal,
    discount: Decimal,
    policy: InventoryPolicy,
) -> OrderTotals:
    places = policy.decimal_places
    gross_rounded = round_places(gross, places)
    discount_rounded = round_places(discount, places)
    subtotal = gross_rounded - discount_rounded
    tax = round_places(subtotal * policy.tax_rate, places)
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        discount=discount_rounded,
        total=subtotal + tax,
    )


@traced_engine("totals", "1.0", fingerprint_fields=("items", "policy"))
def calculate_order_total(
    items: Sequence[LineItem],
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> OrderTotals:
    """
    Calculate totals for an order with optional per-line discounts.

    Each line contributes ``quantity x unit_price`` to the gross amount and
    ``quantity x unit_price x discount_percent / 100`` to the discount.
    Tax is ``policy.tax_rate`` applied to the discounted subtotal.

    Args:
        items: Order lines, in order.
        policy: Tax rate and rounding precision.

    Returns:
        OrderTotals with subtotal, tax, discount and total.
    """
    t0 = time.monotonic()
    logger.info("order_total_started", extra={
        "line_count": len(items),
        "tax_rate": str(policy.tax_rate),
    })

    gross = sum((item.gross_amount for item in items), Decimal("0"))
    discount = sum((item.discount_amount for item in items), Decimal("0"))
    totals = _build_totals(gross, discount, policy)

    logger.info("order_total_completed", extra={
        "subtotal": str(totals.subtotal),
        "discount": str(totals.discount),
        "tax": str(totals.tax),
        "total": str(totals.total),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return totals


@traced_engine("totals", "1.0", fingerprint_fields=("items", "policy"))
def calculate_sale_total(
    items: Sequence[SaleLineItem],
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> OrderTotals:
    """
    Calculate totals for a point-of-sale sale.

    Sales carry no line discounts: ``discount`` is always zero.
    """
    t0 = time.monotonic()
    logger.info("sale_total_started", extra={
        "line_count": len(items),
        "tax_rate": str(policy.tax_rate),
    })

    gross = sum((item.amount for item in items), Decimal("0"))
    totals = _build_totals(gross, Decimal("0"), policy)

    logger.info("sale_total_completed", extra={
        "subtotal": str(totals.subtotal),
        "tax": str(totals.tax),
        "total": str(totals.total),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return totals


@traced_engine("totals", "1.0", fingerprint_fields=("items",))
def calculate_refund(
    items: Sequence[LineItem],
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> Decimal:
    """
    Refund due for returned lines: sum of ``unit_price x quantity``.

    Line discounts of the original order are not reapplied and no tax is
    added; the result is rounded once.
    """
    refund = round_places(
        sum((item.gross_amount for item in items), Decimal("0")),
        policy.decimal_places,
    )
    logger.info("refund_calculated", extra={
        "line_count": len(items),
        "refund_amount": str(refund),
    })
    return refund
