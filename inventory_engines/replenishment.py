"""
Module: inventory_engines.replenishment
Responsibility:
    Sales velocity, reorder quantity suggestion and stockout prediction.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain and the engine tracer.

Invariants enforced:
    - Purity: no clock access.  ``predict_stockout`` takes ``as_of``
      explicitly; ``StockoutPredictor`` reads it from an injected Clock.
    - Velocity is total quantity / number of samples, kept as an exact
      ratio.  Samples are treated as one per day whatever their dates.
      Ceilings, floors and the Decimal fields reported on results are all
      taken from that ratio.
    - Zero velocity never divides: cover is ``DaysOfCover.unbounded()``.
    - Suggested order quantities are non-negative multiples of
      ``policy.reorder_multiple``.

Reorder heuristic (policy, not an optimal reorder-point model):
    safety_stock   = ceil(velocity x safety_stock_days)
    lead_demand    = ceil(velocity x lead_time_days)
    optimal        = lead_demand + safety_stock - current_stock
    suggested      = max(0, ceil(optimal / reorder_multiple) x reorder_multiple)

Failure modes:
    - None for well-typed input.

Usage:
    from inventory_engines.replenishment import suggest_reorder_quantity

    suggestion = suggest_reorder_quantity(
        current_stock=12,
        reorder_level=20,
        average_daily_sales=Decimal("4"),
    )
    print(suggestion.suggested_order_quantity)  # 30
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from fractions import Fraction
from typing import Any, Sequence

from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.dtos import SalesSample
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.domain.values import (
    DaysOfCover,
    fraction_to_decimal,
    round_places,
    to_fraction,
)
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.replenishment")


@dataclass(frozen=True)
class ReorderSuggestion:
    """
    Reorder suggestion for one product.

    ``average_daily_sales`` and ``days_until_stockout`` are rounded for
    reporting; ``suggested_order_quantity`` is computed from unrounded
    inputs.
    """

    product_id: str
    current_stock: int
    reorder_level: int
    average_daily_sales: Decimal
    suggested_order_quantity: int
    days_until_stockout: DaysOfCover

    @property
    def needs_reorder(self) -> bool:
        return self.current_stock <= self.reorder_level

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "current_stock": self.current_stock,
            "reorder_level": self.reorder_level,
            "average_daily_sales": str(self.average_daily_sales),
            "suggested_order_quantity": self.suggested_order_quantity,
            "days_until_stockout": self.days_until_stockout.to_dict(),
        }


@dataclass(frozen=True)
class StockoutPrediction:
    """
    Projected stockout of one product.

    ``predicted_date`` is None exactly when ``days_remaining`` is unbounded.
    """

    predicted_date: date | None
    days_remaining: DaysOfCover
    average_daily_sales: Decimal = Decimal("0")

    @property
    def will_stock_out(self) -> bool:
        return self.predicted_date is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "predicted_date": self.predicted_date.isoformat() if self.predicted_date else None,
            "days_remaining": self.days_remaining.to_dict(),
            "average_daily_sales": str(self.average_daily_sales),
        }


def average_daily_sales(sales: Sequence[SalesSample]) -> Fraction:
    """
    Units sold per day: total quantity over the number of samples.

    The result is the exact ratio (``Fraction(5, 3)`` for sales of 5, 0
    and 0); it compares equal to the matching Decimal and can be passed
    straight to ``suggest_reorder_quantity``.  Returns 0 for an empty
    history.
    """
    if not sales:
        return Fraction(0)
    return Fraction(sum(sample.quantity for sample in sales), len(sales))


def _report(velocity: Fraction, places: int) -> Decimal:
    return round_places(fraction_to_decimal(velocity), places)


def round_up_to_multiple(quantity: int, multiple: int) -> int:
    """Smallest multiple of ``multiple`` that is >= ``quantity``."""
    return -(-quantity // multiple) * multiple


@traced_engine(
    "replenishment",
    "1.0",
    fingerprint_fields=("current_stock", "reorder_level", "average_daily_sales", "lead_time_days"),
)
def suggest_reorder_quantity(
    current_stock: int,
    reorder_level: int,
    average_daily_sales: Fraction | Decimal | int | str,
    lead_time_days: int | None = None,
    *,
    product_id: str = "",
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> ReorderSuggestion:
    """
    Suggest how many units to order.

    Args:
        current_stock: Units on hand.
        reorder_level: Threshold at or below which restocking is due.
        average_daily_sales: Units sold per day, ideally the exact ratio
            from ``average_daily_sales()``.
        lead_time_days: Days until a new order arrives; defaults to
            ``policy.default_lead_time_days``.
        product_id: Echoed on the result.
        policy: Safety stock days, reorder multiple and precision.

    Returns:
        ReorderSuggestion.
    """
    velocity = to_fraction(average_daily_sales)
    if lead_time_days is None:
        lead_time_days = policy.default_lead_time_days

    cover = DaysOfCover.from_velocity(current_stock, velocity)
    safety_stock = math.ceil(velocity * policy.safety_stock_days)
    lead_demand = math.ceil(velocity * lead_time_days)
    optimal = lead_demand + safety_stock - current_stock
    suggested = max(0, round_up_to_multiple(optimal, policy.reorder_multiple))

    logger.info("reorder_quantity_suggested", extra={
        "product_id": product_id,
        "current_stock": current_stock,
        "reorder_level": reorder_level,
        "average_daily_sales": str(_report(velocity, policy.decimal_places)),
        "lead_time_days": lead_time_days,
        "safety_stock": safety_stock,
        "lead_time_demand": lead_demand,
        "suggested_order_quantity": suggested,
        "unbounded_cover": cover.is_unbounded,
    })

    return ReorderSuggestion(
        product_id=product_id,
        current_stock=current_stock,
        reorder_level=reorder_level,
        average_daily_sales=_report(velocity, policy.decimal_places),
        suggested_order_quantity=suggested,
        days_until_stockout=cover.rounded(policy.decimal_places),
    )


@traced_engine("replenishment", "1.0", fingerprint_fields=("current_stock", "sales", "as_of"))
def predict_stockout(
    current_stock: int,
    sales: Sequence[SalesSample],
    as_of: date,
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> StockoutPrediction:
    """
    Predict when a product will run out at its historical sales rate.

    The predicted date is ``as_of`` plus the whole number of days of
    cover (the unrounded cover, floored).

    Args:
        current_stock: Units on hand.
        sales: Historical sales samples.
        as_of: Calendar date the projection starts from.
        policy: Rounding precision for ``days_remaining``.

    Returns:
        StockoutPrediction; ``predicted_date`` is None and cover is
        unbounded when there is no history or no sales.
    """
    t0 = time.monotonic()
    velocity = average_daily_sales(sales)

    if velocity <= 0:
        logger.info("stockout_prediction_unbounded", extra={
            "current_stock": current_stock,
            "sample_count": len(sales),
        })
        return StockoutPrediction(
            predicted_date=None,
            days_remaining=DaysOfCover.unbounded(),
            average_daily_sales=Decimal("0"),
        )

    cover = DaysOfCover.from_velocity(current_stock, velocity)
    predicted_date = as_of + timedelta(days=cover.whole_days())

    logger.info("stockout_prediction_completed", extra={
        "current_stock": current_stock,
        "sample_count": len(sales),
        "average_daily_sales": str(_report(velocity, policy.decimal_places)),
        "days_remaining": str(cover.rounded(policy.decimal_places).days),
        "predicted_date": predicted_date.isoformat(),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })

    return StockoutPrediction(
        predicted_date=predicted_date,
        days_remaining=cover.rounded(policy.decimal_places),
        average_daily_sales=_report(velocity, policy.decimal_places),
    )


class StockoutPredictor:
    """
    Stockout projection anchored on an injected clock.

    Contract:
        The clock is the only source of "today"; the projection itself is
        delegated to ``predict_stockout``.
    """

    def __init__(self, clock: Clock, policy: InventoryPolicy = DEFAULT_POLICY):
        self._clock = clock
        self._policy = policy

    def predict(
        self,
        current_stock: int,
        sales: Sequence[SalesSample],
    ) -> StockoutPrediction:
        return predict_stockout(
            current_stock,
            sales,
            self._clock.today(),
            policy=self._policy,
        )
