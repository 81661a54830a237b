"""
Values -- Immutable domain value objects and rounding helpers.

Responsibility:
    Provides the numeric primitives shared by every inventory engine:
    Decimal coercion, half-up rounding to a fixed number of fraction
    digits, and ``DaysOfCover``, the tagged "how long will stock last"
    value that replaces floating-point infinity.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by the DTOs and by every engine. No outward dependencies.

Invariants enforced:
    - Decimal-only arithmetic: floats are rejected by ``to_decimal``;
      the boundary parsers convert store values before they get here.
    - Rounding is ROUND_HALF_UP on the value itself (value x 10^places,
      rounded to the nearest integer, divided back).
    - ``DaysOfCover`` is either finite (a Decimal) or unbounded, never
      both; unbounded compares greater than every finite value.
    - Day counts derived from sales history keep the exact ratio, so
      whole-day floors and day thresholds are never off by one ulp.

Failure modes:
    - TypeError from ``to_decimal`` for float or bool input.
    - ValueError from ``to_decimal`` for unparsable strings.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from fractions import Fraction
from typing import Any

MONEY_PLACES = 2
UNBOUNDED_LABEL = "unbounded"


def to_decimal(value: Decimal | int | str) -> Decimal:
    """
    Coerce an int, str or Decimal to Decimal.

    Floats are refused: a float has already lost the exact cent value, so
    callers must convert at the boundary (see ``inventory_kernel.domain.dtos``).
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a numeric amount")
    if isinstance(value, float):
        raise TypeError(
            f"Float amounts are not accepted ({value!r}); pass Decimal, int or str"
        )
    if isinstance(value, (int, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Cannot convert {value!r} to Decimal") from e
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


def to_fraction(value: Fraction | Decimal | int | str) -> Fraction:
    """Exact rational form of an amount; floats are refused as in ``to_decimal``."""
    if isinstance(value, Fraction):
        return value
    return Fraction(to_decimal(value))


def fraction_to_decimal(value: Fraction) -> Decimal:
    """Decimal quotient of an exact ratio, to the context precision."""
    return Decimal(value.numerator) / Decimal(value.denominator)


def round_places(value: Decimal, places: int = MONEY_PLACES) -> Decimal:
    """Round half-up to ``places`` fraction digits."""
    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def round_cents(value: Decimal) -> Decimal:
    """Round a monetary amount half-up to the cent."""
    return round_places(value, MONEY_PLACES)


@dataclass(frozen=True, slots=True)
class DaysOfCover:
    """
    Number of days current stock will last, or unbounded.

    Contract:
        ``days is None`` means unbounded: there is no sales velocity, so
        stock never runs out at the observed rate.
    Guarantees:
        - Immutable and hashable.
        - Total ordering: every finite value < unbounded.
        - ``to_dict()`` is JSON-safe (no float infinity).
    Non-goals:
        - Does not reject negative day counts; negative stock is the
          caller's concern.
    """

    days: Decimal | None = None
    # Unrounded stock/velocity ratio; floors and thresholds read this
    exact: Fraction | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.days is not None and not isinstance(self.days, Decimal):
            object.__setattr__(self, "days", to_decimal(self.days))

    @classmethod
    def finite(cls, days: Decimal | int | str) -> DaysOfCover:
        return cls(days=to_decimal(days))

    @classmethod
    def unbounded(cls) -> DaysOfCover:
        return cls(days=None)

    @classmethod
    def from_velocity(
        cls,
        stock: Decimal | int,
        average_daily_sales: Fraction | Decimal | int,
    ) -> DaysOfCover:
        """
        stock / velocity when velocity is positive, otherwise unbounded.

        The quotient is kept exact, so a velocity of 5/3 and 5 units give
        exactly 3 days rather than 2.999...; ``days`` is its Decimal form.
        """
        velocity = to_fraction(average_daily_sales)
        if velocity > 0:
            ratio = to_fraction(stock) / velocity
            return cls(days=fraction_to_decimal(ratio), exact=ratio)
        return cls.unbounded()

    @property
    def is_unbounded(self) -> bool:
        return self.days is None

    def rounded(self, places: int = MONEY_PLACES) -> DaysOfCover:
        """Same cover rounded half-up; unbounded stays unbounded."""
        if self.days is None:
            return self
        return DaysOfCover(days=round_places(self.days, places))

    def whole_days(self) -> int | None:
        """Floor of the day count, or None when unbounded."""
        if self.days is None:
            return None
        return math.floor(self._exact_days())

    def exceeds(self, threshold: Decimal | int) -> bool:
        """True when cover is strictly longer than ``threshold`` days."""
        if self.days is None:
            return True
        return self._exact_days() > to_fraction(threshold)

    def _exact_days(self) -> Fraction:
        if self.exact is not None:
            return self.exact
        return Fraction(self.days)

    def format(self, places: int = 1) -> str:
        """Human-readable day count, e.g. ``"12.5"`` or ``"unbounded"``."""
        if self.days is None:
            return UNBOUNDED_LABEL
        return str(round_places(self.days, places))

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": None if self.days is None else str(self.days),
            "unbounded": self.days is None,
        }

    def _key(self) -> tuple[int, Decimal]:
        if self.days is None:
            return (1, Decimal("0"))
        return (0, self.days)

    def __lt__(self, other: DaysOfCover) -> bool:
        if not isinstance(other, DaysOfCover):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: DaysOfCover) -> bool:
        if not isinstance(other, DaysOfCover):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: DaysOfCover) -> bool:
        if not isinstance(other, DaysOfCover):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: DaysOfCover) -> bool:
        if not isinstance(other, DaysOfCover):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        if self.days is None:
            return UNBOUNDED_LABEL
        return f"{self.days} days"
