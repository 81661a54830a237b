"""
Tests for Decimal coercion, rounding and DaysOfCover.
"""

from decimal import Decimal
from fractions import Fraction

import pytest

from inventory_kernel.domain.values import (
    DaysOfCover,
    fraction_to_decimal,
    round_cents,
    round_places,
    to_decimal,
    to_fraction,
)


class TestToDecimal:

    def test_passes_decimal_through(self):
        value = Decimal("1.10")
        assert to_decimal(value) is value

    def test_int_and_str(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(" 2.50 ") == Decimal("2.50")

    def test_rejects_float(self):
        with pytest.raises(TypeError):
            to_decimal(0.1)

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            to_decimal(True)

    def test_rejects_garbage_string(self):
        with pytest.raises(ValueError):
            to_decimal("ten")


class TestRounding:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("0.125", "0.13"),
            ("0.124", "0.12"),
            ("2.675", "2.68"),
            ("-0.125", "-0.13"),
            ("10", "10.00"),
        ],
    )
    def test_round_cents_half_up(self, value, expected):
        assert round_cents(Decimal(value)) == Decimal(expected)
        assert str(round_cents(Decimal(value))) == expected

    def test_round_places(self):
        assert round_places(Decimal("12.5"), 0) == Decimal("13")
        assert round_places(Decimal("3.14159"), 4) == Decimal("3.1416")


class TestDaysOfCover:

    def test_from_velocity(self):
        cover = DaysOfCover.from_velocity(10, Decimal("4"))
        assert cover.days == Decimal("2.5")
        assert not cover.is_unbounded

    def test_non_terminating_velocity_gives_whole_days(self):
        cover = DaysOfCover.from_velocity(5, Fraction(5, 3))

        assert cover.days == Decimal("3")
        assert cover.whole_days() == 3

    def test_exact_threshold_not_exceeded(self):
        cover = DaysOfCover.from_velocity(30, Fraction(1, 3))

        assert cover.days == Decimal("90")
        assert not cover.exceeds(90)
        assert DaysOfCover.from_velocity(31, Fraction(1, 3)).exceeds(90)

    def test_exact_ratio_ignored_by_equality(self):
        assert DaysOfCover.from_velocity(10, Fraction(4)) == DaysOfCover.finite("2.5")

    def test_zero_velocity_is_unbounded(self):
        assert DaysOfCover.from_velocity(10, Decimal("0")).is_unbounded

    def test_negative_velocity_is_unbounded(self):
        assert DaysOfCover.from_velocity(10, Decimal("-1")).is_unbounded

    def test_unbounded_greater_than_any_finite(self):
        unbounded = DaysOfCover.unbounded()
        huge = DaysOfCover.finite("1E+9")

        assert huge < unbounded
        assert unbounded > huge
        assert unbounded >= DaysOfCover.unbounded()
        assert max([huge, unbounded, DaysOfCover.finite(3)]) == unbounded

    def test_finite_ordering(self):
        assert DaysOfCover.finite(2) < DaysOfCover.finite("2.5")
        assert sorted([DaysOfCover.finite(5), DaysOfCover.finite(1)]) == [
            DaysOfCover.finite(1),
            DaysOfCover.finite(5),
        ]

    def test_exceeds(self):
        assert DaysOfCover.finite(91).exceeds(90)
        assert not DaysOfCover.finite(90).exceeds(90)
        assert DaysOfCover.unbounded().exceeds(90)

    def test_whole_days_floors(self):
        assert DaysOfCover.finite("3.99").whole_days() == 3
        assert DaysOfCover.unbounded().whole_days() is None

    def test_rounded(self):
        assert DaysOfCover.finite("3.335").rounded(2).days == Decimal("3.34")
        assert DaysOfCover.unbounded().rounded(2).is_unbounded

    def test_format(self):
        assert DaysOfCover.finite("2.45").format(1) == "2.5"
        assert DaysOfCover.finite("99.5").format(0) == "100"
        assert DaysOfCover.unbounded().format() == "unbounded"

    def test_to_dict_is_json_safe(self):
        assert DaysOfCover.finite("1.50").to_dict() == {"days": "1.50", "unbounded": False}
        assert DaysOfCover.unbounded().to_dict() == {"days": None, "unbounded": True}

    def test_str(self):
        assert str(DaysOfCover.finite(4)) == "4 days"
        assert str(DaysOfCover.unbounded()) == "unbounded"

    def test_hashable_and_equal(self):
        assert {DaysOfCover.finite(1), DaysOfCover.finite(1)} == {DaysOfCover.finite(1)}
        assert DaysOfCover.unbounded() == DaysOfCover()

    def test_int_days_normalized(self):
        assert DaysOfCover(days=3).days == Decimal("3")

    def test_rejects_float_days(self):
        with pytest.raises(TypeError):
            DaysOfCover.finite(2.5)


class TestFractions:

    def test_to_fraction(self):
        assert to_fraction(Decimal("0.25")) == Fraction(1, 4)
        assert to_fraction("3") == Fraction(3)
        assert to_fraction(Fraction(5, 3)) == Fraction(5, 3)

    def test_to_fraction_refuses_float(self):
        with pytest.raises(TypeError):
            to_fraction(0.5)

    def test_fraction_to_decimal(self):
        assert fraction_to_decimal(Fraction(3, 2)) == Decimal("1.5")
        assert round_places(fraction_to_decimal(Fraction(5, 3))) == Decimal("1.67")
