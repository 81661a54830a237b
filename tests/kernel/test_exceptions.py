"""Tests for the typed exception hierarchy."""

import pytest

from inventory_kernel import exceptions
from inventory_kernel.exceptions import (
    ConfigurationError,
    InvalidPolicyError,
    InvalidSalesSampleError,
    InvalidTransactionDirectionError,
    InventoryKernelError,
    ValidationError,
)


def _all_error_classes() -> list[type]:
    return [
        obj for obj in vars(exceptions).values()
        if isinstance(obj, type) and issubclass(obj, InventoryKernelError)
    ]


class TestHierarchy:

    @pytest.mark.parametrize("cls", _all_error_classes(), ids=lambda c: c.__name__)
    def test_every_class_has_own_code(self, cls):
        assert cls.code
        assert cls.code.isupper()

    def test_codes_unique(self):
        codes = [cls.code for cls in _all_error_classes()]
        assert len(codes) == len(set(codes))

    def test_boundary_errors(self):
        assert issubclass(InvalidSalesSampleError, ValidationError)
        assert issubclass(InvalidTransactionDirectionError, ValidationError)
        assert issubclass(InvalidPolicyError, ConfigurationError)


class TestMessages:

    def test_sales_sample_message(self):
        err = InvalidSalesSampleError(3, "date", "soon", "not an ISO calendar date")
        assert str(err) == (
            "Invalid sales sample at position 3: date='soon' (not an ISO calendar date)"
        )

    def test_policy_error_joins_all_errors(self):
        err = InvalidPolicyError(["a is bad", "b is bad"], source="policy.yaml")
        assert str(err) == "Invalid inventory policy in policy.yaml: a is bad; b is bad"
        assert err.errors == ["a is bad", "b is bad"]
