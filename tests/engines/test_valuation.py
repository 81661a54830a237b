"""
Tests for inventory valuation at cost and at retail.
"""

from decimal import Decimal

from inventory_engines.valuation import (
    InventoryValuation,
    calculate_inventory_value,
    calculate_retail_value,
)
from inventory_kernel.domain.dtos import StockHolding


class TestInventoryValue:
    """Weighted average cost valuation."""

    def test_weighted_average(self):
        valuation = calculate_inventory_value([
            StockHolding(quantity=10, cost_price=Decimal("2.50")),
            StockHolding(quantity=30, cost_price=Decimal("1.50")),
        ])

        assert valuation.total_value == Decimal("70.00")
        assert valuation.average_cost == Decimal("1.75")
        assert valuation.total_quantity == 40
        assert not valuation.is_empty

    def test_empty_input(self):
        valuation = calculate_inventory_value([])

        assert valuation == InventoryValuation(
            total_value=Decimal("0"),
            average_cost=Decimal("0"),
            total_quantity=0,
        )
        assert valuation.is_empty

    def test_zero_quantity_never_divides(self):
        valuation = calculate_inventory_value([
            StockHolding(quantity=0, cost_price=Decimal("9.99")),
            StockHolding(quantity=0, cost_price=Decimal("1.00")),
        ])

        assert valuation.total_value == Decimal("0")
        assert valuation.average_cost == Decimal("0")

    def test_average_from_unrounded_total(self):
        valuation = calculate_inventory_value([
            StockHolding(quantity=3, cost_price=Decimal("0.333")),
        ])

        # total 0.999 -> 1.00, average 0.333 -> 0.33
        assert valuation.total_value == Decimal("1.00")
        assert valuation.average_cost == Decimal("0.33")

    def test_average_rounds_half_up(self):
        valuation = calculate_inventory_value([
            StockHolding(quantity=1, cost_price=Decimal("1.00")),
            StockHolding(quantity=1, cost_price=Decimal("1.01")),
        ])
        assert valuation.average_cost == Decimal("1.01")  # 1.005

    def test_completion_logged(self, captured_logs):
        calculate_inventory_value([StockHolding(quantity=2, cost_price=Decimal("5"))])

        logs = [r for r in captured_logs() if r["message"] == "inventory_valuation_completed"]
        assert logs[-1]["total_value"] == "10.00"
        assert logs[-1]["total_quantity"] == 2


class TestRetailValue:

    def test_values_at_selling_price(self):
        value = calculate_retail_value([
            StockHolding(quantity=10, cost_price=Decimal("2.50"), selling_price=Decimal("4.00")),
            StockHolding(quantity=3, cost_price=Decimal("1.00"), selling_price=Decimal("1.99")),
        ])
        assert value == Decimal("45.97")

    def test_unpriced_holdings_contribute_nothing(self, captured_logs):
        value = calculate_retail_value([
            StockHolding(quantity=10, cost_price=Decimal("2.50"), selling_price=Decimal("4.00")),
            StockHolding(quantity=5, cost_price=Decimal("1.00")),
        ])

        assert value == Decimal("40.00")
        warnings = [
            r for r in captured_logs() if r["message"] == "retail_value_unpriced_holdings"
        ]
        assert warnings[-1]["unpriced_count"] == 1
        assert warnings[-1]["level"] == "WARNING"

    def test_empty(self):
        assert calculate_retail_value([]) == Decimal("0")
