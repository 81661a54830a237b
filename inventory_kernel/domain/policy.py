"""
Inventory policy -- the named, overridable constants used by the engines.

Every engine entry point takes an ``InventoryPolicy`` keyword argument
(defaulting to ``DEFAULT_POLICY``) instead of reading module-level
constants.  ``inventory_config`` builds policies from YAML files; this
module only defines the value type, so engines never import the config
layer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from decimal import Decimal
from typing import Any

from inventory_kernel.domain.values import to_decimal


@dataclass(frozen=True)
class InventoryPolicy:
    """
    Inventory calculation policy.

    Immutable value object. Range checks live in
    ``inventory_config.validator.validate_policy``; construction only
    normalizes types.
    """

    # Applied to the subtotal of orders and sales (0.10 == 10%)
    tax_rate: Decimal = Decimal("0.10")

    # Days of average sales held as buffer on top of lead-time demand
    safety_stock_days: int = 3

    # Lead time used when the caller does not supply one
    default_lead_time_days: int = 7

    # Suggested order quantities are rounded up to a multiple of this
    reorder_multiple: int = 10

    # Cover strictly above this many days classifies a product as overstocked
    overstock_threshold_days: int = 90

    # Ceiling on the stock level a single transaction may produce
    max_stock_level: int = 100_000

    # Fraction digits for monetary amounts and day counts
    decimal_places: int = 2

    def __post_init__(self) -> None:
        if not isinstance(self.tax_rate, Decimal):
            object.__setattr__(self, "tax_rate", to_decimal(self.tax_rate))

    @property
    def tax_rate_percent(self) -> Decimal:
        """Tax rate as percentage (e.g., 10 for 10%)."""
        return self.tax_rate * Decimal("100")

    def with_overrides(self, **changes: Any) -> InventoryPolicy:
        """Copy of this policy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation (Decimal rendered as str)."""
        data = asdict(self)
        data["tax_rate"] = str(self.tax_rate)
        return data


DEFAULT_POLICY = InventoryPolicy()
