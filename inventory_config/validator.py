"""
Policy Validator (``inventory_config.validator``).

Responsibility
--------------
Checks an ``InventoryPolicy`` for values the engines cannot work with
(negative tax rate, zero reorder multiple, ...) before it is handed out
by ``get_active_policy()``.

Failure modes
-------------
* Validation errors (``PolicyValidationResult.errors``)  -> the policy
  MUST NOT be used; the loader raises ``InvalidPolicyError``.
* Validation warnings  -> the policy is usable but unusual.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from inventory_kernel.domain.policy import InventoryPolicy

_MAX_DECIMAL_PLACES = 6

# (field, minimum) for integer policy fields
_INT_FIELDS: tuple[tuple[str, int], ...] = (
    ("safety_stock_days", 0),
    ("default_lead_time_days", 0),
    ("reorder_multiple", 1),
    ("overstock_threshold_days", 0),
    ("max_stock_level", 1),
    ("decimal_places", 0),
)


@dataclass
class PolicyValidationResult:
    """
    Result of policy validation.

    ``is_valid`` is True only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_policy(policy: InventoryPolicy) -> PolicyValidationResult:
    """Validate every field of ``policy`` and collect all problems."""
    result = PolicyValidationResult()

    if not policy.tax_rate.is_finite():
        result.add_error(f"tax_rate must be a finite number, got {policy.tax_rate}")
    elif policy.tax_rate < 0:
        result.add_error(f"tax_rate cannot be negative, got {policy.tax_rate}")
    elif policy.tax_rate > Decimal("1"):
        result.add_warning(
            f"tax_rate {policy.tax_rate} is above 100%; rates are fractions (0.10 == 10%)"
        )

    for name, minimum in _INT_FIELDS:
        value = getattr(policy, name)
        if isinstance(value, bool) or not isinstance(value, int):
            result.add_error(f"{name} must be an integer, got {value!r}")
        elif value < minimum:
            result.add_error(f"{name} must be >= {minimum}, got {value}")

    places = policy.decimal_places
    if isinstance(places, int) and places > _MAX_DECIMAL_PLACES:
        result.add_error(
            f"decimal_places must be <= {_MAX_DECIMAL_PLACES}, got {places}"
        )

    lead = policy.default_lead_time_days
    threshold = policy.overstock_threshold_days
    if isinstance(lead, int) and isinstance(threshold, int) and threshold < lead:
        result.add_warning(
            f"overstock_threshold_days ({threshold}) is shorter than "
            f"default_lead_time_days ({lead})"
        )

    return result
