"""
Typed exception hierarchy for the inventory kernel.

The calculation engines never raise: undefined results (division by zero,
zero sales velocity) resolve to ``0`` or an unbounded ``DaysOfCover``, and
out-of-range stock movements come back as structured invalid results.

Exceptions are raised only at the two boundaries of the kernel:

    - Parsing rows delivered by the data store into typed records
      (``inventory_kernel.domain.dtos``).
    - Loading and validating the inventory policy
      (``inventory_config``).

Hierarchy::

    InventoryKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidLineItemError
    |   +-- InvalidSalesSampleError
    |   +-- InvalidStockRecordError
    |   +-- InvalidOrderRecordError
    |   +-- InvalidTransactionDirectionError
    |
    +-- ConfigurationError
        +-- PolicyFileNotFoundError
        +-- InvalidPolicyError

Every class carries a machine-readable ``code`` class attribute and keeps
its context as attributes so that ``StructuredFormatter`` can emit them.
"""

from __future__ import annotations

from typing import Any


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Boundary validation


class ValidationError(InventoryKernelError):
    """Base exception for rejected boundary input."""

    code: str = "VALIDATION_ERROR"


class InvalidLineItemError(ValidationError):
    """An order, sale or return line cannot be used for a calculation."""

    code: str = "INVALID_LINE_ITEM"

    def __init__(self, index: int, field: str, value: Any, reason: str):
        self.index = index
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid line item at position {index}: {field}={value!r} ({reason})"
        )


class InvalidSalesSampleError(ValidationError):
    """A historical sales record is malformed."""

    code: str = "INVALID_SALES_SAMPLE"

    def __init__(self, index: int, field: str, value: Any, reason: str):
        self.index = index
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid sales sample at position {index}: {field}={value!r} ({reason})"
        )


class InvalidStockRecordError(ValidationError):
    """A product stock record (holding, snapshot or tally count) is malformed."""

    code: str = "INVALID_STOCK_RECORD"

    def __init__(self, index: int, field: str, value: Any, reason: str):
        self.index = index
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid stock record at position {index}: {field}={value!r} ({reason})"
        )


class InvalidOrderRecordError(ValidationError):
    """A completed-order row used for revenue is malformed."""

    code: str = "INVALID_ORDER_RECORD"

    def __init__(self, index: int, field: str, value: Any, reason: str):
        self.index = index
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid order record at position {index}: {field}={value!r} ({reason})"
        )


class InvalidTransactionDirectionError(ValidationError):
    """Stock movement direction is neither 'in' nor 'out'."""

    code: str = "INVALID_TRANSACTION_DIRECTION"

    def __init__(self, direction: Any):
        self.direction = direction
        super().__init__(
            f"Invalid transaction direction {direction!r}: expected 'in' or 'out'"
        )


# Configuration


class ConfigurationError(InventoryKernelError):
    """Base exception for inventory policy configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class PolicyFileNotFoundError(ConfigurationError):
    """The configured policy file does not exist."""

    code: str = "POLICY_FILE_NOT_FOUND"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Inventory policy file not found: {path}")


class InvalidPolicyError(ConfigurationError):
    """
    The inventory policy failed validation.

    Carries every validation error so the caller sees all problems at once.
    """

    code: str = "INVALID_POLICY"

    def __init__(self, errors: list[str], source: str | None = None):
        self.errors = list(errors)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(
            f"Invalid inventory policy{where}: " + "; ".join(self.errors)
        )
