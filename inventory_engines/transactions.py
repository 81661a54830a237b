"""
inventory_engines.transactions -- Stock movement validation.

Computes the stock level a movement would produce and checks it against
the policy guardrails (never below zero, never above
``policy.max_stock_level``).  Out-of-range results come back as an invalid
``TransactionValidation`` with the stock unchanged; nothing is raised and
nothing is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass

from inventory_kernel.domain.dtos import TransactionDirection
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.transactions")


@dataclass(frozen=True)
class TransactionValidation:
    """
    Outcome of a stock movement check.

    ``new_stock`` is the resulting level when valid, and the unchanged
    current level when invalid.
    """

    valid: bool
    new_stock: int
    message: str | None = None


@traced_engine(
    "transactions",
    "1.0",
    fingerprint_fields=("product_stock", "transaction_quantity", "direction"),
)
def validate_inventory_transaction(
    product_stock: int,
    transaction_quantity: int,
    direction: TransactionDirection | str,
    *,
    policy: InventoryPolicy = DEFAULT_POLICY,
) -> TransactionValidation:
    """
    Validate a stock movement.

    Args:
        product_stock: Current units on hand.
        transaction_quantity: Units moved.
        direction: ``in`` adds the quantity, ``out`` removes it.
        policy: Supplies the stock ceiling.

    Returns:
        TransactionValidation.

    Raises:
        InvalidTransactionDirectionError: ``direction`` is not in/out.
    """
    direction = TransactionDirection.parse(direction)

    if direction is TransactionDirection.IN:
        new_stock = product_stock + transaction_quantity
    else:
        new_stock = product_stock - transaction_quantity

    if new_stock < 0:
        logger.warning("transaction_rejected_insufficient_stock", extra={
            "product_stock": product_stock,
            "transaction_quantity": transaction_quantity,
            "direction": direction.value,
        })
        return TransactionValidation(
            valid=False,
            new_stock=product_stock,
            message=(
                f"Insufficient stock. Current stock: {product_stock}, "
                f"Requested: {transaction_quantity}"
            ),
        )

    if new_stock > policy.max_stock_level:
        logger.warning("transaction_rejected_stock_ceiling", extra={
            "product_stock": product_stock,
            "transaction_quantity": transaction_quantity,
            "direction": direction.value,
            "new_stock": new_stock,
            "max_stock_level": policy.max_stock_level,
        })
        return TransactionValidation(
            valid=False,
            new_stock=product_stock,
            message=f"Stock level too high. New stock would be: {new_stock}",
        )

    logger.info("transaction_validated", extra={
        "product_stock": product_stock,
        "transaction_quantity": transaction_quantity,
        "direction": direction.value,
        "new_stock": new_stock,
    })
    return TransactionValidation(valid=True, new_stock=new_stock)
