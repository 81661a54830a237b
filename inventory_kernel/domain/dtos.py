"""
DTOs -- Typed input records and the boundary parsers that build them.

Responsibility:
    Defines the immutable records the engines consume (LineItem,
    SaleLineItem, SalesSample, StockHolding, ProductSnapshot, TallyCount,
    OrderRecord, TransactionDirection) and the ``parse_*`` functions that
    turn rows as delivered by the data store (plain dicts with int/str/float/Decimal
    numerics and ISO date strings) into those records.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Callers parse at the boundary, then hand typed records to the engines.
    Engines never see raw rows.

Invariants enforced:
    - Parsed quantities are non-negative ints; parsed prices are
      non-negative Decimals; discounts lie in [0, 100].
    - Floats coming from the store are converted through ``str()`` so the
      shortest decimal representation is kept.
    - Record constructors only normalize types; they do not reject
      negatives, so engines stay total over anything well-typed.

Failure modes:
    - InvalidLineItemError, InvalidSalesSampleError, InvalidStockRecordError
      and InvalidOrderRecordError from the parsers, carrying the offending
      position, field and value.
    - InvalidTransactionDirectionError from ``TransactionDirection.parse``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from inventory_kernel.domain.values import to_decimal
from inventory_kernel.exceptions import (
    InvalidLineItemError,
    InvalidOrderRecordError,
    InvalidSalesSampleError,
    InvalidStockRecordError,
    InvalidTransactionDirectionError,
)

_HUNDRED = Decimal("100")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineItem:
    """
    One order (or return) line.

    ``discount_percent`` is optional; None and 0 both mean no discount.
    """

    quantity: int
    unit_price: Decimal
    discount_percent: Decimal | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        if self.discount_percent is not None:
            object.__setattr__(
                self, "discount_percent", to_decimal(self.discount_percent)
            )

    @property
    def gross_amount(self) -> Decimal:
        """quantity x unit_price, unrounded."""
        return Decimal(self.quantity) * self.unit_price

    @property
    def discount_amount(self) -> Decimal:
        """Discount taken off this line, unrounded."""
        if not self.discount_percent:
            return Decimal("0")
        return self.gross_amount * self.discount_percent / _HUNDRED

    @property
    def net_amount(self) -> Decimal:
        return self.gross_amount - self.discount_amount


@dataclass(frozen=True)
class SaleLineItem:
    """One point-of-sale line, priced at the product's selling price."""

    quantity: int
    selling_price: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "selling_price", to_decimal(self.selling_price))

    @property
    def amount(self) -> Decimal:
        return Decimal(self.quantity) * self.selling_price


@dataclass(frozen=True)
class SalesSample:
    """A historical sale of one product: units sold on a date."""

    quantity: int
    sale_date: date


@dataclass(frozen=True)
class StockHolding:
    """Units on hand of one product with its unit costs."""

    quantity: int
    cost_price: Decimal
    selling_price: Decimal | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "cost_price", to_decimal(self.cost_price))
        if self.selling_price is not None:
            object.__setattr__(self, "selling_price", to_decimal(self.selling_price))


@dataclass(frozen=True)
class ProductSnapshot:
    """Stock position and sales history of one product."""

    product_id: str
    name: str
    current_stock: int
    reorder_level: int
    sales: tuple[SalesSample, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.sales, tuple):
            object.__setattr__(self, "sales", tuple(self.sales))


@dataclass(frozen=True)
class TallyCount:
    """
    One line of a physical stock count.

    ``counted_quantity`` is None when the product was not counted; the
    system quantity is then taken as the count.
    """

    product_id: str
    system_quantity: int
    counted_quantity: int | None = None

    @property
    def effective_count(self) -> int:
        if self.counted_quantity is None:
            return self.system_quantity
        return self.counted_quantity


@dataclass(frozen=True)
class OrderRecord:
    """A stored order as seen by the dashboard: its total, date and status."""

    order_id: str
    total_amount: Decimal
    order_date: date
    status: str = "completed"

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_amount", to_decimal(self.total_amount))

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"


class TransactionDirection(str, Enum):
    """Direction of a stock movement."""

    IN = "in"  # Receipt, return to stock
    OUT = "out"  # Sale, issue, write-off

    @classmethod
    def parse(cls, value: Any) -> TransactionDirection:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidTransactionDirectionError(value)


# ---------------------------------------------------------------------------
# Field parsing helpers
# ---------------------------------------------------------------------------


def _parse_decimal(
    value: Any,
    index: int,
    field_name: str,
    error_cls: type,
) -> Decimal:
    if value is None or isinstance(value, bool):
        raise error_cls(index, field_name, value, "a number is required")
    try:
        if isinstance(value, float):
            result = Decimal(str(value))
        else:
            result = to_decimal(value)
    except (TypeError, ValueError, InvalidOperation):
        raise error_cls(index, field_name, value, "not a number") from None
    if not result.is_finite():
        raise error_cls(index, field_name, value, "must be finite")
    return result


def _parse_non_negative_decimal(
    value: Any,
    index: int,
    field_name: str,
    error_cls: type,
) -> Decimal:
    result = _parse_decimal(value, index, field_name, error_cls)
    if result < 0:
        raise error_cls(index, field_name, value, "cannot be negative")
    return result


def _parse_count(
    value: Any,
    index: int,
    field_name: str,
    error_cls: type,
) -> int:
    """Parse a non-negative whole number of units."""
    result = _parse_decimal(value, index, field_name, error_cls)
    if result != result.to_integral_value():
        raise error_cls(index, field_name, value, "must be a whole number")
    if result < 0:
        raise error_cls(index, field_name, value, "cannot be negative")
    return int(result)


def _parse_sale_date(
    value: Any,
    index: int,
    field_name: str = "date",
    error_cls: type = InvalidSalesSampleError,
) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise error_cls(index, field_name, value, "not an ISO calendar date")


def _first_present(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in row:
            return row[key]
    return None


# ---------------------------------------------------------------------------
# Boundary parsers
# ---------------------------------------------------------------------------


def parse_line_items(rows: Iterable[Mapping[str, Any]]) -> tuple[LineItem, ...]:
    """
    Parse order/return lines (``quantity``, ``unit_price``, optional
    ``discount_percent``).

    Raises:
        InvalidLineItemError: negative or non-numeric quantity/price,
            fractional quantity, or a discount outside [0, 100].
    """
    items: list[LineItem] = []
    for index, row in enumerate(rows):
        quantity = _parse_count(row.get("quantity"), index, "quantity", InvalidLineItemError)
        unit_price = _parse_non_negative_decimal(
            row.get("unit_price"), index, "unit_price", InvalidLineItemError
        )
        raw_discount = row.get("discount_percent")
        discount: Decimal | None = None
        if raw_discount is not None:
            discount = _parse_non_negative_decimal(
                raw_discount, index, "discount_percent", InvalidLineItemError
            )
            if discount > _HUNDRED:
                raise InvalidLineItemError(
                    index, "discount_percent", raw_discount, "cannot exceed 100"
                )
        items.append(LineItem(quantity=quantity, unit_price=unit_price, discount_percent=discount))
    return tuple(items)


def parse_sale_items(rows: Iterable[Mapping[str, Any]]) -> tuple[SaleLineItem, ...]:
    """Parse point-of-sale lines (``quantity``, ``selling_price``)."""
    items: list[SaleLineItem] = []
    for index, row in enumerate(rows):
        quantity = _parse_count(row.get("quantity"), index, "quantity", InvalidLineItemError)
        price = _parse_non_negative_decimal(
            _first_present(row, "selling_price", "unit_price"),
            index,
            "selling_price",
            InvalidLineItemError,
        )
        items.append(SaleLineItem(quantity=quantity, selling_price=price))
    return tuple(items)


def parse_sales_samples(rows: Iterable[Mapping[str, Any]]) -> tuple[SalesSample, ...]:
    """
    Parse historical sales records (``quantity`` and ``date`` or ``sale_date``).

    Dates may be ``date``/``datetime`` objects, ISO dates or ISO timestamps.
    """
    samples: list[SalesSample] = []
    for index, row in enumerate(rows):
        quantity = _parse_count(row.get("quantity"), index, "quantity", InvalidSalesSampleError)
        sale_date = _parse_sale_date(_first_present(row, "sale_date", "date"), index)
        samples.append(SalesSample(quantity=quantity, sale_date=sale_date))
    return tuple(samples)


def parse_stock_holdings(rows: Iterable[Mapping[str, Any]]) -> tuple[StockHolding, ...]:
    """Parse valuation rows (``quantity`` or ``current_stock``, ``cost_price``,
    optional ``selling_price``)."""
    holdings: list[StockHolding] = []
    for index, row in enumerate(rows):
        quantity = _parse_count(
            _first_present(row, "quantity", "current_stock"),
            index,
            "quantity",
            InvalidStockRecordError,
        )
        cost_price = _parse_non_negative_decimal(
            row.get("cost_price"), index, "cost_price", InvalidStockRecordError
        )
        selling_price = None
        if row.get("selling_price") is not None:
            selling_price = _parse_non_negative_decimal(
                row["selling_price"], index, "selling_price", InvalidStockRecordError
            )
        holdings.append(
            StockHolding(quantity=quantity, cost_price=cost_price, selling_price=selling_price)
        )
    return tuple(holdings)


def parse_product_snapshots(
    rows: Iterable[Mapping[str, Any]],
) -> tuple[ProductSnapshot, ...]:
    """
    Parse product rows with embedded sales history.

    Keys: ``id`` (or ``product_id``), ``name``, ``current_stock``,
    ``reorder_level``, optional ``sales`` list.
    """
    products: list[ProductSnapshot] = []
    for index, row in enumerate(rows):
        product_id = _first_present(row, "product_id", "id")
        if product_id is None or str(product_id).strip() == "":
            raise InvalidStockRecordError(index, "product_id", product_id, "is required")
        products.append(
            ProductSnapshot(
                product_id=str(product_id),
                name=str(row.get("name") or ""),
                current_stock=_parse_count(
                    row.get("current_stock"), index, "current_stock", InvalidStockRecordError
                ),
                reorder_level=_parse_count(
                    row.get("reorder_level"), index, "reorder_level", InvalidStockRecordError
                ),
                sales=parse_sales_samples(row.get("sales") or ()),
            )
        )
    return tuple(products)


def parse_tally_counts(rows: Iterable[Mapping[str, Any]]) -> tuple[TallyCount, ...]:
    """
    Parse stock tally lines (``product_id``, ``system_quantity`` or
    ``current_stock``, optional ``counted_quantity``).
    """
    counts: list[TallyCount] = []
    for index, row in enumerate(rows):
        product_id = _first_present(row, "product_id", "id")
        if product_id is None or str(product_id).strip() == "":
            raise InvalidStockRecordError(index, "product_id", product_id, "is required")
        counted = row.get("counted_quantity")
        counts.append(
            TallyCount(
                product_id=str(product_id),
                system_quantity=_parse_count(
                    _first_present(row, "system_quantity", "current_stock"),
                    index,
                    "system_quantity",
                    InvalidStockRecordError,
                ),
                counted_quantity=None if counted is None else _parse_count(
                    counted, index, "counted_quantity", InvalidStockRecordError
                ),
            )
        )
    return tuple(counts)


def parse_order_records(rows: Iterable[Mapping[str, Any]]) -> tuple[OrderRecord, ...]:
    """
    Parse order rows (``id`` or ``order_id``, ``total_amount``,
    ``order_date``, ``order_status``).

    Status is trimmed and lower-cased; a missing status counts as completed.
    """
    orders: list[OrderRecord] = []
    for index, row in enumerate(rows):
        order_id = _first_present(row, "order_id", "id")
        if order_id is None or str(order_id).strip() == "":
            raise InvalidOrderRecordError(index, "order_id", order_id, "is required")
        status = _first_present(row, "order_status", "status")
        orders.append(
            OrderRecord(
                order_id=str(order_id),
                total_amount=_parse_non_negative_decimal(
                    row.get("total_amount"), index, "total_amount", InvalidOrderRecordError
                ),
                order_date=_parse_sale_date(
                    row.get("order_date"), index, "order_date", InvalidOrderRecordError
                ),
                status="completed" if status is None else str(status).strip().lower(),
            )
        )
    return tuple(orders)
