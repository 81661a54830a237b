"""
Pytest fixtures for the inventory kernel test suite.

Provides:
- Structured logging configured for the whole session
- LogContext isolation between tests
- ``captured_logs`` for asserting on emitted log records
- Deterministic clock and sample domain data
"""

import json
import logging
from datetime import date, datetime, timedelta, timezone
from io import StringIO

import pytest

from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.domain.dtos import ProductSnapshot, SalesSample
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_order_total(items)
            logs = captured_logs()
            assert any(r["message"] == "order_total_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2024, 3, 1, 9, 30, 0, tzinfo=timezone.utc))


# =============================================================================
# Domain data
# =============================================================================


def make_sales(quantities: list[int], start: date = date(2024, 1, 1)) -> tuple[SalesSample, ...]:
    """One sample per consecutive day."""
    return tuple(
        SalesSample(quantity=q, sale_date=start + timedelta(days=i))
        for i, q in enumerate(quantities)
    )


@pytest.fixture
def sales_factory():
    return make_sales


@pytest.fixture
def product_factory():
    def _make(
        product_id: str = "P-1",
        name: str = "Widget",
        current_stock: int = 50,
        reorder_level: int = 10,
        daily_sales: list[int] | None = None,
    ) -> ProductSnapshot:
        return ProductSnapshot(
            product_id=product_id,
            name=name,
            current_stock=current_stock,
            reorder_level=reorder_level,
            sales=make_sales(daily_sales or []),
        )

    return _make
