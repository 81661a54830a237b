"""Tests for inventory_kernel.logging_config: JSON lines, context fields, setup."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from inventory_engines.optimization import StockAction
from inventory_kernel.exceptions import InvalidLineItemError
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _fresh_logging_state():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def emitted():
    """
    Configure package logging into a buffer at INFO and return a reader
    yielding the parsed JSON records written so far.
    """
    buffer = StringIO()
    sink = logging.StreamHandler(buffer)
    configure_logging(handler=sink)
    return lambda: [json.loads(line) for line in buffer.getvalue().splitlines() if line]


@pytest.fixture
def log():
    return get_logger("tests")


class TestJsonLines:

    def test_envelope(self, emitted, log):
        log.info("hello")

        (record,) = emitted()
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "inventory_kernel.tests"
        assert record["ts"].endswith("+00:00")

    def test_extra_fields(self, emitted, log):
        log.info("transaction_validated", extra={"new_stock": 42, "direction": "in"})

        (record,) = emitted()
        assert record["new_stock"] == 42
        assert record["direction"] == "in"

    def test_domain_values_encoded(self, emitted, log):
        log.info("valued", extra={
            "total_value": Decimal("70.00"),
            "as_of": date(2024, 3, 1),
            "action": StockAction.REDUCE,
        })

        (record,) = emitted()
        assert record["total_value"] == "70.00"
        assert record["as_of"] == "2024-03-01"
        assert record["action"] == "reduce"

    def test_context_fields_merged(self, emitted, log):
        LogContext.set(correlation_id="req-7", product_id="SKU-1")
        log.info("reorder_quantity_suggested")

        (record,) = emitted()
        assert record["correlation_id"] == "req-7"
        assert record["product_id"] == "SKU-1"

    def test_no_context_fields_by_default(self, emitted, log):
        log.info("plain")

        (record,) = emitted()
        assert not set(LogContext.FIELDS) & set(record)

    def test_plain_exception(self, emitted, log):
        try:
            raise ValueError("boom")
        except ValueError:
            log.exception("failed")

        (record,) = emitted()
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "exc_code" not in record
        assert "Traceback" in record["traceback"]

    def test_kernel_error_attributes(self, emitted, log):
        try:
            raise InvalidLineItemError(2, "quantity", -1, "cannot be negative")
        except InvalidLineItemError:
            log.exception("parse_failed")

        (record,) = emitted()
        assert record["exc_code"] == "INVALID_LINE_ITEM"
        assert record["exc_index"] == 2
        assert record["exc_field"] == "quantity"
        assert record["exc_value"] == -1
        assert record["exc_reason"] == "cannot be negative"

    def test_debug_dropped_at_info(self, emitted, log):
        log.debug("noise")
        log.warning("signal", extra={"k": "v"})

        assert [r["message"] for r in emitted()] == ["signal"]

    def test_formatter_usable_standalone(self):
        record = logging.LogRecord("inventory_kernel.x", logging.INFO, __file__, 1, "msg", (), None)

        assert json.loads(StructuredFormatter().format(record))["message"] == "msg"


class TestLogContext:

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", document_id="PO-1")
        assert LogContext.get_all() == {"correlation_id": "x", "document_id": "PO-1"}

    def test_none_leaves_value(self):
        LogContext.set(actor_id="u-1")
        LogContext.set(actor_id=None, trace_id="t-1")
        assert LogContext.get_all() == {"actor_id": "u-1", "trace_id": "t-1"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_nests_and_restores(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner", product_id="SKU-9"):
            assert LogContext.get_all() == {"correlation_id": "inner", "product_id": "SKU-9"}
        assert LogContext.get_all() == {"correlation_id": "outer"}

    def test_bind_restores_after_error(self):
        LogContext.set(correlation_id="outer")
        with pytest.raises(RuntimeError):
            with LogContext.bind(correlation_id="inner"):
                raise RuntimeError("boom")
        assert LogContext.get_all() == {"correlation_id": "outer"}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            LogContext.set(entry_id="e-1")
        with pytest.raises(TypeError):
            with LogContext.bind(event_id="evt-1"):
                pass


class TestConfigureLogging:

    def test_second_call_is_ignored(self):
        configure_logging(handler=logging.NullHandler())
        configure_logging(handler=logging.NullHandler())

        assert len(logging.getLogger("inventory_kernel").handlers) == 1

    def test_level_applied(self, log):
        buffer = StringIO()
        configure_logging(level=logging.WARNING, stream=buffer)
        log.info("hidden")
        log.warning("shown")

        assert [json.loads(line)["message"] for line in buffer.getvalue().splitlines()] == [
            "shown"
        ]

    def test_does_not_propagate(self):
        configure_logging(handler=logging.NullHandler())
        assert logging.getLogger("inventory_kernel").propagate is False

    def test_reset_removes_handlers(self):
        configure_logging(handler=logging.NullHandler())
        reset_logging()

        assert logging.getLogger("inventory_kernel").handlers == []
