"""
Structured JSON logging for the inventory kernel.

Every record under the ``inventory_kernel`` logger namespace is written as
one JSON object per line: a fixed envelope (``ts``, ``level``, ``logger``,
``message``), the request-scoped fields held by ``LogContext``, the
``extra={...}`` fields passed at the call site, and, for exceptions, the
``code`` and structured attributes of ``InventoryKernelError`` subclasses.

Engines log events such as ``order_total_completed`` with Decimal amounts
already rendered as strings; the encoder below also accepts raw Decimal,
date and Enum values so a stray one never breaks a log line.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

_LOGGER_PREFIX = "inventory_kernel"


# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_EMPTY: Mapping[str, str] = MappingProxyType({})

_context: ContextVar[Mapping[str, str]] = ContextVar(
    "inventory_log_context", default=_EMPTY
)


class LogContext:
    """
    Request-scoped log fields, isolated per thread and per asyncio task.

    The whole context is one immutable mapping held in a ContextVar;
    ``set`` and ``bind`` replace it with a merged copy.
    """

    FIELDS: tuple[str, ...] = (
        "correlation_id",  # One caller request / batch run
        "actor_id",  # User who triggered the calculation
        "product_id",
        "document_id",  # Purchase order, sale, return or tally number
        "trace_id",
    )

    @classmethod
    def _merged(cls, fields: Mapping[str, str | None]) -> Mapping[str, str]:
        unknown = sorted(set(fields) - set(cls.FIELDS))
        if unknown:
            raise TypeError(f"Unknown log context fields: {unknown}")
        merged = dict(_context.get())
        merged.update({k: v for k, v in fields.items() if v is not None})
        return MappingProxyType(merged)

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set context fields. None values leave the current value in place."""
        _context.set(cls._merged(fields))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type["LogContext"]]:
        """
        Set fields for the duration of a ``with`` block, then restore the
        previous context exactly.

        Raises:
            TypeError: on a field name not in ``FIELDS``.
        """
        token = _context.set(cls._merged(fields))
        try:
            yield cls
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_RESERVED_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """Renders a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = self._envelope(record)
        payload.update(LogContext.get_all())
        for key, value in vars(record).items():
            if key not in _RESERVED_KEYS:
                payload.setdefault(key, value)
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record))
        return json.dumps(payload, default=_json_default)

    @staticmethod
    def _envelope(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    def _exception_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        exc = record.exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        # InventoryKernelError subclasses keep their context as attributes
        for name, value in vars(exc).items():
            if not name.startswith("_"):
                fields[f"exc_{name}"] = value
        fields["traceback"] = self.formatException(record.exc_info)
        return fields


# ---------------------------------------------------------------------------
# Logger factory and initialization
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger under the inventory_kernel namespace, e.g. ``engines.totals``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configure_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a structured handler to the ``inventory_kernel`` logger.

    Idempotent: only the first call in a process (or after
    ``reset_logging``) has an effect.  Records do not propagate to the
    root logger, so host applications see them only through this handler.
    """
    global _installed_handler
    with _configure_lock:
        if _installed_handler is not None:
            return
        target = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
        target.setFormatter(StructuredFormatter())

        package_logger = logging.getLogger(_LOGGER_PREFIX)
        package_logger.setLevel(level)
        package_logger.propagate = False
        package_logger.addHandler(target)
        _installed_handler = target


def reset_logging() -> None:
    """Remove all handlers from the package logger. Test support only."""
    global _installed_handler
    with _configure_lock:
        _installed_handler = None
        package_logger = logging.getLogger(_LOGGER_PREFIX)
        package_logger.handlers.clear()
        package_logger.setLevel(logging.WARNING)
