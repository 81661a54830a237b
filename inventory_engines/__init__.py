"""
Module: inventory_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    calculation engine sub-modules (the Inventory Calculator).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel (domain, logging) and sibling engine
    modules.  MUST NOT import inventory_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates are passed in explicitly (or read from an injected Clock).
    - Decimal-only arithmetic for money and day counts.
    - Totality: undefined results resolve to 0 or unbounded cover;
      engines do not raise for well-typed input.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from inventory_engines import calculate_order_total, optimize_stock_levels
"""

from inventory_kernel.logging_config import get_logger

logger = get_logger("engines")

from inventory_engines.optimization import (
    StockAction,
    StockRecommendation,
    optimize_stock_levels,
    recommend_stock_action,
)
from inventory_engines.pricing import calculate_profit_margin
from inventory_engines.replenishment import (
    ReorderSuggestion,
    StockoutPrediction,
    StockoutPredictor,
    average_daily_sales,
    predict_stockout,
    suggest_reorder_quantity,
)
from inventory_engines.stock_status import (
    RevenueSummary,
    StockStatus,
    StockStatusSummary,
    classify_stock_status,
    summarize_revenue,
    summarize_stock_status,
)
from inventory_engines.tally import TallyLine, TallyReconciliation, reconcile_tally
from inventory_engines.totals import (
    OrderTotals,
    calculate_order_total,
    calculate_refund,
    calculate_sale_total,
)
from inventory_engines.transactions import (
    TransactionValidation,
    validate_inventory_transaction,
)
from inventory_engines.valuation import (
    InventoryValuation,
    calculate_inventory_value,
    calculate_retail_value,
)

__all__ = [
    # Totals
    "OrderTotals",
    "calculate_order_total",
    "calculate_sale_total",
    "calculate_refund",
    # Pricing
    "calculate_profit_margin",
    # Replenishment
    "ReorderSuggestion",
    "StockoutPrediction",
    "StockoutPredictor",
    "average_daily_sales",
    "predict_stockout",
    "suggest_reorder_quantity",
    # Valuation
    "InventoryValuation",
    "calculate_inventory_value",
    "calculate_retail_value",
    # Optimization
    "StockAction",
    "StockRecommendation",
    "optimize_stock_levels",
    "recommend_stock_action",
    # Transactions
    "TransactionValidation",
    "validate_inventory_transaction",
    # Stock status
    "StockStatus",
    "StockStatusSummary",
    "classify_stock_status",
    "summarize_stock_status",
    "RevenueSummary",
    "summarize_revenue",
    # Tally
    "TallyLine",
    "TallyReconciliation",
    "reconcile_tally",
]

logger.debug("engines_package_loaded", extra={
    "modules": [
        "totals", "pricing", "replenishment", "valuation",
        "optimization", "transactions", "stock_status", "tally",
    ],
})
