"""
Module: inventory_engines.tally
Responsibility:
    Reconcile a physical stock count (stock tally) against recorded stock.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The caller persists the
    tally lines and, after approval, posts the adjustments.

Invariants enforced:
    - Per line: variance = counted - system.  A product that was not
      counted is taken at its system quantity (variance 0).
    - total_variance = sum(|variance|): over- and under-counts do not
      cancel out.
    - Lines keep input order.

Usage:
    from inventory_engines.tally import reconcile_tally

    result = reconcile_tally(parse_tally_counts(rows))
    if result.has_variance:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from inventory_kernel.domain.dtos import TallyCount
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.tally")

VARIANCE_REASON = "Physical count variance"


@dataclass(frozen=True)
class TallyLine:
    """Reconciled tally line for one product."""

    product_id: str
    system_quantity: int
    counted_quantity: int
    variance: int
    variance_reason: str = ""

    @property
    def adjustment(self) -> int:
        """Signed stock adjustment needed to match the count."""
        return self.variance


@dataclass(frozen=True)
class TallyReconciliation:
    lines: tuple[TallyLine, ...]
    total_variance: int

    @property
    def has_variance(self) -> bool:
        return self.total_variance > 0

    @property
    def variant_lines(self) -> tuple[TallyLine, ...]:
        return tuple(line for line in self.lines if line.variance != 0)


@traced_engine("tally", "1.0", fingerprint_fields=("counts",))
def reconcile_tally(counts: Sequence[TallyCount]) -> TallyReconciliation:
    """
    Compute per-product variances and the total absolute variance.

    Args:
        counts: Tally lines with system and (optional) counted quantities.

    Returns:
        TallyReconciliation.
    """
    lines: list[TallyLine] = []
    for count in counts:
        counted = count.effective_count
        variance = counted - count.system_quantity
        lines.append(
            TallyLine(
                product_id=count.product_id,
                system_quantity=count.system_quantity,
                counted_quantity=counted,
                variance=variance,
                variance_reason=VARIANCE_REASON if variance != 0 else "",
            )
        )

    result = TallyReconciliation(
        lines=tuple(lines),
        total_variance=sum(abs(line.variance) for line in lines),
    )

    logger.info("tally_reconciled", extra={
        "line_count": len(result.lines),
        "variant_line_count": len(result.variant_lines),
        "total_variance": result.total_variance,
    })
    return result
