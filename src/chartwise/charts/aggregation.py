"""Aggregation methods and the single rounding policy for chart values."""
from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from chartwise.models.chart import Aggregation

_TWO_PLACES = Decimal("0.01")


def round2(value: float) -> float:
    """Round half away from zero at two decimals (``1.005`` becomes ``1.01``).

    The decimal is built from ``repr`` so binary float noise does not decide
    the tie. Integers, such as counts, pass through unchanged.
    """
    if isinstance(value, int):
        return value
    if math.isinf(value) or math.isnan(value):
        return value
    try:
        return float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # beyond decimal precision; two places are already below float resolution
        return value


def _sum(values: Sequence[float]) -> float | int:
    if all(isinstance(v, int) for v in values):
        return sum(values)
    return math.fsum(values)


def _avg(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values)


AGGREGATORS: dict[Aggregation, Callable[[Sequence[float]], float | int]] = {
    Aggregation.SUM: _sum,
    Aggregation.AVG: _avg,
    Aggregation.COUNT: len,
    Aggregation.MIN: min,
    Aggregation.MAX: max,
}


def aggregate(values: Sequence[float], method: Aggregation) -> float | int:
    """Apply ``method`` to a non-empty group of values."""
    return AGGREGATORS[method](values)
