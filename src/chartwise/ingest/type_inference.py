"""Per-column semantic type inference over a bounded row sample."""
from __future__ import annotations

import json
import logging
import math
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

from chartwise.ingest.csv_parser import EXTRA_FIELDS_KEY
from chartwise.ingest.values import is_null, parse_date, to_number, unique_values
from chartwise.models.dataset import ColumnDescriptor, ColumnType, DatasetSummary, Row

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 100
_SAMPLE_VALUE_LIMIT = 5
_CATEGORY_MIN_UNIQUE = 10
_CATEGORY_UNIQUE_RATIO = 0.1


class _Sample(NamedTuple):
    non_null: list[Any]
    unique: list[Any]


def _is_boolean(sample: _Sample) -> bool:
    return all(isinstance(v, bool) for v in sample.non_null)


def _is_number(sample: _Sample) -> bool:
    return all(to_number(v) is not None for v in sample.non_null)


def _is_date(sample: _Sample) -> bool:
    return all(isinstance(v, str) and parse_date(v) is not None for v in sample.non_null)


def _is_category(sample: _Sample) -> bool:
    threshold = max(_CATEGORY_MIN_UNIQUE, len(sample.non_null) * _CATEGORY_UNIQUE_RATIO)
    return len(sample.unique) < threshold


# Evaluated in order; the first predicate that holds decides the type.
TYPE_RULES: list[tuple[ColumnType, Callable[[_Sample], bool]]] = [
    (ColumnType.BOOLEAN, _is_boolean),
    (ColumnType.NUMBER, _is_number),
    (ColumnType.DATE, _is_date),
    (ColumnType.CATEGORY, _is_category),
]


def classify(non_null: list[Any]) -> ColumnType:
    sample = _Sample(non_null=non_null, unique=unique_values(non_null))
    for column_type, predicate in TYPE_RULES:
        if predicate(sample):
            return column_type
    return ColumnType.STRING


def column_names(rows: Sequence[Row]) -> list[str]:
    if not rows:
        return []
    return [k for k in rows[0].keys() if k != EXTRA_FIELDS_KEY]


def _describe(name: str, values: list[Any]) -> ColumnDescriptor:
    non_null = [v for v in values if not is_null(v)]
    if not non_null:
        return ColumnDescriptor(
            name=name,
            type=ColumnType.STRING,
            nullable=True,
            null_count=len(values),
            unique_count=0,
        )

    null_count = len(values) - len(non_null)
    unique = unique_values(non_null)
    column_type = classify(non_null)
    descriptor = ColumnDescriptor(
        name=name,
        type=column_type,
        nullable=null_count > 0,
        null_count=null_count,
        unique_count=len(unique),
        sample_values=unique[:_SAMPLE_VALUE_LIMIT],
    )

    if column_type is ColumnType.NUMBER:
        numbers = [to_number(v) for v in non_null]
        descriptor.min = min(numbers)
        descriptor.max = max(numbers)
    elif column_type is ColumnType.DATE:
        dates = [parse_date(v) for v in non_null]
        descriptor.min_date = min(dates).isoformat()
        descriptor.max_date = max(dates).isoformat()
        descriptor.sample_values = [parse_date(v).isoformat() for v in unique[:_SAMPLE_VALUE_LIMIT]]
    elif column_type is ColumnType.CATEGORY:
        descriptor.categories = unique
    return descriptor


def infer_column_types(rows: Sequence[Row]) -> list[ColumnDescriptor]:
    """Return one descriptor per column, computed over the first 100 rows."""
    if not rows:
        return []
    sample = rows[: min(SAMPLE_SIZE, len(rows))]
    descriptors = [_describe(name, [row.get(name) for row in sample]) for name in column_names(rows)]
    logger.debug(
        "Inferred types: %s", ", ".join(f"{d.name}={d.type.value}" for d in descriptors),
    )
    return descriptors


def _js_round(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_bytes(num_bytes: int) -> str:
    """Human-readable size, e.g. ``"158.67 KB"``."""
    if num_bytes <= 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB"]
    index = min(int(math.floor(math.log(num_bytes) / math.log(1024))), len(sizes) - 1)
    scaled = _js_round(num_bytes / (1024 ** index) * 100) / 100
    return f"{scaled:g} {sizes[index]}"


def summarize_dataset(rows: Sequence[Row], columns: Sequence[ColumnDescriptor]) -> DatasetSummary:
    if not rows:
        return DatasetSummary()

    total_nulls = sum(c.null_count for c in columns)
    total_cells = len(rows) * len(columns)
    completeness = ((total_cells - total_nulls) / total_cells * 100) if total_cells else 0.0
    null_ratio = (total_nulls / total_cells) if total_cells else 0.0
    memory_bytes = len(json.dumps(list(rows), separators=(",", ":"), default=str, ensure_ascii=False))

    return DatasetSummary(
        total_rows=len(rows),
        total_columns=len(columns),
        total_nulls=total_nulls,
        null_percentage=_js_round(null_ratio * 1000) / 10,
        completeness=_js_round(completeness * 10) / 10,
        quality_score=_js_round(completeness),
        memory_size=format_bytes(memory_bytes),
        memory_size_bytes=memory_bytes,
    )
