"""Dataset rows -> chart points, one transformer per chart type.

Every transformer is a pure function of ``(rows, config)``. Rows whose
grouping key is null or whose measure does not parse as a number are skipped.
All aggregated values pass through ``round2``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from chartwise.charts.aggregation import aggregate, round2
from chartwise.charts.validation import to_chart_config, validate_chart_config
from chartwise.ingest.type_inference import column_names
from chartwise.ingest.values import format_key, is_null, parse_date, parse_float, to_number
from chartwise.models.chart import (
    Aggregation,
    BarPoint,
    ChartConfig,
    ChartData,
    ChartPoint,
    ChartType,
    LinePoint,
    PiePoint,
    ScatterPoint,
)
from chartwise.models.dataset import ColumnDescriptor, ColumnType, Row

logger = logging.getLogger(__name__)

OTHERS_LABEL = "Others"
DEFAULT_PIE_TOP_N = 10


@dataclass
class _Group:
    name: str
    raw: Any
    values: list[float] = field(default_factory=list)
    rows: int = 0


def _group_numeric(rows: Sequence[Row], key_column: str, value_column: str) -> list[_Group]:
    """Groups in first-seen order."""
    groups: dict[str, _Group] = {}
    for row in rows:
        key = row.get(key_column)
        value = parse_float(row.get(value_column))
        if is_null(key) or value is None:
            continue
        name = format_key(key)
        group = groups.get(name)
        if group is None:
            group = groups[name] = _Group(name=name, raw=key)
        group.values.append(value)
    return list(groups.values())


def prepare_bar_chart_data(
    rows: Sequence[Row],
    x_column: str,
    y_column: str,
    aggregation: Aggregation | str = Aggregation.SUM,
) -> list[BarPoint]:
    method = Aggregation.parse(aggregation, Aggregation.SUM)
    points = [
        BarPoint(
            name=g.name,
            value=round2(aggregate(g.values, method)),
            count=len(g.values),
            min=min(g.values),
            max=max(g.values),
        )
        for g in _group_numeric(rows, x_column, y_column)
    ]
    # sorted() is stable, so ties keep first-seen order
    return sorted(points, key=lambda p: p.value, reverse=True)


def _line_sort_key(groups: list[_Group]):
    numbers = [to_number(g.raw) for g in groups]
    if all(n is not None for n in numbers):
        return lambda g: to_number(g.raw)
    dates = [parse_date(g.raw) for g in groups]
    if all(d is not None for d in dates):
        return lambda g: parse_date(g.raw)
    return lambda g: g.name


def prepare_line_chart_data(
    rows: Sequence[Row],
    x_column: str,
    y_column: str,
    aggregation: Aggregation | str = Aggregation.AVG,
) -> list[LinePoint]:
    """Ascending by key: numeric when every key is a number, chronological
    when every key is a date, otherwise lexicographic."""
    method = Aggregation.parse(aggregation, Aggregation.AVG)
    groups = _group_numeric(rows, x_column, y_column)
    if not groups:
        return []
    groups.sort(key=_line_sort_key(groups))
    return [
        LinePoint(name=g.name, value=round2(aggregate(g.values, method)), date=g.raw)
        for g in groups
    ]


def prepare_pie_chart_data(
    rows: Sequence[Row],
    category_column: str,
    value_column: str | None = None,
    top_n: int | None = DEFAULT_PIE_TOP_N,
) -> list[PiePoint]:
    """Sum of ``value_column`` per category, or the integer row count without one.

    With more than ``top_n`` slices the tail collapses into a single
    ``Others`` slice holding the sum of the excluded values.
    """
    totals: dict[str, float | int] = {}
    for row in rows:
        category = row.get(category_column)
        if is_null(category):
            continue
        name = format_key(category)
        if not value_column:
            totals[name] = totals.get(name, 0) + 1
            continue
        # the category counts even when its value does not parse
        total = totals.setdefault(name, 0.0)
        value = parse_float(row.get(value_column))
        if value is not None:
            totals[name] = total + value

    points = sorted(
        (PiePoint(name=name, value=round2(total)) for name, total in totals.items()),
        key=lambda p: p.value,
        reverse=True,
    )
    if top_n and top_n > 0 and len(points) > top_n:
        head, rest = points[:top_n], points[top_n:]
        others = round2(sum(p.value for p in rest))
        points = head + [PiePoint(name=OTHERS_LABEL, value=others)]
    return points


def prepare_scatter_data(
    rows: Sequence[Row],
    x_column: str,
    y_column: str,
    name_column: str | None = None,
) -> list[ScatterPoint]:
    points: list[ScatterPoint] = []
    for index, row in enumerate(rows):
        x = parse_float(row.get(x_column))
        y = parse_float(row.get(y_column))
        if x is None or y is None:
            continue
        label = format_key(row.get(name_column)) if name_column else f"Point {index + 1}"
        points.append(ScatterPoint(x=x, y=y, name=label))
    return points


def aggregate_data(
    rows: Sequence[Row],
    group_by: str,
    value_column: str | None = None,
    operation: Aggregation | str = Aggregation.SUM,
) -> list[dict[str, Any]]:
    """Generic group-by for tabular summaries.

    Each record carries the group key, the aggregated value (under
    ``value_column`` or ``"count"``) and ``_count``, the group's row count.
    """
    method = Aggregation.parse(operation, Aggregation.SUM)
    groups: dict[str, _Group] = {}
    for row in rows:
        key = row.get(group_by)
        name = format_key(None if is_null(key) else key)
        group = groups.get(name)
        if group is None:
            group = groups[name] = _Group(name=name, raw=None if is_null(key) else key)
        group.rows += 1
        if value_column:
            value = parse_float(row.get(value_column))
            if value is not None:
                group.values.append(value)
        else:
            group.values.append(1)

    out_key = value_column or "count"
    records = []
    for group in groups.values():
        if group.values:
            value: float | int | None = round2(aggregate(group.values, method))
        elif method is Aggregation.COUNT:
            value = 0
        elif method is Aggregation.SUM:
            value = 0.0
        else:
            value = None
        records.append({group_by: group.raw, out_key: value, "_count": group.rows})
    return records


def _numeric_stats(values: list[float]) -> dict[str, Any]:
    total = sum(values)
    return {
        "total": round2(total),
        "average": round2(total / len(values)),
        "min": min(values),
        "max": max(values),
        "data_points": len(values),
    }


def chart_stats(chart_type: ChartType, points: Sequence[ChartPoint]) -> dict[str, Any] | None:
    if not points:
        return None
    if chart_type in (ChartType.BAR, ChartType.LINE):
        return _numeric_stats([p.value for p in points])
    if chart_type is ChartType.PIE:
        values = [p.value for p in points]
        return {
            "total": round2(sum(values)),
            "categories": len(points),
            "largest": points[0].name,
            "smallest": points[-1].name,
        }
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return {
        "x_min": min(xs),
        "x_max": max(xs),
        "y_min": min(ys),
        "y_max": max(ys),
        "data_points": len(points),
    }


def _points_for(rows: Sequence[Row], config: ChartConfig) -> list[ChartPoint]:
    if config.chart_type is ChartType.BAR:
        return prepare_bar_chart_data(rows, config.x_column, config.y_column, config.aggregation)
    if config.chart_type is ChartType.LINE:
        # line charts fall back to averaging when the config leaves it at the default
        aggregation = config.aggregation if "aggregation" in config.model_fields_set else Aggregation.AVG
        return prepare_line_chart_data(rows, config.x_column, config.y_column, aggregation)
    if config.chart_type is ChartType.PIE:
        return prepare_pie_chart_data(
            rows, config.category_column, config.value_column, config.top_n or DEFAULT_PIE_TOP_N,
        )
    return prepare_scatter_data(rows, config.x_column, config.y_column, config.name_column)


def build_chart_data(
    rows: Sequence[Row],
    config: ChartConfig | Mapping[str, Any] | None,
    columns: Sequence[str | ColumnDescriptor] | None = None,
) -> ChartData:
    """Validate ``config`` against the dataset and compute points plus stats.

    Never raises: problems come back as ``is_valid=False`` with an error
    message so the caller can render a placeholder instead of a chart.
    """
    if not rows:
        return ChartData(error="No data available")

    names = list(columns) if columns else column_names(rows)
    validation = validate_chart_config(config, names)
    if not validation.is_valid:
        chart_type = config.chart_type if isinstance(config, ChartConfig) else None
        return ChartData(chart_type=chart_type, error=validation.error)

    try:
        if not isinstance(config, ChartConfig):
            config = to_chart_config(config)
        points = _points_for(rows, config)
    except (ValueError, TypeError) as exc:
        logger.warning("Chart transform failed: %s", exc)
        return ChartData(error=f"Could not build chart: {exc}")

    return ChartData(
        chart_type=config.chart_type,
        points=points,
        is_valid=True,
        stats=chart_stats(config.chart_type, points),
    )


def _columns_of(columns: Sequence[ColumnDescriptor], *types: ColumnType) -> list[ColumnDescriptor]:
    return [c for c in columns if c.type in types]


def get_numeric_columns(columns: Sequence[ColumnDescriptor]) -> list[ColumnDescriptor]:
    return _columns_of(columns, ColumnType.NUMBER)


def get_categorical_columns(columns: Sequence[ColumnDescriptor]) -> list[ColumnDescriptor]:
    return _columns_of(columns, ColumnType.CATEGORY, ColumnType.STRING)


def get_date_columns(columns: Sequence[ColumnDescriptor]) -> list[ColumnDescriptor]:
    return _columns_of(columns, ColumnType.DATE)
