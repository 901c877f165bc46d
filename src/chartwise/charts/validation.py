"""Chart configuration validation. Never raises; returns a ``ChartValidation``."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from chartwise.models.chart import ChartConfig, ChartType, ChartValidation
from chartwise.models.dataset import ColumnDescriptor

_CAMEL = {
    "chart_type": "chartType",
    "x_column": "xColumn",
    "y_column": "yColumn",
    "category_column": "categoryColumn",
    "value_column": "valueColumn",
    "name_column": "nameColumn",
}
_CHART_TYPES = {t.value for t in ChartType}


def _field(config: ChartConfig | Mapping[str, Any], name: str) -> Any:
    if isinstance(config, Mapping):
        value = config.get(name)
        if value is None and name in _CAMEL:
            value = config.get(_CAMEL[name])
        return value
    return getattr(config, name, None)


def _invalid(error: str) -> ChartValidation:
    return ChartValidation(is_valid=False, error=error)


def _missing(column: str, names: Sequence[str]) -> ChartValidation | None:
    if column not in names:
        return _invalid(f'Column "{column}" not found')
    return None


def validate_chart_config(
    config: ChartConfig | Mapping[str, Any] | None,
    columns: Sequence[str | ColumnDescriptor] | None,
) -> ChartValidation:
    """Check required fields per chart type and that every referenced column exists."""
    if not config:
        return _invalid("Configuration is required")

    raw_type = _field(config, "chart_type")
    if not raw_type:
        return _invalid("Chart type is required")

    if not columns:
        return _invalid("No columns available")
    names = [c if isinstance(c, str) else c.name for c in columns]

    chart_type = raw_type.value if isinstance(raw_type, ChartType) else str(raw_type)
    if chart_type not in _CHART_TYPES:
        return _invalid(f"Unknown chart type: {chart_type}")

    if chart_type in (ChartType.BAR.value, ChartType.LINE.value, ChartType.SCATTER.value):
        x_column = _field(config, "x_column")
        y_column = _field(config, "y_column")
        if not x_column:
            return _invalid("X-axis column is required")
        if not y_column:
            return _invalid("Y-axis column is required")
        required = [x_column, y_column]
        optional = [_field(config, "name_column")] if chart_type == ChartType.SCATTER.value else []
    else:
        category_column = _field(config, "category_column")
        if not category_column:
            return _invalid("Category column is required")
        required = [category_column]
        optional = [_field(config, "value_column")]

    for column in required + [c for c in optional if c]:
        error = _missing(column, names)
        if error is not None:
            return error

    return ChartValidation(is_valid=True)


def to_chart_config(config: ChartConfig | Mapping[str, Any]) -> ChartConfig:
    """Build a ``ChartConfig`` from a model or a snake/camelCase mapping."""
    if isinstance(config, ChartConfig):
        return config
    data = dict(config)
    for snake, camel in _CAMEL.items():
        if snake not in data and camel in data:
            data[snake] = data.pop(camel)
    if "topN" in data and "top_n" not in data:
        data["top_n"] = data.pop("topN")
    return ChartConfig.model_validate(data)
