"""Rule-based chart type suggestion from column types."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chartwise.models.chart import Aggregation, ChartSuggestion, ChartType
from chartwise.models.dataset import ColumnDescriptor, ColumnType

_CATEGORICAL = frozenset({ColumnType.CATEGORY, ColumnType.STRING})


@dataclass(frozen=True)
class SuggestionRule:
    chart_type: ChartType
    x_types: frozenset[ColumnType]
    # ``None`` in y_types means the rule also holds without a second column
    y_types: frozenset[ColumnType | None]
    reason: str
    aggregation: Aggregation | None = None

    def matches(self, x_type: ColumnType, y_type: ColumnType | None) -> bool:
        return x_type in self.x_types and y_type in self.y_types

    def suggestion(self, x_column: str, y_column: str | None) -> ChartSuggestion:
        if self.chart_type is ChartType.PIE:
            return ChartSuggestion(
                chart_type=self.chart_type,
                reason=self.reason,
                category_column=x_column,
            )
        return ChartSuggestion(
            chart_type=self.chart_type,
            reason=self.reason,
            x_column=x_column,
            y_column=y_column,
            aggregation=self.aggregation,
        )


# Precedence order: the first matching rule wins.
SUGGESTION_RULES: list[SuggestionRule] = [
    SuggestionRule(
        ChartType.SCATTER,
        frozenset({ColumnType.NUMBER}),
        frozenset({ColumnType.NUMBER}),
        "Both columns are numeric - best for correlation analysis",
    ),
    SuggestionRule(
        ChartType.LINE,
        frozenset({ColumnType.DATE}),
        frozenset({ColumnType.NUMBER}),
        "Time-series data - best for trend analysis",
        Aggregation.AVG,
    ),
    SuggestionRule(
        ChartType.BAR,
        _CATEGORICAL | {ColumnType.BOOLEAN},
        frozenset({ColumnType.NUMBER}),
        "Categorical X and numeric Y - best for comparison",
        Aggregation.SUM,
    ),
    SuggestionRule(
        ChartType.PIE,
        _CATEGORICAL,
        _CATEGORICAL | {None},
        "Categorical data - best for distribution",
    ),
]


def _first_pair(
    rule: SuggestionRule, columns: Sequence[ColumnDescriptor],
) -> tuple[ColumnDescriptor, ColumnDescriptor | None] | None:
    for x in columns:
        if x.type not in rule.x_types:
            continue
        if None in rule.y_types:
            return x, None
        for y in columns:
            if y is not x and y.type in rule.y_types:
                return x, y
    return None


def suggest_chart_type(
    columns: Sequence[ColumnDescriptor],
    x_column: str | None = None,
    y_column: str | None = None,
) -> ChartSuggestion:
    """Suggest a chart for an explicit column pair, or scan the dataset.

    With both columns given, the first rule matching their types decides.
    Otherwise rules are tried in precedence order against the first
    qualifying columns.
    """
    if not columns:
        return ChartSuggestion(reason="No columns available")

    by_name = {c.name: c for c in columns}
    if x_column and y_column and x_column in by_name and y_column in by_name:
        x_type, y_type = by_name[x_column].type, by_name[y_column].type
        for rule in SUGGESTION_RULES:
            if rule.matches(x_type, y_type):
                return rule.suggestion(x_column, y_column)

    for rule in SUGGESTION_RULES:
        pair = _first_pair(rule, columns)
        if pair is not None:
            x, y = pair
            return rule.suggestion(x.name, y.name if y else None)

    return ChartSuggestion(reason="Unable to suggest chart type - insufficient data")
