"""Tests for rule-based chart type suggestion."""
from chartwise.charts.suggest import SUGGESTION_RULES, suggest_chart_type
from chartwise.models.chart import Aggregation, ChartType
from chartwise.models.dataset import ColumnDescriptor, ColumnType


def col(name: str, column_type: ColumnType) -> ColumnDescriptor:
    return ColumnDescriptor(name=name, type=column_type)


def test_rule_precedence_order():
    assert [r.chart_type for r in SUGGESTION_RULES] == [
        ChartType.SCATTER, ChartType.LINE, ChartType.BAR, ChartType.PIE,
    ]


def test_two_numeric_columns_suggest_scatter():
    s = suggest_chart_type([col("a", ColumnType.NUMBER), col("b", ColumnType.NUMBER)])
    assert s.chart_type is ChartType.SCATTER
    assert (s.x_column, s.y_column) == ("a", "b")


def test_date_and_number_suggest_line():
    s = suggest_chart_type([col("when", ColumnType.DATE), col("v", ColumnType.NUMBER)])
    assert s.chart_type is ChartType.LINE
    assert s.aggregation is Aggregation.AVG
    assert s.x_column == "when"


def test_category_and_number_suggest_bar():
    s = suggest_chart_type([col("region", ColumnType.CATEGORY), col("v", ColumnType.NUMBER)])
    assert s.chart_type is ChartType.BAR
    assert s.aggregation is Aggregation.SUM


def test_categories_only_suggest_pie():
    s = suggest_chart_type([col("region", ColumnType.CATEGORY), col("product", ColumnType.STRING)])
    assert s.chart_type is ChartType.PIE
    assert s.category_column == "region"
    assert s.x_column is None


def test_explicit_pair_overrides_scan():
    columns = [
        col("a", ColumnType.NUMBER),
        col("b", ColumnType.NUMBER),
        col("region", ColumnType.CATEGORY),
    ]
    s = suggest_chart_type(columns, "region", "a")
    assert s.chart_type is ChartType.BAR
    assert (s.x_column, s.y_column) == ("region", "a")


def test_no_columns():
    s = suggest_chart_type([])
    assert s.chart_type is None
    assert s.reason == "No columns available"


def test_nothing_matches():
    s = suggest_chart_type([col("flag", ColumnType.BOOLEAN)])
    assert s.chart_type is None
    assert s.reason == "Unable to suggest chart type - insufficient data"
