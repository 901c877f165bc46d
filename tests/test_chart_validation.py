"""Tests for chart configuration validation."""
import pytest

from chartwise.charts.validation import to_chart_config, validate_chart_config
from chartwise.models.chart import Aggregation, ChartConfig, ChartType
from chartwise.models.dataset import ColumnDescriptor, ColumnType

COLUMNS = ["region", "units", "revenue", "label"]


@pytest.mark.parametrize(
    "config,error",
    [
        (None, "Configuration is required"),
        ({}, "Configuration is required"),
        ({"xColumn": "region"}, "Chart type is required"),
        ({"chartType": "radar", "xColumn": "region"}, "Unknown chart type: radar"),
        ({"chartType": "bar", "yColumn": "units"}, "X-axis column is required"),
        ({"chartType": "line", "xColumn": "region"}, "Y-axis column is required"),
        ({"chartType": "pie", "valueColumn": "units"}, "Category column is required"),
        ({"chartType": "bar", "xColumn": "nope", "yColumn": "units"}, 'Column "nope" not found'),
        ({"chartType": "pie", "categoryColumn": "region", "valueColumn": "gone"}, 'Column "gone" not found'),
        (
            {"chartType": "scatter", "xColumn": "units", "yColumn": "revenue", "nameColumn": "who"},
            'Column "who" not found',
        ),
    ],
)
def test_invalid_configs(config, error):
    result = validate_chart_config(config, COLUMNS)
    assert result.is_valid is False
    assert result.error == error


def test_no_columns():
    result = validate_chart_config({"chartType": "bar"}, [])
    assert result.error == "No columns available"


def test_valid_model_config():
    config = ChartConfig(chart_type=ChartType.SCATTER, x_column="units", y_column="revenue", name_column="label")
    assert validate_chart_config(config, COLUMNS).is_valid is True


def test_accepts_column_descriptors():
    columns = [ColumnDescriptor(name="region", type=ColumnType.CATEGORY)]
    assert validate_chart_config({"chart_type": "pie", "category_column": "region"}, columns).is_valid


def test_stale_config_after_dataset_change():
    config = ChartConfig(chart_type=ChartType.BAR, x_column="region", y_column="units")
    assert validate_chart_config(config, COLUMNS).is_valid is True
    result = validate_chart_config(config, ["city", "population"])
    assert result.is_valid is False
    assert result.error == 'Column "region" not found'


def test_to_chart_config_maps_camel_case():
    config = to_chart_config({"chartType": "pie", "categoryColumn": "region", "topN": 3, "aggregation": "average"})
    assert config.chart_type is ChartType.PIE
    assert config.category_column == "region"
    assert config.top_n == 3
    assert config.aggregation is Aggregation.AVG
    assert config.id.startswith("chart_")
