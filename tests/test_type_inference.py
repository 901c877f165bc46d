"""Tests for column type inference, dataset summary and scalar helpers."""
import math

from chartwise.ingest.csv_parser import EXTRA_FIELDS_KEY, parse_csv
from chartwise.ingest.type_inference import (
    classify,
    format_bytes,
    infer_column_types,
    summarize_dataset,
)
from chartwise.ingest.values import format_key, parse_date, parse_float, to_number, unique_values
from chartwise.models.dataset import ColumnType


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassify:
    def test_boolean(self):
        assert classify([True, False, True]) is ColumnType.BOOLEAN

    def test_number(self):
        assert classify([1, 2.5, "3"]) is ColumnType.NUMBER

    def test_date(self):
        assert classify(["2024-01-01", "2024-02-15", "March 3, 2024"]) is ColumnType.DATE

    def test_category_for_few_distinct_values(self):
        assert classify(["red", "blue", "red", "green"]) is ColumnType.CATEGORY

    def test_string_for_many_distinct_values(self):
        names = [f"user-{chr(97 + i)}{chr(97 + j)}" for i in range(5) for j in range(5)]
        assert classify(names) is ColumnType.STRING

    def test_mixed_numbers_and_text_is_not_number(self):
        assert classify([1, 2, "three"]) is ColumnType.CATEGORY

    def test_boolean_beats_number(self):
        assert classify([True]) is ColumnType.BOOLEAN


# ---------------------------------------------------------------------------
# infer_column_types
# ---------------------------------------------------------------------------


def test_infer_sales_columns(sales_csv):
    rows = parse_csv(sales_csv).rows
    columns = {c.name: c for c in infer_column_types(rows)}

    assert columns["region"].type is ColumnType.CATEGORY
    assert columns["region"].categories == ["North", "South", "East"]
    assert columns["units"].type is ColumnType.NUMBER
    assert columns["units"].nullable is True
    assert columns["units"].null_count == 1
    assert columns["units"].min == 3
    assert columns["units"].max == 10
    assert columns["revenue"].type is ColumnType.NUMBER
    assert columns["date"].type is ColumnType.DATE
    assert columns["date"].min_date.startswith("2024-01-01")
    assert columns["date"].max_date.startswith("2024-01-06")


def test_year_month_column_dates_do_not_depend_on_today():
    rows = parse_csv("month,v\n2024-01,1\n2024-02,2\n").rows
    columns = {c.name: c for c in infer_column_types(rows)}
    assert columns["month"].type is ColumnType.DATE
    assert columns["month"].min_date == "2024-01-01T00:00:00"
    assert columns["month"].max_date == "2024-02-01T00:00:00"


def test_time_only_column_is_not_a_date():
    rows = parse_csv("t,v\n10:30,1\n11:45,2\n").rows
    columns = {c.name: c for c in infer_column_types(rows)}
    assert columns["t"].type is ColumnType.CATEGORY
    assert columns["t"].min_date is None


def test_sample_values_are_capped_at_five():
    rows = [{"n": i} for i in range(20)]
    (column,) = infer_column_types(rows)
    assert column.sample_values == [0, 1, 2, 3, 4]
    assert column.unique_count == 20


def test_all_null_column_is_nullable_string():
    rows = [{"a": 1, "b": None}, {"a": 2, "b": ""}]
    columns = {c.name: c for c in infer_column_types(rows)}
    assert columns["b"].type is ColumnType.STRING
    assert columns["b"].nullable is True
    assert columns["b"].null_count == 2
    assert columns["b"].unique_count == 0


def test_extra_fields_key_is_not_a_column():
    rows = [{"a": 1, EXTRA_FIELDS_KEY: [9]}, {"a": 2}]
    assert [c.name for c in infer_column_types(rows)] == ["a"]


def test_inference_uses_first_hundred_rows():
    rows = [{"v": i} for i in range(100)] + [{"v": "oops"}]
    (column,) = infer_column_types(rows)
    assert column.type is ColumnType.NUMBER


def test_empty_rows_give_no_columns():
    assert infer_column_types([]) == []


# ---------------------------------------------------------------------------
# summarize_dataset / format_bytes
# ---------------------------------------------------------------------------


def test_summary_counts(sales_csv):
    rows = parse_csv(sales_csv).rows
    summary = summarize_dataset(rows, infer_column_types(rows))
    assert summary.total_rows == 6
    assert summary.total_columns == 5
    assert summary.total_nulls == 1
    # 29 of 30 cells filled
    assert summary.completeness == 96.7
    assert summary.quality_score == 97
    assert summary.memory_size_bytes > 0


def test_summary_of_empty_dataset():
    summary = summarize_dataset([], [])
    assert summary.total_rows == 0
    assert summary.memory_size == "0 Bytes"


def test_format_bytes():
    assert format_bytes(0) == "0 Bytes"
    assert format_bytes(512) == "512 Bytes"
    assert format_bytes(1024) == "1 KB"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(5 * 1024 * 1024) == "5 MB"


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------


class TestValues:
    def test_to_number(self):
        assert to_number("3.5") == 3.5
        assert to_number(" 7 ") == 7.0
        assert to_number("12kg") is None
        assert to_number(True) is None
        assert to_number("") is None
        assert to_number("Infinity") == math.inf

    def test_parse_float_prefix(self):
        assert parse_float("12kg") == 12.0
        assert parse_float("kg") is None
        assert parse_float(4) == 4.0
        assert parse_float(None) is None

    def test_parse_date_requires_digit(self):
        assert parse_date("2024-03-01").year == 2024
        assert parse_date("today") is None
        assert parse_date("not a 9 date at all zz") is None

    def test_parse_date_fills_missing_parts_with_first(self):
        assert parse_date("2024-01").isoformat() == "2024-01-01T00:00:00"
        assert parse_date("Feb 2024").isoformat() == "2024-02-01T00:00:00"

    def test_parse_date_rejects_time_only(self):
        assert parse_date("10:30") is None
        assert parse_date("23:59:59") is None

    def test_format_key(self):
        assert format_key(None) == "null"
        assert format_key(True) == "true"
        assert format_key(3.0) == "3"
        assert format_key(2.5) == "2.5"
        assert format_key("x") == "x"

    def test_unique_values_keeps_bool_and_int_apart(self):
        assert unique_values([1, True, 1, "1"]) == [1, True, "1"]
