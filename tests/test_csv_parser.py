"""Tests for CSV parsing, upload sniffing and structural validation."""
import pytest

from chartwise.domain.exceptions import CSVParseError, UploadRejectedError
from chartwise.ingest.csv_parser import (
    EMPTY_FILE_MESSAGE,
    EXTRA_FIELDS_KEY,
    check_upload,
    coerce_value,
    parse_csv,
    validate_rows,
)


# ---------------------------------------------------------------------------
# coerce_value
# ---------------------------------------------------------------------------


class TestCoerceValue:
    def test_empty_is_null(self):
        assert coerce_value("") is None

    def test_booleans(self):
        assert coerce_value("true") is True
        assert coerce_value("FALSE") is False

    def test_numbers(self):
        assert coerce_value("42") == 42
        assert isinstance(coerce_value("42"), int)
        assert coerce_value("-3.5") == -3.5
        assert coerce_value("1e3") == 1000.0

    def test_other_text_stays_string(self):
        assert coerce_value("2024-01-01") == "2024-01-01"
        assert coerce_value("yes") == "yes"
        assert coerce_value("12kg") == "12kg"


# ---------------------------------------------------------------------------
# parse_csv
# ---------------------------------------------------------------------------


class TestParseCSV:
    def test_basic_rows_are_typed(self, sales_csv):
        parsed = parse_csv(sales_csv)
        assert parsed.fields == ["region", "product", "units", "revenue", "date"]
        assert len(parsed.rows) == 6
        assert parsed.rows[0] == {
            "region": "North", "product": "Widget", "units": 10, "revenue": 100.5, "date": "2024-01-01",
        }
        assert parsed.rows[5]["units"] is None

    def test_bytes_with_bom(self):
        parsed = parse_csv("\ufeffname,age\nAlice,30\nBob,25\n".encode("utf-8"))
        assert parsed.fields == ["name", "age"]
        assert parsed.rows[1] == {"name": "Bob", "age": 25}

    def test_headers_are_trimmed(self):
        parsed = parse_csv(" name , age \nAlice,30\nBob,25\n")
        assert parsed.fields == ["name", "age"]

    def test_duplicate_headers_get_suffix(self):
        parsed = parse_csv("a,a,b\n1,2,3\n4,5,6\n")
        assert parsed.fields == ["a", "a_1", "b"]
        assert parsed.rows[0] == {"a": 1, "a_1": 2, "b": 3}

    def test_blank_lines_skipped(self):
        parsed = parse_csv("name,age\nAlice,30\n\nBob,25\n\n")
        assert [r["name"] for r in parsed.rows] == ["Alice", "Bob"]

    def test_semicolon_delimiter(self):
        parsed = parse_csv("name;age\nAlice;30\nBob;25\n")
        assert parsed.delimiter == ";"
        assert parsed.rows[0] == {"name": "Alice", "age": 30}

    def test_quoted_field_with_delimiter(self):
        parsed = parse_csv('name,city\n"Smith, J",Paris\n"Doe, A",Rome\n')
        assert parsed.rows[0]["name"] == "Smith, J"

    def test_extra_fields_kept_aside(self):
        parsed = parse_csv("a,b\n1,2\n3,4,5\n6,7\n")
        assert parsed.rows[1] == {"a": 3, "b": 4, EXTRA_FIELDS_KEY: [5]}

    def test_short_row_omits_missing_keys(self):
        parsed = parse_csv("a,b,c\n1,2,3\n4,5\n7,8,9\n")
        assert parsed.rows[1] == {"a": 4, "b": 5}

    def test_header_only_gives_zero_rows(self):
        parsed = parse_csv("name,age\n")
        assert parsed.rows == []

    @pytest.mark.parametrize("content", ["", "   \n\n", b""])
    def test_empty_input_raises(self, content):
        with pytest.raises(CSVParseError) as exc_info:
            parse_csv(content)
        assert exc_info.value.message == EMPTY_FILE_MESSAGE


# ---------------------------------------------------------------------------
# validate_rows
# ---------------------------------------------------------------------------


class TestValidateRows:
    def test_non_list_is_invalid(self):
        report = validate_rows("nope")
        assert report.valid is False
        assert "Expected an array of objects" in report.message

    def test_zero_rows_is_empty_file(self):
        report = validate_rows([])
        assert report.valid is False
        assert report.message == EMPTY_FILE_MESSAGE

    def test_blank_header_is_invalid(self):
        report = validate_rows([{"a": 1, "": 2}])
        assert report.valid is False
        assert "empty column headers" in report.message

    def test_small_dataset_warning(self):
        report = validate_rows([{"a": 1}, {"a": 2}])
        assert report.valid is True
        assert any("very small" in w for w in report.warnings)

    def test_inconsistent_rows_warn_but_stay_valid(self):
        rows = [{"a": 1, "b": 2}] * 5 + [{"a": 1}, {"a": 1}]
        report = validate_rows(rows)
        assert report.valid is True
        assert "Row 6 has different columns than the header row" in report.warnings
        assert any("Too many inconsistent rows (2/7)" in w for w in report.warnings)

    def test_row_warnings_are_capped(self):
        rows = [{"a": 1, "b": 2}] * 5 + [{"a": 1}] * 6
        report = validate_rows(rows)
        row_warnings = [w for w in report.warnings if w.startswith("Row ")]
        assert len(row_warnings) == 3

    def test_all_empty_rows_warning(self):
        rows = [{"a": 1, "b": 2}] * 4 + [{"a": None, "b": ""}] * 2
        report = validate_rows(rows)
        assert "Row 5 contains all empty values" in report.warnings
        assert any("2 rows (33.3%) contain all empty values" in w for w in report.warnings)

    def test_clean_dataset_has_no_warnings(self):
        rows = [{"a": i, "b": i * 2} for i in range(10)]
        report = validate_rows(rows)
        assert report.valid is True
        assert report.warnings == []


# ---------------------------------------------------------------------------
# check_upload
# ---------------------------------------------------------------------------


class TestCheckUpload:
    def test_csv_name_accepted(self):
        assert check_upload("data.csv", "text/csv", 10) == []

    def test_csv_mime_without_extension_accepted(self):
        assert check_upload("export", "text/csv", 10) == []

    def test_non_csv_rejected(self):
        with pytest.raises(UploadRejectedError) as exc_info:
            check_upload("report.xlsx", "application/vnd.ms-excel", 10)
        assert "report.xlsx is not a CSV file" in exc_info.value.message

    def test_oversize_is_warning_only(self):
        warnings = check_upload("big.csv", "text/csv", 20 * 1024 * 1024, max_bytes=10 * 1024 * 1024)
        assert len(warnings) == 1
        assert "20.0 MB" in warnings[0]

    def test_unexpected_mime_warns(self):
        warnings = check_upload("data.csv", "image/png", 10)
        assert any("image/png" in w for w in warnings)
