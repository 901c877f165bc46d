"""CSV parsing and structural validation.

``parse_csv`` turns raw text into typed rows (booleans, numbers and nulls are
converted; everything else stays a string). ``validate_rows`` checks the
parsed rows and reports blocking problems separately from advisory warnings.
"""
from __future__ import annotations

import csv
import io
import logging
import re
from typing import Any, Sequence

from chartwise.config import settings
from chartwise.domain.exceptions import CSVParseError, UploadRejectedError
from chartwise.models.dataset import ParsedCSV, Row, Scalar, ValidationReport

logger = logging.getLogger(__name__)

# Surplus values on a record longer than the header are kept here so the
# structural check can count them.
EXTRA_FIELDS_KEY = "__parsed_extra"

EMPTY_FILE_MESSAGE = "CSV file is empty. Please upload a file with data."

_CANDIDATE_DELIMITERS = ",;\t|"
_SNIFF_BYTES = 4096
_NUMBER_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
_INT_RE = re.compile(r"^\s*-?\d+\s*$")
_TRUE = {"true", "TRUE", "True"}
_FALSE = {"false", "FALSE", "False"}

_INCONSISTENT_RATIO = 0.1
_EMPTY_ROW_RATIO = 0.2
_MAX_ROW_WARNINGS = 3
_SMALL_DATASET_ROWS = 5
_LARGE_DATASET_ROWS = 10_000
_CSV_MIME_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel", "text/plain"}


def coerce_value(cell: str) -> Scalar:
    """Dynamic typing for a single cell."""
    if cell == "":
        return None
    if cell in _TRUE:
        return True
    if cell in _FALSE:
        return False
    if _NUMBER_RE.match(cell):
        if _INT_RE.match(cell):
            return int(cell)
        return float(cell)
    return cell


def _decode(content: str | bytes) -> str:
    if isinstance(content, (bytes, bytearray)):
        text = bytes(content).decode("utf-8", errors="replace")
    else:
        text = content
    return text.lstrip("\ufeff")


def _sniff_delimiter(text: str) -> str:
    sample = text[:_SNIFF_BYTES]
    try:
        return csv.Sniffer().sniff(sample, delimiters=_CANDIDATE_DELIMITERS).delimiter
    except csv.Error:
        return ","


def _normalize_headers(raw: Sequence[str]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for name in raw:
        base = name.strip()
        count = seen.get(base, 0)
        seen[base] = count + 1
        headers.append(base if count == 0 else f"{base}_{count}")
    return headers


def _is_blank_record(record: Sequence[str]) -> bool:
    return not record or (len(record) == 1 and not record[0].strip())


def parse_csv(content: str | bytes) -> ParsedCSV:
    """Parse CSV text into typed rows keyed by the (trimmed) header row.

    Raises ``CSVParseError`` for empty input or malformed quoting.
    """
    text = _decode(content)
    if not text.strip():
        raise CSVParseError(EMPTY_FILE_MESSAGE)

    delimiter = _sniff_delimiter(text)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)

    headers: list[str] | None = None
    rows: list[Row] = []
    try:
        for record in reader:
            if _is_blank_record(record):
                continue
            if headers is None:
                headers = _normalize_headers(record)
                continue
            row: Row = {}
            for index, cell in enumerate(record[: len(headers)]):
                row[headers[index]] = coerce_value(cell)
            if len(record) > len(headers):
                row[EXTRA_FIELDS_KEY] = [coerce_value(c) for c in record[len(headers):]]
            rows.append(row)
    except csv.Error as exc:
        detail = f"Line {reader.line_num}: {exc}"
        logger.warning("CSV parse failed: %s", detail)
        raise CSVParseError("CSV parsing encountered errors", errors=[detail]) from exc

    if headers is None:
        raise CSVParseError(EMPTY_FILE_MESSAGE)

    logger.debug("Parsed %d rows x %d columns (delimiter=%r)", len(rows), len(headers), delimiter)
    return ParsedCSV(rows=rows, fields=headers, delimiter=delimiter)


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def validate_rows(data: Any) -> ValidationReport:
    """Check structural consistency of parsed rows.

    Blank headers, zero rows and non-list input are blocking. Inconsistent
    rows, mostly-empty rows and extreme sizes are reported as warnings.
    """
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        return ValidationReport(valid=False, message="Invalid data format. Expected an array of objects.")

    if len(data) == 0:
        return ValidationReport(valid=False, message=EMPTY_FILE_MESSAGE)

    columns = [k for k in data[0].keys() if k != EXTRA_FIELDS_KEY]
    if not columns:
        return ValidationReport(valid=False, message="No columns found in CSV file.")

    if any(not str(c).strip() for c in columns):
        return ValidationReport(
            valid=False,
            message="CSV contains empty column headers. Please ensure all columns have names.",
        )

    warnings: list[str] = []
    total = len(data)

    expected_keys = sorted(data[0].keys())
    inconsistent = 0
    for index, row in enumerate(data):
        if sorted(row.keys()) != expected_keys:
            inconsistent += 1
            if inconsistent <= _MAX_ROW_WARNINGS:
                warnings.append(f"Row {index + 1} has different columns than the header row")
    if inconsistent > total * _INCONSISTENT_RATIO:
        warnings.append(
            f"Too many inconsistent rows ({inconsistent}/{total}). Please check your CSV structure."
        )

    empty_rows = 0
    for index, row in enumerate(data):
        values = [v for k, v in row.items() if k != EXTRA_FIELDS_KEY]
        if all(_is_empty(v) for v in values):
            empty_rows += 1
            if empty_rows <= _MAX_ROW_WARNINGS:
                warnings.append(f"Row {index + 1} contains all empty values")
    if empty_rows > total * _EMPTY_ROW_RATIO:
        warnings.append(
            f"{empty_rows} rows ({empty_rows / total * 100:.1f}%) contain all empty values"
        )

    if total < _SMALL_DATASET_ROWS:
        warnings.append("Dataset is very small (less than 5 rows). Analysis may be limited.")
    if total > _LARGE_DATASET_ROWS:
        warnings.append(f"Large dataset detected ({total} rows). Processing may take longer.")

    return ValidationReport(valid=True, warnings=warnings)


def check_upload(
    file_name: str,
    content_type: str | None,
    size_bytes: int,
    max_bytes: int | None = None,
) -> list[str]:
    """Sniff name/MIME type and return advisory warnings.

    Raises ``UploadRejectedError`` when the file is clearly not a CSV.
    """
    limit = settings.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    is_csv_name = file_name.lower().endswith(".csv")
    mime = (content_type or "").split(";")[0].strip().lower()
    if not is_csv_name and mime != "text/csv":
        raise UploadRejectedError(f"{file_name} is not a CSV file. Please upload a .csv file.")

    warnings: list[str] = []
    if mime and mime not in _CSV_MIME_TYPES and mime != "application/octet-stream":
        warnings.append(f"Unexpected content type {mime!r}; parsing as CSV anyway.")
    if size_bytes > limit:
        warnings.append(
            f"File is {size_bytes / (1024 * 1024):.1f} MB, above the recommended "
            f"{limit / (1024 * 1024):.0f} MB. Processing may be slow."
        )
    return warnings
