"""Dataset use-case service: upload pipeline, row browsing and summary."""
from __future__ import annotations

import logging
import math
from typing import Any

from chartwise.api.schemas.dataset import DatasetRead, RowPage, RowQuery
from chartwise.domain.exceptions import DatasetValidationError, InvalidInputError, NotFoundError
from chartwise.ingest.csv_parser import EXTRA_FIELDS_KEY, check_upload, parse_csv, validate_rows
from chartwise.ingest.type_inference import infer_column_types, summarize_dataset
from chartwise.ingest.values import format_key, to_number
from chartwise.models.dataset import Dataset, DatasetSummary, Row
from chartwise.state.store import AppStore, ClearDataset, LoadDataset

logger = logging.getLogger(__name__)

NO_DATASET_MESSAGE = "No dataset loaded. Upload a CSV file first."


def build_dataset(content: bytes | str, file_name: str, content_type: str | None = None) -> Dataset:
    """Run the full ingest pipeline: sniff, parse, validate, infer types.

    Raises ``UploadRejectedError``, ``CSVParseError`` or
    ``DatasetValidationError``; nothing is stored.
    """
    size = len(content.encode("utf-8")) if isinstance(content, str) else len(content)
    warnings = check_upload(file_name, content_type, size)
    parsed = parse_csv(content)
    report = validate_rows(parsed.rows)
    if not report.valid:
        raise DatasetValidationError(report.message, report.warnings)

    rows = parsed.rows
    columns = infer_column_types(rows)
    return Dataset(
        file_name=file_name,
        rows=tuple(rows),
        columns=tuple(columns),
        summary=summarize_dataset(rows, columns),
        warnings=tuple(warnings + report.warnings),
    )


def require_dataset(store: AppStore) -> Dataset:
    dataset = store.snapshot.dataset
    if dataset is None:
        raise NotFoundError(NO_DATASET_MESSAGE)
    return dataset


def _matches(row: Row, needle: str) -> bool:
    return any(
        needle in format_key(value).lower()
        for key, value in row.items()
        if key != EXTRA_FIELDS_KEY and value is not None
    )


def _sort_key(value: Any) -> tuple[int, float, str]:
    number = to_number(value)
    if number is not None:
        return (0, number, "")
    return (1, 0.0, format_key(value).lower())


def filter_and_sort(rows: list[Row], query: RowQuery, columns: list[str]) -> list[Row]:
    result = rows
    if query.search:
        needle = query.search.strip().lower()
        result = [row for row in result if _matches(row, needle)]
    if query.sort_by:
        if query.sort_by not in columns:
            raise InvalidInputError(f'Column "{query.sort_by}" not found')
        present = [r for r in result if r.get(query.sort_by) is not None]
        missing = [r for r in result if r.get(query.sort_by) is None]
        present.sort(key=lambda r: _sort_key(r[query.sort_by]), reverse=query.direction == "desc")
        # nulls always last
        result = present + missing
    return result


class DatasetService:
    def __init__(self, store: AppStore) -> None:
        self._store = store

    def upload(self, content: bytes, file_name: str, content_type: str | None = None) -> DatasetRead:
        dataset = build_dataset(content, file_name, content_type)
        self._store.dispatch(LoadDataset(dataset))
        logger.info(
            "Loaded %s: %d rows, %d columns, %d warnings",
            file_name, len(dataset.rows), len(dataset.columns), len(dataset.warnings),
        )
        return DatasetRead.from_dataset(dataset)

    def get(self) -> DatasetRead:
        return DatasetRead.from_dataset(require_dataset(self._store))

    def clear(self) -> None:
        require_dataset(self._store)
        self._store.dispatch(ClearDataset())

    def summary(self) -> DatasetSummary:
        return require_dataset(self._store).summary

    def rows(self, query: RowQuery) -> RowPage:
        dataset = require_dataset(self._store)
        matched = filter_and_sort(list(dataset.rows), query, dataset.column_names)
        total = len(matched)
        total_pages = max(1, math.ceil(total / query.page_size))
        start = (query.page - 1) * query.page_size
        page_rows = matched[start:start + query.page_size]
        return RowPage(
            items=[{k: v for k, v in row.items() if k != EXTRA_FIELDS_KEY} for row in page_rows],
            total=total,
            page=query.page,
            page_size=query.page_size,
            total_pages=total_pages,
        )
