"""Export use-case service. Reads the store, never mutates it."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from chartwise.api.schemas.export import ExportFile, ExportFormat
from chartwise.charts.transformers import build_chart_data
from chartwise.export.pdf import build_pdf_report
from chartwise.export.serializers import build_export_package, rows_to_csv, to_excel_placeholder, to_json
from chartwise.services.dataset_service import require_dataset
from chartwise.state.store import AppStore

logger = logging.getLogger(__name__)

_MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.PDF: "application/pdf",
}


class ExportService:
    def __init__(self, store: AppStore) -> None:
        self._store = store

    def export(self, fmt: ExportFormat, include_data: bool = False) -> ExportFile:
        snapshot = self._store.snapshot
        dataset = require_dataset(self._store)
        now = datetime.now(timezone.utc)
        stamp = now.strftime("%Y-%m-%d")

        if fmt is ExportFormat.CSV:
            content = rows_to_csv(dataset.rows).encode("utf-8")
            filename = f"analytics-data-{stamp}.csv"
        elif fmt is ExportFormat.XLSX:
            content = to_excel_placeholder(dataset.rows)
            filename = f"analytics-data-{stamp}.xlsx"
        elif fmt is ExportFormat.JSON:
            package = build_export_package(dataset, snapshot.charts, snapshot.analysis, exported_at=now)
            content = to_json(package).encode("utf-8")
            filename = f"analytics-export-{stamp}.json"
        else:
            charts = [
                (config, build_chart_data(dataset.rows, config, list(dataset.columns)))
                for config in snapshot.charts
            ]
            content = build_pdf_report(dataset, charts, snapshot.analysis, include_data=include_data)
            filename = f"analytics-report-{stamp}.pdf"

        logger.info("Exported %s (%d bytes)", filename, len(content))
        return ExportFile(content=content, media_type=_MEDIA_TYPES[fmt], filename=filename)
