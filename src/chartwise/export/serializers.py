"""Text exports: CSV, the JSON package and the spreadsheet placeholder."""
from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from chartwise.ingest.csv_parser import EXTRA_FIELDS_KEY
from chartwise.ingest.values import format_key
from chartwise.models.chart import ChartConfig
from chartwise.models.dataset import Dataset, Row
from chartwise.models.insight import AnalysisResult


def _columns(rows: Sequence[Row]) -> list[str]:
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            if key != EXTRA_FIELDS_KEY:
                seen.setdefault(key, None)
    return list(seen)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return format_key(value)


def rows_to_csv(rows: Sequence[Row]) -> str:
    """Serialise rows; the header is the union of keys in first-seen order."""
    if not rows:
        return ""
    columns = _columns(rows)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(columns)
    for row in rows:
        writer.writerow([_cell(row.get(c)) for c in columns])
    return buffer.getvalue()


def to_excel_placeholder(rows: Sequence[Row]) -> bytes:
    """CSV bytes served under an ``.xlsx`` name. Not a real workbook."""
    return rows_to_csv(rows).encode("utf-8")


def _plain_rows(rows: Sequence[Row]) -> list[Row]:
    return [{k: v for k, v in row.items() if k != EXTRA_FIELDS_KEY} for row in rows]


def build_export_package(
    dataset: Dataset | None,
    charts: Sequence[ChartConfig] = (),
    analysis: AnalysisResult | None = None,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    rows = list(dataset.rows) if dataset else []
    insights = analysis.insights if analysis else []
    statistics: dict[str, Any] = {}
    if dataset is not None:
        statistics = dataset.summary.model_dump(mode="json")
        statistics["columns"] = [c.model_dump(mode="json") for c in dataset.columns]

    return {
        "metadata": {
            "exportDate": (exported_at or datetime.now(timezone.utc)).isoformat(),
            "dataRows": len(rows),
            "totalCharts": len(charts),
            "hasAIInsights": len(insights) > 0,
            "fileName": dataset.file_name if dataset else None,
        },
        "data": _plain_rows(rows),
        "statistics": statistics,
        "charts": [c.model_dump(mode="json") for c in charts],
        "aiAnalysis": {
            "insights": [i.model_dump(mode="json") for i in insights],
            "recommendations": [r.model_dump(mode="json") for r in analysis.recommendations] if analysis else [],
            "predictions": analysis.predictions.model_dump(mode="json") if analysis and analysis.predictions else None,
            "anomalies": [a.model_dump(mode="json") for a in analysis.anomalies] if analysis else [],
        },
    }


def to_json(package: dict[str, Any]) -> str:
    return json.dumps(package, indent=2, default=str, ensure_ascii=False)
