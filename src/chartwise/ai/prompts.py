"""Deterministic prompt construction for the insight client."""
from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from chartwise.ai.helpers import truncate_context
from chartwise.models.dataset import ColumnDescriptor, Row

SAMPLE_TOKEN_BUDGET = 3000

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert data analyst specializing in business intelligence and data insights. "
    "Provide clear, actionable insights in JSON format."
)
CHART_SYSTEM_PROMPT = "You are a data visualization expert. Provide chart suggestions in JSON format."
QUESTION_SYSTEM_PROMPT = (
    "You are a helpful data analyst who answers questions clearly and accurately based on data."
)

_ANALYSIS_SCHEMA = """{
  "insights": [
    {
      "type": "positive" | "warning" | "negative" | "neutral",
      "category": "sales" | "performance" | "user_behavior" | "general",
      "title": "Brief title",
      "description": "Detailed explanation",
      "confidence": 0-100,
      "dataPoints": ["specific data point 1", "specific data point 2"]
    }
  ],
  "recommendations": [
    {
      "priority": "high" | "medium" | "low",
      "action": "What to do",
      "reason": "Why to do it",
      "impact": "Expected outcome"
    }
  ],
  "predictions": {
    "trend": "up" | "down" | "stable",
    "forecast": "Brief forecast summary",
    "confidence": 0-100
  },
  "anomalies": [
    {
      "column": "column name",
      "description": "What's unusual",
      "severity": "high" | "medium" | "low"
    }
  ],
  "dataQuality": {
    "score": 0-100,
    "issues": ["issue 1", "issue 2"],
    "completeness": 0-100
  }
}"""

_CHART_SCHEMA = """{
  "suggestions": [
    {
      "chartType": "bar" | "line" | "pie" | "scatter",
      "xColumn": "column name",
      "yColumn": "column name",
      "categoryColumn": "for pie charts",
      "valueColumn": "for pie charts",
      "aggregation": "sum" | "avg" | "count" | "min" | "max",
      "title": "Suggested chart title",
      "reasoning": "Why this chart is recommended",
      "confidence": 0-100,
      "insights": ["insight 1", "insight 2"]
    }
  ]
}"""


def prepare_data_for_ai(
    rows: Sequence[Row],
    columns: Sequence[ColumnDescriptor],
    max_rows: int = 100,
    max_columns: int = 20,
    max_tokens: int = SAMPLE_TOKEN_BUDGET,
) -> dict[str, Any]:
    """Sample rows and summarise columns so prompts stay small.

    The row sample is cut further when its JSON would exceed ``max_tokens``.
    """
    if not rows:
        return {"sample": [], "statistics": {}, "columns": []}

    kept = list(columns)[:max_columns]
    names = [c.name for c in kept]
    sample = [{name: row.get(name) for name in names} for row in rows[:max_rows]]
    sample = truncate_context(sample, max_tokens)

    column_types: dict[str, int] = {}
    for column in columns:
        column_types[column.type.value] = column_types.get(column.type.value, 0) + 1

    return {
        "sample": sample,
        "statistics": {
            "totalRows": len(rows),
            "sampleSize": len(sample),
            "columnCount": len(columns),
            "columnTypes": column_types,
        },
        "columns": [{"name": c.name, "type": c.type.value} for c in kept],
    }


def _dump(rows: list[Row]) -> str:
    return json.dumps(rows, indent=2, default=str, ensure_ascii=False)


def _column_lines(prepared: dict[str, Any]) -> str:
    return "\n".join(f"- {c['name']} ({c['type']})" for c in prepared["columns"])


def build_analysis_prompt(prepared: dict[str, Any]) -> str:
    stats = prepared["statistics"]
    sample = prepared["sample"]
    return f"""You are a data analyst expert. Analyze this dataset and provide comprehensive insights.

DATA OVERVIEW:
- Total Rows: {stats["totalRows"]}
- Columns: {stats["columnCount"]}
- Column Types: {json.dumps(stats["columnTypes"])}

COLUMNS:
{_column_lines(prepared)}

SAMPLE DATA (first {len(sample)} rows):
{_dump(sample[:10])}

Please provide:
1. **Key Insights**: 4-6 important observations about the data (trends, patterns, notable values)
2. **Recommendations**: 3-5 actionable recommendations based on the data
3. **Predictions**: Any trends or forecasts you can identify
4. **Anomalies**: Any unusual patterns or outliers
5. **Data Quality**: Assessment of data completeness and quality

Format your response as JSON with this structure:
{_ANALYSIS_SCHEMA}"""


def build_chart_prompt(prepared: dict[str, Any]) -> str:
    return f"""You are a data visualization expert. Suggest the best chart types for this dataset.

COLUMNS:
{_column_lines(prepared)}

SAMPLE DATA:
{_dump(prepared["sample"][:5])}

Suggest 3 different chart configurations that would best visualize this data.

Format as JSON:
{_CHART_SCHEMA}"""


def build_question_prompt(question: str, prepared: dict[str, Any]) -> str:
    names = ", ".join(c["name"] for c in prepared["columns"])
    return f"""You are a helpful data analyst. Answer this question about the dataset.

QUESTION: {question}

DATASET INFO:
- Rows: {prepared["statistics"]["totalRows"]}
- Columns: {names}

SAMPLE DATA:
{_dump(prepared["sample"][:10])}

Provide a clear, concise answer based on the data. Include specific numbers and examples where relevant."""


def build_messages(system_prompt: str, user_prompt: str) -> list[dict[str, Any]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
