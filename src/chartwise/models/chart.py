"""Chart configuration and chart-point models."""
from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, field_validator


class ChartType(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    SCATTER = "scatter"


class Aggregation(str, Enum):
    SUM = "sum"
    AVG = "avg"
    COUNT = "count"
    MIN = "min"
    MAX = "max"

    @classmethod
    def parse(cls, value: "Aggregation | str | None", default: "Aggregation") -> "Aggregation":
        if value is None or value == "":
            return default
        if isinstance(value, Aggregation):
            return value
        lowered = str(value).strip().lower()
        if lowered == "average":
            return cls.AVG
        return cls(lowered)


def _new_chart_id() -> str:
    return f"chart_{uuid.uuid4().hex[:12]}"


class ChartConfig(BaseModel):
    id: str = Field(default_factory=_new_chart_id)
    chart_type: ChartType
    title: str = ""
    x_column: str | None = None
    y_column: str | None = None
    category_column: str | None = None
    value_column: str | None = None
    name_column: str | None = None
    aggregation: Aggregation = Aggregation.SUM
    top_n: int | None = Field(default=10, ge=1)

    @field_validator("aggregation", mode="before")
    @classmethod
    def _alias_average(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().lower() == "average":
            return Aggregation.AVG
        if isinstance(v, str):
            return v.strip().lower()
        return v


class BarPoint(BaseModel):
    name: str
    value: int | float
    count: int
    min: float
    max: float


class LinePoint(BaseModel):
    name: str
    value: int | float
    date: Union[str, int, float, bool, None] = None


class PiePoint(BaseModel):
    name: str
    value: int | float


class ScatterPoint(BaseModel):
    x: float
    y: float
    name: str


ChartPoint = Union[BarPoint, ScatterPoint, PiePoint, LinePoint]


class ChartValidation(BaseModel):
    is_valid: bool
    error: str | None = None


class ChartData(BaseModel):
    chart_type: ChartType | None = None
    points: list[ChartPoint] = Field(default_factory=list)
    is_valid: bool = False
    error: str | None = None
    stats: dict[str, Any] | None = None


class ChartSuggestion(BaseModel):
    chart_type: ChartType | None = None
    reason: str
    x_column: str | None = None
    y_column: str | None = None
    category_column: str | None = None
    value_column: str | None = None
    aggregation: Aggregation | None = None
