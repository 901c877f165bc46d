"""AI analysis result models.

The completion endpoint is asked for camelCase JSON; ``validation_alias``
accepts either spelling so the same models parse replies and API payloads.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

InsightType = Literal["positive", "warning", "negative", "neutral"]
Priority = Literal["high", "medium", "low"]
Trend = Literal["up", "down", "stable"]

_PRIORITY_ORDER = {"high": 1, "medium": 2, "low": 3}


def _clamp_percent(v: Any) -> float:
    try:
        value = float(v)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, min(100.0, value))


class Insight(BaseModel):
    id: str = ""
    type: InsightType = "neutral"
    category: str = "general"
    title: str = ""
    description: str = ""
    confidence: float = 0.0
    data_points: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("data_points", "dataPoints"),
    )
    timestamp: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, v: Any) -> Any:
        if v in ("positive", "warning", "negative", "neutral"):
            return v
        return "neutral"

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_range(cls, v: Any) -> float:
        return _clamp_percent(v)

    @field_validator("data_points", mode="before")
    @classmethod
    def _stringify_points(cls, v: Any) -> list[str]:
        if not v:
            return []
        if not isinstance(v, list):
            v = [v]
        return [str(item) for item in v]


class Recommendation(BaseModel):
    priority: Priority = "medium"
    action: str = ""
    reason: str = ""
    impact: str = ""

    @field_validator("priority", mode="before")
    @classmethod
    def _known_priority(cls, v: Any) -> Any:
        return v if v in _PRIORITY_ORDER else "medium"


class Prediction(BaseModel):
    trend: Trend = "stable"
    forecast: str = ""
    confidence: float = 0.0

    @field_validator("trend", mode="before")
    @classmethod
    def _known_trend(cls, v: Any) -> Any:
        return v if v in ("up", "down", "stable") else "stable"

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_range(cls, v: Any) -> float:
        return _clamp_percent(v)


class Anomaly(BaseModel):
    id: str = ""
    column: str = ""
    description: str = ""
    severity: Priority = "medium"
    timestamp: str | None = None

    @field_validator("severity", mode="before")
    @classmethod
    def _known_severity(cls, v: Any) -> Any:
        return v if v in _PRIORITY_ORDER else "medium"


class DataQuality(BaseModel):
    score: float = 0.0
    issues: list[str] = Field(default_factory=list)
    completeness: float = 0.0
    rating: str | None = None
    color: str | None = None

    @field_validator("score", "completeness", mode="before")
    @classmethod
    def _percent(cls, v: Any) -> float:
        return _clamp_percent(v)


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class AnalysisResult(BaseModel):
    insights: list[Insight] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
    predictions: Prediction | None = None
    anomalies: list[Anomaly] = Field(default_factory=list)
    data_quality: DataQuality | None = Field(
        default=None, validation_alias=AliasChoices("data_quality", "dataQuality"),
    )
    usage: TokenUsage | None = None
    cached: bool = False


class AIChartSuggestion(BaseModel):
    chart_type: str = Field(validation_alias=AliasChoices("chart_type", "chartType"))
    x_column: str | None = Field(default=None, validation_alias=AliasChoices("x_column", "xColumn"))
    y_column: str | None = Field(default=None, validation_alias=AliasChoices("y_column", "yColumn"))
    category_column: str | None = Field(
        default=None, validation_alias=AliasChoices("category_column", "categoryColumn"),
    )
    value_column: str | None = Field(
        default=None, validation_alias=AliasChoices("value_column", "valueColumn"),
    )
    aggregation: str | None = None
    title: str = ""
    reasoning: str = ""
    confidence: float = 0.0
    insights: list[str] = Field(default_factory=list)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_range(cls, v: Any) -> float:
        return _clamp_percent(v)


class AIConfigStatus(BaseModel):
    configured: bool
    message: str
