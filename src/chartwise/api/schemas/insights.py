"""Insight DTOs, pure Pydantic."""
from __future__ import annotations
from pydantic import BaseModel, Field

from chartwise.models.insight import AIChartSuggestion, AIConfigStatus, AnalysisResult


class InsightsRead(BaseModel):
    analysis: AnalysisResult | None = None
    loading: bool = False
    status: AIConfigStatus


class AIChartSuggestionList(BaseModel):
    items: list[AIChartSuggestion]
    total: int


class AskRequest(BaseModel):
    question: str = Field(min_length=1)


class AskResponse(BaseModel):
    question: str
    answer: str
