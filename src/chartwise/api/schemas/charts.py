"""Chart DTOs, pure Pydantic."""
from __future__ import annotations
from pydantic import BaseModel, Field

from chartwise.models.chart import Aggregation, ChartConfig, ChartType


class ChartCreate(BaseModel):
    chart_type: ChartType
    title: str = ""
    x_column: str | None = None
    y_column: str | None = None
    category_column: str | None = None
    value_column: str | None = None
    name_column: str | None = None
    aggregation: Aggregation | None = None
    top_n: int | None = Field(default=None, ge=1)

    def to_config(self, chart_id: str | None = None) -> ChartConfig:
        data = self.model_dump(exclude_none=True)
        if chart_id is not None:
            data["id"] = chart_id
        return ChartConfig.model_validate(data)


class ChartList(BaseModel):
    items: list[ChartConfig]
    total: int


class ChartSuggestRequest(BaseModel):
    x_column: str | None = None
    y_column: str | None = None
