"""Dataset DTOs, pure Pydantic."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Literal
from pydantic import BaseModel, Field

from chartwise.models.dataset import ColumnDescriptor, Dataset, DatasetSummary


class DatasetRead(BaseModel):
    file_name: str
    row_count: int
    columns: list[ColumnDescriptor]
    summary: DatasetSummary
    warnings: list[str] = Field(default_factory=list)
    loaded_at: datetime

    @classmethod
    def from_dataset(cls, dataset: Dataset) -> "DatasetRead":
        return cls(
            file_name=dataset.file_name,
            row_count=len(dataset.rows),
            columns=list(dataset.columns),
            summary=dataset.summary,
            warnings=list(dataset.warnings),
            loaded_at=dataset.loaded_at,
        )


class RowQuery(BaseModel):
    search: str | None = None
    sort_by: str | None = None
    direction: Literal["asc", "desc"] = "asc"
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=500)


class RowPage(BaseModel):
    items: list[dict[str, Any]]
    total: int
    page: int
    page_size: int
    total_pages: int
