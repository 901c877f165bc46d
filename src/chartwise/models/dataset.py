"""Dataset and column metadata models."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

Scalar = Union[str, int, float, bool, None]
Row = dict[str, Any]


class ColumnType(str, Enum):
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    CATEGORY = "category"
    STRING = "string"


class ColumnDescriptor(BaseModel):
    name: str
    type: ColumnType
    nullable: bool = False
    null_count: int = 0
    unique_count: int = 0
    sample_values: list[Any] = Field(default_factory=list)
    min: float | None = None
    max: float | None = None
    min_date: str | None = None
    max_date: str | None = None
    categories: list[Any] | None = None


class DatasetSummary(BaseModel):
    total_rows: int = 0
    total_columns: int = 0
    total_nulls: int = 0
    null_percentage: float = 0.0
    completeness: float = 0.0
    quality_score: int = 0
    memory_size: str = "0 Bytes"
    memory_size_bytes: int = 0


class ValidationReport(BaseModel):
    valid: bool = True
    message: str = ""
    warnings: list[str] = Field(default_factory=list)


class ParsedCSV(BaseModel):
    rows: list[Row]
    fields: list[str]
    delimiter: str = ","


class Dataset(BaseModel):
    """Immutable once built; a re-upload replaces it wholesale."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    rows: tuple[Row, ...]
    columns: tuple[ColumnDescriptor, ...]
    summary: DatasetSummary
    warnings: tuple[str, ...] = ()
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> ColumnDescriptor | None:
        return next((c for c in self.columns if c.name == name), None)
