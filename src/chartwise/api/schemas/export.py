"""Export DTOs, pure Pydantic."""
from __future__ import annotations
from enum import Enum
from pydantic import BaseModel


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    XLSX = "xlsx"
    PDF = "pdf"


class ExportFile(BaseModel):
    content: bytes
    media_type: str
    filename: str
