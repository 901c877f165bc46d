"""Settings DTOs, pure Pydantic."""
from __future__ import annotations
from pydantic import BaseModel


class PreferencesRead(BaseModel):
    dark_mode: bool


class PreferencesUpdate(BaseModel):
    dark_mode: bool | None = None
    toggle: bool = False


class AIStatusRead(BaseModel):
    configured: bool
    message: str
    enabled: bool
    auto_generate: bool
    model: str
    cache_enabled: bool
    min_call_interval: float
