"""FastAPI dependencies."""
from __future__ import annotations
from fastapi import Request

from chartwise.ai.insights import InsightClient
from chartwise.state.store import AppStore


def get_store(request: Request) -> AppStore:
    """The process-wide store created by ``create_app``."""
    return request.app.state.store


def get_insight_client(request: Request) -> InsightClient:
    return request.app.state.insight_client
