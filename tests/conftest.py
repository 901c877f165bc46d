"""Shared test fixtures.

  store: AppStore persisting preferences under tmp_path.
  fake_llm: FakeLLMClient returning a canned analysis reply.
  insight_client: InsightClient wired to fake_llm with no gate delay and
    no retry sleeps.
  client: FastAPI TestClient over create_app(store, insight_client).
"""
import json
import os
import tempfile
from typing import Any

import pytest


def pytest_configure(config):
    """Set dummy environment before any test modules are imported.

    chartwise.config reads settings at import time; tests must never pick up
    a developer's real key or write into the working tree's data directory.
    """
    os.environ.setdefault("OPENAI_API_KEY", "sk-test-dummy-for-tests")
    os.environ.setdefault("CHARTWISE_LOG_LEVEL", "WARNING")
    os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="chartwise-test-"))


SALES_CSV = (
    "region,product,units,revenue,date\n"
    "North,Widget,10,100.5,2024-01-01\n"
    "South,Gadget,5,50,2024-01-02\n"
    "North,Gadget,7,70.25,2024-01-03\n"
    "East,Widget,3,30,2024-01-04\n"
    "South,Widget,8,80,2024-01-05\n"
    "East,Gadget,,20,2024-01-06\n"
)

ANALYSIS_REPLY = {
    "insights": [
        {
            "type": "positive",
            "category": "trend",
            "title": "North leads revenue",
            "description": "North has the highest revenue.",
            "confidence": 85,
            "dataPoints": ["North: 170.75"],
        }
    ],
    "recommendations": [
        {"priority": "low", "action": "Track weekly", "reason": "Small sample", "impact": "Minor"},
        {"priority": "high", "action": "Fill missing units", "reason": "One null", "impact": "Accuracy"},
    ],
    "predictions": {"trend": "up", "forecast": "Revenue grows", "confidence": 60},
    "anomalies": [
        {"column": "units", "description": "Missing value in row 6", "severity": "medium"}
    ],
    "dataQuality": {"score": 92, "issues": ["1 missing value"], "completeness": 97},
}


class FakeLLMClient:
    """Test double returning pre-configured replies (or raising errors) in order."""

    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses) or [json.dumps(ANALYSIS_REPLY)]
        self.call_count = 0
        self.last_messages: list[dict[str, Any]] | None = None
        self.last_kwargs: dict[str, Any] = {}
        self.usage: dict[str, int] | None = None

    def chat_completions_create(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        response_format: dict[str, Any] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        from chartwise.ai.llm_protocol import Completion

        self.call_count += 1
        self.last_messages = messages
        self.last_kwargs = {
            "model": model,
            "response_format": response_format,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        # the last response repeats once the queue is exhausted
        item = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(item, BaseException):
            raise item
        return Completion(content=item, usage=self.usage)


class StatusError(Exception):
    """Stand-in for an SDK error carrying an HTTP status code."""

    def __init__(self, status_code: int, message: str = "boom") -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def make_insight_client(llm, **overrides):
    from chartwise.ai.cache import InsightCache
    from chartwise.ai.insights import InsightClient
    from chartwise.ai.rate_limit import MinIntervalGate, RetryPolicy

    kwargs = dict(
        enabled=True,
        api_key="sk-test",
        gate=MinIntervalGate(0),
        retry_policy=RetryPolicy(3, 0, sleep=lambda s: None),
        cache=InsightCache(),
        clock=lambda: 1_700_000_000.0,
    )
    kwargs.update(overrides)
    return InsightClient(llm, **kwargs)


@pytest.fixture
def sales_csv() -> str:
    return SALES_CSV


@pytest.fixture
def store(tmp_path):
    from chartwise.state.store import AppStore, PreferencesStore
    return AppStore(PreferencesStore(tmp_path / "preferences.json"))


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def insight_client(fake_llm):
    return make_insight_client(fake_llm)


@pytest.fixture
def client(store, insight_client):
    """FastAPI TestClient over an isolated store and fake LLM."""
    from fastapi.testclient import TestClient
    from chartwise.api.app import create_app

    app = create_app(store=store, insight_client=insight_client)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def loaded_client(client, sales_csv):
    """TestClient with the sales CSV already uploaded."""
    resp = client.post("/dataset/upload", files={"file": ("sales.csv", sales_csv.encode(), "text/csv")})
    assert resp.status_code == 201, resp.text
    return client
