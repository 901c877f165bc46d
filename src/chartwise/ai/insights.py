"""InsightClient: analysis, chart suggestions and Q&A over a dataset sample.

Each call runs the same pipeline: validate input, check configuration,
consult the cache (analysis only), pass the min-interval gate, then call the
model under the retry policy. Errors surface as ``AIError`` subclasses.
"""
from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from chartwise.ai.cache import InsightCache, make_cache_key
from chartwise.ai.helpers import ai_config_status, format_recommendations, rate_data_quality
from chartwise.ai.llm_protocol import Completion, LLMClient, OpenAILLMClient
from chartwise.ai.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    CHART_SYSTEM_PROMPT,
    QUESTION_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_chart_prompt,
    build_messages,
    build_question_prompt,
    prepare_data_for_ai,
)
from chartwise.ai.rate_limit import MinIntervalGate, RetryPolicy, classify_llm_error
from chartwise.config import settings
from chartwise.domain.exceptions import AIConfigurationError, AIResponseError, InvalidInputError
from chartwise.models.dataset import ColumnDescriptor, Row
from chartwise.models.insight import AIChartSuggestion, AIConfigStatus, AnalysisResult, TokenUsage

logger = logging.getLogger(__name__)

JSON_RESPONSE = {"type": "json_object"}
SUGGESTION_SAMPLE_ROWS = 50
SUGGESTION_MAX_TOKENS = 2000
ANSWER_MAX_TOKENS = 1000


class InsightClient:
    def __init__(
        self,
        llm_client: LLMClient | None = None,
        *,
        gate: MinIntervalGate | None = None,
        retry_policy: RetryPolicy | None = None,
        cache: InsightCache | None = None,
        enabled: bool | None = None,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        max_rows: int | None = None,
        max_columns: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._llm_client = llm_client if llm_client is not None else OpenAILLMClient(api_key=self._api_key)
        self.gate = gate if gate is not None else MinIntervalGate(settings.AI_MIN_CALL_INTERVAL)
        self.retry_policy = (
            retry_policy if retry_policy is not None
            else RetryPolicy(settings.AI_MAX_RETRIES, settings.AI_RETRY_DELAY)
        )
        # an empty cache is falsy, so test against None
        self.cache = (
            cache if cache is not None
            else InsightCache(settings.AI_CACHE_TTL, enabled=settings.AI_CACHE_ENABLED)
        )
        self.enabled = settings.AI_ENABLED if enabled is None else enabled
        self.model = model or settings.OPENAI_MODEL
        self.temperature = settings.OPENAI_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.OPENAI_MAX_TOKENS
        self.max_rows = max_rows or settings.AI_MAX_DATA_ROWS
        self.max_columns = max_columns or settings.AI_MAX_COLUMNS
        self._clock = clock

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def status(self) -> AIConfigStatus:
        return ai_config_status(self.enabled, self._api_key)

    def analyze_data(self, rows: Sequence[Row], columns: Sequence[ColumnDescriptor]) -> AnalysisResult:
        if not rows:
            raise InvalidInputError("No data to analyze")
        if not columns:
            raise InvalidInputError("No columns information provided")
        self._ensure_configured()

        key = make_cache_key(rows, columns)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Analysis served from cache")
            return cached.model_copy(update={"cached": True})

        self.gate.acquire()
        logger.info("Starting AI data analysis (%d rows, %d columns)", len(rows), len(columns))
        prepared = prepare_data_for_ai(rows, columns, self.max_rows, self.max_columns)
        completion = self._complete(
            build_messages(ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt(prepared)),
            response_format=JSON_RESPONSE,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        result = self._parse_analysis(completion)
        self.cache.set(key, result)
        logger.info("Analysis complete: %d insights", len(result.insights))
        return result

    def suggest_charts(
        self, rows: Sequence[Row], columns: Sequence[ColumnDescriptor],
    ) -> list[AIChartSuggestion]:
        if not rows or not columns:
            raise InvalidInputError("No data or columns provided")
        self._ensure_configured()
        self.gate.acquire()

        prepared = prepare_data_for_ai(rows, columns, SUGGESTION_SAMPLE_ROWS, self.max_columns)
        completion = self._complete(
            build_messages(CHART_SYSTEM_PROMPT, build_chart_prompt(prepared)),
            response_format=JSON_RESPONSE,
            temperature=0.7,
            max_tokens=SUGGESTION_MAX_TOKENS,
        )
        payload = self._load_json(completion.content)
        raw = payload.get("suggestions") or []
        if not isinstance(raw, list):
            raise AIResponseError("AI response field 'suggestions' is not a list")
        try:
            suggestions = [AIChartSuggestion.model_validate(item) for item in raw]
        except ValidationError as exc:
            raise AIResponseError(f"AI chart suggestions did not match the expected shape: {exc}") from exc
        logger.info("Generated %d chart suggestions", len(suggestions))
        return suggestions

    def answer_question(
        self, question: str, rows: Sequence[Row], columns: Sequence[ColumnDescriptor],
    ) -> str:
        if not question or not question.strip():
            raise InvalidInputError("No question provided")
        if not rows:
            raise InvalidInputError("No data available to answer questions")
        self._ensure_configured()
        self.gate.acquire()

        logger.info("Answering question: %r", question)
        prepared = prepare_data_for_ai(rows, columns, SUGGESTION_SAMPLE_ROWS, self.max_columns)
        answer = self._complete(
            build_messages(QUESTION_SYSTEM_PROMPT, build_question_prompt(question.strip(), prepared)),
            temperature=0.7,
            max_tokens=ANSWER_MAX_TOKENS,
        ).content
        if not answer.strip():
            raise AIResponseError("AI returned an empty answer")
        return answer.strip()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_configured(self) -> None:
        status = self.status()
        if not status.configured:
            raise AIConfigurationError(status.message)

    def _complete(self, messages: list[dict[str, Any]], **kwargs: Any) -> Completion:
        def attempt() -> Completion:
            try:
                return self._llm_client.chat_completions_create(
                    model=self.model, messages=messages, **kwargs,
                )
            except Exception as exc:
                mapped = classify_llm_error(exc)
                if mapped is exc:
                    raise
                raise mapped from exc

        return self.retry_policy.call(attempt)

    @staticmethod
    def _load_json(content: str) -> dict[str, Any]:
        try:
            payload = json.loads(content)
        except (TypeError, json.JSONDecodeError) as exc:
            raise AIResponseError("AI returned a response that is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise AIResponseError("AI response is not a JSON object")
        return payload

    def _parse_analysis(self, completion: Completion) -> AnalysisResult:
        payload = self._load_json(completion.content)
        stamp_ms = int(self._clock() * 1000)
        timestamp = datetime.fromtimestamp(stamp_ms / 1000, tz=timezone.utc).isoformat()

        for prefix, field in (("insight", "insights"), ("anomaly", "anomalies")):
            items = payload.get(field)
            if isinstance(items, list):
                payload[field] = [
                    {"id": f"{prefix}_{stamp_ms}_{i}", **item, "timestamp": timestamp}
                    if isinstance(item, dict) else item
                    for i, item in enumerate(items)
                ]

        try:
            result = AnalysisResult.model_validate(payload)
        except ValidationError as exc:
            raise AIResponseError(f"AI analysis did not match the expected shape: {exc}") from exc

        return result.model_copy(
            update={
                "recommendations": format_recommendations(result.recommendations),
                "data_quality": rate_data_quality(result.data_quality),
                "usage": TokenUsage.model_validate(completion.usage) if completion.usage else None,
            }
        )
