"""AI insight use-case service."""
from __future__ import annotations

import logging

from chartwise.ai.insights import InsightClient
from chartwise.api.schemas.insights import AIChartSuggestionList, AskResponse, InsightsRead
from chartwise.domain.exceptions import ChartwiseError
from chartwise.models.insight import AnalysisResult
from chartwise.services.dataset_service import require_dataset
from chartwise.state.store import AppStore, SetAnalysis, SetInsightsLoading

logger = logging.getLogger(__name__)


class InsightService:
    def __init__(self, store: AppStore, client: InsightClient) -> None:
        self._store = store
        self._client = client

    def get(self) -> InsightsRead:
        snapshot = self._store.snapshot
        return InsightsRead(
            analysis=snapshot.analysis,
            loading=snapshot.insights_loading,
            status=self._client.status(),
        )

    def analyze(self) -> AnalysisResult:
        dataset = require_dataset(self._store)
        self._store.dispatch(SetInsightsLoading(True))
        try:
            result = self._client.analyze_data(dataset.rows, dataset.columns)
        except ChartwiseError as exc:
            logger.warning("Analysis failed (%s): %s", type(exc).__name__, exc.message)
            self._store.dispatch(SetInsightsLoading(False))
            raise
        except Exception:
            self._store.dispatch(SetInsightsLoading(False))
            raise
        self._store.dispatch(SetAnalysis(result, dataset=dataset))
        return result

    def chart_suggestions(self) -> AIChartSuggestionList:
        dataset = require_dataset(self._store)
        suggestions = self._client.suggest_charts(dataset.rows, dataset.columns)
        return AIChartSuggestionList(items=suggestions, total=len(suggestions))

    def ask(self, question: str) -> AskResponse:
        dataset = require_dataset(self._store)
        answer = self._client.answer_question(question, dataset.rows, dataset.columns)
        return AskResponse(question=question, answer=answer)
