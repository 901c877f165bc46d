"""Chart use-case service."""
from __future__ import annotations

import logging

from chartwise.api.schemas.charts import ChartCreate, ChartList, ChartSuggestRequest
from chartwise.charts.suggest import suggest_chart_type
from chartwise.charts.transformers import build_chart_data
from chartwise.charts.validation import validate_chart_config
from chartwise.domain.exceptions import ChartConfigError, NotFoundError
from chartwise.models.chart import ChartConfig, ChartData, ChartSuggestion
from chartwise.models.dataset import Dataset
from chartwise.services.dataset_service import require_dataset
from chartwise.state.store import AddChart, AppStore, RemoveChart, UpdateChart

logger = logging.getLogger(__name__)


class ChartService:
    def __init__(self, store: AppStore) -> None:
        self._store = store

    def _validated(self, payload: ChartCreate, dataset: Dataset, chart_id: str | None = None) -> ChartConfig:
        config = payload.to_config(chart_id)
        validation = validate_chart_config(config, list(dataset.columns))
        if not validation.is_valid:
            raise ChartConfigError(validation.error or "Invalid chart configuration")
        return config

    def _get(self, chart_id: str) -> ChartConfig:
        config = self._store.snapshot.chart(chart_id)
        if config is None:
            raise NotFoundError(f"Chart {chart_id} not found")
        return config

    def list_charts(self) -> ChartList:
        charts = list(self._store.snapshot.charts)
        return ChartList(items=charts, total=len(charts))

    def create(self, payload: ChartCreate) -> ChartConfig:
        config = self._validated(payload, require_dataset(self._store))
        self._store.dispatch(AddChart(config))
        logger.info("Added %s chart %s", config.chart_type.value, config.id)
        return config

    def update(self, chart_id: str, payload: ChartCreate) -> ChartConfig:
        self._get(chart_id)
        config = self._validated(payload, require_dataset(self._store), chart_id)
        self._store.dispatch(UpdateChart(config))
        return config

    def delete(self, chart_id: str) -> None:
        self._store.dispatch(RemoveChart(chart_id))

    def data(self, chart_id: str) -> ChartData:
        """Points for a stored chart, re-validated against the current dataset."""
        config = self._get(chart_id)
        dataset = require_dataset(self._store)
        return build_chart_data(dataset.rows, config, list(dataset.columns))

    def preview(self, payload: ChartCreate) -> ChartData:
        dataset = require_dataset(self._store)
        return build_chart_data(dataset.rows, payload.to_config(), list(dataset.columns))

    def suggest(self, payload: ChartSuggestRequest) -> ChartSuggestion:
        dataset = require_dataset(self._store)
        return suggest_chart_type(list(dataset.columns), payload.x_column, payload.y_column)
