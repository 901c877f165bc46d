"""Typed HTTP client for Streamlit pages.

Only imports DTOs from ``chartwise.api.schemas`` and ``chartwise.models``;
never services or the store. Instantiate via ``get_client()`` which caches
per Streamlit session.
"""
from __future__ import annotations

from typing import Any

import httpx
import streamlit as st

from chartwise.api.schemas.charts import ChartCreate, ChartList, ChartSuggestRequest
from chartwise.api.schemas.dataset import DatasetRead, RowPage
from chartwise.api.schemas.export import ExportFormat
from chartwise.api.schemas.insights import AIChartSuggestionList, AskResponse, InsightsRead
from chartwise.api.schemas.settings import AIStatusRead, PreferencesRead
from chartwise.config import settings
from chartwise.models.chart import ChartConfig, ChartData, ChartSuggestion
from chartwise.models.dataset import DatasetSummary
from chartwise.models.insight import AnalysisResult


class APIError(Exception):
    """Raised when the backend returns a 4xx/5xx response."""

    def __init__(self, status_code: int, detail: str, kind: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        self.kind = kind
        super().__init__(f"[{status_code}] {detail}")


class ChartwiseClient:
    """One method per backend endpoint.  All return pure Pydantic DTOs."""

    def __init__(self, base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> None:
        self._client = httpx.Client(base_url=base_url or settings.API_URL, timeout=60.0, transport=transport)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            body = resp.json()
            detail, kind = body.get("detail", resp.text), body.get("kind")
        except ValueError:
            detail, kind = resp.text, None
        if not isinstance(detail, str):
            # FastAPI request-validation errors carry a list
            detail = "; ".join(str(item.get("msg", item)) for item in detail) if isinstance(detail, list) else str(detail)
        raise APIError(resp.status_code, detail, kind)

    # ------------------------------------------------------------------
    # Dataset
    # ------------------------------------------------------------------

    def upload_dataset(self, filename: str, content: bytes, content_type: str = "text/csv") -> DatasetRead:
        resp = self._client.post("/dataset/upload", files={"file": (filename, content, content_type)})
        self._raise_for_status(resp)
        return DatasetRead.model_validate(resp.json())

    def get_dataset(self) -> DatasetRead | None:
        """Current dataset, or ``None`` when nothing is loaded."""
        resp = self._client.get("/dataset")
        if resp.status_code == 404:
            return None
        self._raise_for_status(resp)
        return DatasetRead.model_validate(resp.json())

    def clear_dataset(self) -> None:
        resp = self._client.delete("/dataset")
        self._raise_for_status(resp)

    def list_rows(
        self,
        *,
        search: str | None = None,
        sort_by: str | None = None,
        direction: str = "asc",
        page: int = 1,
        page_size: int = 10,
    ) -> RowPage:
        params: dict[str, Any] = {"direction": direction, "page": page, "page_size": page_size}
        if search:
            params["search"] = search
        if sort_by:
            params["sort_by"] = sort_by
        resp = self._client.get("/dataset/rows", params=params)
        self._raise_for_status(resp)
        return RowPage.model_validate(resp.json())

    def get_summary(self) -> DatasetSummary:
        resp = self._client.get("/dataset/summary")
        self._raise_for_status(resp)
        return DatasetSummary.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    def list_charts(self) -> ChartList:
        resp = self._client.get("/charts")
        self._raise_for_status(resp)
        return ChartList.model_validate(resp.json())

    def create_chart(self, payload: ChartCreate) -> ChartConfig:
        resp = self._client.post("/charts", json=payload.model_dump(mode="json", exclude_none=True))
        self._raise_for_status(resp)
        return ChartConfig.model_validate(resp.json())

    def update_chart(self, chart_id: str, payload: ChartCreate) -> ChartConfig:
        resp = self._client.put(f"/charts/{chart_id}", json=payload.model_dump(mode="json", exclude_none=True))
        self._raise_for_status(resp)
        return ChartConfig.model_validate(resp.json())

    def delete_chart(self, chart_id: str) -> None:
        resp = self._client.delete(f"/charts/{chart_id}")
        self._raise_for_status(resp)

    def chart_data(self, chart_id: str) -> ChartData:
        resp = self._client.get(f"/charts/{chart_id}/data")
        self._raise_for_status(resp)
        return ChartData.model_validate(resp.json())

    def preview_chart(self, payload: ChartCreate) -> ChartData:
        resp = self._client.post("/charts/preview", json=payload.model_dump(mode="json", exclude_none=True))
        self._raise_for_status(resp)
        return ChartData.model_validate(resp.json())

    def suggest_chart(self, x_column: str | None = None, y_column: str | None = None) -> ChartSuggestion:
        payload = ChartSuggestRequest(x_column=x_column, y_column=y_column)
        resp = self._client.post("/charts/suggest", json=payload.model_dump())
        self._raise_for_status(resp)
        return ChartSuggestion.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def get_insights(self) -> InsightsRead:
        resp = self._client.get("/insights")
        self._raise_for_status(resp)
        return InsightsRead.model_validate(resp.json())

    def analyze(self) -> AnalysisResult:
        resp = self._client.post("/insights/analyze")
        self._raise_for_status(resp)
        return AnalysisResult.model_validate(resp.json())

    def ai_chart_suggestions(self) -> AIChartSuggestionList:
        resp = self._client.post("/insights/chart-suggestions")
        self._raise_for_status(resp)
        return AIChartSuggestionList.model_validate(resp.json())

    def ask(self, question: str) -> AskResponse:
        resp = self._client.post("/insights/ask", json={"question": question})
        self._raise_for_status(resp)
        return AskResponse.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self, fmt: ExportFormat, include_data: bool = False) -> tuple[bytes, str]:
        """Return the file bytes and the server-suggested file name."""
        resp = self._client.get(f"/export/{fmt.value}", params={"include_data": include_data})
        self._raise_for_status(resp)
        disposition = resp.headers.get("content-disposition", "")
        filename = disposition.split("filename=")[-1].strip('"') if "filename=" in disposition else f"export.{fmt.value}"
        return resp.content, filename

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_preferences(self) -> PreferencesRead:
        resp = self._client.get("/settings/preferences")
        self._raise_for_status(resp)
        return PreferencesRead.model_validate(resp.json())

    def set_dark_mode(self, enabled: bool) -> PreferencesRead:
        resp = self._client.put("/settings/preferences", json={"dark_mode": enabled})
        self._raise_for_status(resp)
        return PreferencesRead.model_validate(resp.json())

    def ai_status(self) -> AIStatusRead:
        resp = self._client.get("/settings/ai")
        self._raise_for_status(resp)
        return AIStatusRead.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def health(self) -> dict:
        resp = self._client.get("/health")
        self._raise_for_status(resp)
        return resp.json()


# ------------------------------------------------------------------
# Streamlit helper: one client per session
# ------------------------------------------------------------------

def get_client() -> ChartwiseClient:
    """Return a cached ``ChartwiseClient`` for the current Streamlit session."""
    if "chartwise_api_client" not in st.session_state:
        base_url = st.session_state.get("chartwise_api_url", settings.API_URL)
        st.session_state["chartwise_api_client"] = ChartwiseClient(base_url=base_url)
    return st.session_state["chartwise_api_client"]
