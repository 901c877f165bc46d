"""AI insight endpoints."""
from fastapi import APIRouter, Depends

from chartwise.ai.insights import InsightClient
from chartwise.api.deps import get_insight_client, get_store
from chartwise.api.schemas.insights import AIChartSuggestionList, AskRequest, AskResponse, InsightsRead
from chartwise.models.insight import AnalysisResult
from chartwise.services.insight_service import InsightService
from chartwise.state.store import AppStore

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("", response_model=InsightsRead)
def get_insights(
    store: AppStore = Depends(get_store),
    client: InsightClient = Depends(get_insight_client),
) -> InsightsRead:
    return InsightService(store, client).get()


@router.post("/analyze", response_model=AnalysisResult)
def analyze(
    store: AppStore = Depends(get_store),
    client: InsightClient = Depends(get_insight_client),
) -> AnalysisResult:
    return InsightService(store, client).analyze()


@router.post("/chart-suggestions", response_model=AIChartSuggestionList)
def chart_suggestions(
    store: AppStore = Depends(get_store),
    client: InsightClient = Depends(get_insight_client),
) -> AIChartSuggestionList:
    return InsightService(store, client).chart_suggestions()


@router.post("/ask", response_model=AskResponse)
def ask(
    payload: AskRequest,
    store: AppStore = Depends(get_store),
    client: InsightClient = Depends(get_insight_client),
) -> AskResponse:
    return InsightService(store, client).ask(payload.question)
