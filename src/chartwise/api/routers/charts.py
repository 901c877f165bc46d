"""Chart configuration and chart data endpoints."""
from fastapi import APIRouter, Depends

from chartwise.api.deps import get_store
from chartwise.api.schemas.charts import ChartCreate, ChartList, ChartSuggestRequest
from chartwise.models.chart import ChartConfig, ChartData, ChartSuggestion
from chartwise.services.chart_service import ChartService
from chartwise.state.store import AppStore

router = APIRouter(prefix="/charts", tags=["charts"])


@router.get("", response_model=ChartList)
def list_charts(store: AppStore = Depends(get_store)) -> ChartList:
    return ChartService(store).list_charts()


@router.post("", response_model=ChartConfig, status_code=201)
def create_chart(payload: ChartCreate, store: AppStore = Depends(get_store)) -> ChartConfig:
    return ChartService(store).create(payload)


@router.post("/preview", response_model=ChartData)
def preview_chart(payload: ChartCreate, store: AppStore = Depends(get_store)) -> ChartData:
    return ChartService(store).preview(payload)


@router.post("/suggest", response_model=ChartSuggestion)
def suggest_chart(payload: ChartSuggestRequest, store: AppStore = Depends(get_store)) -> ChartSuggestion:
    return ChartService(store).suggest(payload)


@router.put("/{chart_id}", response_model=ChartConfig)
def update_chart(chart_id: str, payload: ChartCreate, store: AppStore = Depends(get_store)) -> ChartConfig:
    return ChartService(store).update(chart_id, payload)


@router.delete("/{chart_id}", status_code=204)
def delete_chart(chart_id: str, store: AppStore = Depends(get_store)) -> None:
    ChartService(store).delete(chart_id)


@router.get("/{chart_id}/data", response_model=ChartData)
def chart_data(chart_id: str, store: AppStore = Depends(get_store)) -> ChartData:
    return ChartService(store).data(chart_id)
