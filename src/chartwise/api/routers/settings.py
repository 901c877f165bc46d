"""Preferences and AI status endpoints."""
from fastapi import APIRouter, Depends

from chartwise.ai.insights import InsightClient
from chartwise.api.deps import get_insight_client, get_store
from chartwise.api.schemas.settings import AIStatusRead, PreferencesRead, PreferencesUpdate
from chartwise.services.settings_service import SettingsService
from chartwise.state.store import AppStore

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/preferences", response_model=PreferencesRead)
def get_preferences(store: AppStore = Depends(get_store)) -> PreferencesRead:
    return SettingsService(store).preferences()


@router.put("/preferences", response_model=PreferencesRead)
def update_preferences(payload: PreferencesUpdate, store: AppStore = Depends(get_store)) -> PreferencesRead:
    return SettingsService(store).update_preferences(payload)


@router.get("/ai", response_model=AIStatusRead)
def ai_status(
    store: AppStore = Depends(get_store),
    client: InsightClient = Depends(get_insight_client),
) -> AIStatusRead:
    return SettingsService(store, client).ai_status()
