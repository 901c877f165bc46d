"""Preferences and AI configuration status."""
from __future__ import annotations

from chartwise.ai.insights import InsightClient
from chartwise.api.schemas.settings import AIStatusRead, PreferencesRead, PreferencesUpdate
from chartwise.config import settings
from chartwise.state.store import AppStore, SetDarkMode, ToggleDarkMode


class SettingsService:
    def __init__(self, store: AppStore, client: InsightClient | None = None) -> None:
        self._store = store
        self._client = client

    def preferences(self) -> PreferencesRead:
        return PreferencesRead(dark_mode=self._store.snapshot.dark_mode)

    def update_preferences(self, payload: PreferencesUpdate) -> PreferencesRead:
        if payload.toggle:
            self._store.dispatch(ToggleDarkMode())
        elif payload.dark_mode is not None:
            self._store.dispatch(SetDarkMode(payload.dark_mode))
        return self.preferences()

    def ai_status(self) -> AIStatusRead:
        client = self._client or InsightClient()
        status = client.status()
        return AIStatusRead(
            configured=status.configured,
            message=status.message,
            enabled=client.enabled,
            auto_generate=settings.AI_AUTO_GENERATE,
            model=client.model,
            cache_enabled=client.cache.enabled,
            min_call_interval=client.gate.min_interval,
        )
