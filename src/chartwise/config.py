"""Application settings, read once from the environment / ``.env``."""
from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # OpenAI
    OPENAI_API_KEY: SecretStr | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_MAX_TOKENS: int = 4000
    OPENAI_TEMPERATURE: float = 0.7

    # Feature flags
    AI_ENABLED: bool = False
    AI_AUTO_GENERATE: bool = False

    # Outbound call policy
    AI_MAX_RETRIES: int = 3
    AI_RETRY_DELAY: float = 1.0
    AI_MIN_CALL_INTERVAL: float = 2.0

    # Sampling (keeps prompts small)
    AI_MAX_DATA_ROWS: int = 100
    AI_MAX_COLUMNS: int = 20

    # Response cache
    AI_CACHE_ENABLED: bool = True
    AI_CACHE_TTL: float = 30 * 60

    # Uploads
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    DATA_DIR: Path = Path("data")
    API_URL: str = "http://127.0.0.1:8000"

    @property
    def data_dir(self) -> Path:
        return self.DATA_DIR

    @property
    def preferences_file(self) -> Path:
        return self.DATA_DIR / "preferences.json"

    @property
    def openai_api_key(self) -> str | None:
        if self.OPENAI_API_KEY is None:
            return None
        return self.OPENAI_API_KEY.get_secret_value() or None


settings = Settings()
