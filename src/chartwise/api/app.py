"""FastAPI application factory."""
from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chartwise import __version__
from chartwise.ai.insights import InsightClient
from chartwise.config import settings
from chartwise.domain.exceptions import (
    AIAuthenticationError,
    AIConfigurationError,
    AIError,
    AIRateLimitError,
    AIRequestError,
    AIResponseError,
    AITransientError,
    ChartConfigError,
    ChartwiseError,
    CSVParseError,
    DatasetValidationError,
    ExportError,
    InvalidInputError,
    LocalRateLimitError,
    NotFoundError,
    UploadRejectedError,
)
from chartwise.logging import get_session_id, logger
from chartwise.state.store import AppStore, PreferencesStore

# Most specific first; the first isinstance match decides the status.
ERROR_STATUS: list[tuple[type[ChartwiseError], int]] = [
    (NotFoundError, 404),
    (CSVParseError, 422),
    (DatasetValidationError, 422),
    (UploadRejectedError, 422),
    (ChartConfigError, 422),
    (InvalidInputError, 422),
    (LocalRateLimitError, 429),
    (AIRateLimitError, 429),
    (AIAuthenticationError, 502),
    (AIResponseError, 502),
    (AIRequestError, 502),
    (AIConfigurationError, 503),
    (AITransientError, 503),
    (ExportError, 500),
]


def status_for(exc: ChartwiseError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


def _error_kind(exc: ChartwiseError) -> str:
    if isinstance(exc, AIError):
        return exc.kind
    return type(exc).__name__


def create_app(store: AppStore | None = None, insight_client: InsightClient | None = None) -> FastAPI:
    app = FastAPI(
        title="Chartwise API",
        version=__version__,
    )
    app.state.store = store or AppStore(PreferencesStore(settings.preferences_file))
    app.state.insight_client = insight_client or InsightClient()

    # Import routers inside create_app() to avoid circular imports at module load time
    from chartwise.api.routers.dataset import router as dataset_router
    from chartwise.api.routers.charts import router as charts_router
    from chartwise.api.routers.insights import router as insights_router
    from chartwise.api.routers.export import router as export_router
    from chartwise.api.routers.settings import router as settings_router

    app.include_router(dataset_router)
    app.include_router(charts_router)
    app.include_router(insights_router)
    app.include_router(export_router)
    app.include_router(settings_router)

    @app.exception_handler(ChartwiseError)
    def _domain_error(request: Request, exc: ChartwiseError) -> JSONResponse:
        status = status_for(exc)
        content: dict = {"detail": exc.message, "kind": _error_kind(exc)}
        if isinstance(exc, CSVParseError) and exc.errors:
            content["errors"] = exc.errors
        if isinstance(exc, DatasetValidationError) and exc.warnings:
            content["warnings"] = exc.warnings
        if isinstance(exc, LocalRateLimitError):
            content["wait_seconds"] = exc.wait_seconds
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status, content=content)

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok", "session_id": get_session_id()}

    return app
