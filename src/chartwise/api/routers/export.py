"""Export endpoints. Each returns a file download."""
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from chartwise.api.deps import get_store
from chartwise.api.schemas.export import ExportFormat
from chartwise.services.export_service import ExportService
from chartwise.state.store import AppStore

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/{fmt}")
def export(fmt: ExportFormat, include_data: bool = False, store: AppStore = Depends(get_store)) -> Response:
    exported = ExportService(store).export(fmt, include_data=include_data)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
