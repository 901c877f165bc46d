"""Dataset endpoints: upload, browse, summary."""
from typing import Literal

from fastapi import APIRouter, Depends, Query, UploadFile

from chartwise.api.deps import get_store
from chartwise.api.schemas.dataset import DatasetRead, RowPage, RowQuery
from chartwise.models.dataset import DatasetSummary
from chartwise.services.dataset_service import DatasetService
from chartwise.state.store import AppStore

router = APIRouter(prefix="/dataset", tags=["dataset"])


@router.post("/upload", response_model=DatasetRead, status_code=201)
async def upload_dataset(file: UploadFile, store: AppStore = Depends(get_store)) -> DatasetRead:
    content = await file.read()
    return DatasetService(store).upload(
        content=content,
        file_name=file.filename or "upload.csv",
        content_type=file.content_type,
    )


@router.get("", response_model=DatasetRead)
def get_dataset(store: AppStore = Depends(get_store)) -> DatasetRead:
    return DatasetService(store).get()


@router.delete("", status_code=204)
def clear_dataset(store: AppStore = Depends(get_store)) -> None:
    DatasetService(store).clear()


@router.get("/rows", response_model=RowPage)
def list_rows(
    search: str | None = None,
    sort_by: str | None = None,
    direction: Literal["asc", "desc"] = "asc",
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=500),
    store: AppStore = Depends(get_store),
) -> RowPage:
    query = RowQuery(search=search, sort_by=sort_by, direction=direction, page=page, page_size=page_size)
    return DatasetService(store).rows(query)


@router.get("/summary", response_model=DatasetSummary)
def dataset_summary(store: AppStore = Depends(get_store)) -> DatasetSummary:
    return DatasetService(store).summary()
