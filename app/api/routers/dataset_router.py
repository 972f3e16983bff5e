"""
app/api/routers/dataset_router.py

Session lifecycle and CSV upload endpoints.
"""

from __future__ import annotations

import io
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from app.api.dependencies import get_csv_upload, get_loaded_session, get_session
from app.config import get_csv_ingestion_settings
from app.domain.errors import DatasetIngestionError
from app.schemas.dashboard import (
    DatasetDescriptorResponse,
    FilterOptionsResponse,
    SessionCreatedResponse,
)
from app.services.dashboard_session import (
    DashboardSession,
    DashboardSessionStore,
    SessionNotFoundError,
    get_session_store,
)

router = APIRouter(tags=["datasets"])


@router.post("/sessions", response_model=SessionCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    store: DashboardSessionStore = Depends(get_session_store),
) -> SessionCreatedResponse:
    session_id, _ = store.create()
    return SessionCreatedResponse(session_id=session_id)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    store: DashboardSessionStore = Depends(get_session_store),
) -> None:
    try:
        store.delete(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found.") from exc


@router.post("/sessions/{session_id}/upload", response_model=DatasetDescriptorResponse)
def upload_csv(
    file: UploadFile = Depends(get_csv_upload),
    session: DashboardSession = Depends(get_session),
) -> DatasetDescriptorResponse:
    """
    Replace the session's dataset with one uploaded CSV.

    A rejected upload keeps the previously loaded dataset active.
    """

    max_bytes = get_csv_ingestion_settings().max_upload_bytes
    try:
        payload = file.file.read(max_bytes + 1)
    finally:
        file.file.close()

    if len(payload) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"CSV file exceeds the {max_bytes} byte upload limit.",
        )

    try:
        descriptor = session.upload(
            stream=io.BytesIO(payload),
            file_name=file.filename or "upload.csv",
        )
    except DatasetIngestionError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return DatasetDescriptorResponse.from_domain(descriptor)


@router.get("/sessions/{session_id}/descriptor", response_model=DatasetDescriptorResponse)
def get_descriptor(
    session: DashboardSession = Depends(get_loaded_session),
) -> DatasetDescriptorResponse:
    descriptor = session.dataset_descriptor()
    if descriptor is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No dataset loaded. Upload a CSV first.",
        )
    return DatasetDescriptorResponse.from_domain(descriptor)


@router.get("/sessions/{session_id}/records")
def get_records(
    session: DashboardSession = Depends(get_loaded_session),
) -> dict[str, Any]:
    records = session.normalized_dataset()
    return {
        "rows": len(records),
        "data": [record.to_dict() for record in records],
    }


@router.get("/sessions/{session_id}/options", response_model=FilterOptionsResponse)
def get_filter_options(
    session: DashboardSession = Depends(get_loaded_session),
) -> FilterOptionsResponse:
    options = session.available_options()
    return FilterOptionsResponse(
        regions=list(options.regions),
        products=list(options.products),
        categories=list(options.categories),
    )
