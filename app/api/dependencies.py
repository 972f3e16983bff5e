"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and session lookup.
"""

from __future__ import annotations

from fastapi import Depends, File, HTTPException, UploadFile, status

from app.services.dashboard_session import (
    DashboardSession,
    DashboardSessionStore,
    SessionNotFoundError,
    get_session_store,
)

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please upload a valid CSV file",
        )

    return file


def get_session(
    session_id: str,
    store: DashboardSessionStore = Depends(get_session_store),
) -> DashboardSession:
    """
    Resolve the path's session id or answer 404.
    """

    try:
        return store.get(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found.",
        ) from exc


def get_loaded_session(session: DashboardSession = Depends(get_session)) -> DashboardSession:
    """
    Like get_session, but answer 409 until a dataset has been uploaded.
    """

    if not session.has_dataset():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No dataset loaded. Upload a CSV first.",
        )
    return session
