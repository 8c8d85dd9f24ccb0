"""Shared dependencies for API endpoints."""
from fastapi import HTTPException, Request

from src.records import RecordsStore


def get_records_store(request: Request) -> RecordsStore:
    """Dependency that provides the application's records store.

    Raises:
        HTTPException: 503 if the store has no records to serve yet
    """
    records_store = getattr(request.app.state, "records_store", None)
    if records_store is None or not records_store.is_ready:
        raise HTTPException(status_code=503, detail="Records are not available yet")
    return records_store
