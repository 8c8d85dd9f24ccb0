"""Pydantic schemas for API responses."""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class RecordResponse(BaseModel):
    """A single regional record."""

    model_config = ConfigDict(from_attributes=True)

    record_key: str
    event_id: str
    type: Literal["single", "average"]
    attempt_result: int


class RecordsListResponse(BaseModel):
    """Cached records with the time they were fetched."""

    updated_at: datetime
    count: int
    records: list[RecordResponse]


class RefreshRequestedResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Health check with records cache freshness."""

    status: str
    records_updated_at: Optional[datetime] = None
    records_count: int = 0
    next_refresh_in_seconds: Optional[float] = None
