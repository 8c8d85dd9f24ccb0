"""API endpoints for cached regional records."""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.dependencies import get_records_store
from src.api.schemas import RecordResponse, RecordsListResponse, RefreshRequestedResponse
from src.records import RecordsStore

router = APIRouter(prefix="/records", tags=["records"])


@router.get("", response_model=RecordsListResponse)
def list_records(
    event_id: Optional[str] = Query(None, description="Only records for this event, e.g. 333"),
    record_key: Optional[str] = Query(None, description="WR, a continent id or a country id"),
    type: Optional[Literal["single", "average"]] = Query(None, description="Result type"),
    records_store: RecordsStore = Depends(get_records_store),
):
    """List cached regional records in the order they were fetched."""
    snapshot = records_store.snapshot()

    records = [
        r
        for r in snapshot.records
        if (event_id is None or r.event_id == event_id)
        and (record_key is None or r.record_key == record_key)
        and (type is None or r.type == type)
    ]

    return RecordsListResponse(
        updated_at=snapshot.updated_at,
        count=len(records),
        records=[RecordResponse.model_validate(r) for r in records],
    )


@router.post("/refresh", response_model=RefreshRequestedResponse, status_code=202)
def refresh_records(records_store: RecordsStore = Depends(get_records_store)):
    """Ask the background refresher to fetch records now."""
    records_store.request_refresh()
    return RefreshRequestedResponse(message="Records refresh requested")


@router.get("/{record_key}/{event_id}/{type}", response_model=RecordResponse)
def get_record(
    record_key: str,
    event_id: str,
    type: Literal["single", "average"],
    records_store: RecordsStore = Depends(get_records_store),
):
    """Get the current record for a region, event and result type."""
    record = records_store.get_regional_records_map().get((record_key, event_id, type))

    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")

    return RecordResponse.model_validate(record)
