from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.auth import require_session_user
from backend.schemas import EntriesResponse, EntryResponse, EntryUpsert
from backend import repositories

router = APIRouter()


def _validate_day(day: str) -> str:
    try:
        parsed = date.fromisoformat(day)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")
    if parsed.isoformat() != day:
        raise HTTPException(status_code=400, detail="Invalid date format")
    return day


@router.get("/v1/entries", response_model=EntriesResponse)
async def list_entries(
    start: date | None = Query(None),
    end: date | None = Query(None),
    user: dict = Depends(require_session_user),
):
    if start and end and end < start:
        raise HTTPException(status_code=400, detail="End date must be after start date")
    items = await repositories.list_entries(
        user["user_id"],
        start.isoformat() if start else None,
        end.isoformat() if end else None,
    )
    return {"items": items}


@router.get("/v1/entries/{day}", response_model=EntryResponse)
async def get_entry(day: str, user: dict = Depends(require_session_user)):
    _validate_day(day)
    entry = await repositories.get_entry(user["user_id"], day)
    if not entry:
        raise HTTPException(status_code=404, detail="No entry for this day")
    return entry


@router.put("/v1/entries/{day}", response_model=EntryResponse)
async def upsert_entry(day: str, payload: EntryUpsert, user: dict = Depends(require_session_user)):
    _validate_day(day)
    fields = payload.model_dump(exclude={"updated_at"})
    return await repositories.upsert_entry(user["user_id"], day, fields, payload.updated_at)
