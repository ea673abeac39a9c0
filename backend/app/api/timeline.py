"""Lead timeline endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.schemas.timeline import TimelineEventRead
from backend.app.services.timeline import list_events

router = APIRouter(prefix="/api/timeline", tags=["timeline"])


@router.get("", response_model=list[TimelineEventRead])
async def get_timeline(
    lead_id: Optional[int] = Query(default=None, alias="leadId"),
    db: Session = Depends(get_db),
):
    if lead_id is None:
        raise HTTPException(status_code=400, detail="Lead ID is required")
    return list_events(db, lead_id)
