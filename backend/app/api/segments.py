"""Segment endpoints: saved lead filters and their live lead lists."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_acting_user, get_optional_acting_user
from backend.app.models.segment import Segment
from backend.app.schemas.lead import LeadRead
from backend.app.schemas.segment import SegmentCreate, SegmentRead
from backend.app.services.lead_export import attachment_filename, leads_to_csv
from backend.app.services.segments import create_segment as create_segment_record
from backend.app.services.segments import refresh_lead_count, segment_leads

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/segments", tags=["segments"])


def _get_segment(db: Session, segment_id: int) -> Segment:
    segment = db.query(Segment).filter(Segment.id == segment_id).first()
    if not segment:
        raise HTTPException(status_code=404, detail="Segment not found")
    return segment


@router.get("", response_model=list[SegmentRead])
async def list_segments(db: Session = Depends(get_db)):
    return db.query(Segment).order_by(Segment.created_at.desc(), Segment.id.desc()).all()


@router.post("", response_model=SegmentRead)
async def create_segment(
    segment_in: SegmentCreate,
    db: Session = Depends(get_db),
    actor: dict = Depends(get_acting_user),
):
    segment = create_segment_record(db, segment_in, actor)
    db.commit()
    db.refresh(segment)
    return segment


@router.get("/{segment_id}", response_model=SegmentRead)
async def get_segment(segment_id: int, db: Session = Depends(get_db)):
    return _get_segment(db, segment_id)


@router.get("/{segment_id}/leads", response_model=list[LeadRead])
async def get_segment_leads(segment_id: int, db: Session = Depends(get_db)):
    segment = _get_segment(db, segment_id)
    return segment_leads(db, segment)


@router.get("/{segment_id}/download")
async def download_segment_leads(segment_id: int, db: Session = Depends(get_db)):
    segment = _get_segment(db, segment_id)
    leads = segment_leads(db, segment)
    logger.info("segment download: %s leads", len(leads), extra={"segment_id": segment.id})
    return Response(
        content=leads_to_csv(leads),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{attachment_filename(segment.name)}"'},
    )


@router.post("/{segment_id}/refresh-count", response_model=SegmentRead)
async def refresh_segment_count(
    segment_id: int,
    db: Session = Depends(get_db),
    actor: Optional[dict] = Depends(get_optional_acting_user),
):
    """Recompute the stored lead count from the segment's query."""
    segment = refresh_lead_count(db, _get_segment(db, segment_id))
    db.commit()
    logger.info(
        "segment count refreshed: %s leads",
        segment.lead_count,
        extra={"segment_id": segment.id, "actor": actor["email"] if actor else None},
    )
    db.refresh(segment)
    return segment
