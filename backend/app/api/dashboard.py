"""Dashboard overview endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.app.core.settings import get_settings
from backend.app.core.time import utc_now
from backend.app.db.session import get_db
from backend.app.models.lead import LEAD_STATUSES, Lead
from backend.app.schemas.dashboard import DashboardStats

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(db: Session = Depends(get_db)):
    active = db.query(Lead).filter(Lead.is_archived.is_(False))
    total_leads = active.count()

    leads_by_status = {status: 0 for status in LEAD_STATUSES}
    rows = (
        db.query(Lead.status, func.count(Lead.id))
        .filter(Lead.is_archived.is_(False))
        .group_by(Lead.status)
        .all()
    )
    for status, count in rows:
        if status in leads_by_status:
            leads_by_status[status] = count

    upcoming = (
        active.filter(Lead.status == "follow-up", Lead.follow_up_date >= utc_now())
        .order_by(Lead.follow_up_date.asc())
        .limit(get_settings().upcoming_follow_up_limit)
        .all()
    )

    return {"total_leads": total_leads, "leads_by_status": leads_by_status, "upcoming_follow_ups": upcoming}
