"""Global search across leads, segments and tasks."""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from backend.app.core.settings import get_settings
from backend.app.db.session import get_db
from backend.app.models.lead import Lead
from backend.app.models.segment import Segment
from backend.app.models.task import Task
from backend.app.schemas.search import SearchPagination, SearchResults
from backend.app.services.leads import escape_like, lead_search_clause

router = APIRouter(prefix="/api/search", tags=["search"])


def _contains(column, term: str):
    return column.ilike(f"%{escape_like(term)}%", escape="\\")


@router.get("", response_model=SearchResults)
async def search(
    query: str = "",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=5, ge=1, le=100),
    type: Literal["all", "leads", "segments", "tasks"] = "all",
    db: Session = Depends(get_db),
):
    term = query.strip()
    results = {
        "segments": [],
        "tasks": [],
        "leads": [],
        "pagination": SearchPagination(has_more=False, page=page, total=0),
    }
    if not term:
        return results

    cap = get_settings().search_category_limit

    if type in ("all", "leads"):
        leads = db.query(Lead).filter(Lead.is_archived.is_(False), lead_search_clause(term))
        total = leads.count()
        results["leads"] = (
            leads.order_by(Lead.created_at.desc(), Lead.id.desc()).offset((page - 1) * limit).limit(limit).all()
        )
        results["pagination"] = SearchPagination(has_more=page * limit < total, page=page, total=total)

    if type in ("all", "segments"):
        results["segments"] = (
            db.query(Segment)
            .filter(or_(_contains(Segment.name, term), _contains(Segment.description, term)))
            .order_by(Segment.created_at.desc())
            .limit(cap)
            .all()
        )

    if type in ("all", "tasks"):
        results["tasks"] = (
            db.query(Task)
            .options(joinedload(Task.lead))
            .filter(or_(_contains(Task.title, term), _contains(Task.description, term)))
            .order_by(Task.created_at.desc())
            .limit(cap)
            .all()
        )

    return results
