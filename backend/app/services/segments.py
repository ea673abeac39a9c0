"""Segment creation and re-materialisation."""

import logging

from sqlalchemy import func

from backend.app.core.time import utc_now
from backend.app.models.lead import Lead
from backend.app.models.segment import Segment
from backend.app.schemas.segment import SegmentCreate
from backend.app.services.segment_query import build_lead_query, compile_lead_query, dump_query, load_query

logger = logging.getLogger(__name__)


def count_matching(db, query: dict) -> int:
    return db.query(func.count(Lead.id)).filter(compile_lead_query(query)).scalar()


def create_segment(db, segment_in: SegmentCreate, actor: dict) -> Segment:
    """Resolve the criteria to a query document and snapshot how many leads match now."""
    query = build_lead_query(segment_in.filter_criteria)
    lead_count = count_matching(db, query)
    segment = Segment(
        name=segment_in.name,
        description=segment_in.description,
        filter_criteria=segment_in.filter_criteria.model_dump(by_alias=True, mode="json"),
        query=dump_query(query),
        lead_count=lead_count,
        count_refreshed_at=utc_now(),
        created_by_name=actor["name"],
        created_by_email=actor["email"],
    )
    db.add(segment)
    logger.info("segment %r matches %s leads", segment.name, lead_count, extra={"actor": actor["email"]})
    return segment


def segment_leads(db, segment: Segment) -> list[Lead]:
    """Re-run the stored query against current data, newest first."""
    clause = compile_lead_query(load_query(segment.query))
    return db.query(Lead).filter(clause).order_by(Lead.created_at.desc(), Lead.id.desc()).all()


def refresh_lead_count(db, segment: Segment) -> Segment:
    segment.lead_count = count_matching(db, load_query(segment.query))
    segment.count_refreshed_at = utc_now()
    return segment
