"""Timeline services for recording lead audit events.

Events are added to the caller's unit of work and committed together with the
lead or task change that produced them.
"""

import logging
from typing import Any, Optional

from backend.app.models.timeline import TimelineEvent

logger = logging.getLogger(__name__)


def record_event(
    db,
    lead_id: int,
    event_type: str,
    title: str,
    description: str,
    actor: dict,
    metadata: Optional[dict[str, Any]] = None,
) -> TimelineEvent:
    event = TimelineEvent(
        lead_id=lead_id,
        event_type=event_type,
        title=title,
        description=description,
        event_metadata=metadata or {},
        created_by_name=actor.get("name") or "",
        created_by_email=actor.get("email") or "",
    )
    db.add(event)
    logger.debug("timeline event %s queued", event_type, extra={"lead_id": lead_id})
    return event


def list_events(db, lead_id: int) -> list[TimelineEvent]:
    return (
        db.query(TimelineEvent)
        .filter(TimelineEvent.lead_id == lead_id)
        .order_by(TimelineEvent.created_at.desc(), TimelineEvent.id.desc())
        .all()
    )
