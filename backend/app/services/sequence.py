"""Atomic lead-ID sequencing.

IDs are reserved with a single ``UPDATE counters SET value = value + n``, so two
concurrent creations can never read the same "next" value. The unique index on
``leads.lead_id`` backs this up.
"""

import logging

from sqlalchemy import func, select, update

from backend.app.core.settings import get_settings
from backend.app.models.counter import Counter
from backend.app.models.lead import Lead

logger = logging.getLogger(__name__)

LEAD_COUNTER = "lead_id"


def format_lead_id(value: int) -> str:
    return str(value).zfill(get_settings().lead_id_width)


def _seed_value(db) -> int:
    highest = db.execute(select(func.max(Lead.lead_id))).scalar()
    return int(highest) if highest else 0


def ensure_lead_counter(db) -> None:
    """Create the counter row, seeded from the highest existing lead ID."""
    if db.get(Counter, LEAD_COUNTER) is not None:
        return
    db.add(Counter(name=LEAD_COUNTER, value=_seed_value(db)))
    db.flush()


def reserve_lead_ids(db, count: int = 1) -> list[str]:
    """Reserve ``count`` consecutive lead IDs inside the caller's transaction."""
    if count <= 0:
        return []
    ensure_lead_counter(db)
    db.execute(
        update(Counter)
        .where(Counter.name == LEAD_COUNTER)
        .values(value=Counter.value + count)
        .execution_options(synchronize_session=False)
    )
    last = db.execute(select(Counter.value).where(Counter.name == LEAD_COUNTER)).scalar_one()
    first = last - count + 1
    logger.debug("reserved lead ids %s..%s", first, last)
    return [format_lead_id(value) for value in range(first, last + 1)]
