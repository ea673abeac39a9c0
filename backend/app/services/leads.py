"""Lead rules shared by the manual form, the import pipeline and bulk edits."""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import or_

from backend.app.core.time import ensure_utc, to_iso
from backend.app.models.lead import Lead
from backend.app.services.sequence import reserve_lead_ids
from backend.app.services.timeline import record_event

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_TYPE = "Other"
DEFAULT_PRIORITY = "medium"
TRACKED_FIELDS = {
    "status": "status",
    "priority": "priority",
    "follow_up_date": "followUpDate",
}
SEARCH_COLUMNS = (
    Lead.business_name,
    Lead.contact_person,
    Lead.email,
    Lead.phone_number,
    Lead.business_category,
    Lead.business_type,
    Lead.city,
    Lead.state,
    Lead.country,
)


class LeadValidationError(ValueError):
    """A lead payload broke one of the canonical field rules."""


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


REQUIRED_FIELD_LABELS = {"business_name": "businessName", "business_category": "businessCategory"}


def validate_lead_fields(data: dict, *, require_location: bool, labels: Optional[dict] = None) -> None:
    """Apply the canonical lead rules; ``data`` is keyed by model attribute names.

    ``labels`` renames required fields in the error message, e.g. to the
    spreadsheet column headers an import was read from.
    """
    labels = labels or REQUIRED_FIELD_LABELS
    missing = [labels[key] for key in REQUIRED_FIELD_LABELS if _blank(data.get(key))]
    if missing:
        raise LeadValidationError(f"Missing required fields: {', '.join(missing)}")
    if _blank(data.get("email")) and _blank(data.get("phone_number")):
        raise LeadValidationError("Either email or phone number must be provided")
    if require_location and any(_blank(data.get(key)) for key in ("country", "state", "city")):
        raise LeadValidationError("Location fields (country, state, city) are required")


def build_lead(data: dict, *, lead_id: str, creator: dict, source: str) -> Lead:
    return Lead(
        lead_id=lead_id,
        business_name=data["business_name"].strip(),
        business_type=(data.get("business_type") or "").strip() or DEFAULT_BUSINESS_TYPE,
        business_category=data["business_category"].strip(),
        contact_person=data.get("contact_person"),
        phone_number=data.get("phone_number") or None,
        email=data.get("email") or None,
        website_url=data.get("website_url") or None,
        city=data.get("city") or None,
        state=data.get("state") or None,
        country=data.get("country") or None,
        notes=data.get("notes"),
        status=data.get("status") or "new",
        priority=data.get("priority") or DEFAULT_PRIORITY,
        follow_up_date=data.get("follow_up_date"),
        source=data.get("source") or source,
        service_interest=data.get("service_interest"),
        website_status=data.get("website_status"),
        is_archived=False,
        created_by_name=creator.get("name"),
        created_by_email=creator.get("email"),
    )


def create_lead(db, data: dict, creator: dict) -> Lead:
    """Validate, number and stage a manually entered lead plus its creation event."""
    validate_lead_fields(data, require_location=True)
    (lead_id,) = reserve_lead_ids(db, 1)
    lead = build_lead(data, lead_id=lead_id, creator=creator, source="manual")
    db.add(lead)
    db.flush()
    record_event(
        db,
        lead.id,
        "lead_created",
        "Lead created",
        f"Lead {lead.lead_id} ({lead.business_name}) was created",
        creator,
        {"leadId": lead.lead_id},
    )
    return lead


def _comparable(value: Any) -> Any:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


def _event_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_iso(value)
    return value


def apply_lead_update(db, lead: Lead, changes: dict, actor: dict) -> list[dict]:
    """Apply a partial update and stage one ``lead_updated`` event per tracked change.

    ``changes`` holds only the fields the caller sent, keyed by model attribute.
    Returns the recorded change list.
    """
    recorded = []
    for attr, wire_name in TRACKED_FIELDS.items():
        if attr not in changes or changes[attr] is None:
            continue
        old_value = getattr(lead, attr)
        new_value = changes[attr]
        if _comparable(old_value) != _comparable(new_value):
            recorded.append({"field": wire_name, "oldValue": _event_value(old_value), "newValue": _event_value(new_value)})

    for attr, value in changes.items():
        setattr(lead, attr, value)
    lead.updated_by_name = actor.get("name")
    lead.updated_by_email = actor.get("email")

    for change in recorded:
        record_event(
            db,
            lead.id,
            "lead_updated",
            f"Lead {change['field']} updated",
            f"{change['field']} changed from {change['oldValue']} to {change['newValue']}",
            actor,
            change,
        )
    if recorded:
        logger.info("lead %s changed: %s", lead.lead_id, ", ".join(c["field"] for c in recorded), extra={"lead_id": lead.id})
    return recorded


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def lead_search_clause(term: str):
    pattern = f"%{escape_like(term)}%"
    return or_(*(column.ilike(pattern, escape="\\") for column in SEARCH_COLUMNS))


def bulk_update(db, lead_ids: list[int], values: dict, actor: Optional[dict] = None) -> int:
    """Set ``values`` on every listed lead; returns how many rows actually changed.

    Changed leads are stamped with ``actor`` as their last updater when given.
    """
    leads = db.query(Lead).filter(Lead.id.in_(lead_ids)).all()
    modified = 0
    for lead in leads:
        changed = False
        for attr, value in values.items():
            if getattr(lead, attr) != value:
                setattr(lead, attr, value)
                changed = True
        if changed:
            modified += 1
            if actor:
                lead.updated_by_name = actor.get("name")
                lead.updated_by_email = actor.get("email")
    return modified
