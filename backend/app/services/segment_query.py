"""Segment query documents.

A segment persists its filter twice: the criteria the user picked and the
resolved query document built from them. The document is a small JSON
dialect (field equality plus ``$in``/``$gte``/``$lte``/``$or``/``$and``/``$exists``
and friends) keyed by the lead's wire field names. Re-materialising a segment
compiles the stored document, never the criteria, so a segment keeps matching
what it matched when it was saved even if the builder changes later.
"""

import json
from typing import Any

from sqlalchemy import and_, or_, true

from backend.app.core.time import parse_datetime, to_iso
from backend.app.models.lead import Lead
from backend.app.schemas.segment import DateRange, FilterCriteria

LIST_FIELDS = (
    ("status", "status"),
    ("priority", "priority"),
    ("business_category", "businessCategory"),
    ("business_type", "businessType"),
    ("service_interest", "serviceInterest"),
    ("website_status", "websiteStatus"),
    ("source", "source"),
    ("created_by", "createdBy.email"),
)
LOCATION_FIELDS = ("country", "state", "city")

FIELD_COLUMNS = {
    "leadId": Lead.lead_id,
    "businessName": Lead.business_name,
    "businessType": Lead.business_type,
    "businessCategory": Lead.business_category,
    "contactPerson": Lead.contact_person,
    "phoneNumber": Lead.phone_number,
    "email": Lead.email,
    "websiteUrl": Lead.website_url,
    "city": Lead.city,
    "state": Lead.state,
    "country": Lead.country,
    "status": Lead.status,
    "priority": Lead.priority,
    "source": Lead.source,
    "serviceInterest": Lead.service_interest,
    "websiteStatus": Lead.website_status,
    "isArchived": Lead.is_archived,
    "createdBy.email": Lead.created_by_email,
    "createdBy.name": Lead.created_by_name,
    "followUpDate": Lead.follow_up_date,
    "createdAt": Lead.created_at,
    "updatedAt": Lead.updated_at,
}
DATE_FIELDS = {"followUpDate", "createdAt", "updatedAt"}


class QueryDocumentError(ValueError):
    """A stored query document uses an unknown field or operator."""


def _empty_field_tests(field: str) -> list[dict]:
    return [{field: {"$exists": False}}, {field: None}, {field: ""}]


def _date_bounds(date_range: DateRange) -> dict:
    bounds = {}
    if date_range.from_:
        bounds["$gte"] = to_iso(parse_datetime(date_range.from_))
    if date_range.to:
        bounds["$lte"] = to_iso(parse_datetime(date_range.to, end_of_day=True))
    return bounds


def build_lead_query(criteria: FilterCriteria) -> dict:
    """Translate filter criteria into a query document."""
    query: dict[str, Any] = {}

    for attr, field in LIST_FIELDS:
        values = getattr(criteria, attr)
        if values:
            query[field] = {"$in": list(values)}

    location_tests = [
        {field: {"$in": list(getattr(criteria.location, field))}}
        for field in LOCATION_FIELDS
        if getattr(criteria.location, field)
    ]
    empty_groups = []
    if criteria.has_empty_email:
        empty_groups.append(_empty_field_tests("email"))
    if criteria.has_empty_phone:
        empty_groups.append(_empty_field_tests("phoneNumber"))

    if criteria.match_mode == "any":
        # every location test and empty-field alternative lands in one OR
        alternatives = location_tests + [test for group in empty_groups for test in group]
        if alternatives:
            query["$or"] = alternatives
    else:
        for test in location_tests:
            query.update(test)
        if len(empty_groups) == 1:
            query["$or"] = empty_groups[0]
        elif empty_groups:
            query["$and"] = [{"$or": group} for group in empty_groups]

    if criteria.is_archived is not None:
        query["isArchived"] = criteria.is_archived

    for attr, field in (("follow_up_date", "followUpDate"), ("created_at", "createdAt")):
        bounds = _date_bounds(getattr(criteria, attr))
        if bounds:
            query[field] = bounds

    return query


def dump_query(query: dict) -> str:
    return json.dumps(query, indent=2)


def load_query(text: str) -> dict:
    try:
        query = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QueryDocumentError(f"Stored query is not valid JSON: {exc.msg}") from exc
    if not isinstance(query, dict):
        raise QueryDocumentError("Stored query must be an object")
    return query


def _coerce(field: str, value: Any) -> Any:
    if value is None:
        return None
    if field in DATE_FIELDS:
        if not isinstance(value, str):
            raise QueryDocumentError(f"{field} expects an ISO date string")
        return parse_datetime(value)
    if field == "isArchived" and not isinstance(value, bool):
        raise QueryDocumentError("isArchived expects a boolean")
    return value


def _equals(column, value):
    return column.is_(None) if value is None else column == value


def _operator_clause(field: str, column, op: str, operand: Any):
    if op in ("$in", "$nin"):
        if not isinstance(operand, list):
            raise QueryDocumentError(f"{op} on {field} expects a list")
        values = [_coerce(field, item) for item in operand]
        present = [item for item in values if item is not None]
        clause = column.in_(present)
        if len(present) != len(values):
            clause = or_(clause, column.is_(None))
        return clause if op == "$in" else ~clause
    if op == "$eq":
        return _equals(column, _coerce(field, operand))
    if op == "$ne":
        value = _coerce(field, operand)
        return column.is_not(None) if value is None else or_(column != value, column.is_(None))
    if op == "$exists":
        return column.is_not(None) if operand else column.is_(None)
    value = _coerce(field, operand)
    if op == "$gte":
        return column >= value
    if op == "$gt":
        return column > value
    if op == "$lte":
        return column <= value
    if op == "$lt":
        return column < value
    raise QueryDocumentError(f"Unsupported operator {op}")


def _field_clause(field: str, condition: Any):
    column = FIELD_COLUMNS.get(field)
    if column is None:
        raise QueryDocumentError(f"Unknown field {field}")
    if isinstance(condition, dict) and condition and all(key.startswith("$") for key in condition):
        return and_(*(_operator_clause(field, column, op, operand) for op, operand in condition.items()))
    return _equals(column, _coerce(field, condition))


def _sub_documents(op: str, value: Any) -> list:
    if not isinstance(value, list) or not value:
        raise QueryDocumentError(f"{op} expects a non-empty list")
    return [compile_lead_query(item) for item in value]


def compile_lead_query(query: dict):
    """Compile a query document into a SQLAlchemy filter over ``Lead``."""
    if not isinstance(query, dict):
        raise QueryDocumentError("Query must be an object")
    clauses = []
    for key, value in query.items():
        if key == "$or":
            clauses.append(or_(*_sub_documents(key, value)))
        elif key == "$and":
            clauses.append(and_(*_sub_documents(key, value)))
        elif key == "$nor":
            clauses.append(~or_(*_sub_documents(key, value)))
        elif key.startswith("$"):
            raise QueryDocumentError(f"Unsupported operator {key}")
        else:
            clauses.append(_field_clause(key, value))
    if not clauses:
        return true()
    return and_(*clauses)

