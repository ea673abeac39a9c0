"""Lead management endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import (
    get_acting_user,
    get_optional_acting_user,
    get_optional_verified_user,
    get_verified_user,
    parse_user_snapshot,
)
from backend.app.models.lead import Lead
from backend.app.models.user import GoogleUser
from backend.app.schemas.lead import (
    BulkLeadIds,
    BulkLeadUpdate,
    BulkResult,
    ImportResult,
    LeadCreate,
    LeadRead,
    LeadUpdate,
    SearchCount,
)
from backend.app.services.lead_export import leads_to_csv
from backend.app.services.lead_import import ImportFileError, file_extension, import_leads
from backend.app.services.leads import (
    LeadValidationError,
    apply_lead_update,
    bulk_update,
    create_lead as create_lead_record,
    lead_search_clause,
    validate_lead_fields,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/leads", tags=["leads"])

UNKNOWN_ACTOR = {"name": "Unknown User", "email": "unknown@email.com"}
NON_NULLABLE_FIELDS = {"business_name", "business_category", "business_type", "status", "priority", "source", "is_archived"}


def _get_lead(db: Session, lead_id: int) -> Lead:
    lead = db.query(Lead).filter(Lead.id == lead_id).first()
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


def _require_ids(lead_ids: list[int]) -> None:
    if not lead_ids:
        raise HTTPException(status_code=400, detail="Invalid lead IDs")


@router.get("", response_model=list[LeadRead])
async def list_leads(
    status: Optional[str] = None,
    is_archived: Optional[bool] = Query(default=None, alias="isArchived"),
    db: Session = Depends(get_db),
):
    query = db.query(Lead)
    if status:
        query = query.filter(Lead.status == status)
    if is_archived is not None:
        query = query.filter(Lead.is_archived == is_archived)
    return query.order_by(Lead.created_at.desc(), Lead.id.desc()).all()


@router.post("", response_model=LeadRead)
async def create_lead(
    lead_in: LeadCreate,
    db: Session = Depends(get_db),
    verified: Optional[GoogleUser] = Depends(get_optional_verified_user),
):
    if verified is not None:
        creator = {"name": verified.name, "email": verified.email}
    elif lead_in.user is not None and lead_in.user.email:
        creator = {"name": lead_in.user.name or lead_in.user.email, "email": lead_in.user.email}
    else:
        raise HTTPException(status_code=400, detail="User information is required")

    data = lead_in.model_dump(exclude={"user"})
    try:
        lead = create_lead_record(db, data, creator)
    except LeadValidationError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc))
    db.commit()
    db.refresh(lead)
    logger.info("lead %s created", lead.lead_id, extra={"lead_id": lead.id, "actor": creator["email"]})
    return lead


@router.post("/import", response_model=ImportResult)
async def import_lead_file(
    file: Optional[UploadFile] = File(default=None),
    user_data: Optional[str] = Form(default=None, alias="userData"),
    db: Session = Depends(get_db),
    verified: Optional[GoogleUser] = Depends(get_optional_verified_user),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")
    if verified is not None:
        creator = {"name": verified.name, "email": verified.email}
    elif not user_data:
        raise HTTPException(status_code=400, detail="User data not provided")
    else:
        creator = parse_user_snapshot(user_data)
    try:
        file_extension(file.filename)
    except ImportFileError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    content = await file.read()
    try:
        outcome = import_leads(db, file.filename, content, creator)
    except Exception as exc:
        db.rollback()
        logger.exception("import of %s failed", file.filename)
        raise HTTPException(status_code=500, detail=f"Failed to import leads: {exc}")

    details = {
        "totalRows": outcome.total_rows,
        "validRows": outcome.valid_rows,
        "invalidRows": len(outcome.errors),
        "successfullyImported": 0,
        "errors": outcome.errors,
    }
    if not outcome.leads:
        db.rollback()
        return JSONResponse(status_code=400, content={"error": "No valid leads found in the file", "details": details})

    db.commit()
    details["successfullyImported"] = outcome.valid_rows
    message = "Leads imported successfully"
    if outcome.errors:
        message = f"Imported {outcome.valid_rows} leads; {len(outcome.errors)} rows were skipped"
    return ImportResult(message=message, count=outcome.valid_rows, details=details)


@router.post("/archive", response_model=BulkResult)
async def archive_leads(
    payload: BulkLeadIds,
    db: Session = Depends(get_db),
    actor: Optional[dict] = Depends(get_optional_acting_user),
):
    _require_ids(payload.lead_ids)
    modified = bulk_update(db, payload.lead_ids, {"is_archived": True}, actor)
    if modified == 0:
        db.rollback()
        raise HTTPException(status_code=404, detail="No leads were updated")
    db.commit()
    return BulkResult(message=f"Successfully archived {modified} leads", modified_count=modified)


@router.post("/update", response_model=BulkResult)
async def update_leads(
    payload: BulkLeadUpdate,
    db: Session = Depends(get_db),
    actor: Optional[dict] = Depends(get_optional_acting_user),
):
    _require_ids(payload.lead_ids)
    updates = {
        key: value
        for key, value in payload.updates.model_dump(exclude_unset=True).items()
        if value is not None or key == "notes"
    }
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    actor = actor or UNKNOWN_ACTOR
    modified = 0
    for lead in db.query(Lead).filter(Lead.id.in_(payload.lead_ids)).all():
        changes = {key: value for key, value in updates.items() if getattr(lead, key) != value}
        if changes:
            apply_lead_update(db, lead, changes, actor)
            modified += 1
    if modified == 0:
        db.rollback()
        raise HTTPException(status_code=404, detail="No leads were updated")
    db.commit()
    return BulkResult(message=f"Successfully updated {modified} leads", modified_count=modified)


@router.get("/search-count", response_model=SearchCount)
async def search_count(query: str = "", db: Session = Depends(get_db)):
    term = query.strip()
    if not term:
        return SearchCount(leads_count=0)
    count = db.query(Lead).filter(Lead.is_archived.is_(False), lead_search_clause(term)).count()
    return SearchCount(leads_count=count)


@router.get("/export")
async def export_leads(db: Session = Depends(get_db), current_user: GoogleUser = Depends(get_verified_user)):
    leads = (
        db.query(Lead)
        .filter(Lead.is_archived.is_(False))
        .order_by(Lead.created_at.desc(), Lead.id.desc())
        .all()
    )
    if not leads:
        raise HTTPException(status_code=404, detail="No leads found")
    logger.info("exporting %s leads", len(leads), extra={"actor": current_user.email})
    return Response(
        content=leads_to_csv(leads),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=leads.csv"},
    )


@router.get("/{lead_id}", response_model=LeadRead)
async def get_lead(lead_id: int, db: Session = Depends(get_db)):
    return _get_lead(db, lead_id)


@router.put("/{lead_id}", response_model=LeadRead)
async def update_lead(
    lead_id: int,
    lead_in: LeadUpdate,
    db: Session = Depends(get_db),
    actor: dict = Depends(get_acting_user),
):
    lead = _get_lead(db, lead_id)
    changes = {
        key: value
        for key, value in lead_in.model_dump(exclude_unset=True).items()
        if value is not None or key not in NON_NULLABLE_FIELDS
    }
    merged = {column: getattr(lead, column) for column in ("business_name", "business_category", "email", "phone_number")}
    merged.update(changes)
    try:
        validate_lead_fields(merged, require_location=False)
    except LeadValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    apply_lead_update(db, lead, changes, actor)
    db.commit()
    db.refresh(lead)
    return lead


@router.post("/{lead_id}/archive", response_model=LeadRead)
async def archive_lead(
    lead_id: int,
    db: Session = Depends(get_db),
    actor: Optional[dict] = Depends(get_optional_acting_user),
):
    lead = _get_lead(db, lead_id)
    lead.is_archived = True
    if actor:
        lead.updated_by_name = actor["name"]
        lead.updated_by_email = actor["email"]
    db.commit()
    db.refresh(lead)
    return lead


@router.delete("/{lead_id}")
async def delete_lead(
    lead_id: int,
    db: Session = Depends(get_db),
    actor: Optional[dict] = Depends(get_optional_acting_user),
):
    lead = _get_lead(db, lead_id)
    db.delete(lead)
    db.commit()
    logger.info("lead %s deleted", lead_id, extra={"lead_id": lead_id, "actor": (actor or UNKNOWN_ACTOR)["email"]})
    return {"message": "Lead deleted successfully"}
