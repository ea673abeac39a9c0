"""Task endpoints for lead follow-up actions."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from backend.app.core.time import to_iso
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_acting_user, get_optional_acting_user
from backend.app.models.lead import Lead
from backend.app.models.task import Task
from backend.app.schemas.task import TaskCreate, TaskRead, TaskUpdate, TaskUpdateRequest, TaskWithLead
from backend.app.services.timeline import record_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _get_task(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _apply_task_update(db: Session, task: Task, updates: TaskUpdate, actor: Optional[dict]) -> Task:
    changes = updates.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No updates provided")

    assigned_to = changes.pop("assigned_to", None)
    if assigned_to is not None and not assigned_to.get("email"):
        raise HTTPException(status_code=400, detail="assignedTo requires an email")

    old_status = task.status
    for field, value in changes.items():
        if value is None and field in ("title", "description", "status", "priority"):
            continue
        setattr(task, field, value)
    if assigned_to is not None:
        task.assigned_to_email = assigned_to["email"]
        task.assigned_to_name = assigned_to.get("name") or assigned_to["email"]

    if task.status != old_status:
        record_event(
            db,
            task.lead_id,
            "task_updated",
            "Task status updated",
            f'Task "{task.title}" changed from {old_status} to {task.status}',
            actor or {"name": task.assigned_to_name, "email": task.assigned_to_email},
            {"taskId": str(task.id), "taskTitle": task.title, "taskStatus": task.status, "oldValue": old_status, "newValue": task.status},
        )
    db.commit()
    db.refresh(task)
    return task


@router.get("", response_model=list[TaskWithLead])
async def list_tasks(
    lead_id: Optional[int] = Query(default=None, alias="leadId"),
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    query = db.query(Task).options(joinedload(Task.lead))
    if lead_id is not None:
        query = query.filter(Task.lead_id == lead_id)
    if status:
        query = query.filter(Task.status == status)
    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


@router.post("", response_model=TaskRead)
@router.post("/create", response_model=TaskRead, include_in_schema=False)
async def create_task(
    task_in: TaskCreate,
    db: Session = Depends(get_db),
    actor: dict = Depends(get_acting_user),
):
    lead = db.query(Lead).filter(Lead.id == task_in.lead_id).first()
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    if not task_in.title.strip() or not task_in.description.strip():
        raise HTTPException(status_code=400, detail="Missing required fields: title, description")

    task = Task(
        lead_id=lead.id,
        title=task_in.title.strip(),
        description=task_in.description.strip(),
        due_date=task_in.due_date,
        status=task_in.status,
        priority=task_in.priority,
        assigned_to_name=actor["name"],
        assigned_to_email=actor["email"],
    )
    db.add(task)
    db.flush()
    record_event(
        db,
        lead.id,
        "task_created",
        "New Task Created",
        f'Task "{task.title}" was created',
        actor,
        {
            "taskId": str(task.id),
            "taskTitle": task.title,
            "taskStatus": task.status,
            "priority": task.priority,
            "dueDate": to_iso(task.due_date),
        },
    )
    db.commit()
    db.refresh(task)
    logger.info("task %s created", task.id, extra={"lead_id": lead.id, "task_id": task.id})
    return task


@router.put("/update", response_model=TaskRead)
async def update_task_by_body(
    payload: TaskUpdateRequest,
    db: Session = Depends(get_db),
    actor: Optional[dict] = Depends(get_optional_acting_user),
):
    if payload.task_id is None:
        raise HTTPException(status_code=400, detail="Task ID is required")
    if payload.updates is None:
        raise HTTPException(status_code=400, detail="No updates provided")
    task = _get_task(db, payload.task_id)
    return _apply_task_update(db, task, payload.updates, actor)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    updates: TaskUpdate,
    db: Session = Depends(get_db),
    actor: Optional[dict] = Depends(get_optional_acting_user),
):
    task = _get_task(db, task_id)
    return _apply_task_update(db, task, updates, actor)
