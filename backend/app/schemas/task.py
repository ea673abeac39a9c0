"""Task schemas."""

from typing import Literal, Optional

from pydantic import ConfigDict

from backend.app.schemas.base import ApiModel, PersonRef, ReadModel, UtcDatetime
from backend.app.schemas.lead import AllowedPriority


AllowedTaskStatus = Literal["pending", "in_progress", "completed", "cancelled"]


class TaskCreate(ApiModel):
    lead_id: int
    title: str
    description: str
    due_date: Optional[UtcDatetime] = None
    status: AllowedTaskStatus = "pending"
    priority: AllowedPriority = "medium"


class TaskUpdate(ApiModel):
    """Partial task update; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[UtcDatetime] = None
    status: Optional[AllowedTaskStatus] = None
    priority: Optional[AllowedPriority] = None
    assigned_to: Optional[PersonRef] = None


class TaskUpdateRequest(ApiModel):
    task_id: Optional[int] = None
    updates: Optional[TaskUpdate] = None


class TaskLeadSummary(ApiModel):
    business_name: str
    contact_person: Optional[str] = None


class TaskRead(ReadModel):
    lead_id: int
    title: str
    description: str
    due_date: Optional[UtcDatetime] = None
    status: str
    priority: str
    assigned_to: PersonRef
    created_at: UtcDatetime
    updated_at: UtcDatetime


class TaskWithLead(TaskRead):
    lead: Optional[TaskLeadSummary] = None
