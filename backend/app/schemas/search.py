"""Global search result schemas."""

from typing import Optional

from backend.app.schemas.base import ApiModel, ReadModel
from backend.app.schemas.lead import LeadRead
from backend.app.schemas.task import TaskLeadSummary


class SegmentHit(ReadModel):
    name: str
    description: Optional[str] = None
    lead_count: int


class TaskHit(ReadModel):
    lead_id: int
    title: str
    description: str
    status: str
    priority: str
    lead: Optional[TaskLeadSummary] = None


class SearchPagination(ApiModel):
    has_more: bool
    page: int
    total: int


class SearchResults(ApiModel):
    segments: list[SegmentHit]
    tasks: list[TaskHit]
    leads: list[LeadRead]
    pagination: SearchPagination
