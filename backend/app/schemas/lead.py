"""Lead schemas for create, update, bulk and read operations."""

from typing import Literal, Optional

from pydantic import ConfigDict, Field

from backend.app.schemas.base import ApiModel, PersonRef, ReadModel, UtcDatetime


AllowedLeadStatus = Literal["new", "contacted", "follow-up", "converted", "not-interested"]
AllowedPriority = Literal["low", "medium", "high"]


class LeadBase(ApiModel):
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    business_category: Optional[str] = None
    contact_person: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    website_url: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    notes: Optional[str] = None
    follow_up_date: Optional[UtcDatetime] = None
    service_interest: Optional[str] = None
    website_status: Optional[str] = None


class LeadCreate(LeadBase):
    """Manual lead creation. Required fields are checked by services.leads so the
    error message can name the missing rule."""

    status: Optional[AllowedLeadStatus] = None
    priority: Optional[AllowedPriority] = None
    source: Optional[str] = None
    user: Optional[PersonRef] = None


class LeadUpdate(LeadBase):
    """Schema for lead updates with partial fields."""

    status: Optional[AllowedLeadStatus] = None
    priority: Optional[AllowedPriority] = None
    source: Optional[str] = None
    is_archived: Optional[bool] = None


class LeadRead(ReadModel):
    lead_id: str
    business_name: str
    business_type: Optional[str] = None
    business_category: Optional[str] = None
    contact_person: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    website_url: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    notes: Optional[str] = None
    status: str
    priority: str
    follow_up_date: Optional[UtcDatetime] = None
    source: str
    service_interest: Optional[str] = None
    website_status: Optional[str] = None
    is_archived: bool
    created_by: Optional[PersonRef] = None
    updated_by: Optional[PersonRef] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class BulkLeadIds(ApiModel):
    lead_ids: list[int] = Field(default_factory=list)


class BulkLeadChanges(ApiModel):
    """Fields a bulk edit may touch; anything else is rejected."""

    model_config = ConfigDict(extra="forbid")

    status: Optional[AllowedLeadStatus] = None
    priority: Optional[AllowedPriority] = None
    notes: Optional[str] = None


class BulkLeadUpdate(BulkLeadIds):
    updates: BulkLeadChanges = Field(default_factory=BulkLeadChanges)


class BulkResult(ApiModel):
    message: str
    modified_count: int


class SearchCount(ApiModel):
    leads_count: int


class ImportRowError(ApiModel):
    row: int
    message: str


class ImportDetails(ApiModel):
    total_rows: int
    valid_rows: int
    invalid_rows: int
    successfully_imported: int
    errors: list[ImportRowError]


class ImportResult(ApiModel):
    message: str
    count: int
    details: ImportDetails
