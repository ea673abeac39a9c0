"""Segment schemas, including the typed filter criteria."""

from typing import Literal, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from backend.app.core.time import parse_datetime
from backend.app.schemas.base import ApiModel, PersonRef, ReadModel, UtcDatetime
from backend.app.schemas.lead import AllowedLeadStatus, AllowedPriority


def _as_list(value):
    # a bare string is a one-element selection
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return value


class StrictApiModel(ApiModel):
    model_config = ConfigDict(extra="forbid")


class LocationFilter(StrictApiModel):
    country: list[str] = Field(default_factory=list)
    state: list[str] = Field(default_factory=list)
    city: list[str] = Field(default_factory=list)

    @field_validator("country", "state", "city", mode="before")
    @classmethod
    def coerce_list(cls, v):
        return _as_list(v)

    def is_empty(self) -> bool:
        return not (self.country or self.state or self.city)


class DateRange(StrictApiModel):
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None

    @field_validator("from_", "to")
    @classmethod
    def check_parsable(cls, v: Optional[str]) -> Optional[str]:
        if v in (None, ""):
            return None
        parse_datetime(v)
        return v

    def is_empty(self) -> bool:
        return self.from_ is None and self.to is None


class FilterCriteria(StrictApiModel):
    """Structured segment filter.

    ``match_mode`` selects how location and empty-field tests combine:
    ``"all"`` ANDs the dimensions (OR within each), ``"any"`` folds every
    location and empty-field test into a single OR.
    """

    status: list[AllowedLeadStatus] = Field(default_factory=list)
    priority: list[AllowedPriority] = Field(default_factory=list)
    business_category: list[str] = Field(default_factory=list)
    business_type: list[str] = Field(default_factory=list)
    service_interest: list[str] = Field(default_factory=list)
    website_status: list[str] = Field(default_factory=list)
    source: list[str] = Field(default_factory=list)
    created_by: list[str] = Field(default_factory=list)
    location: LocationFilter = Field(default_factory=LocationFilter)
    is_archived: Optional[bool] = None
    has_empty_email: bool = False
    has_empty_phone: bool = False
    follow_up_date: DateRange = Field(default_factory=DateRange)
    created_at: DateRange = Field(default_factory=DateRange)
    match_mode: Literal["all", "any"] = "all"

    @field_validator(
        "status",
        "priority",
        "business_category",
        "business_type",
        "service_interest",
        "website_status",
        "source",
        "created_by",
        mode="before",
    )
    @classmethod
    def coerce_list(cls, v):
        return _as_list(v)

    @field_validator("location", "follow_up_date", "created_at", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return {} if v is None else v


class SegmentCreate(ApiModel):
    name: str
    description: Optional[str] = None
    filter_criteria: FilterCriteria = Field(default_factory=FilterCriteria)

    @model_validator(mode="after")
    def strip_text(self):
        self.name = self.name.strip()
        if self.description is not None:
            self.description = self.description.strip() or None
        if not self.name:
            raise ValueError("Segment name is required")
        return self


class SegmentRead(ReadModel):
    name: str
    description: Optional[str] = None
    filter_criteria: dict
    query: str
    lead_count: int
    count_refreshed_at: UtcDatetime
    created_by: PersonRef
    created_at: UtcDatetime
    updated_at: UtcDatetime
