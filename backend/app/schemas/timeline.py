"""Timeline event schemas for lead activity."""

from typing import Any

from pydantic import Field

from backend.app.schemas.base import PersonRef, ReadModel, UtcDatetime


class TimelineEventRead(ReadModel):
    lead_id: int
    type: str = Field(validation_alias="event_type")
    title: str
    description: str
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="event_metadata")
    created_by: PersonRef
    created_at: UtcDatetime
