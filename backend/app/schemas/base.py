"""Shared pydantic configuration for the camelCase JSON surface."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.app.core.time import ensure_utc


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ReadModel(ApiModel):
    """Base for records read back from the database; ``id`` is exposed as ``_id``."""

    id: int = Field(serialization_alias="_id")


class PersonRef(ApiModel):
    """Denormalised name/email snapshot of a user."""

    name: Optional[str] = None
    email: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
