"""Signed-in operator schemas."""

from typing import Optional

from pydantic import EmailStr, Field

from backend.app.schemas.base import ApiModel, ReadModel, UtcDatetime


class GoogleUserUpsert(ApiModel):
    id: Optional[str] = None
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")


class GoogleUserSummary(ReadModel):
    email: str
    name: str


class GoogleUserRead(GoogleUserSummary):
    uid: str
    photo_url: Optional[str] = Field(default=None, serialization_alias="photoURL")
    last_login: UtcDatetime
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None


class SignInResponse(GoogleUserRead):
    access_token: str
    token_type: str = "bearer"
