"""Pydantic schemas for User."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from supportbot.schemas.common import RecordRead, reject_null
from supportbot.schemas.support_issue import SupportIssueRead


class UserBase(BaseModel):
    """Base user fields."""

    telegram_id: str = Field(min_length=1)
    username: Optional[str] = None
    first_name: str = Field(min_length=1)
    last_name: Optional[str] = None
    language_code: Optional[str] = None
    is_premium: bool = False
    bio: Optional[str] = None
    profile_photo: Optional[str] = None


class UserCreate(UserBase):
    """Schema for creating a user. joined_at is assigned by the store."""

    pass


class UserUpdate(BaseModel):
    """Schema for updating a user. telegram_id is immutable."""

    username: Optional[str] = None
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = None
    language_code: Optional[str] = None
    is_premium: Optional[bool] = None
    bio: Optional[str] = None
    profile_photo: Optional[str] = None

    @field_validator("first_name", "is_premium", mode="before")
    @classmethod
    def _not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info.field_name)


class UserRead(UserBase, RecordRead):
    id: int
    joined_at: datetime

    @property
    def display_name(self) -> str:
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name


class UserDetail(BaseModel):
    """User with their support history."""

    user: UserRead
    support_issues: list[SupportIssueRead]
