"""Pydantic schemas for SupportIssue."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from supportbot.schemas.common import RecordRead, reject_null


class SupportIssueStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class SupportIssueBase(BaseModel):
    user_id: str = Field(min_length=1)  # owner's telegram id
    conversation_id: int
    title: str = Field(min_length=1)
    status: SupportIssueStatus = SupportIssueStatus.PENDING
    assigned_to: Optional[str] = None


class SupportIssueCreate(SupportIssueBase):
    """Schema for opening a support issue. opened_at is assigned by the store."""

    pass


class SupportIssueUpdate(BaseModel):
    """Schema for updating a support issue. All fields optional."""

    title: Optional[str] = Field(default=None, min_length=1)
    status: Optional[SupportIssueStatus] = None
    assigned_to: Optional[str] = None
    closed_at: Optional[datetime] = None

    @field_validator("title", "status", mode="before")
    @classmethod
    def _not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info.field_name)


class SupportIssueRead(SupportIssueBase, RecordRead):
    id: int
    opened_at: datetime
    closed_at: Optional[datetime] = None
