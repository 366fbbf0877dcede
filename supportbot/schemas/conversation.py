"""Pydantic schemas for Conversation."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from supportbot.schemas.common import RecordRead, reject_null
from supportbot.schemas.message import MessageRead
from supportbot.schemas.support_issue import SupportIssueRead
from supportbot.schemas.user import UserRead


class ConversationStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ConversationBase(BaseModel):
    telegram_user_id: str = Field(min_length=1)
    thread_id: Optional[str] = None
    status: ConversationStatus = ConversationStatus.OPEN


class ConversationCreate(ConversationBase):
    """Schema for creating a conversation. Timestamps are assigned by the store."""

    pass


class ConversationUpdate(BaseModel):
    """Schema for updating a conversation. All fields optional."""

    thread_id: Optional[str] = None
    status: Optional[ConversationStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def _not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info.field_name)


class ConversationRead(ConversationBase, RecordRead):
    id: int
    last_message_at: datetime
    created_at: datetime


class ConversationDetail(BaseModel):
    """Conversation with its recent messages, owner and support issue."""

    conversation: ConversationRead
    messages: list[MessageRead]
    user: Optional[UserRead] = None
    support_issue: Optional[SupportIssueRead] = None
