"""Pydantic schemas for Message. Messages are created once and never updated."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from supportbot.schemas.common import RecordRead
from supportbot.schemas.media import MediaKind


class SenderType(str, Enum):
    USER = "user"  # end user
    ADMIN = "admin"  # support agent
    BOT = "bot"  # system


class MessageBase(BaseModel):
    conversation_id: int
    telegram_message_id: Optional[str] = None
    sender_id: str = Field(min_length=1)
    sender_type: SenderType
    sender_name: Optional[str] = None
    content: Optional[str] = None
    media_type: Optional[MediaKind] = None
    media_url: Optional[str] = None

    @model_validator(mode="after")
    def _media_pair(self):
        if (self.media_type is None) != (self.media_url is None):
            raise ValueError("media_type and media_url must be set together")
        return self


class MessageCreate(MessageBase):
    """Schema for storing a message. sent_at is assigned by the store."""

    pass


class MessageRead(MessageBase, RecordRead):
    id: int
    sent_at: datetime
