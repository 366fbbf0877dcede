"""
Normalized message contracts for the relay.

The Telegram adapter converts webhook updates into these shapes; the
conversation router only ever sees them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from supportbot.schemas.media import MediaRef


class Sender(BaseModel):
    """Profile of whoever sent an inbound message."""

    id: str
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None
    is_premium: bool = False

    @property
    def display_name(self) -> str:
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name


class InboundMessage(BaseModel):
    """Normalized inbound message (adapter → router)."""

    chat_id: str
    message_id: str
    sender: Optional[Sender] = None
    text: Optional[str] = None
    caption: Optional[str] = None
    media: Optional[MediaRef] = None
    reply_to_message_id: Optional[str] = None

    @property
    def content(self) -> Optional[str]:
        """Text to store for this message; falls back to the media caption."""
        return self.text or self.caption


class BotIdentity(BaseModel):
    """The bot's own account as reported by getMe."""

    id: int
    is_bot: bool = True
    first_name: str
    username: Optional[str] = None
    can_join_groups: Optional[bool] = None
    can_read_all_group_messages: Optional[bool] = None


class SupportGroupConfig(BaseModel):
    """Current support group setting."""

    group_id: Optional[str] = None


class SupportGroupUpdate(BaseModel):
    """Body for setting the support group."""

    group_id: str = Field(min_length=1)
