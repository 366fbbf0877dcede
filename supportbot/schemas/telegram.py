"""
Telegram webhook payload schemas.

Matches the structure Telegram sends to webhook endpoints. Only the fields
the relay reads are declared; everything else in the payload is ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TelegramUser(BaseModel):
    """Telegram user (message.from)."""

    id: int
    is_bot: bool = False
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None
    is_premium: Optional[bool] = None


class TelegramChat(BaseModel):
    """Telegram chat (message.chat)."""

    id: int
    type: str
    title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class TelegramPhotoSize(BaseModel):
    """One size of a photo; Telegram sends them smallest first."""

    file_id: str
    file_unique_id: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class TelegramFile(BaseModel):
    """Document, video, audio or voice attachment."""

    file_id: str
    file_unique_id: Optional[str] = None
    mime_type: Optional[str] = None
    file_name: Optional[str] = None


class TelegramMessage(BaseModel):
    """Telegram message (update.message and friends)."""

    message_id: int
    from_: Optional[TelegramUser] = Field(default=None, alias="from")
    chat: TelegramChat
    date: int
    message_thread_id: Optional[int] = None
    text: Optional[str] = None
    caption: Optional[str] = None
    photo: Optional[list[TelegramPhotoSize]] = None
    document: Optional[TelegramFile] = None
    video: Optional[TelegramFile] = None
    audio: Optional[TelegramFile] = None
    voice: Optional[TelegramFile] = None
    reply_to_message: Optional[TelegramMessage] = None

    model_config = {"populate_by_name": True}


class TelegramWebhookUpdate(BaseModel):
    """Telegram webhook update payload (root object)."""

    update_id: int
    message: Optional[TelegramMessage] = None
    edited_message: Optional[TelegramMessage] = None
    channel_post: Optional[TelegramMessage] = None
    edited_channel_post: Optional[TelegramMessage] = None


TelegramMessage.model_rebuild()
