"""Conversation model: the support dialogue of one user."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String

from supportbot.db import Base


class Conversation(Base):
    """One row per user (telegram_user_id is unique). thread_id maps support replies back."""

    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    telegram_user_id = Column(String(64), unique=True, nullable=False, index=True)
    thread_id = Column(String(64), nullable=True, index=True)
    status = Column(String(16), nullable=False, default="open")
    last_message_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
