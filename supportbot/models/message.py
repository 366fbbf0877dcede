"""Message model: immutable log of everything relayed in a conversation."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from supportbot.db import Base


class Message(Base):
    __tablename__ = "messages"

    __table_args__ = (
        Index("ix_messages_conversation_id_sent_at", "conversation_id", "sent_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(
        Integer, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    telegram_message_id = Column(String(64), nullable=True)
    sender_id = Column(String(64), nullable=False)
    sender_type = Column(String(16), nullable=False)  # 'user' | 'admin' | 'bot'
    sender_name = Column(String(512), nullable=True)
    content = Column(Text, nullable=True)
    media_type = Column(String(16), nullable=True)
    media_url = Column(Text, nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=False)
