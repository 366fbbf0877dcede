"""SupportIssue model: ticket opened when a conversation's support thread is created."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from supportbot.db import Base


class SupportIssue(Base):
    __tablename__ = "support_issues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    conversation_id = Column(
        Integer,
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(256), nullable=False)
    status = Column(String(32), nullable=False, default="pending")
    opened_at = Column(DateTime(timezone=True), nullable=False)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    assigned_to = Column(String(256), nullable=True)
