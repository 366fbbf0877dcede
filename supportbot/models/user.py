"""User model: one row per Telegram account that has written to the bot."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from supportbot.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    telegram_id = Column(String(64), unique=True, nullable=False, index=True)
    username = Column(String(256), nullable=True)
    first_name = Column(String(256), nullable=False)
    last_name = Column(String(256), nullable=True)
    language_code = Column(String(16), nullable=True)
    is_premium = Column(Boolean, nullable=False, default=False)
    bio = Column(Text, nullable=True)
    profile_photo = Column(Text, nullable=True)
    joined_at = Column(DateTime(timezone=True), nullable=False)
