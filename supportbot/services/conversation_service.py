"""Conversation CRUD and lookups by owner and by support thread."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from supportbot.exceptions import DuplicateRecordError
from supportbot.models.conversation import Conversation
from supportbot.schemas.common import update_values
from supportbot.schemas.conversation import (
    ConversationCreate,
    ConversationStatus,
    ConversationUpdate,
)
from supportbot.services.base import RecordService, column_values
from supportbot.utils.time import Clock


class ConversationService(RecordService[Conversation]):
    def __init__(self, db: Session, clock: Optional[Clock] = None) -> None:
        super().__init__(db, Conversation, clock)

    def get_conversation(self, conversation_id: int) -> Optional[Conversation]:
        return self.get_record(conversation_id)

    def get_conversation_by_telegram_user_id(
        self, telegram_user_id: str
    ) -> Optional[Conversation]:
        return (
            self.db.query(Conversation)
            .filter(Conversation.telegram_user_id == telegram_user_id)
            .order_by(Conversation.id)
            .first()
        )

    def get_conversation_by_thread_id(self, thread_id: str) -> Optional[Conversation]:
        return (
            self.db.query(Conversation)
            .filter(Conversation.thread_id == thread_id)
            .order_by(Conversation.id)
            .first()
        )

    def get_conversations(
        self,
        status: Optional[ConversationStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Conversation]:
        """Conversations with the most recent activity first."""
        query = self.db.query(Conversation)
        if status is not None:
            query = query.filter(Conversation.status == ConversationStatus(status).value)
        query = query.order_by(
            Conversation.last_message_at.desc(), Conversation.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def create_conversation(self, data: ConversationCreate) -> Conversation:
        if self.get_conversation_by_telegram_user_id(data.telegram_user_id) is not None:
            raise DuplicateRecordError(
                f"Conversation for user {data.telegram_user_id!r} already exists"
            )
        now = self.clock()
        conversation = Conversation(
            **column_values(data.model_dump()),
            last_message_at=now,
            created_at=now,
        )
        return self.save(conversation)

    def update_conversation(
        self, conversation_id: int, data: Optional[ConversationUpdate] = None
    ) -> Optional[Conversation]:
        """Merge set fields; last_message_at is refreshed on every update."""
        conversation = self.get_conversation(conversation_id)
        if conversation is None:
            return None
        values = update_values(data) if data is not None else {}
        values["last_message_at"] = self.clock()
        return self.apply(conversation, values)
