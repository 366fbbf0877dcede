"""Message insert and history reads. Messages are never updated or deleted."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from supportbot.exceptions import RecordNotFoundError
from supportbot.models.message import Message
from supportbot.schemas.message import MessageCreate
from supportbot.services.base import RecordService, column_values
from supportbot.services.conversation_service import ConversationService
from supportbot.utils.time import Clock


class MessageService(RecordService[Message]):
    def __init__(self, db: Session, clock: Optional[Clock] = None) -> None:
        super().__init__(db, Message, clock)
        self._conversations = ConversationService(db, clock=self.clock)

    def get_message(self, message_id: int) -> Optional[Message]:
        return self.get_record(message_id)

    def create_message(self, data: MessageCreate) -> Message:
        """Insert a message and bump the parent conversation's last activity."""
        if self._conversations.get_conversation(data.conversation_id) is None:
            raise RecordNotFoundError(
                f"Conversation {data.conversation_id} does not exist"
            )
        message = Message(**column_values(data.model_dump()), sent_at=self.clock())
        message = self.save(message)
        self._conversations.update_conversation(data.conversation_id)
        return message

    def get_messages(self, conversation_id: int, limit: Optional[int] = 50) -> List[Message]:
        """The `limit` most recent messages, returned oldest first."""
        query = (
            self.db.query(Message)
            .filter(Message.conversation_id == conversation_id)
            .order_by(Message.sent_at.desc(), Message.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return list(reversed(query.all()))
