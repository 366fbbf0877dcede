"""Volatile in-process record store."""

from __future__ import annotations

import itertools
import threading
from datetime import datetime
from typing import Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel

from supportbot.exceptions import DuplicateRecordError, RecordNotFoundError
from supportbot.schemas.common import update_values
from supportbot.schemas.conversation import (
    ConversationCreate,
    ConversationRead,
    ConversationStatus,
    ConversationUpdate,
)
from supportbot.schemas.message import MessageCreate, MessageRead
from supportbot.schemas.support_issue import (
    SupportIssueCreate,
    SupportIssueRead,
    SupportIssueStatus,
    SupportIssueUpdate,
)
from supportbot.schemas.user import UserCreate, UserRead, UserUpdate
from supportbot.storage.base import DEFAULT_LIST_LIMIT, RecordStore
from supportbot.utils.time import Clock, utcnow

RecordT = TypeVar("RecordT", bound=BaseModel)


def _first(records: Iterable[RecordT], predicate: Callable[[RecordT], bool]) -> Optional[RecordT]:
    """Lowest-id record matching predicate. Maps are keyed by ascending id."""
    for record in records:
        if predicate(record):
            return record.model_copy()
    return None


def _newest_first(
    records: Iterable[RecordT],
    timestamp: Callable[[RecordT], datetime],
    limit: Optional[int],
) -> list[RecordT]:
    ordered = sorted(records, key=lambda r: (timestamp(r), r.id), reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return [record.model_copy() for record in ordered]


class MemoryStore(RecordStore):
    """Dict-backed store. A lock keeps concurrent handlers from corrupting the maps."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow
        self._lock = threading.RLock()
        self._users: dict[int, UserRead] = {}
        self._conversations: dict[int, ConversationRead] = {}
        self._messages: dict[int, MessageRead] = {}
        self._support_issues: dict[int, SupportIssueRead] = {}
        self._user_ids = itertools.count(1)
        self._conversation_ids = itertools.count(1)
        self._message_ids = itertools.count(1)
        self._support_issue_ids = itertools.count(1)

    # Users

    def get_user(self, user_id: int) -> Optional[UserRead]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy() if user else None

    def get_user_by_telegram_id(self, telegram_id: str) -> Optional[UserRead]:
        with self._lock:
            return _first(self._users.values(), lambda u: u.telegram_id == telegram_id)

    def create_user(self, data: UserCreate) -> UserRead:
        with self._lock:
            if self.get_user_by_telegram_id(data.telegram_id) is not None:
                raise DuplicateRecordError(
                    f"User with telegram_id {data.telegram_id!r} already exists"
                )
            user = UserRead(
                **data.model_dump(), id=next(self._user_ids), joined_at=self._clock()
            )
            self._users[user.id] = user
            return user.model_copy()

    def update_user(self, user_id: int, data: UserUpdate) -> Optional[UserRead]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = UserRead.model_validate({**user.model_dump(), **update_values(data)})
            self._users[user_id] = updated
            return updated.model_copy()

    def list_users(self, limit: Optional[int] = DEFAULT_LIST_LIMIT) -> list[UserRead]:
        with self._lock:
            return _newest_first(self._users.values(), lambda u: u.joined_at, limit)

    # Conversations

    def get_conversation(self, conversation_id: int) -> Optional[ConversationRead]:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            return conversation.model_copy() if conversation else None

    def get_conversation_by_telegram_user_id(
        self, telegram_user_id: str
    ) -> Optional[ConversationRead]:
        with self._lock:
            return _first(
                self._conversations.values(),
                lambda c: c.telegram_user_id == telegram_user_id,
            )

    def get_conversation_by_thread_id(self, thread_id: str) -> Optional[ConversationRead]:
        with self._lock:
            return _first(self._conversations.values(), lambda c: c.thread_id == thread_id)

    def create_conversation(self, data: ConversationCreate) -> ConversationRead:
        with self._lock:
            if self.get_conversation_by_telegram_user_id(data.telegram_user_id) is not None:
                raise DuplicateRecordError(
                    f"Conversation for user {data.telegram_user_id!r} already exists"
                )
            now = self._clock()
            conversation = ConversationRead(
                **data.model_dump(),
                id=next(self._conversation_ids),
                last_message_at=now,
                created_at=now,
            )
            self._conversations[conversation.id] = conversation
            return conversation.model_copy()

    def update_conversation(
        self, conversation_id: int, data: Optional[ConversationUpdate] = None
    ) -> Optional[ConversationRead]:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                return None
            values = update_values(data) if data is not None else {}
            values["last_message_at"] = self._clock()
            updated = ConversationRead.model_validate({**conversation.model_dump(), **values})
            self._conversations[conversation_id] = updated
            return updated.model_copy()

    def list_conversations(
        self,
        status: Optional[ConversationStatus] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> list[ConversationRead]:
        with self._lock:
            conversations = [
                c
                for c in self._conversations.values()
                if status is None or c.status == status
            ]
            return _newest_first(conversations, lambda c: c.last_message_at, limit)

    # Messages

    def get_message(self, message_id: int) -> Optional[MessageRead]:
        with self._lock:
            message = self._messages.get(message_id)
            return message.model_copy() if message else None

    def create_message(self, data: MessageCreate) -> MessageRead:
        with self._lock:
            if data.conversation_id not in self._conversations:
                raise RecordNotFoundError(
                    f"Conversation {data.conversation_id} does not exist"
                )
            message = MessageRead(
                **data.model_dump(), id=next(self._message_ids), sent_at=self._clock()
            )
            self._messages[message.id] = message
            self.update_conversation(data.conversation_id)
            return message.model_copy()

    def get_messages_by_conversation_id(
        self, conversation_id: int, limit: Optional[int] = DEFAULT_LIST_LIMIT
    ) -> list[MessageRead]:
        with self._lock:
            messages = sorted(
                (m for m in self._messages.values() if m.conversation_id == conversation_id),
                key=lambda m: (m.sent_at, m.id),
            )
            if limit is not None:
                messages = messages[max(len(messages) - limit, 0):]
            return [m.model_copy() for m in messages]

    # Support issues

    def get_support_issue(self, issue_id: int) -> Optional[SupportIssueRead]:
        with self._lock:
            issue = self._support_issues.get(issue_id)
            return issue.model_copy() if issue else None

    def get_support_issue_by_conversation_id(
        self, conversation_id: int
    ) -> Optional[SupportIssueRead]:
        with self._lock:
            return _first(
                self._support_issues.values(),
                lambda i: i.conversation_id == conversation_id,
            )

    def create_support_issue(self, data: SupportIssueCreate) -> SupportIssueRead:
        with self._lock:
            issue = SupportIssueRead(
                **data.model_dump(),
                id=next(self._support_issue_ids),
                opened_at=self._clock(),
                closed_at=None,
            )
            self._support_issues[issue.id] = issue
            return issue.model_copy()

    def update_support_issue(
        self, issue_id: int, data: SupportIssueUpdate
    ) -> Optional[SupportIssueRead]:
        with self._lock:
            issue = self._support_issues.get(issue_id)
            if issue is None:
                return None
            updated = SupportIssueRead.model_validate({**issue.model_dump(), **update_values(data)})
            self._support_issues[issue_id] = updated
            return updated.model_copy()

    def list_support_issues(
        self,
        user_id: Optional[str] = None,
        status: Optional[SupportIssueStatus] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> list[SupportIssueRead]:
        with self._lock:
            issues = [
                i
                for i in self._support_issues.values()
                if (user_id is None or i.user_id == user_id)
                and (status is None or i.status == status)
            ]
            return _newest_first(issues, lambda i: i.opened_at, limit)
