"""
Record store contract.

The relay persists four kinds of records (users, conversations, messages,
support issues). Two interchangeable backends implement this contract: a
volatile in-process store and a SQL store. Both return pydantic ``*Read``
models, assign monotonically increasing integer ids per kind, and stamp
creation timestamps from an injectable clock.

Secondary lookups return at most one record: the lowest id among matches.
List operations return newest first by the record's defining timestamp
(ties broken by id) and are truncated to ``limit``; ``None`` means no limit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

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

DEFAULT_LIST_LIMIT = 50


class RecordStore(ABC):
    """Contract shared by the memory and SQL backends."""

    # Users

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[UserRead]: ...

    @abstractmethod
    def get_user_by_telegram_id(self, telegram_id: str) -> Optional[UserRead]: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> UserRead:
        """Raise DuplicateRecordError if the telegram id is taken."""
        ...

    @abstractmethod
    def update_user(self, user_id: int, data: UserUpdate) -> Optional[UserRead]: ...

    @abstractmethod
    def list_users(
        self, limit: Optional[int] = DEFAULT_LIST_LIMIT
    ) -> list[UserRead]: ...

    # Conversations

    @abstractmethod
    def get_conversation(self, conversation_id: int) -> Optional[ConversationRead]: ...

    @abstractmethod
    def get_conversation_by_telegram_user_id(
        self, telegram_user_id: str
    ) -> Optional[ConversationRead]: ...

    @abstractmethod
    def get_conversation_by_thread_id(
        self, thread_id: str
    ) -> Optional[ConversationRead]: ...

    @abstractmethod
    def create_conversation(self, data: ConversationCreate) -> ConversationRead:
        """Raise DuplicateRecordError if the user already has a conversation."""
        ...

    @abstractmethod
    def update_conversation(
        self, conversation_id: int, data: Optional[ConversationUpdate] = None
    ) -> Optional[ConversationRead]:
        """Merge set fields. Always refreshes last_message_at, even with no fields."""
        ...

    @abstractmethod
    def list_conversations(
        self,
        status: Optional[ConversationStatus] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> list[ConversationRead]: ...

    # Messages

    @abstractmethod
    def get_message(self, message_id: int) -> Optional[MessageRead]: ...

    @abstractmethod
    def create_message(self, data: MessageCreate) -> MessageRead:
        """Store a message and refresh the conversation's last_message_at.

        Raise RecordNotFoundError if the conversation does not exist.
        """
        ...

    @abstractmethod
    def get_messages_by_conversation_id(
        self, conversation_id: int, limit: Optional[int] = DEFAULT_LIST_LIMIT
    ) -> list[MessageRead]:
        """The `limit` most recent messages, oldest first."""
        ...

    # Support issues

    @abstractmethod
    def get_support_issue(self, issue_id: int) -> Optional[SupportIssueRead]: ...

    @abstractmethod
    def get_support_issue_by_conversation_id(
        self, conversation_id: int
    ) -> Optional[SupportIssueRead]: ...

    @abstractmethod
    def create_support_issue(self, data: SupportIssueCreate) -> SupportIssueRead: ...

    @abstractmethod
    def update_support_issue(
        self, issue_id: int, data: SupportIssueUpdate
    ) -> Optional[SupportIssueRead]: ...

    @abstractmethod
    def list_support_issues(
        self,
        user_id: Optional[str] = None,
        status: Optional[SupportIssueStatus] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> list[SupportIssueRead]: ...
