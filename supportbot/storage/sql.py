"""SQL record store: one short-lived session per operation, every write committed on its own."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from supportbot.db import Base, build_session_factory, db_session
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
from supportbot.services.conversation_service import ConversationService
from supportbot.services.message_service import MessageService
from supportbot.services.support_issue_service import SupportIssueService
from supportbot.services.user_service import UserService
from supportbot.storage.base import DEFAULT_LIST_LIMIT, RecordStore
from supportbot.utils.time import Clock, utcnow


class SqlStore(RecordStore):
    def __init__(self, session_factory: sessionmaker, clock: Optional[Clock] = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or utcnow

    @classmethod
    def from_engine(
        cls, engine: Engine, clock: Optional[Clock] = None, create_tables: bool = False
    ) -> "SqlStore":
        if create_tables:
            Base.metadata.create_all(engine)
        return cls(build_session_factory(engine), clock=clock)

    def _session(self):
        return db_session(self._session_factory)

    # Users

    def get_user(self, user_id: int) -> Optional[UserRead]:
        with self._session() as db:
            user = UserService(db).get_user(user_id)
            return UserRead.model_validate(user) if user else None

    def get_user_by_telegram_id(self, telegram_id: str) -> Optional[UserRead]:
        with self._session() as db:
            user = UserService(db).get_user_by_telegram_id(telegram_id)
            return UserRead.model_validate(user) if user else None

    def create_user(self, data: UserCreate) -> UserRead:
        with self._session() as db:
            user = UserService(db, clock=self._clock).create_user(data)
            return UserRead.model_validate(user)

    def update_user(self, user_id: int, data: UserUpdate) -> Optional[UserRead]:
        with self._session() as db:
            user = UserService(db).update_user(user_id, data)
            return UserRead.model_validate(user) if user else None

    def list_users(self, limit: Optional[int] = DEFAULT_LIST_LIMIT) -> list[UserRead]:
        with self._session() as db:
            return [UserRead.model_validate(u) for u in UserService(db).get_users(limit)]

    # Conversations

    def get_conversation(self, conversation_id: int) -> Optional[ConversationRead]:
        with self._session() as db:
            conversation = ConversationService(db).get_conversation(conversation_id)
            return ConversationRead.model_validate(conversation) if conversation else None

    def get_conversation_by_telegram_user_id(
        self, telegram_user_id: str
    ) -> Optional[ConversationRead]:
        with self._session() as db:
            conversation = ConversationService(db).get_conversation_by_telegram_user_id(
                telegram_user_id
            )
            return ConversationRead.model_validate(conversation) if conversation else None

    def get_conversation_by_thread_id(self, thread_id: str) -> Optional[ConversationRead]:
        with self._session() as db:
            conversation = ConversationService(db).get_conversation_by_thread_id(thread_id)
            return ConversationRead.model_validate(conversation) if conversation else None

    def create_conversation(self, data: ConversationCreate) -> ConversationRead:
        with self._session() as db:
            conversation = ConversationService(db, clock=self._clock).create_conversation(
                data
            )
            return ConversationRead.model_validate(conversation)

    def update_conversation(
        self, conversation_id: int, data: Optional[ConversationUpdate] = None
    ) -> Optional[ConversationRead]:
        with self._session() as db:
            conversation = ConversationService(db, clock=self._clock).update_conversation(
                conversation_id, data
            )
            return ConversationRead.model_validate(conversation) if conversation else None

    def list_conversations(
        self,
        status: Optional[ConversationStatus] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> list[ConversationRead]:
        with self._session() as db:
            conversations = ConversationService(db).get_conversations(status, limit)
            return [ConversationRead.model_validate(c) for c in conversations]

    # Messages

    def get_message(self, message_id: int) -> Optional[MessageRead]:
        with self._session() as db:
            message = MessageService(db).get_message(message_id)
            return MessageRead.model_validate(message) if message else None

    def create_message(self, data: MessageCreate) -> MessageRead:
        with self._session() as db:
            message = MessageService(db, clock=self._clock).create_message(data)
            return MessageRead.model_validate(message)

    def get_messages_by_conversation_id(
        self, conversation_id: int, limit: Optional[int] = DEFAULT_LIST_LIMIT
    ) -> list[MessageRead]:
        with self._session() as db:
            messages = MessageService(db).get_messages(conversation_id, limit)
            return [MessageRead.model_validate(m) for m in messages]

    # Support issues

    def get_support_issue(self, issue_id: int) -> Optional[SupportIssueRead]:
        with self._session() as db:
            issue = SupportIssueService(db).get_support_issue(issue_id)
            return SupportIssueRead.model_validate(issue) if issue else None

    def get_support_issue_by_conversation_id(
        self, conversation_id: int
    ) -> Optional[SupportIssueRead]:
        with self._session() as db:
            issue = SupportIssueService(db).get_support_issue_by_conversation_id(
                conversation_id
            )
            return SupportIssueRead.model_validate(issue) if issue else None

    def create_support_issue(self, data: SupportIssueCreate) -> SupportIssueRead:
        with self._session() as db:
            issue = SupportIssueService(db, clock=self._clock).create_support_issue(data)
            return SupportIssueRead.model_validate(issue)

    def update_support_issue(
        self, issue_id: int, data: SupportIssueUpdate
    ) -> Optional[SupportIssueRead]:
        with self._session() as db:
            issue = SupportIssueService(db).update_support_issue(issue_id, data)
            return SupportIssueRead.model_validate(issue) if issue else None

    def list_support_issues(
        self,
        user_id: Optional[str] = None,
        status: Optional[SupportIssueStatus] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> list[SupportIssueRead]:
        with self._session() as db:
            issues = SupportIssueService(db).get_support_issues(user_id, status, limit)
            return [SupportIssueRead.model_validate(i) for i in issues]
