"""User CRUD and lookup by Telegram id."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from supportbot.exceptions import DuplicateRecordError
from supportbot.models.user import User
from supportbot.schemas.common import update_values
from supportbot.schemas.user import UserCreate, UserUpdate
from supportbot.services.base import RecordService, column_values
from supportbot.utils.time import Clock


class UserService(RecordService[User]):
    def __init__(self, db: Session, clock: Optional[Clock] = None) -> None:
        super().__init__(db, User, clock)

    def get_user(self, user_id: int) -> Optional[User]:
        return self.get_record(user_id)

    def get_user_by_telegram_id(self, telegram_id: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.telegram_id == telegram_id)
            .order_by(User.id)
            .first()
        )

    def get_users(self, limit: Optional[int] = None) -> List[User]:
        """Users newest first by join date."""
        query = self.db.query(User).order_by(User.joined_at.desc(), User.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def create_user(self, data: UserCreate) -> User:
        if self.get_user_by_telegram_id(data.telegram_id) is not None:
            raise DuplicateRecordError(
                f"User with telegram_id {data.telegram_id!r} already exists"
            )
        user = User(**column_values(data.model_dump()), joined_at=self.clock())
        return self.save(user)

    def update_user(self, user_id: int, data: UserUpdate) -> Optional[User]:
        user = self.get_user(user_id)
        if user is None:
            return None
        return self.apply(user, update_values(data))
