"""Tests for the commit and error mapping shared by the SQL services."""

import pytest
from sqlalchemy.exc import IntegrityError

from supportbot.config import Settings
from supportbot.db import Base, build_engine, build_session_factory
from supportbot.exceptions import DuplicateRecordError
from supportbot.models.user import User
from supportbot.services.user_service import UserService
from supportbot.utils.time import utcnow


@pytest.fixture
def db():
    engine = build_engine(Settings(ENV="test", database_url="sqlite://"))
    Base.metadata.create_all(engine)
    session = build_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()


def test_save_maps_unique_violation_to_duplicate(db):
    svc = UserService(db)
    svc.save(User(telegram_id="111", first_name="Alice", joined_at=utcnow()))
    with pytest.raises(DuplicateRecordError, match="unique constraint"):
        svc.save(User(telegram_id="111", first_name="Bob", joined_at=utcnow()))


def test_save_propagates_other_integrity_errors(db):
    svc = UserService(db)
    user = svc.save(User(telegram_id="111", first_name="Alice", joined_at=utcnow()))
    with pytest.raises(IntegrityError, match="NOT NULL"):
        svc.apply(user, {"first_name": None})
    db.expire_all()
    assert svc.get_user(user.id).first_name == "Alice"
