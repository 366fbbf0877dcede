"""Shared plumbing for the per-entity SQL services."""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from supportbot.db import Base
from supportbot.exceptions import DuplicateRecordError
from supportbot.utils.time import Clock, utcnow

ModelT = TypeVar("ModelT", bound=Base)

# SQLSTATE for unique_violation (PostgreSQL)
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the database rejected a row for a duplicate key, not for another constraint."""
    if getattr(error.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "unique" in str(error.orig).lower()


def column_values(data: dict[str, Any]) -> dict[str, Any]:
    """Unwrap enums so string columns receive plain values."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in data.items()
    }


class RecordService(Generic[ModelT]):
    def __init__(
        self, db: Session, model: Type[ModelT], clock: Optional[Clock] = None
    ) -> None:
        self.db = db
        self.model = model
        self.clock = clock or utcnow

    def get_record(self, record_id: int) -> Optional[ModelT]:
        return self.db.query(self.model).filter(self.model.id == record_id).first()

    def save(self, record: ModelT) -> ModelT:
        """
        Add (if new), commit and refresh a record. Unique violations become
        DuplicateRecordError; other integrity errors propagate.
        """
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_unique_violation(e):
                raise
            raise DuplicateRecordError(
                f"{self.model.__name__} violates a unique constraint"
            ) from e
        self.db.refresh(record)
        return record

    def apply(self, record: ModelT, values: dict[str, Any]) -> ModelT:
        for key, value in column_values(values).items():
            setattr(record, key, value)
        return self.save(record)
