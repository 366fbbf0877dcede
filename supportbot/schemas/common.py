"""Shared base for records returned by the store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, field_validator


class RecordRead(BaseModel):
    """Base for stored records. Naive datetimes (e.g. from SQLite) are read as UTC."""

    model_config = {"from_attributes": True}

    @field_validator("*", mode="after")
    @classmethod
    def _as_utc(cls, value: Any) -> Any:
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def reject_null(value: Any, field_name: str) -> Any:
    """For update fields that may be omitted but never cleared."""
    if value is None:
        raise ValueError(f"{field_name} must not be null")
    return value


def update_values(data: BaseModel) -> dict[str, Any]:
    """
    Fields explicitly set on an update schema, re-validated so that an
    instance built without validation cannot write invalid values.
    """
    values = data.model_dump(exclude_unset=True)
    return type(data).model_validate(values).model_dump(exclude_unset=True)
