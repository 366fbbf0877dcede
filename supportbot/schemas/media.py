"""
Media attached to a message.

A message carries either no media (``None``) or exactly one ``MediaRef``.
Which kinds are relayed to the other side is decided by ``FORWARDABLE_MEDIA``;
audio and voice are stored for the record but never relayed.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class MediaKind(str, Enum):
    PHOTO = "photo"
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    VOICE = "voice"


# Order in which attachments are checked when an update carries several.
MEDIA_PRECEDENCE: tuple[MediaKind, ...] = (
    MediaKind.PHOTO,
    MediaKind.DOCUMENT,
    MediaKind.VIDEO,
    MediaKind.AUDIO,
    MediaKind.VOICE,
)

FORWARDABLE_MEDIA: dict[MediaKind, bool] = {
    MediaKind.PHOTO: True,
    MediaKind.DOCUMENT: True,
    MediaKind.VIDEO: True,
    MediaKind.AUDIO: False,
    MediaKind.VOICE: False,
}


class MediaRef(BaseModel):
    """One media item: its kind and the platform file id."""

    kind: MediaKind
    file_id: str = Field(min_length=1)

    model_config = {"frozen": True}

    @property
    def forwardable(self) -> bool:
        return FORWARDABLE_MEDIA[self.kind]
