"""In-process messaging gateway that records every outbound call."""

import itertools
from dataclasses import dataclass, field
from typing import Any, Optional

import pytest
from telegram.error import TelegramError

from supportbot.adapters.base import MessagingGateway
from supportbot.schemas.relay import BotIdentity


@dataclass
class SentCall:
    method: str
    chat_id: Optional[str] = None
    payload: Optional[str] = None
    kwargs: dict[str, Any] = field(default_factory=dict)


class FakeGateway(MessagingGateway):
    """
    Records calls instead of talking to Telegram.
    Methods named in ``failing`` raise TelegramError.
    """

    def __init__(self) -> None:
        self.calls: list[SentCall] = []
        self.failing: set[str] = set()
        self.profile_photo_file_id: Optional[str] = None
        self.topic_id = "77"
        self.started = False
        self.stopped = False
        self.webhooks: list[tuple[str, Optional[str]]] = []
        self._message_ids = itertools.count(1000)

    def _record(self, method: str, chat_id=None, payload=None, **kwargs) -> None:
        if method in self.failing:
            raise TelegramError(f"{method} failed")
        self.calls.append(SentCall(method, chat_id, payload, kwargs))

    def sent(self, method: Optional[str] = None, chat_id: Optional[str] = None) -> list[SentCall]:
        return [
            c
            for c in self.calls
            if (method is None or c.method == method)
            and (chat_id is None or c.chat_id == chat_id)
        ]

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    async def send_text(self, chat_id, text, reply_to_message_id=None, parse_mode=None):
        self._record(
            "send_text",
            chat_id,
            text,
            reply_to_message_id=reply_to_message_id,
            parse_mode=parse_mode,
        )
        return str(next(self._message_ids))

    async def _send_media(self, method, chat_id, file_id, caption, reply_to_message_id, parse_mode):
        self._record(
            method,
            chat_id,
            file_id,
            caption=caption,
            reply_to_message_id=reply_to_message_id,
            parse_mode=parse_mode,
        )
        return str(next(self._message_ids))

    async def send_photo(self, chat_id, file_id, caption=None, reply_to_message_id=None, parse_mode=None):
        return await self._send_media(
            "send_photo", chat_id, file_id, caption, reply_to_message_id, parse_mode
        )

    async def send_document(self, chat_id, file_id, caption=None, reply_to_message_id=None, parse_mode=None):
        return await self._send_media(
            "send_document", chat_id, file_id, caption, reply_to_message_id, parse_mode
        )

    async def send_video(self, chat_id, file_id, caption=None, reply_to_message_id=None, parse_mode=None):
        return await self._send_media(
            "send_video", chat_id, file_id, caption, reply_to_message_id, parse_mode
        )

    async def get_profile_photo_file_id(self, user_id):
        self._record("get_profile_photo_file_id", user_id)
        return self.profile_photo_file_id

    async def get_file_link(self, file_id):
        self._record("get_file_link", payload=file_id)
        return f"https://api.telegram.org/file/bot123:abc/photos/{file_id}.jpg"

    async def create_forum_topic(self, chat_id, name):
        self._record("create_forum_topic", chat_id, name)
        return self.topic_id

    async def get_me(self):
        self._record("get_me")
        return BotIdentity(id=123456, first_name="Support", username="support_bot")

    async def set_webhook(self, url, secret=None):
        self._record("set_webhook", payload=url)
        self.webhooks.append((url, secret))


@pytest.fixture
def gateway():
    return FakeGateway()
