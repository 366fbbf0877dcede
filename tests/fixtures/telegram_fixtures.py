"""Builders for raw Telegram webhook payloads and normalized inbound messages."""

from typing import Any, Optional

import pytest

from supportbot.schemas.relay import InboundMessage, Sender

SUPPORT_GROUP_ID = "-1001234567890"


def telegram_message(
    *,
    message_id: int = 456,
    user_id: int = 111,
    chat_id: Optional[int] = None,
    first_name: str = "Alice",
    text: Optional[str] = "help",
    reply_to_message_id: Optional[int] = None,
    **extra: Any,
) -> dict[str, Any]:
    message: dict[str, Any] = {
        "message_id": message_id,
        "from": {
            "id": user_id,
            "is_bot": False,
            "first_name": first_name,
            "language_code": "en",
        },
        "chat": {
            "id": chat_id if chat_id is not None else user_id,
            "type": "private" if chat_id is None else "supergroup",
        },
        "date": 1609459200,
    }
    if text is not None:
        message["text"] = text
    if reply_to_message_id is not None:
        message["reply_to_message"] = {
            "message_id": reply_to_message_id,
            "chat": message["chat"],
            "date": 1609459100,
        }
    message.update(extra)
    return message


def telegram_update(update_id: int = 123, **kwargs: Any) -> dict[str, Any]:
    return {"update_id": update_id, "message": telegram_message(**kwargs)}


def user_message(
    user_id: str = "111",
    first_name: str = "Alice",
    message_id: str = "1",
    **kwargs: Any,
) -> InboundMessage:
    kwargs.setdefault("text", "help")
    return InboundMessage(
        chat_id=user_id,
        message_id=message_id,
        sender=Sender(id=user_id, first_name=first_name, language_code="en"),
        **kwargs,
    )


def support_reply(
    thread_id: Optional[str],
    text: Optional[str] = "On it",
    agent_id: str = "999",
    message_id: str = "5000",
    **kwargs: Any,
) -> InboundMessage:
    return InboundMessage(
        chat_id=SUPPORT_GROUP_ID,
        message_id=message_id,
        sender=Sender(id=agent_id, first_name="Agent"),
        text=text,
        reply_to_message_id=thread_id,
        **kwargs,
    )


@pytest.fixture
def support_group_id():
    return SUPPORT_GROUP_ID
