"""
Telegram gateway.

Uses python-telegram-bot's ``Bot`` for Bot API calls and converts webhook
update payloads into the relay's normalized ``InboundMessage``.
"""

from __future__ import annotations

from typing import Optional

from telegram import Bot, ReplyParameters

from supportbot.adapters.base import MessagingGateway
from supportbot.config import Settings
from supportbot.exceptions import MissingCredentialError
from supportbot.schemas.media import MEDIA_PRECEDENCE, MediaKind, MediaRef
from supportbot.schemas.relay import BotIdentity, InboundMessage, Sender
from supportbot.schemas.telegram import TelegramMessage, TelegramUser


def extract_media(msg: TelegramMessage) -> Optional[MediaRef]:
    """Pick at most one attachment, in MEDIA_PRECEDENCE order. Photos use the largest size."""
    for kind in MEDIA_PRECEDENCE:
        if kind is MediaKind.PHOTO:
            if msg.photo:
                return MediaRef(kind=kind, file_id=msg.photo[-1].file_id)
            continue
        attachment = getattr(msg, kind.value)
        if attachment is not None:
            return MediaRef(kind=kind, file_id=attachment.file_id)
    return None


def to_sender(user: TelegramUser) -> Sender:
    return Sender(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        username=user.username,
        language_code=user.language_code,
        is_premium=bool(user.is_premium),
    )


def to_inbound_message(msg: TelegramMessage) -> InboundMessage:
    """Normalize a Telegram message for the conversation router."""
    return InboundMessage(
        chat_id=str(msg.chat.id),
        message_id=str(msg.message_id),
        sender=to_sender(msg.from_) if msg.from_ else None,
        text=msg.text,
        caption=msg.caption,
        media=extract_media(msg),
        reply_to_message_id=(
            str(msg.reply_to_message.message_id) if msg.reply_to_message else None
        ),
    )


def _reply_to(message_id: Optional[str]) -> Optional[ReplyParameters]:
    if not message_id:
        return None
    return ReplyParameters(message_id=int(message_id))


class TelegramGateway(MessagingGateway):
    """Telegram Bot API gateway. chat_id / user_id are Telegram ids as strings."""

    TELEGRAM_SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

    def __init__(self, bot_token: str, webhook_secret: Optional[str] = None) -> None:
        self._bot_token = bot_token
        self._webhook_secret = webhook_secret
        self._bot: Optional[Bot] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelegramGateway":
        if not settings.telegram_bot_token:
            raise MissingCredentialError("TELEGRAM_BOT_TOKEN environment variable is required")
        return cls(
            bot_token=settings.telegram_bot_token,
            webhook_secret=settings.telegram_webhook_secret,
        )

    def _get_bot(self) -> Bot:
        if self._bot is None:
            self._bot = Bot(token=self._bot_token)
        return self._bot

    async def start(self) -> None:
        await self._get_bot().initialize()

    async def stop(self) -> None:
        if self._bot is not None:
            await self._bot.shutdown()

    def verify_webhook(
        self, secret: Optional[str], request_headers: Optional[dict[str, str]] = None
    ) -> bool:
        """Validate X-Telegram-Bot-Api-Secret-Token if webhook secret is configured."""
        expected = secret or self._webhook_secret
        if not expected:
            return True
        request_headers = request_headers or {}
        header_lower = self.TELEGRAM_SECRET_HEADER.lower()
        actual = None
        for key, value in request_headers.items():
            if key.lower() == header_lower:
                actual = value
                break
        return actual == expected

    async def send_text(
        self,
        chat_id: str,
        text: str,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> str:
        sent = await self._get_bot().send_message(
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
            reply_parameters=_reply_to(reply_to_message_id),
        )
        return str(sent.message_id)

    async def send_photo(
        self,
        chat_id: str,
        file_id: str,
        caption: Optional[str] = None,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> str:
        sent = await self._get_bot().send_photo(
            chat_id=chat_id,
            photo=file_id,
            caption=caption,
            parse_mode=parse_mode,
            reply_parameters=_reply_to(reply_to_message_id),
        )
        return str(sent.message_id)

    async def send_document(
        self,
        chat_id: str,
        file_id: str,
        caption: Optional[str] = None,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> str:
        sent = await self._get_bot().send_document(
            chat_id=chat_id,
            document=file_id,
            caption=caption,
            parse_mode=parse_mode,
            reply_parameters=_reply_to(reply_to_message_id),
        )
        return str(sent.message_id)

    async def send_video(
        self,
        chat_id: str,
        file_id: str,
        caption: Optional[str] = None,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> str:
        sent = await self._get_bot().send_video(
            chat_id=chat_id,
            video=file_id,
            caption=caption,
            parse_mode=parse_mode,
            reply_parameters=_reply_to(reply_to_message_id),
        )
        return str(sent.message_id)

    async def get_profile_photo_file_id(self, user_id: str) -> Optional[str]:
        photos = await self._get_bot().get_user_profile_photos(
            user_id=int(user_id), offset=0, limit=1
        )
        if not photos.photos:
            return None
        return photos.photos[0][0].file_id

    async def get_file_link(self, file_id: str) -> str:
        # python-telegram-bot expands file_path into the full download URL
        tg_file = await self._get_bot().get_file(file_id)
        return str(tg_file.file_path)

    async def create_forum_topic(self, chat_id: str, name: str) -> str:
        topic = await self._get_bot().create_forum_topic(chat_id=chat_id, name=name)
        return str(topic.message_thread_id)

    async def get_me(self) -> BotIdentity:
        me = await self._get_bot().get_me()
        return BotIdentity(
            id=me.id,
            is_bot=me.is_bot,
            first_name=me.first_name,
            username=me.username,
            can_join_groups=me.can_join_groups,
            can_read_all_group_messages=me.can_read_all_group_messages,
        )

    async def set_webhook(self, url: str, secret: Optional[str] = None) -> None:
        await self._get_bot().set_webhook(url=url, secret_token=secret)
