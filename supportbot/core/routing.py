"""
Conversation routing between end users and the support group.

A message from an end user is stored on their conversation and relayed to
the support group as a reply to the conversation's thread message. A reply
to that thread message inside the support group is stored and relayed back
to the end user. The first message of a conversation opens the thread: an
introduction is posted to the support group, a forum topic is created and a
support issue is opened.
"""

from __future__ import annotations

import asyncio
import html
import logging
from typing import Optional

from pydantic import ValidationError

from supportbot.adapters.base import MessagingGateway
from supportbot.config import DEFAULT_SUPPORT_ISSUE_TITLE, DEFAULT_WELCOME_MESSAGE
from supportbot.core.results import RouteAction, RouteResult, StepResult
from supportbot.core.support_channel import SupportChannel
from supportbot.schemas.conversation import (
    ConversationCreate,
    ConversationRead,
    ConversationUpdate,
)
from supportbot.schemas.media import MediaKind, MediaRef
from supportbot.schemas.message import MessageCreate, SenderType
from supportbot.schemas.relay import InboundMessage, Sender
from supportbot.schemas.support_issue import SupportIssueCreate
from supportbot.schemas.user import UserCreate, UserRead, UserUpdate
from supportbot.storage.base import RecordStore

logger = logging.getLogger(__name__)

HTML = "HTML"
FORUM_TOPIC_NAME_MAX = 128

STEP_PROFILE_PHOTO = "profile_photo"
STEP_CREATE_THREAD = "create_thread"
STEP_FORWARD_MEDIA = "forward_media"


def _bold_prefix(name: str, text: Optional[str]) -> str:
    return f"<b>{html.escape(name)}:</b> {html.escape(text or '')}"


def build_introduction(sender: Sender, user: UserRead) -> str:
    """HTML summary of a user posted to the support group when their thread opens."""
    full_name = html.escape(sender.display_name)
    username = f"@{html.escape(sender.username)}" if sender.username else "Not set"
    language = html.escape(sender.language_code) if sender.language_code else "Unknown"
    return (
        "📱 <b>New Support Request</b>\n\n"
        f"<b>User:</b> {full_name}\n"
        f"<b>Username:</b> {username}\n"
        f"<b>User ID:</b> {html.escape(sender.id)}\n"
        f"<b>Language:</b> {language}\n"
        f"<b>Premium:</b> {'Yes' if sender.is_premium else 'No'}\n"
        f"<b>Date Joined:</b> {user.joined_at:%Y-%m-%d %H:%M UTC}"
    )


class ConversationRouter:
    """Routes inbound messages between end users and the support group."""

    def __init__(
        self,
        store: RecordStore,
        gateway: MessagingGateway,
        support_channel: SupportChannel,
        welcome_message: str = DEFAULT_WELCOME_MESSAGE,
        support_issue_title: str = DEFAULT_SUPPORT_ISSUE_TITLE,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._support_channel = support_channel
        self._welcome_message = welcome_message
        self._support_issue_title = support_issue_title
        self._lock = asyncio.Lock()

    async def handle(self, msg: InboundMessage) -> RouteResult:
        """
        Route one inbound message. Never raises: invalid record data and
        unexpected failures drop this message only. Writes made before a
        failure stay committed.
        """
        async with self._lock:
            try:
                if self._support_channel.is_support_chat(msg.chat_id):
                    return await self._handle_support_message(msg)
                return await self._handle_user_message(msg)
            except ValidationError as e:
                logger.warning(
                    "Dropping message %s from chat %s: invalid record data: %s",
                    msg.message_id,
                    msg.chat_id,
                    e,
                    extra={"chat_id": msg.chat_id},
                )
                return RouteResult.dropped(f"validation error: {e}")
            except Exception as e:
                logger.exception(
                    "Dropping message %s from chat %s: %s",
                    msg.message_id,
                    msg.chat_id,
                    e,
                    extra={"chat_id": msg.chat_id},
                )
                return RouteResult.dropped(f"{type(e).__name__}: {e}")

    # End user -> support group

    async def _handle_user_message(self, msg: InboundMessage) -> RouteResult:
        sender = msg.sender
        if sender is None:
            return RouteResult.ignored("message has no sender")

        user = self._store.get_user_by_telegram_id(sender.id)
        if user is None:
            user = self._store.create_user(
                UserCreate(
                    telegram_id=sender.id,
                    username=sender.username,
                    first_name=sender.first_name,
                    last_name=sender.last_name,
                    language_code=sender.language_code,
                    is_premium=sender.is_premium,
                )
            )
            logger.info("New user %s (%s)", user.telegram_id, user.display_name)
            await self._gateway.send_text(msg.chat_id, self._welcome_message)

        conversation = self._store.get_conversation_by_telegram_user_id(sender.id)
        if conversation is None:
            conversation = self._store.create_conversation(
                ConversationCreate(telegram_user_id=sender.id)
            )

        stored = self._store.create_message(
            self._message_record(conversation.id, msg, sender, SenderType.USER)
        )
        result = RouteResult(action=RouteAction.USER_MESSAGE, message=stored)

        support_chat_id = self._support_channel.get()
        if support_chat_id is None:
            logger.debug("No support group configured; message %s not relayed", stored.id)
            return result

        if conversation.thread_id is None:
            conversation = await self._open_thread(
                support_chat_id, conversation, user, sender, result
            )
        if conversation.thread_id is None:
            return result

        if msg.text:
            await self._gateway.send_text(
                support_chat_id,
                _bold_prefix(sender.first_name, msg.text),
                reply_to_message_id=conversation.thread_id,
                parse_mode=HTML,
            )
        if msg.media is not None:
            result.steps.append(
                await self._forward_media(
                    support_chat_id,
                    msg.media,
                    caption=_bold_prefix(sender.first_name, msg.caption),
                    reply_to_message_id=conversation.thread_id,
                    parse_mode=HTML,
                )
            )
        return result

    async def _open_thread(
        self,
        support_chat_id: str,
        conversation: ConversationRead,
        user: UserRead,
        sender: Sender,
        result: RouteResult,
    ) -> ConversationRead:
        """Introduce the user to the support group and open their thread and support issue."""
        photo_step = await self._fetch_profile_photo(user)
        result.steps.append(photo_step)

        intro_message_id = await self._gateway.send_text(
            support_chat_id, build_introduction(sender, user), parse_mode=HTML
        )

        thread_step = await self._create_thread(support_chat_id, sender)
        result.steps.append(thread_step)
        if not thread_step.ok:
            return conversation

        # Support agents reply to the introduction; its id maps replies back here
        updated = self._store.update_conversation(
            conversation.id, ConversationUpdate(thread_id=intro_message_id)
        )
        if updated is None:
            return conversation
        if self._store.get_support_issue_by_conversation_id(updated.id) is None:
            issue = self._store.create_support_issue(
                SupportIssueCreate(
                    user_id=sender.id,
                    conversation_id=updated.id,
                    title=self._support_issue_title,
                )
            )
            logger.info(
                "Opened support issue %s for conversation %s",
                issue.id,
                updated.id,
                extra={"chat_id": sender.id, "conversation_id": updated.id},
            )
        return updated

    async def _fetch_profile_photo(self, user: UserRead) -> StepResult:
        try:
            file_id = await self._gateway.get_profile_photo_file_id(user.telegram_id)
            if file_id is None:
                return StepResult.success(STEP_PROFILE_PHOTO)
            link = await self._gateway.get_file_link(file_id)
            self._store.update_user(user.id, UserUpdate(profile_photo=link))
            return StepResult.success(STEP_PROFILE_PHOTO, link)
        except Exception as e:
            logger.warning(
                "Could not fetch profile photo for user %s: %s", user.telegram_id, e
            )
            return StepResult.failure(STEP_PROFILE_PHOTO, e)

    async def _create_thread(self, support_chat_id: str, sender: Sender) -> StepResult:
        try:
            topic_id = await self._gateway.create_forum_topic(
                support_chat_id, sender.first_name[:FORUM_TOPIC_NAME_MAX]
            )
            return StepResult.success(STEP_CREATE_THREAD, topic_id)
        except Exception as e:
            logger.warning(
                "Could not create forum topic for user %s; will retry on next message: %s",
                sender.id,
                e,
            )
            return StepResult.failure(STEP_CREATE_THREAD, e)

    # Support group -> end user

    async def _handle_support_message(self, msg: InboundMessage) -> RouteResult:
        if msg.sender is None or msg.reply_to_message_id is None:
            return RouteResult.ignored("not a reply from a support agent")

        conversation = self._store.get_conversation_by_thread_id(msg.reply_to_message_id)
        if conversation is None:
            return RouteResult.ignored("reply does not belong to a tracked thread")

        stored = self._store.create_message(
            self._message_record(conversation.id, msg, msg.sender, SenderType.ADMIN)
        )
        result = RouteResult(action=RouteAction.SUPPORT_REPLY, message=stored)

        user_chat_id = conversation.telegram_user_id
        if msg.text:
            await self._gateway.send_text(user_chat_id, msg.text)
        if msg.media is not None:
            result.steps.append(
                await self._forward_media(user_chat_id, msg.media, caption=msg.caption)
            )
        return result

    # Helpers

    @staticmethod
    def _message_record(
        conversation_id: int,
        msg: InboundMessage,
        sender: Sender,
        sender_type: SenderType,
    ) -> MessageCreate:
        return MessageCreate(
            conversation_id=conversation_id,
            telegram_message_id=msg.message_id,
            sender_id=sender.id,
            sender_type=sender_type,
            sender_name=sender.display_name,
            content=msg.content,
            media_type=msg.media.kind if msg.media else None,
            media_url=msg.media.file_id if msg.media else None,
        )

    async def _forward_media(
        self,
        chat_id: str,
        media: MediaRef,
        caption: Optional[str] = None,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> StepResult:
        if not media.forwardable:
            logger.info("%s media is stored but not relayed", media.kind.value)
            return StepResult.skip(
                STEP_FORWARD_MEDIA, f"{media.kind.value} is not forwardable"
            )
        senders = {
            MediaKind.PHOTO: self._gateway.send_photo,
            MediaKind.DOCUMENT: self._gateway.send_document,
            MediaKind.VIDEO: self._gateway.send_video,
        }
        try:
            sent_id = await senders[media.kind](
                chat_id,
                media.file_id,
                caption=caption,
                reply_to_message_id=reply_to_message_id,
                parse_mode=parse_mode,
            )
            return StepResult.success(STEP_FORWARD_MEDIA, sent_id)
        except Exception as e:
            logger.warning("Could not forward %s to chat %s: %s", media.kind.value, chat_id, e)
            return StepResult.failure(STEP_FORWARD_MEDIA, e)
