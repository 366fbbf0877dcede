"""Components shared by the webhook handler and the query API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from supportbot.adapters.base import MessagingGateway
from supportbot.adapters.telegram import TelegramGateway
from supportbot.config import Settings
from supportbot.core.routing import ConversationRouter
from supportbot.core.support_channel import SupportChannel
from supportbot.storage import RecordStore, build_store


@dataclass
class AppState:
    settings: Settings
    store: RecordStore
    gateway: MessagingGateway
    support_channel: SupportChannel
    router: ConversationRouter


def build_app_state(
    settings: Settings,
    store: Optional[RecordStore] = None,
    gateway: Optional[MessagingGateway] = None,
    support_channel: Optional[SupportChannel] = None,
) -> AppState:
    """
    Wire the application. Components not passed in are built from settings.

    Raises:
        MissingCredentialError: no gateway given and TELEGRAM_BOT_TOKEN unset.
    """
    gateway = gateway or TelegramGateway.from_settings(settings)
    store = store or build_store(settings)
    support_channel = support_channel or SupportChannel(settings.support_group_id)
    router = ConversationRouter(
        store=store,
        gateway=gateway,
        support_channel=support_channel,
        welcome_message=settings.welcome_message,
        support_issue_title=settings.support_issue_title,
    )
    return AppState(
        settings=settings,
        store=store,
        gateway=gateway,
        support_channel=support_channel,
        router=router,
    )
