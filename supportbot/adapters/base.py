"""
Messaging gateway interface.

The conversation router talks to the chat platform only through this
contract, so tests can substitute a recording fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from supportbot.schemas.relay import BotIdentity


class MessagingGateway(ABC):
    """Contract for chat platform gateways. Platform errors propagate to the caller."""

    async def start(self) -> None:
        """Open connections. Called once at application startup."""
        return None

    async def stop(self) -> None:
        """Release connections. Called once at application shutdown."""
        return None

    @abstractmethod
    async def send_text(
        self,
        chat_id: str,
        text: str,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> str:
        """Send a text message. Return the platform message id."""
        ...

    @abstractmethod
    async def send_photo(
        self,
        chat_id: str,
        file_id: str,
        caption: Optional[str] = None,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> str: ...

    @abstractmethod
    async def send_document(
        self,
        chat_id: str,
        file_id: str,
        caption: Optional[str] = None,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> str: ...

    @abstractmethod
    async def send_video(
        self,
        chat_id: str,
        file_id: str,
        caption: Optional[str] = None,
        reply_to_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
    ) -> str: ...

    @abstractmethod
    async def get_profile_photo_file_id(self, user_id: str) -> Optional[str]:
        """File id of the user's current profile photo, or None if they have none."""
        ...

    @abstractmethod
    async def get_file_link(self, file_id: str) -> str: ...

    @abstractmethod
    async def create_forum_topic(self, chat_id: str, name: str) -> str:
        """Create a forum topic in a group. Return its thread id."""
        ...

    @abstractmethod
    async def get_me(self) -> BotIdentity: ...

    async def set_webhook(self, url: str, secret: Optional[str] = None) -> None:
        """Register the webhook URL with the platform. Override if supported."""
        return None

    def verify_webhook(
        self, secret: Optional[str], request_headers: Optional[dict[str, str]] = None
    ) -> bool:
        """
        Verify webhook request (e.g. secret token). Override if platform supports it.
        Return True if valid or verification not required; False to reject.
        """
        return True
