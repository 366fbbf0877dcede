"""Chat platform gateways."""

from supportbot.adapters.base import MessagingGateway
from supportbot.adapters.telegram import TelegramGateway

__all__ = ["MessagingGateway", "TelegramGateway"]
