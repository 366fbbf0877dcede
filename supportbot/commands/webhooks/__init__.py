"""Webhook command handlers."""

from supportbot.commands.webhooks.telegram_command import TelegramWebhookCommand

__all__ = ["TelegramWebhookCommand"]
