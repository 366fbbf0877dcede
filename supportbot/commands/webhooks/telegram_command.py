"""
Command to handle Telegram webhook updates.

Validates the webhook secret, parses the update and hands new messages to
the conversation router. Edited messages and channel posts are accepted
and ignored.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException
from pydantic import ValidationError

from supportbot.adapters.telegram import to_inbound_message
from supportbot.core.app_state import AppState
from supportbot.core.results import RouteResult
from supportbot.schemas.telegram import TelegramWebhookUpdate


class TelegramWebhookCommand:
    """
    Command to handle Telegram webhook updates.
    Malformed updates are logged and acknowledged so Telegram does not redeliver them.
    """

    def __init__(self, state: AppState) -> None:
        self.state = state
        self.settings = state.settings
        self.logger = logging.getLogger(__name__)

    async def execute(
        self, headers: dict[str, str], body: dict[str, Any]
    ) -> dict[str, str]:
        """
        Execute the Telegram webhook: validate secret, parse body, route the message.

        Args:
            headers: Request headers (for X-Telegram-Bot-Api-Secret-Token).
            body: Raw JSON update as sent by Telegram.

        Returns:
            dict: {"status": "ok"} when the update was processed or ignored
                on purpose, {"status": "ignored"} when it could not be parsed.

        Raises:
            HTTPException: 403 on invalid secret.
        """
        if not self.state.gateway.verify_webhook(
            self.settings.telegram_webhook_secret, headers
        ):
            raise HTTPException(status_code=403, detail="Invalid webhook secret")
        try:
            update = TelegramWebhookUpdate.model_validate(body)
        except ValidationError as e:
            self.logger.warning(
                "Telegram webhook parse error: %s",
                e,
                extra={"update_id": body.get("update_id")},
            )
            return {"status": "ignored"}

        if update.message is None:
            self.logger.debug(
                "Ignoring update %s without a new message",
                update.update_id,
                extra={"update_id": update.update_id},
            )
            return {"status": "ok"}

        result = await self.handle_message(update)
        self.logger.info(
            "Telegram update %s routed: %s",
            update.update_id,
            result.action.value,
            extra={
                "update_id": update.update_id,
                "chat_id": update.message.chat.id,
                "conversation_id": (
                    result.message.conversation_id if result.message else None
                ),
            },
        )
        return {"status": "ok"}

    async def handle_message(self, update: TelegramWebhookUpdate) -> RouteResult:
        inbound = to_inbound_message(update.message)
        return await self.state.router.handle(inbound)
