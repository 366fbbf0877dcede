"""
Webhook routes for inbound Telegram updates.

Telegram POSTs raw updates here; we route them and return 200.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from supportbot.commands.webhooks.telegram_command import TelegramWebhookCommand
from supportbot.core.app_state import AppState
from supportbot.routers.utils.dependencies import get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/telegram")
async def telegram_webhook(
    request: Request,
    state: AppState = Depends(get_app_state),
) -> dict[str, str]:
    """
    Receive Telegram webhook updates.
    Validate X-Telegram-Bot-Api-Secret-Token if TELEGRAM_WEBHOOK_SECRET is set.
    """
    headers = dict(request.headers) if request.headers else {}
    try:
        body = await request.json()
    except ValueError as e:
        logger.warning("Telegram webhook invalid JSON: %s", e)
        raise HTTPException(status_code=400, detail="Invalid JSON body") from e
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Body must be a JSON object")
    return await TelegramWebhookCommand(state).execute(headers, body)
