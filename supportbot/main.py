"""FastAPI application for the support relay."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi_pagination import add_pagination
from telegram.error import TelegramError

from supportbot import __version__
from supportbot.adapters.base import MessagingGateway
from supportbot.config import Settings, get_settings
from supportbot.core.app_state import build_app_state
from supportbot.core.support_channel import SupportChannel
from supportbot.infra.logging_config import LoggingConfig, get_logger
from supportbot.routers import (
    bot,
    conversations,
    support_issues,
    users,
    webhooks,
)
from supportbot.storage.base import RecordStore

logger = get_logger()


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[RecordStore] = None,
    gateway: Optional[MessagingGateway] = None,
    support_channel: Optional[SupportChannel] = None,
) -> FastAPI:
    """
    Build the application. Components left out are built from settings when
    the app starts; a missing TELEGRAM_BOT_TOKEN then aborts startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        LoggingConfig(settings)
        state = build_app_state(
            settings,
            store=store,
            gateway=gateway,
            support_channel=support_channel,
        )
        await state.gateway.start()
        if settings.telegram_webhook_url:
            try:
                await state.gateway.set_webhook(
                    settings.telegram_webhook_url, settings.telegram_webhook_secret
                )
                logger.info("Webhook registered at %s", settings.telegram_webhook_url)
            except TelegramError as e:
                logger.warning("Could not register webhook: %s", e)
        app.state.supportbot = state
        logger.info(
            "%s started (storage=%s, support group=%s)",
            settings.app_name,
            settings.storage_backend,
            state.support_channel.get() or "unset",
        )
        try:
            yield
        finally:
            await state.gateway.stop()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

    app.include_router(webhooks.router)
    app.include_router(bot.router)
    app.include_router(conversations.router)
    app.include_router(users.router)
    app.include_router(support_issues.router)

    @app.get("/health", tags=["system"])
    def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    add_pagination(app)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "supportbot.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
    )


if __name__ == "__main__":
    run()
