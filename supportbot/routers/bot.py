"""Bot identity and support group settings."""

from fastapi import APIRouter, Depends, HTTPException
from telegram.error import TelegramError

from supportbot.adapters.base import MessagingGateway
from supportbot.core.support_channel import SupportChannel
from supportbot.infra.logging_config import get_logger
from supportbot.routers.utils.dependencies import get_gateway, get_support_channel
from supportbot.schemas.relay import BotIdentity, SupportGroupConfig, SupportGroupUpdate

logger = get_logger("bot")

router = APIRouter(
    prefix="/bot",
    tags=["bot"],
)


@router.get("/info", response_model=BotIdentity)
async def get_bot_info(
    gateway: MessagingGateway = Depends(get_gateway),
) -> BotIdentity:
    """Return the bot account as reported by Telegram."""
    try:
        return await gateway.get_me()
    except TelegramError as e:
        logger.warning("getMe failed: %s", e)
        raise HTTPException(status_code=502, detail="Telegram request failed") from e


@router.get("/support-group", response_model=SupportGroupConfig)
def get_support_group(
    support_channel: SupportChannel = Depends(get_support_channel),
) -> SupportGroupConfig:
    return SupportGroupConfig(group_id=support_channel.get())


@router.put("/support-group", response_model=SupportGroupConfig)
@router.post("/support-group", response_model=SupportGroupConfig)
def set_support_group(
    data: SupportGroupUpdate,
    support_channel: SupportChannel = Depends(get_support_channel),
) -> SupportGroupConfig:
    """Point the relay at a support group. Takes effect for the next message."""
    try:
        support_channel.set(data.group_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    logger.info("Support group set to %s", support_channel.get())
    return SupportGroupConfig(group_id=support_channel.get())
