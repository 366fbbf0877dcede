"""Tests for TelegramGateway and Telegram payload normalization."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from supportbot.adapters.telegram import TelegramGateway, extract_media, to_inbound_message
from supportbot.config import Settings
from supportbot.exceptions import MissingCredentialError
from supportbot.schemas.media import MediaKind
from supportbot.schemas.telegram import TelegramMessage, TelegramWebhookUpdate
from tests.fixtures.telegram_fixtures import telegram_message, telegram_update

# Token format: digits:rest (e.g. 123456:ABC). No real API calls are made.
FAKE_TOKEN = "123456:AAHdqTcvCH1vGWJxfSeofSAs0K5P"


@pytest.fixture
def telegram_gateway():
    return TelegramGateway(bot_token=FAKE_TOKEN, webhook_secret=None)


def _sent(message_id: int):
    msg = MagicMock()
    msg.message_id = message_id
    return msg


def test_from_settings_requires_token():
    with pytest.raises(MissingCredentialError, match="TELEGRAM_BOT_TOKEN"):
        TelegramGateway.from_settings(Settings(ENV="test", telegram_bot_token=None))


def test_verify_webhook_no_secret(telegram_gateway):
    assert telegram_gateway.verify_webhook(None, {}) is True
    assert (
        telegram_gateway.verify_webhook(None, {"X-Telegram-Bot-Api-Secret-Token": "x"})
        is True
    )


def test_verify_webhook_with_secret():
    gateway = TelegramGateway(bot_token=FAKE_TOKEN, webhook_secret="secret")
    assert gateway.verify_webhook("secret", {"X-Telegram-Bot-Api-Secret-Token": "secret"})
    assert not gateway.verify_webhook("secret", {"X-Telegram-Bot-Api-Secret-Token": "wrong"})
    assert not gateway.verify_webhook(None, {})


def test_verify_webhook_case_insensitive_header():
    """Headers are case-insensitive; Starlette/FastAPI lowercases them."""
    gateway = TelegramGateway(bot_token=FAKE_TOKEN, webhook_secret="my-secret")
    assert gateway.verify_webhook("my-secret", {"x-telegram-bot-api-secret-token": "my-secret"})
    assert gateway.verify_webhook("my-secret", {"X-TELEGRAM-BOT-API-SECRET-TOKEN": "my-secret"})


def test_to_inbound_message():
    update = TelegramWebhookUpdate.model_validate(telegram_update(text="hello"))
    inbound = to_inbound_message(update.message)
    assert inbound.chat_id == "111"
    assert inbound.message_id == "456"
    assert inbound.sender.id == "111"
    assert inbound.sender.first_name == "Alice"
    assert inbound.text == "hello"
    assert inbound.media is None
    assert inbound.reply_to_message_id is None


def test_to_inbound_message_reply():
    msg = TelegramMessage.model_validate(
        telegram_message(chat_id=-100, reply_to_message_id=1001, text="On it")
    )
    inbound = to_inbound_message(msg)
    assert inbound.chat_id == "-100"
    assert inbound.reply_to_message_id == "1001"


def test_extract_media_prefers_largest_photo():
    msg = TelegramMessage.model_validate(
        telegram_message(
            text=None,
            caption="screen",
            photo=[
                {"file_id": "small", "file_unique_id": "s", "width": 90, "height": 90},
                {"file_id": "large", "file_unique_id": "l", "width": 800, "height": 800},
            ],
        )
    )
    media = extract_media(msg)
    assert media.kind == MediaKind.PHOTO
    assert media.file_id == "large"


def test_extract_media_precedence():
    msg = TelegramMessage.model_validate(
        telegram_message(
            text=None,
            document={"file_id": "doc", "file_unique_id": "d"},
            video={"file_id": "vid", "file_unique_id": "v"},
            voice={"file_id": "ogg", "file_unique_id": "o"},
        )
    )
    media = extract_media(msg)
    assert media.kind == MediaKind.DOCUMENT
    assert media.file_id == "doc"


def test_extract_media_voice():
    msg = TelegramMessage.model_validate(
        telegram_message(text=None, voice={"file_id": "ogg", "file_unique_id": "o"})
    )
    assert extract_media(msg).kind == MediaKind.VOICE
    assert not extract_media(msg).forwardable


@pytest.mark.asyncio
async def test_send_text_with_reply(telegram_gateway):
    mock_bot = MagicMock()
    mock_bot.send_message = AsyncMock(return_value=_sent(42))

    with patch.object(telegram_gateway, "_get_bot", return_value=mock_bot):
        sent_id = await telegram_gateway.send_text(
            "-100", "<b>Alice:</b> hi", reply_to_message_id="1001", parse_mode="HTML"
        )

    assert sent_id == "42"
    kwargs = mock_bot.send_message.await_args.kwargs
    assert kwargs["chat_id"] == "-100"
    assert kwargs["parse_mode"] == "HTML"
    assert kwargs["reply_parameters"].message_id == 1001


@pytest.mark.asyncio
async def test_send_text_without_reply(telegram_gateway):
    mock_bot = MagicMock()
    mock_bot.send_message = AsyncMock(return_value=_sent(7))

    with patch.object(telegram_gateway, "_get_bot", return_value=mock_bot):
        await telegram_gateway.send_text("111", "hello")

    assert mock_bot.send_message.await_args.kwargs["reply_parameters"] is None


@pytest.mark.asyncio
async def test_send_photo(telegram_gateway):
    mock_bot = MagicMock()
    mock_bot.send_photo = AsyncMock(return_value=_sent(43))

    with patch.object(telegram_gateway, "_get_bot", return_value=mock_bot):
        sent_id = await telegram_gateway.send_photo("111", "file-1", caption="look")

    assert sent_id == "43"
    kwargs = mock_bot.send_photo.await_args.kwargs
    assert kwargs["photo"] == "file-1"
    assert kwargs["caption"] == "look"


@pytest.mark.asyncio
async def test_get_profile_photo_file_id(telegram_gateway):
    photo = MagicMock()
    photo.file_id = "avatar"
    mock_bot = MagicMock()
    mock_bot.get_user_profile_photos = AsyncMock(return_value=MagicMock(photos=[[photo]]))

    with patch.object(telegram_gateway, "_get_bot", return_value=mock_bot):
        assert await telegram_gateway.get_profile_photo_file_id("111") == "avatar"

    mock_bot.get_user_profile_photos.assert_awaited_once_with(user_id=111, offset=0, limit=1)


@pytest.mark.asyncio
async def test_get_profile_photo_none(telegram_gateway):
    mock_bot = MagicMock()
    mock_bot.get_user_profile_photos = AsyncMock(return_value=MagicMock(photos=[]))

    with patch.object(telegram_gateway, "_get_bot", return_value=mock_bot):
        assert await telegram_gateway.get_profile_photo_file_id("111") is None


@pytest.mark.asyncio
async def test_create_forum_topic(telegram_gateway):
    mock_bot = MagicMock()
    mock_bot.create_forum_topic = AsyncMock(return_value=MagicMock(message_thread_id=9))

    with patch.object(telegram_gateway, "_get_bot", return_value=mock_bot):
        assert await telegram_gateway.create_forum_topic("-100", "Alice") == "9"

    mock_bot.create_forum_topic.assert_awaited_once_with(chat_id="-100", name="Alice")


@pytest.mark.asyncio
async def test_get_me(telegram_gateway):
    me = MagicMock(
        id=123456,
        is_bot=True,
        first_name="Support",
        username="support_bot",
        can_join_groups=True,
        can_read_all_group_messages=False,
    )
    mock_bot = MagicMock()
    mock_bot.get_me = AsyncMock(return_value=me)

    with patch.object(telegram_gateway, "_get_bot", return_value=mock_bot):
        identity = await telegram_gateway.get_me()

    assert identity.id == 123456
    assert identity.username == "support_bot"
