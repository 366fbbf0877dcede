import pytest
from fastapi.testclient import TestClient

from supportbot.config import Settings
from supportbot.core.support_channel import SupportChannel
from supportbot.main import create_app
from tests.fixtures.telegram_fixtures import SUPPORT_GROUP_ID


@pytest.fixture
def settings():
    return Settings(
        ENV="test",
        telegram_bot_token=None,
        telegram_webhook_secret="secret",
        telegram_webhook_url=None,
    )


@pytest.fixture
def client(settings, memory_store, gateway):
    """App wired to an in-memory store and a recording gateway."""
    app = create_app(
        settings,
        store=memory_store,
        gateway=gateway,
        support_channel=SupportChannel(SUPPORT_GROUP_ID),
    )
    with TestClient(app) as c:
        yield c


@pytest.fixture
def webhook_headers():
    return {"X-Telegram-Bot-Api-Secret-Token": "secret"}
