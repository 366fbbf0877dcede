import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("STORAGE_BACKEND", "memory")

pytest_plugins = [
    "tests.fixtures.store_fixtures",
    "tests.fixtures.gateway_fixtures",
    "tests.fixtures.telegram_fixtures",
]
