"""Shared fixtures for payout_bot tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from payout_bot.models.config import BotConfig, DiscordConfig, TwitterConfig
from payout_bot.notify.dispatcher import NotificationDispatcher
from payout_bot.runner import PayoutRunner
from payout_bot.storage.sqlite import SQLiteCursorStore

from tests.mocks import MockEventSource, MockNotifier, MockPriceSource, MockResolver

TEST_API_TOKEN = "test-api-token"
TEST_CRON_SECRET = "test-cron-secret"
TEST_WEBHOOK_URL = "https://discord.test/api/webhooks/1/abc"


# ── Report metadata ──────────────────────────────────────────────


def pytest_configure(config):
    """Add deployment info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Subgraph"] = BotConfig.subgraph_id
    meta["Page size"] = str(BotConfig.page_size)


def make_test_config(**overrides) -> BotConfig:
    """Build a BotConfig suitable for testing."""
    defaults = dict(
        api_token=TEST_API_TOKEN,
        cron_secret=TEST_CRON_SECRET,
        subgraph_url="https://graph.test/subgraphs/livepeer",
        page_size=20,
        http_timeout=5,
        db_path=":memory:",
        poll_interval=1,
        error_backoff=1,
        enrich_timeout=1,
        discord=DiscordConfig(webhook_url=TEST_WEBHOOK_URL),
        twitter=TwitterConfig(),
    )
    defaults.update(overrides)
    return BotConfig(**defaults)


@pytest.fixture
def test_config():
    """Default BotConfig for tests."""
    return make_test_config()


@pytest.fixture
async def store():
    """Initialized in-memory SQLiteCursorStore."""
    s = SQLiteCursorStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def mock_source():
    return MockEventSource()


@pytest.fixture
def mock_discord():
    return MockNotifier(name="discord")


@pytest.fixture
def mock_twitter():
    return MockNotifier(name="twitter")


@pytest.fixture
def mock_resolver():
    return MockResolver()


@pytest.fixture
def mock_prices():
    return MockPriceSource()


@pytest.fixture
async def runner(test_config, store, mock_source, mock_twitter, mock_discord,
                 mock_resolver, mock_prices):
    """Fully wired PayoutRunner with mocked components."""
    r = PayoutRunner(test_config)
    r.store = store
    r.source = mock_source
    r.resolver = mock_resolver
    r.prices = mock_prices
    r.dispatcher = NotificationDispatcher([mock_twitter, mock_discord])
    return r
