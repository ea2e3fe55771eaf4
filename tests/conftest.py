"""
Shared fixtures for AI Digest tests.

Provides common test fixtures for use across all test modules.
"""

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from ai_digest.config import AppConfig, DigestConfig, FeedSource, GoldPriceConfig, TelegramConfig
from ai_digest.filters import FeedItem


# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Reference time used across tests
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample config file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def sample_rss_content(fixtures_dir: Path) -> str:
    """Return contents of sample RSS feed."""
    return (fixtures_dir / "sample_rss.xml").read_text(encoding="utf-8")


@pytest.fixture
def sample_atom_content(fixtures_dir: Path) -> str:
    """Return contents of sample Atom feed."""
    return (fixtures_dir / "sample_atom.xml").read_text(encoding="utf-8")


@pytest.fixture
def now() -> datetime:
    """Return the fixed reference time."""
    return NOW


@pytest.fixture
def sample_feed_item() -> FeedItem:
    """
    Create a sample feed item for testing.

    Returns
    -------
    FeedItem
        A fully populated, keyword-matching item.
    """
    return FeedItem(
        title="OpenAI launches GPT-5",
        link="https://example.com/gpt-5",
        published=datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc),
        summary="The new model is available today.",
        source="r/OpenAI",
    )


@pytest.fixture
def minimal_telegram_config() -> TelegramConfig:
    """Create a minimal valid Telegram configuration."""
    return TelegramConfig(
        bot_token="1234567890:ABCdefGHIjklMNOpqrsTUVwxyz",
        chat_id="-1001234567890",
    )


@pytest.fixture
def test_sources() -> tuple[FeedSource, ...]:
    """Return one RSS and one Atom test source."""
    return (
        FeedSource("Test RSS", "https://example.com/rss.xml"),
        FeedSource("Test Atom", "https://example.com/atom.xml"),
    )


@pytest.fixture
def app_config(
    minimal_telegram_config: TelegramConfig, test_sources: tuple[FeedSource, ...]
) -> AppConfig:
    """
    Create an app configuration pointing at test URLs.

    Returns
    -------
    AppConfig
        Configuration rendering dates in UTC with the gold price enabled.
    """
    return AppConfig(
        telegram=minimal_telegram_config,
        digest=DigestConfig(time_zone="UTC"),
        gold_price=GoldPriceConfig(url="https://example.com/gold"),
        sources=test_sources,
    )


@pytest.fixture
def mock_telegram_bot() -> MagicMock:
    """
    Create a mock Telegram bot.

    Returns
    -------
    MagicMock
        A mock Bot instance with common methods mocked.
    """
    bot = MagicMock()
    bot.send_message = AsyncMock()
    bot.shutdown = AsyncMock()
    return bot
