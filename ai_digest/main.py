"""
Main entry point for AI Digest.

Runs one digest: fetch all feeds, select the major items, render them and
deliver the result to Telegram. Scheduling is left to cron or a similar
external trigger.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone
from itertools import chain
from urllib.parse import urlparse

import coloredlogs
import yaml
from pydantic import ValidationError

from ai_digest.config import AppConfig, load_config, load_config_from_env
from ai_digest.filters import select_items
from ai_digest.formatter import (
    combine_sections,
    format_digest,
    format_gold_price,
    resolve_timezone,
)
from ai_digest.notifier import Notifier
from ai_digest.price import GoldPriceFetcher, GoldPriceSnapshot
from ai_digest.rss_parser import FeedFetcher
from ai_digest.telegram import DeliveryError, TelegramNotifier

logger = logging.getLogger(__name__)


def redact_proxy_url(proxy_url: str) -> str:
    """
    Redact credentials from a proxy URL for safe logging.

    Parameters
    ----------
    proxy_url : str
        The proxy URL potentially containing credentials.

    Returns
    -------
    str
        The proxy URL with password redacted.
    """
    try:
        parsed = urlparse(proxy_url)
        if parsed.password:
            netloc = parsed.hostname or ""
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            if parsed.username:
                netloc = f"{parsed.username}:****@{netloc}"
            return f"{parsed.scheme}://{netloc}{parsed.path}"
        return proxy_url
    except ValueError:
        return "<proxy url>"


class DigestRunner:
    """
    Builds and delivers one digest.

    Coordinates fetching, filtering, formatting and delivery. Holds no
    state between runs.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the runner.

        Parameters
        ----------
        config : AppConfig
            Application configuration.
        """
        self.config = config

    async def run(self, now: datetime | None = None) -> bool:
        """
        Build the digest and send it.

        Parameters
        ----------
        now : datetime | None
            Aware reference time; defaults to the current UTC time.

        Returns
        -------
        bool
            True if a message was sent, False if the run was a no-op.

        Raises
        ------
        DeliveryError
            If a chunk could not be delivered even as plain text.
        """
        if not self.config.telegram.is_configured:
            logger.info("Missing Telegram credentials. Set TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID.")
            return False

        now = now or datetime.now(timezone.utc)
        settings = self.config.digest

        if settings.proxy:
            logger.info("Using proxy: %s", redact_proxy_url(settings.proxy))

        client_options = {
            "timeout": settings.request_timeout,
            "user_agent": settings.user_agent,
            "proxy_url": settings.proxy,
        }
        async with FeedFetcher(**client_options) as feeds, GoldPriceFetcher(**client_options) as prices:
            results, snapshot = await asyncio.gather(
                feeds.fetch_all(self.config.sources),
                self._fetch_gold_price(prices),
            )

        cutoff = now - timedelta(hours=settings.window_hours)
        items = select_items(chain.from_iterable(results), cutoff, settings.max_items)

        tz = resolve_timezone(settings.time_zone)
        now_local = now.astimezone(tz)
        summary = format_digest(items, now_local, tz)
        gold = format_gold_price(snapshot, now_local, tz)

        if not summary and not gold:
            logger.info("No major items or gold price data available.")
            return False

        message = combine_sections(summary, gold)

        notifier: Notifier = TelegramNotifier(
            self.config.telegram,
            proxy_url=settings.proxy,
            max_message_length=settings.max_message_length,
        )
        try:
            await notifier.send_message(message)
        finally:
            await notifier.close()

        logger.info("Telegram message sent.")
        return True

    async def _fetch_gold_price(self, prices: GoldPriceFetcher) -> GoldPriceSnapshot | None:
        if not self.config.gold_price.enabled:
            return None
        return await prices.fetch(self.config.gold_price.url)


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("telegram").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Daily AI news digest with Telegram delivery",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to a YAML configuration file (environment variables are used when omitted)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        config = load_config(args.config) if args.config else load_config_from_env()
    except (FileNotFoundError, ValueError, ValidationError, yaml.YAMLError) as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    runner = DigestRunner(config)

    try:
        asyncio.run(runner.run())
    except DeliveryError as e:
        logger.error("Digest delivery failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
