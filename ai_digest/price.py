"""
Spot gold price lookup.

Fetches the latest spot price from a JSON endpoint returning an array of
[timestamp, price] pairs. Any failure degrades to "no price available".
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

import aiohttp

from ai_digest.rss_parser import REQUEST_ERRORS, create_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoldPriceSnapshot:
    """
    Spot gold price at a point in time.

    Attributes
    ----------
    price_usd_per_ounce : Decimal
        Price in USD per troy ounce, always positive.
    timestamp : datetime
        Aware UTC time of the quote.
    """

    price_usd_per_ounce: Decimal
    timestamp: datetime


def _to_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        return None
    return Decimal(value)


def parse_gold_price(payload: str | bytes) -> GoldPriceSnapshot | None:
    """
    Read the first [timestamp, price] pair of a price payload.

    Parameters
    ----------
    payload : str | bytes
        JSON document from the price endpoint.

    Returns
    -------
    GoldPriceSnapshot | None
        The snapshot, or None if the payload is malformed or the price is
        not positive.
    """
    try:
        document = json.loads(payload, parse_float=Decimal)
    except (ValueError, UnicodeDecodeError):
        logger.warning("Gold price payload is not valid JSON")
        return None

    if not isinstance(document, list) or not document:
        return None

    first = document[0]
    if not isinstance(first, list) or len(first) < 2:
        return None

    seconds = _to_decimal(first[0])
    price = _to_decimal(first[1])
    if seconds is None or price is None or price <= 0:
        return None

    try:
        timestamp = datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    except (OverflowError, OSError, ValueError, InvalidOperation):
        return None

    return GoldPriceSnapshot(price_usd_per_ounce=price, timestamp=timestamp)


class GoldPriceFetcher:
    """Async client for the spot gold price endpoint."""

    def __init__(
        self,
        timeout: int = 20,
        user_agent: str = "AI-Digest/1.0",
        proxy_url: str | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.proxy_url = proxy_url
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            self._session = create_session(self.timeout, self.user_agent, self.proxy_url)
        return self._session

    async def fetch(self, url: str) -> GoldPriceSnapshot | None:
        """
        Fetch the current spot gold price.

        Parameters
        ----------
        url : str
            Price endpoint URL.

        Returns
        -------
        GoldPriceSnapshot | None
            The snapshot, or None if the request failed or the payload was
            unusable.
        """
        session = await self._get_session()

        try:
            async with session.get(url) as response:
                response.raise_for_status()
                payload = await response.read()
        except REQUEST_ERRORS as e:
            logger.warning("Failed to fetch gold price: %s", str(e) or type(e).__name__)
            return None

        snapshot = parse_gold_price(payload)
        if snapshot is None:
            logger.warning("Gold price payload from %s is unusable", url)
        else:
            logger.info("Fetched gold price: %s USD/oz", snapshot.price_usd_per_ounce)
        return snapshot

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "GoldPriceFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
