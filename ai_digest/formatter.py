"""
Digest rendering for Telegram MarkdownV2.

Titles, source names and dates are escaped; links are inserted verbatim.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ai_digest.filters import FeedItem
from ai_digest.price import GoldPriceSnapshot

logger = logging.getLogger(__name__)

MARKDOWN_V2_SPECIAL_CHARS = frozenset("_*[]()~`>#+-=|{}.!")

DATE_FORMAT = "%Y-%m-%d %H:%M"

# Prices are shown to the cent, halves rounded up
CENT = Decimal("0.01")

DIGEST_TITLE = "AI 大事速览"
UNKNOWN_DATE = "时间未知"
GOLD_TITLE = "金价快报"
GOLD_PRICE_LABEL = "现货黄金"
GOLD_TIME_LABEL = "时间"
GOLD_SOURCE_LINE = "来源: metals.live"


def escape_markdown_v2(text: str | None) -> str:
    """
    Escape Telegram MarkdownV2 special characters.

    Parameters
    ----------
    text : str | None
        Text to escape.

    Returns
    -------
    str
        Text with every special character prefixed by a backslash.
    """
    if not text:
        return ""
    return "".join(f"\\{c}" if c in MARKDOWN_V2_SPECIAL_CHARS else c for c in text)


def resolve_timezone(name: str) -> tzinfo:
    """
    Resolve an IANA time zone name.

    Falls back to the local system zone if the name is unknown or invalid.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("Time zone '%s' not found. Falling back to local time.", name)
        return datetime.now().astimezone().tzinfo


def _local_date(value: datetime, tz: tzinfo) -> str:
    try:
        return value.astimezone(tz).strftime(DATE_FORMAT)
    except OverflowError:
        return UNKNOWN_DATE


def format_digest(items: Sequence[FeedItem], now_local: datetime, tz: tzinfo) -> str:
    """
    Render selected items as a digest message.

    Parameters
    ----------
    items : Sequence[FeedItem]
        Items in display order.
    now_local : datetime
        Current time in the display zone, shown in the header.
    tz : tzinfo
        Zone used to render item dates.

    Returns
    -------
    str
        The digest, or an empty string if there are no items.
    """
    if not items:
        return ""

    lines = [escape_markdown_v2(f"{DIGEST_TITLE} - {now_local:{DATE_FORMAT}}")]

    for index, item in enumerate(items, start=1):
        date_text = UNKNOWN_DATE if item.published is None else _local_date(item.published, tz)

        source = escape_markdown_v2(item.source)
        title = escape_markdown_v2(item.title)
        date = escape_markdown_v2(date_text)
        lines.append(f"{index}. [{source}] {title}")
        lines.append(f"   {date} | {item.link}")

    return "\n".join(lines) + "\n"


def format_gold_price(
    snapshot: GoldPriceSnapshot | None, now_local: datetime, tz: tzinfo
) -> str:
    """
    Render the spot gold price section.

    Returns an empty string when no snapshot is available.
    """
    if snapshot is None:
        return ""

    price = snapshot.price_usd_per_ounce.quantize(CENT, rounding=ROUND_HALF_UP)
    lines = [
        f"{GOLD_TITLE} - {now_local:{DATE_FORMAT}}",
        f"{GOLD_PRICE_LABEL}: {price} USD/oz",
        f"{GOLD_TIME_LABEL}: {_local_date(snapshot.timestamp, tz)}",
        GOLD_SOURCE_LINE,
    ]
    return "".join(escape_markdown_v2(line) + "\n" for line in lines)


def combine_sections(*sections: str) -> str:
    """
    Join non-empty sections with a single blank line.

    Trailing whitespace of each section is dropped; blank sections are
    skipped entirely.
    """
    return "\n\n".join(section.rstrip() for section in sections if section and section.strip())
