"""
Relevance filtering for feed items.

Keeps recent items that mention at least one major-event keyword and
ranks them newest first.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from ai_digest.config import MAJOR_KEYWORDS

logger = logging.getLogger(__name__)

# Undated items rank below every dated one
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class FeedItem:
    """
    Normalized RSS/Atom item.

    Attributes
    ----------
    title : str
        Item title, never blank.
    link : str
        Item URL.
    published : datetime | None
        Timezone-aware publication time, None when the feed gave none or
        it could not be parsed.
    summary : str
        Item description/summary.
    source : str
        Name of the feed source the item came from.
    """

    title: str
    link: str = ""
    published: datetime | None = None
    summary: str = ""
    source: str = ""


def is_major_item(item: FeedItem, keywords: Iterable[str] = MAJOR_KEYWORDS) -> bool:
    """
    Check whether an item's title or summary mentions a keyword.

    Matching is a case-insensitive substring test.

    Parameters
    ----------
    item : FeedItem
        The item to check.
    keywords : Iterable[str]
        Keywords to look for.

    Returns
    -------
    bool
        True if at least one keyword appears.
    """
    text = f"{item.title} {item.summary}".lower()
    return any(keyword.lower() in text for keyword in keywords)


def _sort_key(item: FeedItem) -> datetime:
    return item.published or _OLDEST


def select_items(
    items: Iterable[FeedItem],
    cutoff: datetime,
    max_count: int = 12,
    keywords: Iterable[str] = MAJOR_KEYWORDS,
) -> list[FeedItem]:
    """
    Select the items that go into a digest.

    Items without a publication time are never dropped for age, but they
    rank after all dated items.

    Parameters
    ----------
    items : Iterable[FeedItem]
        Candidate items from all sources.
    cutoff : datetime
        Timezone-aware lower bound for the publication time.
    max_count : int
        Maximum number of items returned.
    keywords : Iterable[str]
        Keywords an item must mention to be kept.

    Returns
    -------
    list[FeedItem]
        Selected items, newest first.
    """
    keywords = tuple(keywords)
    candidates = list(items)

    recent = [item for item in candidates if item.published is None or item.published >= cutoff]
    major = [item for item in recent if is_major_item(item, keywords)]
    selected = sorted(major, key=_sort_key, reverse=True)[:max_count]

    logger.info(
        "Selected %d of %d items (%d recent, %d major)",
        len(selected),
        len(candidates),
        len(recent),
        len(major),
    )

    return selected
